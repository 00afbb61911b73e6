from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Delta = Tuple[int, int]  # (column delta, row delta) relative to the focus space


@dataclass(frozen=True)
class CardDef:
    """A base card as designed: one name, or two names when it has a mirrored variant.

    Deltas use doubled coordinates as seen by the top player: (0, 2) is the next
    space forward (downward), (1, 1) is forward and to the right.
    """
    names: Tuple[str, ...]
    required: Tuple[Delta, ...]
    capture: Tuple[Delta, ...]

    @property
    def reflectable(self) -> bool:
        return len(self.names) == 2


@dataclass(frozen=True)
class CardDimensions:
    """Bounding box of a card's effect in delta space, and where the focus space sits inside it."""
    column_count: int
    row_count: int
    col_min: int
    col_max: int
    row_min: int
    row_max: int
    column_offset: int  # focus column counted from the leftmost column of the box
    row_offset: int  # focus row counted from the topmost row of the box

    def focus_offset(self, player: int) -> Tuple[int, int]:
        """Focus offset from the top-left of the box as the given player sees the card.

        The bottom player sees every card rotated 180 degrees.
        """
        if player == 0:
            return self.column_offset, self.row_offset
        return self.column_count - 1 - self.column_offset, self.row_count - 1 - self.row_offset


@dataclass(frozen=True)
class Card:
    name: str
    required: Tuple[Delta, ...]
    capture: Tuple[Delta, ...]
    dimensions: CardDimensions


def card_dimensions(required: Iterable[Delta], capture: Iterable[Delta]) -> CardDimensions:
    """Computes the tight bounding box over the union of required and capture deltas."""
    spaces: List[Delta] = list(capture) + list(required)
    if not spaces:
        raise ValueError('A card needs at least one required or capture space')
    cols = [col for col, _ in spaces]
    rows = [row for _, row in spaces]
    col_min, col_max = min(cols), max(cols)
    row_min, row_max = min(rows), max(rows)
    return CardDimensions(
        column_count=col_max - col_min + 1,
        row_count=row_max - row_min + 1,
        col_min=col_min,
        col_max=col_max,
        row_min=row_min,
        row_max=row_max,
        # Integers have no negative zero, so a focus on the box edge is a plain 0.
        column_offset=-col_min,
        row_offset=-row_min,
    )


def make_card(name: str, required: Sequence[Delta], capture: Sequence[Delta]) -> Card:
    req = tuple((int(c), int(r)) for c, r in required)
    cap = tuple((int(c), int(r)) for c, r in capture)
    return Card(name=name, required=req, capture=cap, dimensions=card_dimensions(req, cap))


def mirror_card(card: Card, name: Optional[str] = None) -> Card:
    """Reflects a card left-to-right by negating every column delta.

    Dimensions are recomputed from the mirrored deltas rather than copied.
    """
    return make_card(
        name if name is not None else card.name,
        [(-col, row) for col, row in card.required],
        [(-col, row) for col, row in card.capture],
    )


def _def(names: Sequence[str], required: Sequence[Delta], capture: Sequence[Delta]) -> CardDef:
    return CardDef(names=tuple(names), required=tuple(required), capture=tuple(capture))


CARD_DEFS: Tuple[CardDef, ...] = (
    _def(['Jab'],
         [(0, 0)],
         [(0, 2), (0, 4), (0, 6), (0, 8)]),
    _def(['Stab'],
         [(0, 0), (0, -2)],
         [(0, 2), (0, 4), (0, 6), (0, 8), (0, 10)]),
    _def(['Thrust'],
         [(0, 0), (1, 1), (-1, 1)],
         [(0, 2), (0, 4), (0, 6), (0, 8), (0, 10), (1, 3), (-1, 3)]),
    _def(['Skewer'],
         [(0, 0), (1, 1), (-1, 1), (1, -1), (-1, -1), (0, -2), (0, -4), (0, -6)],
         [(0, 2), (0, 4), (0, 6), (0, 8), (0, 10), (0, 12),
          (1, 3), (2, 4), (3, 5), (-1, 3), (-2, 4), (-3, 5)]),
    _def(['Lunge'],
         [(0, 0), (0, -4), (0, -6)],
         [(0, 4), (0, 6), (0, 8), (0, 10), (0, 12), (0, 14)]),
    _def(['Cut L', 'Cut R'],
         [(0, 0)],
         [(1, 1), (2, 2), (3, 3), (0, 2)]),
    _def(['Slice L', 'Slice R'],
         [(0, 0), (-1, -1)],
         [(1, 1), (2, 2), (3, 3), (4, 4), (5, 5)]),
    _def(['Slash L', 'Slash R'],
         [(0, 0), (0, -2), (0, -4)],
         [(1, 1), (2, 2), (3, 3), (4, 4), (5, 5), (6, 6)]),
    _def(['Hack L', 'Hack R'],
         [(0, 0), (0, -2), (1, -1)],
         [(1, 1), (2, 2), (3, 3), (4, 4), (2, 0), (3, 1), (4, 2), (5, 3), (5, 1)]),
    _def(['Chop L', 'Chop R'],
         [(0, 0), (0, -2), (-1, -1)],
         [(0, 2), (1, 1), (2, 0), (3, -1), (4, -2), (1, -1), (2, -2), (3, -3), (1, -3), (2, -4)]),
    _def(['Whack L', 'Whack R'],
         [(0, 0), (-1, 1)],
         [(-1, 3), (0, 4), (0, 2), (1, 3), (1, 1), (1, -1), (2, 2), (2, 0)]),
    _def(['Bash L', 'Bash R'],
         [(0, 0), (1, -1), (0, -2), (-1, -1)],
         [(0, 2), (1, 3), (1, 1), (2, 4), (2, 2), (2, 0), (3, 3), (3, 1)]),
    _def(['Smash L', 'Smash R'],
         [(0, 0), (1, -1), (0, -2), (-1, -1), (2, -2), (1, -3), (0, -4), (-1, -3), (-2, -2)],
         [(0, 2), (1, 3), (1, 1), (2, 4), (2, 2), (2, 0), (3, 5), (3, 3), (3, 1), (3, -1),
          (4, 4), (4, 2), (4, 0)]),
    _def(['Block'],
         [(1, 1), (-1, 1)],
         [(4, 0), (4, -2), (3, 1), (3, -1), (2, 0), (2, -2), (1, -1), (0, 0), (0, -2),
          (-1, -1), (-2, 0), (-2, -2), (-3, 1), (-3, -1), (-4, 0), (-4, -2)]),
    _def(['Parry L', 'Parry R'],
         [(1, 1), (-1, -1)],
         [(4, 2), (4, 0), (3, 3), (3, 1), (2, 2), (2, 0), (0, 2), (0, 0), (-1, 1)]),
    _def(['Brace'],
         [(0, 0)],
         [(1, -1), (-1, -1),
          (2, -2), (0, -2), (-2, -2),
          (3, -3), (1, -3), (-1, -3), (-3, -3),
          (4, -4), (2, -4), (0, -4), (-2, -4), (-4, -4),
          (5, -5), (3, -5), (1, -5), (-1, -5), (-3, -5), (-5, -5),
          (6, -6), (4, -6), (-4, -6), (-6, -6),
          (7, -7), (5, -7), (-5, -7), (-7, -7),
          (8, -8), (-8, -8)]),
)


def build_card_pool(defs: Iterable[CardDef]) -> Tuple[Card, ...]:
    """Expands base definitions into the draw pool.

    Each definition contributes exactly two entries: the card and its mirrored
    variant, or the same card twice when it has only one name. That keeps every
    archetype equally likely to be drawn.
    """
    pool: List[Card] = []
    for card_def in defs:
        base = make_card(card_def.names[0], card_def.required, card_def.capture)
        pool.append(base)
        if card_def.reflectable:
            pool.append(mirror_card(base, card_def.names[1]))
        elif len(card_def.names) == 1:
            pool.append(base)
        else:
            raise ValueError(f'Card definition must have one or two names, got {card_def.names!r}')
    return tuple(pool)


CARD_POOL: Tuple[Card, ...] = build_card_pool(CARD_DEFS)

_CARDS_BY_NAME: Dict[str, Card] = {card.name: card for card in CARD_POOL}


def card_by_name(name: str) -> Card:
    """Looks up a card from the pool by its display name."""
    try:
        return _CARDS_BY_NAME[name]
    except KeyError:
        raise ValueError(f'Unknown card: {name!r}') from None


def card_names() -> List[str]:
    return sorted(_CARDS_BY_NAME)


def draw_card(rng: random.Random, pool: Sequence[Card] = CARD_POOL) -> Card:
    """Draws one card uniformly from the pool, with replacement."""
    return pool[rng.randrange(len(pool))]
