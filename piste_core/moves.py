from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .board import CONTROLLED, Board, Coord, Space, SpaceKind, score_value
from .cards import Card, Delta


def orient(player: int, delta: Delta) -> Delta:
    """Turns a card delta into board direction for a player.

    The top player (0) reads cards as printed; the bottom player (1) sees them
    rotated 180 degrees, so both components are negated.
    """
    if player not in (0, 1):
        raise ValueError(f'player must be 0 or 1, got {player!r}')
    dc, dr = delta
    if player == 0:
        return dc, dr
    return -dc, -dr


def target_space(focus: Coord, player: int, delta: Delta) -> Coord:
    dc, dr = orient(player, delta)
    return focus[0] + dc, focus[1] + dr


class RequiredMark(Enum):
    SATISFIED = 'satisfied'
    MISSING = 'missing'  # on the board but not the player's
    OFF_BOARD = 'off_board'


class CaptureMark(Enum):
    WILL_CAPTURE = 'will_capture'
    CORE_HIT = 'core_hit'  # opponent core: scores points, control unchanged
    NO_EFFECT = 'no_effect'  # already the player's
    OFF_BOARD = 'off_board'


@dataclass(frozen=True)
class DeltaCheck:
    delta: Delta
    target: Coord
    mark: Union[RequiredMark, CaptureMark]


@dataclass(frozen=True)
class PlayPreview:
    """Per-delta outcome of playing a card at a focus, computed without touching the board."""
    focus: Coord
    required: Tuple[DeltaCheck, ...]
    capture: Tuple[DeltaCheck, ...]
    core_points: int
    focus_on_board: bool = True

    @property
    def playable(self) -> bool:
        return self.focus_on_board and all(check.mark is RequiredMark.SATISFIED for check in self.required)

    def captured(self) -> List[Coord]:
        return [check.target for check in self.capture if check.mark is CaptureMark.WILL_CAPTURE]


def required_mark(board: Board, player: int, target: Coord) -> RequiredMark:
    space = board.at(*target)
    if not space.on_board:
        return RequiredMark.OFF_BOARD
    if space.owned_by(player):
        return RequiredMark.SATISFIED
    return RequiredMark.MISSING


def capture_mark(board: Board, player: int, target: Coord) -> CaptureMark:
    space = board.at(*target)
    if not space.on_board:
        return CaptureMark.OFF_BOARD
    if space.owned_by(player):
        return CaptureMark.NO_EFFECT
    if space.is_core:
        return CaptureMark.CORE_HIT
    return CaptureMark.WILL_CAPTURE


def rejection_reason(board: Board, player: int, card: Card, focus: Coord) -> Optional[str]:
    """Returns why a play is illegal ('off_board' or 'not_controlled'), or None when it is legal."""
    if not board.at(*focus).on_board:
        return 'off_board'
    for delta in card.required:
        mark = required_mark(board, player, target_space(focus, player, delta))
        if mark is RequiredMark.OFF_BOARD:
            return 'off_board'
        if mark is RequiredMark.MISSING:
            return 'not_controlled'
    return None


def is_legal_play(board: Board, player: int, card: Card, focus: Coord) -> bool:
    return rejection_reason(board, player, card, focus) is None


def preview_play(board: Board, player: int, card: Card, focus: Coord) -> PlayPreview:
    """Marks each required and capture delta for a hover preview. Cheap and side-effect free."""
    required: List[DeltaCheck] = []
    for delta in card.required:
        target = target_space(focus, player, delta)
        required.append(DeltaCheck(delta, target, required_mark(board, player, target)))
    capture: List[DeltaCheck] = []
    points = 0
    for delta in card.capture:
        target = target_space(focus, player, delta)
        mark = capture_mark(board, player, target)
        if mark is CaptureMark.CORE_HIT:
            points += abs(score_value(board.config, *target))
        capture.append(DeltaCheck(delta, target, mark))
    return PlayPreview(
        focus=focus,
        required=tuple(required),
        capture=tuple(capture),
        core_points=points,
        focus_on_board=board.at(*focus).on_board,
    )


def apply_captures(board: Board, player: int, card: Card, focus: Coord) -> Tuple[Board, int]:
    """Applies a card's capture spaces for a play already known to be legal.

    Returns the new board and the points earned by hitting opponent core spaces.
    Every target is judged against the board as it was before the play; capture
    spaces off the board are ignored.
    """
    updates: Dict[Coord, Space] = {}
    points = 0
    for delta in card.capture:
        target = target_space(focus, player, delta)
        space = board.at(*target)
        if space.kind is SpaceKind.NOT_ON_BOARD or space.owned_by(player):
            continue
        if space.is_core:
            # Core spaces score but never change hands.
            points += abs(score_value(board.config, *target))
        else:
            updates[target] = CONTROLLED[player]
    return board.with_spaces(updates), points


def legal_focuses(board: Board, player: int, card: Card) -> List[Coord]:
    """Lists every on-board focus where the player could play the card right now."""
    return [coord for coord in board.coords() if rejection_reason(board, player, card, coord) is None]
