from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .config import RulesConfig

Coord = Tuple[int, int]  # (column, row) in doubled coordinates

# Same-column neighbors differ in row by 2; diagonal neighbors by (+-1, +-1).
NEIGHBOR_DIRECTIONS: Tuple[Coord, ...] = ((0, 2), (0, -2), (1, 1), (1, -1), (-1, 1), (-1, -1))


class SpaceKind(Enum):
    NOT_ON_BOARD = 'not_on_board'
    UNCONTROLLED = 'uncontrolled'
    CORE = 'core'
    CONTROLLED = 'controlled'


@dataclass(frozen=True)
class Space:
    """State of one grid cell. Core and controlled spaces carry their owner (0 = top, 1 = bottom)."""
    kind: SpaceKind
    owner: Optional[int] = None

    def __post_init__(self) -> None:
        owned = self.kind in (SpaceKind.CORE, SpaceKind.CONTROLLED)
        if owned and self.owner not in (0, 1):
            raise ValueError(f'{self.kind.value} space needs owner 0 or 1, got {self.owner!r}')
        if not owned and self.owner is not None:
            raise ValueError(f'{self.kind.value} space cannot have an owner')

    @property
    def on_board(self) -> bool:
        return self.kind is not SpaceKind.NOT_ON_BOARD

    @property
    def is_core(self) -> bool:
        return self.kind is SpaceKind.CORE

    @property
    def is_controlled(self) -> bool:
        return self.kind is SpaceKind.CONTROLLED

    def owned_by(self, player: int) -> bool:
        """True for the player's core and controlled spaces."""
        return self.owner == player


NOT_ON_BOARD = Space(SpaceKind.NOT_ON_BOARD)
UNCONTROLLED = Space(SpaceKind.UNCONTROLLED)
CORE: Tuple[Space, Space] = (Space(SpaceKind.CORE, 0), Space(SpaceKind.CORE, 1))
CONTROLLED: Tuple[Space, Space] = (Space(SpaceKind.CONTROLLED, 0), Space(SpaceKind.CONTROLLED, 1))

_SYMBOLS: Dict[Space, str] = {
    NOT_ON_BOARD: ' ',
    UNCONTROLLED: '.',
    CORE[0]: 'A',
    CONTROLLED[0]: 'a',
    CORE[1]: 'B',
    CONTROLLED[1]: 'b',
}


def top_row_for_column(config: RulesConfig, col: int) -> int:
    return abs(col - config.span)


def row_limit_for_column(config: RulesConfig, col: int) -> int:
    return config.num_rows - abs(col - config.span)


def is_on_board(config: RulesConfig, col: int, row: int) -> bool:
    """Shape predicate: whether (col, row) names a real hex on a board of this config."""
    if col < 0 or col >= config.num_cols or row < 0 or row >= config.num_rows:
        return False
    if row < top_row_for_column(config, col) or row >= row_limit_for_column(config, col):
        return False
    # Column SPAN starts at row 0, so every hex has row - col - SPAN even.
    return (row - col - config.span) % 2 == 0


def board_coords(config: RulesConfig) -> Iterator[Coord]:
    """Yields every on-board coordinate, top row first and left to right within a row."""
    for row in range(config.num_rows):
        for col in range(config.num_cols):
            if is_on_board(config, col, row):
                yield (col, row)


def score_value(config: RulesConfig, col: int, row: int) -> int:
    """Points a space is worth: positive values score for the top player, negative for the bottom.

    Core spaces on the board's outer edge carry a bonus, largest at the two tips.
    """
    score = row - config.mid_row
    sign = 1 if score > 0 else -1
    if row == 0 or row == config.num_rows - 1:
        score += (config.span + 2) * sign
    else:
        laterality = abs(col - config.span)
        if laterality == row or laterality == config.num_rows - 1 - row:
            score += (config.span + 1 - laterality) * sign
    return score


@dataclass(frozen=True)
class Board:
    """The hex grid as a flat row-major tuple of spaces, sized num_cols * num_rows."""
    config: RulesConfig
    cells: Tuple[Space, ...]

    def __post_init__(self) -> None:
        expected = self.config.num_cols * self.config.num_rows
        if len(self.cells) != expected:
            raise ValueError(f'Board needs {expected} cells, got {len(self.cells)}')

    @property
    def num_cols(self) -> int:
        return self.config.num_cols

    @property
    def num_rows(self) -> int:
        return self.config.num_rows

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.num_cols and 0 <= row < self.num_rows

    def index(self, col: int, row: int) -> int:
        """Calculates the flat index for a column and row, rejecting coordinates outside the grid."""
        if not self.in_bounds(col, row):
            raise ValueError(f'({col}, {row}) is outside the {self.num_cols}x{self.num_rows} grid')
        return row * self.num_cols + col

    def at(self, col: int, row: int) -> Space:
        """Gets the space at a coordinate. Anything outside the grid reads as NOT_ON_BOARD."""
        if not self.in_bounds(col, row):
            return NOT_ON_BOARD
        return self.cells[row * self.num_cols + col]

    def coords(self) -> Iterator[Coord]:
        return board_coords(self.config)

    def spaces(self) -> Iterator[Tuple[Coord, Space]]:
        for coord in self.coords():
            yield coord, self.at(*coord)

    def count(self, space: Space) -> int:
        return sum(1 for _, s in self.spaces() if s == space)

    def coords_of(self, space: Space) -> List[Coord]:
        return [coord for coord, s in self.spaces() if s == space]

    def with_spaces(self, updates: Mapping[Coord, Space]) -> 'Board':
        """Returns a copy with some spaces replaced. The board's shape can never change."""
        if not updates:
            return self
        cells = list(self.cells)
        for (col, row), space in updates.items():
            idx = self.index(col, row)
            if not cells[idx].on_board or not space.on_board:
                raise ValueError(f'Cannot change whether ({col}, {row}) is on the board')
            cells[idx] = space
        return Board(self.config, tuple(cells))

    def validate(self) -> None:
        """Raises ValueError if the board's shape or core spaces differ from a fresh board's."""
        fresh = initialize_board(self.config)
        for idx, (mine, expected) in enumerate(zip(self.cells, fresh.cells)):
            col, row = idx % self.num_cols, idx // self.num_cols
            if mine.on_board != expected.on_board:
                raise ValueError(f'Space ({col}, {row}) does not match the board shape')
            if mine.is_core != expected.is_core or (mine.is_core and mine.owner != expected.owner):
                raise ValueError(f'Core space mismatch at ({col}, {row})')

    def pretty(self, marks: Optional[Mapping[Coord, str]] = None, labels: bool = False) -> str:
        """Generates a human-readable rendering of the board.

        'A'/'a' are the top player's core/controlled spaces, 'B'/'b' the bottom
        player's, '.' is uncontrolled. `marks` overrides the symbol for chosen
        spaces; `labels` appends each space's point value with an arrow showing
        which player it scores for.
        """
        overlay = marks or {}
        width = 4 if labels else 1
        lines: List[str] = ['    ' + ' '.join(f'{col:<{width}}' for col in range(self.num_cols))]
        for row in range(self.num_rows):
            cells: List[str] = []
            for col in range(self.num_cols):
                space = self.at(col, row)
                symbol = overlay.get((col, row), _SYMBOLS[space])
                if labels and space.on_board:
                    symbol += _score_label(score_value(self.config, col, row))
                cells.append(f'{symbol:<{width}}')
            lines.append(f'{row:>3} ' + ' '.join(cells).rstrip())
        return '\n'.join(lines)


def _score_label(value: int) -> str:
    if value > 0:
        return f'{value}^'
    if value < 0:
        return f'{-value}v'
    return '-'


def initialize_board(config: RulesConfig) -> Board:
    """Builds the starting board: core tips for both players, pre-controlled bands, a neutral middle."""
    cols, rows = config.num_cols, config.num_rows
    span = config.span
    grid: List[Space] = [NOT_ON_BOARD] * (cols * rows)

    def put(col: int, row: int, space: Space) -> None:
        grid[row * cols + col] = space

    for offset in range(span + 1):
        lower_row = rows - 1 - offset
        put(span - offset, offset, CORE[0])
        put(span + offset, offset, CORE[0])
        put(span - offset, lower_row, CORE[1])
        put(span + offset, lower_row, CORE[1])
        # Each row holds only every other column.
        for col in range(span - offset + 2, span + offset, 2):
            put(col, offset, CONTROLLED[0])
            put(col, lower_row, CONTROLLED[1])

    for row in range(span + 1, rows - span - 1):
        distance = row - config.mid_row
        owner = UNCONTROLLED
        if distance < -config.starting_uncontrolled_depth:
            owner = CONTROLLED[0]
        elif distance > config.starting_uncontrolled_depth:
            owner = CONTROLLED[1]
        for col in range((row - span) % 2, cols, 2):
            put(col, row, owner)

    return Board(config, tuple(grid))


def neighbors(board: Board, coord: Coord) -> List[Coord]:
    """Gets the on-board hex neighbors of a coordinate."""
    col, row = coord
    out: List[Coord] = []
    for dc, dr in NEIGHBOR_DIRECTIONS:
        if board.at(col + dc, row + dr).on_board:
            out.append((col + dc, row + dr))
    return out
