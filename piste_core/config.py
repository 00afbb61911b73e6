from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RulesConfig:
    """Fixed rules parameters for one game: board shape, hand size and winning score."""
    span: int = 4  # columns on each side of the center column
    mid_height: int = 6  # uncontrolled spaces in the outermost columns at setup
    starting_uncontrolled_depth: int = 4  # rows on each side of the middle row left neutral
    hand_size: int = 3
    point_target: int = 50

    def __post_init__(self) -> None:
        if self.span < 1:
            raise ValueError(f'span must be at least 1, got {self.span}')
        if self.mid_height < 0:
            raise ValueError(f'mid_height must not be negative, got {self.mid_height}')
        if self.starting_uncontrolled_depth < 0:
            raise ValueError(f'starting_uncontrolled_depth must not be negative, got {self.starting_uncontrolled_depth}')
        if self.hand_size < 2:
            raise ValueError(f'hand_size must be at least 2, got {self.hand_size}')
        if self.point_target < 1:
            raise ValueError(f'point_target must be at least 1, got {self.point_target}')

    @property
    def num_cols(self) -> int:
        return 2 * self.span + 1

    @property
    def num_rows(self) -> int:
        # One tip row, SPAN widening rows, 2*MID_HEIGHT+1 middle rows, SPAN narrowing rows, one tip row.
        return 2 * (self.span + self.mid_height) + 3

    @property
    def mid_row(self) -> int:
        return (self.num_rows - 1) // 2

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'RulesConfig':
        """Builds a config from PISTE_* environment variables, falling back to the defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: int) -> int:
            raw = env.get(name)
            if raw is None or str(raw).strip() == '':
                return default
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f'{name} must be an integer, got {raw!r}') from None

        return cls(
            span=_int('PISTE_SPAN', defaults.span),
            mid_height=_int('PISTE_MID_HEIGHT', defaults.mid_height),
            starting_uncontrolled_depth=_int('PISTE_UNCONTROLLED_DEPTH', defaults.starting_uncontrolled_depth),
            hand_size=_int('PISTE_HAND_SIZE', defaults.hand_size),
            point_target=_int('PISTE_POINT_TARGET', defaults.point_target),
        )


DEFAULT_CONFIG = RulesConfig()
