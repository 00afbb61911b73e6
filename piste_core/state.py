from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .board import Board, Coord
from .cards import Card
from .config import RulesConfig


@dataclass(frozen=True)
class PlayerState:
    """One player's hand (left to right) and score."""
    hand: Tuple[Card, ...]
    score: int = 0

    def with_hand(self, hand: Tuple[Card, ...]) -> 'PlayerState':
        return PlayerState(tuple(hand), self.score)

    def add_points(self, points: int) -> 'PlayerState':
        if points < 0:
            raise ValueError('Scores never decrease')
        return PlayerState(self.hand, self.score + points)


@dataclass(frozen=True)
class GameState:
    """Represents the full state of a game: board, both players, and whose turn it is.

    `focus` is the space an interactive frontend is hovering over; the rules never read it.
    `winner` is set once a player reaches the point target, which ends the game.
    """
    board: Board
    players: Tuple[PlayerState, PlayerState]
    active_player: int  # 0 = top, 1 = bottom
    selected_card: Optional[int] = None
    focus: Optional[Coord] = None
    winner: Optional[int] = None

    @property
    def config(self) -> RulesConfig:
        return self.board.config

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None

    def other_player(self) -> int:
        return 1 - self.active_player

    def player(self, player: int) -> PlayerState:
        return self.players[player]

    def active(self) -> PlayerState:
        return self.players[self.active_player]

    def selected(self) -> Optional[Card]:
        if self.selected_card is None:
            return None
        return self.active().hand[self.selected_card]

    def with_player(self, player: int, state: PlayerState) -> 'GameState':
        players = (state, self.players[1]) if player == 0 else (self.players[0], state)
        return replace(self, players=players)

    def with_board(self, board: Board) -> 'GameState':
        return replace(self, board=board)

    def with_turn(self, next_turn: int) -> 'GameState':
        return replace(self, active_player=next_turn, selected_card=None, focus=None)
