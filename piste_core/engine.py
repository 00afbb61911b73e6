"""
Turn and scoring state machine.

Every action takes a GameState and returns a new one; nothing here mutates its
input. A play runs legality check, captures, connectivity pruning, win check,
hand maintenance, then hands the turn over with end-of-turn scoring for the
player about to move.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from .board import Board, Coord, initialize_board, score_value
from .cards import Card, draw_card
from .config import DEFAULT_CONFIG, RulesConfig
from .connectivity import prune_disconnected
from .moves import PlayPreview, apply_captures, preview_play, rejection_reason
from .state import GameState, PlayerState

logger = logging.getLogger(__name__)

SeedOrRng = Union[None, int, str, random.Random]


class Phase(Enum):
    AWAITING_SELECTION = 'awaiting_selection'
    AWAITING_TARGET = 'awaiting_target'
    GAME_OVER = 'game_over'


@dataclass(frozen=True)
class PlayResult:
    """Outcome of attempting a play. On rejection `state` is the unchanged input state."""
    accepted: bool
    state: GameState
    core_points: int = 0  # earned by the mover from opponent core spaces
    turn_points: int = 0  # end-of-turn score credited to the next player
    reason: Optional[str] = None


def _make_rng(seed_or_rng: SeedOrRng) -> random.Random:
    if isinstance(seed_or_rng, random.Random):
        return seed_or_rng
    return random.Random(seed_or_rng)


def initialize_game(seed_or_rng: SeedOrRng = None, config: RulesConfig = DEFAULT_CONFIG) -> GameState:
    """Deals a fresh game: starting board, full hands, zero scores and a random first player."""
    rng = _make_rng(seed_or_rng)
    board = initialize_board(config)
    hands: Tuple[List[Card], List[Card]] = ([], [])
    for _ in range(config.hand_size):
        hands[0].append(draw_card(rng))
        hands[1].append(draw_card(rng))
    first = rng.randrange(2)
    players = (PlayerState(tuple(hands[0])), PlayerState(tuple(hands[1])))
    logger.debug('New game: player %d moves first', first)
    return GameState(board=board, players=players, active_player=first)


def new_game(state: GameState, seed_or_rng: SeedOrRng = None) -> GameState:
    """Starts over with the same rules config. This is the only way out of a finished game."""
    return initialize_game(seed_or_rng, state.config)


def phase(state: GameState) -> Phase:
    if state.is_game_over:
        return Phase.GAME_OVER
    if state.selected_card is None:
        return Phase.AWAITING_SELECTION
    return Phase.AWAITING_TARGET


def is_game_over(state: GameState) -> bool:
    return state.is_game_over


def winner(state: GameState) -> Optional[int]:
    return state.winner


def _check_hand_index(state: GameState, card_index: int) -> None:
    hand = state.active().hand
    if not 0 <= card_index < len(hand):
        raise ValueError(f'Card index {card_index} out of range for a hand of {len(hand)}')


def select_card(state: GameState, card_index: int) -> GameState:
    if state.is_game_over:
        return state
    _check_hand_index(state, card_index)
    return replace(state, selected_card=card_index)


def deselect_card(state: GameState) -> GameState:
    if state.selected_card is None:
        return state
    return replace(state, selected_card=None)


def toggle_card(state: GameState, card_index: int) -> GameState:
    """Clicking the selected card deselects it; clicking any other card selects that one."""
    if state.selected_card == card_index:
        return deselect_card(state)
    return select_card(state, card_index)


def set_focus(state: GameState, col: int, row: int) -> GameState:
    focus: Optional[Coord] = (col, row) if state.board.at(col, row).on_board else None
    if focus == state.focus:
        return state
    return replace(state, focus=focus)


def clear_focus(state: GameState) -> GameState:
    return state if state.focus is None else replace(state, focus=None)


def legality_preview(state: GameState, card_index: int, focus_col: int, focus_row: int) -> PlayPreview:
    """Per-delta legality flags for the active player's card at a focus. Never changes state."""
    _check_hand_index(state, card_index)
    card = state.active().hand[card_index]
    return preview_play(state.board, state.active_player, card, (focus_col, focus_row))


def refill_hand(hand: Sequence[Card], played_index: int, rng: random.Random, hand_size: int) -> Tuple[Card, ...]:
    """Discards the played card and the leftmost other card, shifts the rest left, then draws to fill."""
    leftmost_other = 1 if played_index == 0 else 0
    kept = [card for i, card in enumerate(hand) if i not in (played_index, leftmost_other)]
    while len(kept) < hand_size:
        kept.append(draw_card(rng))
    return tuple(kept)


def end_of_turn_score(board: Board, player: int) -> int:
    """Points a player collects at the start of their turn for controlled spaces on the far half."""
    direction = 1 if player == 0 else -1
    total = 0
    for (col, row), space in board.spaces():
        if space.is_controlled and space.owner == player:
            total += max(0, score_value(board.config, col, row) * direction)
    return total


def attempt_play(
    state: GameState,
    card_index: int,
    focus_col: int,
    focus_row: int,
    rng: Optional[random.Random] = None,
) -> PlayResult:
    """Plays a card from the active player's hand at a focus space, if the play is legal."""
    if state.is_game_over:
        return PlayResult(False, state, reason='game_over')
    _check_hand_index(state, card_index)

    player = state.active_player
    card = state.active().hand[card_index]
    focus = (focus_col, focus_row)
    reason = rejection_reason(state.board, player, card, focus)
    if reason is not None:
        logger.debug('Rejected %s by player %d at %s: %s', card.name, player, focus, reason)
        return PlayResult(False, state, reason=reason)

    board, core_points = apply_captures(state.board, player, card, focus)
    board = prune_disconnected(board)
    mover = state.active().add_points(core_points)
    logger.debug('Player %d played %s at %s for %d core points', player, card.name, focus, core_points)

    next_state = replace(state.with_board(board).with_player(player, mover), selected_card=None, focus=None)
    target = state.config.point_target
    if mover.score >= target:
        # The winning hand stays on display; no turn switch and no end-of-turn scoring.
        logger.info('Player %d wins with %d points', player, mover.score)
        return PlayResult(True, replace(next_state, winner=player), core_points=core_points)

    hand = refill_hand(mover.hand, card_index, rng or random.Random(), state.config.hand_size)
    next_state = next_state.with_player(player, mover.with_hand(hand))

    opponent = 1 - player
    turn_points = end_of_turn_score(board, opponent)
    scorer = next_state.player(opponent).add_points(turn_points)
    next_state = next_state.with_player(opponent, scorer).with_turn(opponent)
    if scorer.score >= target:
        logger.info('Player %d wins with %d points', opponent, scorer.score)
        next_state = replace(next_state, winner=opponent)
    return PlayResult(True, next_state, core_points=core_points, turn_points=turn_points)


def play_selected(state: GameState, focus_col: int, focus_row: int, rng: Optional[random.Random] = None) -> PlayResult:
    """Plays whichever card is currently selected, as a click on a board space would."""
    if state.is_game_over:
        return PlayResult(False, state, reason='game_over')
    if state.selected_card is None:
        return PlayResult(False, state, reason='no_selection')
    return attempt_play(state, state.selected_card, focus_col, focus_row, rng)
