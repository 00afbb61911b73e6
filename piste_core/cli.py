from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, List, Optional

from .board import Coord
from .config import RulesConfig
from .engine import (
    PlayResult,
    attempt_play,
    initialize_game,
    legality_preview,
    new_game,
    play_selected,
    set_focus,
    toggle_card,
)
from .moves import CaptureMark, RequiredMark, legal_focuses
from .state import GameState

PLAYER_NAMES = ('Top (A)', 'Bottom (B)')

HELP = """Commands:
  select <n>           select card <n> (1-based); selecting it again deselects it
  <col> <row>          play the selected card with its focus on (col, row)
  <card> <col> <row>   play card number <card> with its focus on (col, row)
  preview <col> <row>  show what playing the selected card there would do
  preview <card> <col> <row>   same, for card number <card>
  plays <card>         list every focus where the card can be played
  new                  start a new game
  help                 show this text
  quit                 leave"""


def describe_hand(state: GameState, player: int) -> str:
    parts: List[str] = []
    for i, card in enumerate(state.player(player).hand, start=1):
        selected = player == state.active_player and state.selected_card == i - 1
        parts.append(f'{i}:{card.name}' + ('*' if selected else ''))
    return '  '.join(parts)


def print_state(state: GameState, labels: bool = False, marks: Optional[Dict[Coord, str]] = None) -> None:
    print(state.board.pretty(marks=marks, labels=labels))
    for player in (0, 1):
        turn = ' <- to move' if player == state.active_player and not state.is_game_over else ''
        print(f"{PLAYER_NAMES[player]}: {state.player(player).score} pts  [{describe_hand(state, player)}]{turn}")


def preview_marks(state: GameState, card_index: int, col: int, row: int) -> Dict[Coord, str]:
    preview = legality_preview(state, card_index, col, row)
    marks: Dict[Coord, str] = {}
    for check in preview.capture:
        if check.mark is CaptureMark.WILL_CAPTURE:
            marks[check.target] = '+'
        elif check.mark is CaptureMark.CORE_HIT:
            marks[check.target] = '*'
    for check in preview.required:
        if check.mark is RequiredMark.SATISFIED:
            marks[check.target] = 'v'
        elif check.mark is RequiredMark.MISSING:
            marks[check.target] = 'x'
    return marks


def report_play(result: PlayResult, player: int) -> None:
    if not result.accepted:
        print(f'Illegal play ({result.reason}). Try again.')
        return
    if result.core_points:
        print(f'Core hit for {result.core_points} points!')
    if result.turn_points:
        print(f'{PLAYER_NAMES[result.state.active_player]} scores {result.turn_points} for held territory.')
    if result.state.active_player != player:
        print(f'{PLAYER_NAMES[player]} played.')


def _parse_ints(tokens: List[str], count: int) -> Optional[List[int]]:
    if len(tokens) != count:
        return None
    try:
        return [int(t) for t in tokens]
    except ValueError:
        return None


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Piste hot-seat terminal game')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for card draws and first player')
    parser.add_argument('--span', type=int, default=None, help='Columns on each side of the center column')
    parser.add_argument('--mid-height', type=int, default=None, help='Neutral depth of the outer columns')
    parser.add_argument('--point-target', type=int, default=None, help='Points needed to win')
    parser.add_argument('--labels', action='store_true', help='Show point values on every space')
    parser.add_argument('--show-plays', action='store_true', help='List legal focuses for each card every turn')
    parser.add_argument('--verbose', action='store_true', help='Log engine decisions')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    base = RulesConfig.from_env()
    config = RulesConfig(
        span=args.span if args.span is not None else base.span,
        mid_height=args.mid_height if args.mid_height is not None else base.mid_height,
        starting_uncontrolled_depth=base.starting_uncontrolled_depth,
        hand_size=base.hand_size,
        point_target=args.point_target if args.point_target is not None else base.point_target,
    )
    rng = random.Random(args.seed)
    state = initialize_game(rng, config)
    print(HELP)

    while True:
        print()
        print_state(state, labels=args.labels)
        if state.is_game_over:
            print(f"{PLAYER_NAMES[state.winner]} wins! Type 'new' to play again or 'quit'.")
        elif args.show_plays:
            for i, card in enumerate(state.active().hand):
                spots = legal_focuses(state.board, state.active_player, card)
                print(f'  {i + 1}:{card.name} playable at {spots if spots else "nowhere"}')

        try:
            text = input(f'{PLAYER_NAMES[state.active_player]}> ').strip()
        except EOFError:
            return
        tokens = text.replace(',', ' ').split()
        if not tokens:
            continue
        command = tokens[0].lower()

        if command in ('quit', 'exit', 'q'):
            return
        if command == 'help':
            print(HELP)
            continue
        if command == 'new':
            state = new_game(state, rng)
            continue
        if state.is_game_over:
            print('The game is over.')
            continue

        hand_size = len(state.active().hand)
        if command == 'plays':
            nums = _parse_ints(tokens[1:], 1)
            if nums is None or not 1 <= nums[0] <= hand_size:
                print('Usage: plays <card>')
                continue
            card = state.active().hand[nums[0] - 1]
            print(legal_focuses(state.board, state.active_player, card))
            continue
        if command == 'select':
            nums = _parse_ints(tokens[1:], 1)
            if nums is None or not 1 <= nums[0] <= hand_size:
                print('Usage: select <card>')
                continue
            state = toggle_card(state, nums[0] - 1)
            if state.selected_card is None:
                print('Selection cleared.')
            else:
                print(f'Selected {nums[0]}:{state.selected().name}')
            continue
        if command == 'preview':
            nums = _parse_ints(tokens[1:], 2)
            if nums is not None:
                if state.selected_card is None:
                    print('Select a card first (select <card>).')
                    continue
                state = set_focus(state, nums[0], nums[1])
                card_index = state.selected_card
            else:
                nums = _parse_ints(tokens[1:], 3)
                if nums is None or not 1 <= nums[0] <= hand_size:
                    print('Usage: preview <col> <row> or preview <card> <col> <row>')
                    continue
                card_index = nums.pop(0) - 1
            marks = preview_marks(state, card_index, nums[0], nums[1])
            print(state.board.pretty(marks=marks))
            continue

        player = state.active_player
        nums = _parse_ints(tokens, 2)
        if nums is not None:
            result = play_selected(state, nums[0], nums[1], rng)
            if result.reason == 'no_selection':
                print('Select a card first (select <card>).')
                continue
        else:
            nums = _parse_ints(tokens, 3)
            if nums is None or not 1 <= nums[0] <= hand_size:
                print("Could not parse. Type 'help' for commands.")
                continue
            result = attempt_play(state, nums[0] - 1, nums[1], nums[2], rng)
        report_play(result, player)
        state = result.state


if __name__ == '__main__':
    main()
