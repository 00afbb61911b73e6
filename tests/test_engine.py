import random
import unittest
from dataclasses import replace

from game import (
    CONTROLLED,
    DEFAULT_CONFIG,
    CARD_POOL,
    GameState,
    Phase,
    PlayerState,
    RulesConfig,
    UNCONTROLLED,
    attempt_play,
    card_by_name,
    deselect_card,
    disconnected_spaces,
    draw_card,
    end_of_turn_score,
    initialize_board,
    initialize_game,
    is_game_over,
    legal_focuses,
    legality_preview,
    make_card,
    new_game,
    phase,
    play_selected,
    refill_hand,
    select_card,
    set_focus,
    clear_focus,
    toggle_card,
    winner,
)


def make_state(hand0, hand1=None, active=0, board=None, scores=(0, 0), config=DEFAULT_CONFIG):
    hand1 = hand1 if hand1 is not None else hand0
    return GameState(
        board=board or initialize_board(config),
        players=(PlayerState(tuple(hand0), scores[0]), PlayerState(tuple(hand1), scores[1])),
        active_player=active,
    )


class TestInitializeGame(unittest.TestCase):
    def test_given_seed_when_initializing_then_deterministic_deal_order(self):
        s = initialize_game(7)
        rng = random.Random(7)
        draws = [draw_card(rng) for _ in range(6)]
        first = rng.randrange(2)
        self.assertEqual(s.player(0).hand, tuple(draws[0::2]))
        self.assertEqual(s.player(1).hand, tuple(draws[1::2]))
        self.assertEqual(s.active_player, first)
        self.assertEqual(initialize_game(7), s)

    def test_given_new_game_when_initialized_then_clean_state(self):
        s = initialize_game(random.Random(3))
        self.assertEqual([p.score for p in s.players], [0, 0])
        self.assertEqual([len(p.hand) for p in s.players], [3, 3])
        self.assertIsNone(s.selected_card)
        self.assertIsNone(s.focus)
        self.assertIsNone(winner(s))
        self.assertFalse(is_game_over(s))
        self.assertIs(phase(s), Phase.AWAITING_SELECTION)
        self.assertEqual(s.board, initialize_board(DEFAULT_CONFIG))

    def test_given_custom_config_when_starting_over_then_config_kept(self):
        config = RulesConfig(span=3, mid_height=4, hand_size=4, point_target=20)
        s = initialize_game(1, config)
        self.assertEqual(len(s.player(0).hand), 4)
        again = new_game(replace(s, winner=0), 2)
        self.assertEqual(again.config, config)
        self.assertIsNone(again.winner)


class TestSelection(unittest.TestCase):
    def setUp(self):
        self.state = make_state([card_by_name('Jab'), card_by_name('Stab'), card_by_name('Lunge')])

    def test_given_card_when_selecting_and_toggling_then_selection_changes_only(self):
        s = select_card(self.state, 1)
        self.assertEqual(s.selected_card, 1)
        self.assertEqual(s.selected().name, 'Stab')
        self.assertIs(phase(s), Phase.AWAITING_TARGET)
        self.assertEqual(s.board, self.state.board)
        self.assertEqual(toggle_card(s, 2).selected_card, 2)
        self.assertIsNone(toggle_card(s, 1).selected_card)
        self.assertIsNone(deselect_card(s).selected_card)
        self.assertIs(deselect_card(self.state), self.state)

    def test_given_bad_index_when_selecting_then_value_error(self):
        with self.assertRaises(ValueError):
            select_card(self.state, 3)
        with self.assertRaises(ValueError):
            attempt_play(self.state, -1, 4, 6)

    def test_given_hover_when_setting_focus_then_only_board_spaces_tracked(self):
        s = set_focus(self.state, 4, 10)
        self.assertEqual(s.focus, (4, 10))
        self.assertIsNone(set_focus(s, 3, 0).focus)
        self.assertIsNone(clear_focus(s).focus)

    def test_given_selected_card_when_previewing_then_state_unchanged(self):
        p = legality_preview(self.state, 0, 4, 6)
        self.assertTrue(p.playable)
        self.assertFalse(legality_preview(self.state, 0, 4, 10).playable)


class TestHandMaintenance(unittest.TestCase):
    def test_given_each_played_slot_when_refilling_then_played_and_leftmost_other_discarded(self):
        a, b, c = CARD_POOL[0], CARD_POOL[2], CARD_POOL[4]
        for played, survivor in ((0, c), (1, c), (2, b)):
            rng = random.Random(11)
            expected_rng = random.Random(11)
            hand = refill_hand((a, b, c), played, rng, 3)
            self.assertEqual(hand, (survivor, draw_card(expected_rng), draw_card(expected_rng)))

    def test_given_larger_hand_when_refilling_then_order_of_survivors_kept(self):
        cards = CARD_POOL[:5]
        hand = refill_hand(cards, 3, random.Random(0), 5)
        self.assertEqual(hand[:3], (cards[1], cards[2], cards[4]))
        self.assertEqual(len(hand), 5)


class TestAttemptPlay(unittest.TestCase):
    def setUp(self):
        self.jab = card_by_name('Jab')
        self.hand = [self.jab, card_by_name('Stab'), card_by_name('Lunge')]

    def test_given_jab_from_home_band_when_played_then_four_spaces_taken_and_turn_passes(self):
        s = select_card(make_state(self.hand), 0)
        result = attempt_play(s, 0, 4, 6, random.Random(5))
        self.assertTrue(result.accepted)
        ns = result.state
        for row in (8, 10, 12, 14):
            self.assertEqual(ns.board.at(4, row), CONTROLLED[0])
        self.assertEqual(result.core_points, 0)
        self.assertEqual(result.turn_points, 0)
        self.assertEqual(ns.active_player, 1)
        self.assertIsNone(ns.selected_card)
        self.assertEqual(ns.player(0).hand[0].name, 'Lunge')
        self.assertEqual(len(ns.player(0).hand), 3)
        self.assertEqual(ns.player(1).hand, s.player(1).hand)
        self.assertEqual([p.score for p in ns.players], [0, 0])

    def test_given_uncontrolled_focus_when_played_then_rejected_without_change(self):
        s = make_state(self.hand)
        before = s.board.cells
        result = attempt_play(s, 0, 4, 10)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, 'not_controlled')
        self.assertIs(result.state, s)
        self.assertEqual(s.board.cells, before)

    def test_given_required_space_off_board_when_played_then_rejected(self):
        s = make_state(self.hand)
        result = attempt_play(s, 1, 4, 0)  # Stab needs the space behind the tip
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, 'off_board')

    def test_given_bottom_player_when_playing_then_card_rotated(self):
        s = make_state(self.hand, active=1)
        result = attempt_play(s, 0, 4, 16, random.Random(0))
        self.assertTrue(result.accepted)
        for row in (14, 12, 10, 8):
            self.assertEqual(result.state.board.at(4, row), CONTROLLED[1])
        self.assertEqual(result.state.active_player, 0)

    def test_given_core_in_reach_when_played_then_points_awarded_and_core_kept(self):
        board = initialize_board(DEFAULT_CONFIG).with_spaces({(4, r): CONTROLLED[0] for r in (8, 10, 12, 14)})
        s = make_state(self.hand, board=board)
        result = attempt_play(s, 0, 4, 14, random.Random(0))
        self.assertTrue(result.accepted)
        self.assertEqual(result.core_points, 17)
        self.assertEqual(result.state.player(0).score, 17)
        self.assertEqual(result.state.board.at(4, 22).owner, 1)
        self.assertTrue(result.state.board.at(4, 22).is_core)
        self.assertFalse(result.state.is_game_over)

    def test_given_capture_that_strands_territory_when_played_then_pruned(self):
        spear = make_card('Spear', [(0, 0)], [(0, 8)])
        board = initialize_board(DEFAULT_CONFIG).with_spaces({(4, r): CONTROLLED[1] for r in (10, 12, 14)})
        s = make_state([spear, spear, spear], board=board)
        result = attempt_play(s, 0, 4, 6, random.Random(0))
        self.assertTrue(result.accepted)
        for row in (10, 12, 14):
            self.assertEqual(result.state.board.at(4, row), UNCONTROLLED)
        self.assertEqual(result.state.board.at(4, 16), CONTROLLED[1])


class TestScoringAndWin(unittest.TestCase):
    def setUp(self):
        self.jab = card_by_name('Jab')
        self.hand = [self.jab, self.jab, self.jab]
        self.reach = initialize_board(DEFAULT_CONFIG).with_spaces(
            {(4, r): CONTROLLED[0] for r in (8, 10, 12, 14)})

    def test_given_initial_board_when_scoring_turn_then_nothing_earned(self):
        board = initialize_board(DEFAULT_CONFIG)
        self.assertEqual(end_of_turn_score(board, 0), 0)
        self.assertEqual(end_of_turn_score(board, 1), 0)

    def test_given_territory_on_far_half_when_scoring_turn_then_positive_values_summed(self):
        self.assertEqual(end_of_turn_score(self.reach, 0), 1 + 3)  # rows 12 and 14
        board = initialize_board(DEFAULT_CONFIG).with_spaces({(4, r): CONTROLLED[1] for r in (8, 10, 12, 14)})
        self.assertEqual(end_of_turn_score(board, 1), 3 + 1)  # rows 8 and 10

    def test_given_score_just_below_target_when_core_hit_then_game_continues(self):
        s = make_state(self.hand, board=self.reach, scores=(32, 0))
        result = attempt_play(s, 0, 4, 14, random.Random(0))
        self.assertEqual(result.state.player(0).score, 49)
        self.assertFalse(result.state.is_game_over)
        self.assertEqual(result.state.active_player, 1)

    def test_given_core_hit_reaching_target_when_played_then_mover_wins_immediately(self):
        s = make_state(self.hand, board=self.reach, scores=(33, 49))
        result = attempt_play(select_card(s, 2), 2, 4, 14, random.Random(0))
        ns = result.state
        self.assertTrue(result.accepted)
        self.assertEqual(winner(ns), 0)
        self.assertIs(phase(ns), Phase.GAME_OVER)
        self.assertEqual(ns.player(0).score, 50)
        # No turn switch, no end-of-turn scoring and the winning hand stays on display.
        self.assertEqual(ns.active_player, 0)
        self.assertEqual(ns.player(1).score, 49)
        self.assertEqual(ns.player(0).hand, s.player(0).hand)
        self.assertIsNone(ns.selected_card)

    def test_given_held_territory_when_turn_passes_then_next_player_can_win_without_moving(self):
        board = initialize_board(DEFAULT_CONFIG).with_spaces({(4, r): CONTROLLED[1] for r in (8, 10, 12, 14)})
        s = make_state(self.hand, board=board, scores=(0, 46))
        result = attempt_play(s, 0, 0, 6, random.Random(0))
        ns = result.state
        self.assertTrue(result.accepted)
        self.assertEqual(result.turn_points, 4)
        self.assertEqual(ns.player(1).score, 50)
        self.assertEqual(winner(ns), 1)
        self.assertEqual(ns.active_player, 1)
        self.assertEqual(len(ns.player(0).hand), 3)

    def test_given_finished_game_when_acting_then_everything_ignored(self):
        s = replace(make_state(self.hand, board=self.reach), winner=1)
        result = attempt_play(s, 0, 4, 14)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, 'game_over')
        self.assertIs(result.state, s)
        self.assertIs(select_card(s, 0), s)
        self.assertEqual(play_selected(s, 4, 14).reason, 'game_over')

    def test_given_no_selection_when_clicking_board_then_rejected(self):
        s = make_state(self.hand)
        self.assertEqual(play_selected(s, 4, 6).reason, 'no_selection')
        played = play_selected(select_card(s, 1), 4, 6, random.Random(0))
        self.assertTrue(played.accepted)

    def test_given_random_games_when_played_out_then_invariants_hold(self):
        rng = random.Random(2024)
        fresh = initialize_board(DEFAULT_CONFIG)
        cores = {coord: space for coord, space in fresh.spaces() if space.is_core}
        for _ in range(3):
            s = initialize_game(rng)
            for _ in range(120):
                if s.is_game_over:
                    break
                options = [
                    (i, coord)
                    for i, card in enumerate(s.active().hand)
                    for coord in legal_focuses(s.board, s.active_player, card)
                ]
                if not options:
                    break  # no pass rule: a hand with no legal play stalls the game
                i, (col, row) = options[rng.randrange(len(options))]
                scores = [p.score for p in s.players]
                result = attempt_play(s, i, col, row, rng)
                self.assertTrue(result.accepted)
                s = result.state
                self.assertTrue(all(p.score >= before for p, before in zip(s.players, scores)))
                for coord, space in cores.items():
                    self.assertEqual(s.board.at(*coord), space)
                self.assertEqual(disconnected_spaces(s.board), [])
            if s.is_game_over:
                self.assertGreaterEqual(s.player(s.winner).score, DEFAULT_CONFIG.point_target)


if __name__ == '__main__':
    unittest.main(verbosity=2)
