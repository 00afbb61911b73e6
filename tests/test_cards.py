import random
import unittest

from game import (
    CARD_DEFS,
    CARD_POOL,
    build_card_pool,
    card_by_name,
    card_dimensions,
    card_names,
    draw_card,
    make_card,
    mirror_card,
)


class TestCardGeometry(unittest.TestCase):
    def test_given_jab_when_computing_dimensions_then_single_column_box_with_focus_at_top(self):
        jab = card_by_name('Jab')
        d = jab.dimensions
        self.assertEqual((d.column_count, d.row_count), (1, 9))
        self.assertEqual((d.col_min, d.col_max, d.row_min, d.row_max), (0, 0, 0, 8))
        # Focus sits on the minimum edge on both axes: offsets are zero.
        self.assertEqual(d.column_offset, 0)
        self.assertEqual(d.row_offset, 0)

    def test_given_cut_variants_when_computing_dimensions_then_column_offsets_flip(self):
        left = card_by_name('Cut L').dimensions
        right = card_by_name('Cut R').dimensions
        self.assertEqual(left.column_count, right.column_count)
        self.assertEqual(left.row_count, right.row_count)
        self.assertEqual(left.column_offset, 0)
        self.assertEqual(right.column_offset, 3)
        self.assertEqual(right.column_offset, left.column_count - 1 - left.column_offset)
        self.assertEqual((right.col_min, right.col_max), (-3, 0))

    def test_given_brace_when_computing_dimensions_then_box_spans_backward_fan(self):
        d = card_by_name('Brace').dimensions
        self.assertEqual((d.column_count, d.row_count), (17, 9))
        self.assertEqual((d.column_offset, d.row_offset), (8, 8))

    def test_given_bottom_player_when_asking_focus_offset_then_rotated_offset_returned(self):
        d = card_by_name('Cut L').dimensions
        self.assertEqual(d.focus_offset(0), (0, 0))
        self.assertEqual(d.focus_offset(1), (3, 3))

    def test_given_empty_card_when_computing_dimensions_then_value_error(self):
        with self.assertRaises(ValueError):
            card_dimensions([], [])


class TestMirroring(unittest.TestCase):
    def test_given_reflectable_defs_when_mirroring_then_column_deltas_negated(self):
        for card_def in CARD_DEFS:
            if not card_def.reflectable:
                continue
            original = card_by_name(card_def.names[0])
            mirrored = card_by_name(card_def.names[1])
            self.assertEqual(set(mirrored.required), {(-c, r) for c, r in original.required})
            self.assertEqual(set(mirrored.capture), {(-c, r) for c, r in original.capture})
            self.assertEqual(mirrored.dimensions.row_count, original.dimensions.row_count)
            self.assertEqual(mirrored.dimensions.column_count, original.dimensions.column_count)
            self.assertEqual(mirrored.dimensions.col_min, -original.dimensions.col_max)

    def test_given_any_card_when_mirrored_twice_then_identity(self):
        for card in CARD_POOL:
            self.assertEqual(mirror_card(mirror_card(card)), card)

    def test_given_asymmetric_card_when_mirrored_then_dimensions_recomputed(self):
        card = make_card('Hook', [(0, 0)], [(2, 2), (1, 3)])
        mirrored = mirror_card(card, 'Hook R')
        self.assertEqual(mirrored.name, 'Hook R')
        self.assertEqual(card.dimensions.column_offset, 0)
        self.assertEqual(mirrored.dimensions.column_offset, 2)
        self.assertEqual(mirrored.dimensions.col_max, 0)


class TestCardPool(unittest.TestCase):
    def test_given_catalog_when_building_pool_then_two_entries_per_definition(self):
        self.assertEqual(len(CARD_DEFS), 16)
        self.assertEqual(len(CARD_POOL), 2 * len(CARD_DEFS))
        names = [card.name for card in CARD_POOL]
        # Single-name cards appear twice, each mirrored variant once.
        self.assertEqual(names.count('Jab'), 2)
        self.assertEqual(names.count('Brace'), 2)
        self.assertEqual(names.count('Slice L'), 1)
        self.assertEqual(names.count('Slice R'), 1)
        self.assertEqual(len(card_names()), 25)

    def test_given_three_name_def_when_building_pool_then_value_error(self):
        from piste_core.cards import CardDef
        bad = CardDef(names=('A', 'B', 'C'), required=((0, 0),), capture=((0, 2),))
        with self.assertRaises(ValueError):
            build_card_pool([bad])

    def test_given_unknown_name_when_looking_up_then_value_error(self):
        with self.assertRaises(ValueError):
            card_by_name('Feint')

    def test_given_seeded_rng_when_drawing_then_uniform_index_into_pool(self):
        rng = random.Random(42)
        expected_rng = random.Random(42)
        for _ in range(20):
            card = draw_card(rng)
            self.assertIs(card, CARD_POOL[expected_rng.randrange(len(CARD_POOL))])

    def test_given_shipped_catalog_when_checking_overlap_then_no_card_captures_its_required_spaces(self):
        for card in CARD_POOL:
            self.assertFalse(set(card.required) & set(card.capture), card.name)


if __name__ == '__main__':
    unittest.main(verbosity=2)
