"""
Unit tests for position normalization and BMI.
"""
import unittest
import numpy as np
import pandas as pd
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from cfb_size_analysis.config import config
from cfb_size_analysis.data.preprocessor import DataPreprocessor, add_bmi, normalize_positions
from cfb_size_analysis.exceptions import InvalidHeightError, UnknownPositionError


def _players(rows):
    return pd.DataFrame(rows, columns=['name', 'team', 'position', 'height', 'weight'])


class TestNormalizePositions(unittest.TestCase):

    def setUp(self):
        self.raw = _players([
            ('a', 'Ohio State', 'QB', 75, 220),
            ('b', 'Ohio State', 'ATH', 73, 200),
            ('c', 'Ohio State', 'PR', 70, 180),
            ('d', 'Ohio State', 'C', 76, 300),
            ('e', 'Ohio State', 'G', 77, 315),
            ('f', 'Ohio State', 'OT', 78, 320),
            ('g', 'Ohio State', 'DE', 76, 265),
            ('h', 'Ohio State', 'DT', 75, 300),
            ('i', 'Ohio State', 'NT', 74, 330),
            ('j', 'Ohio State', 'CB', 71, 185),
            ('k', 'Ohio State', 'S', 72, 200),
            ('l', 'Ohio State', 'FB', 72, 240),
            ('m', 'Army', 'FB', 71, 230),
            ('n', 'Navy', 'FB', 70, 225),
            ('o', 'Ohio State', 'LB', 74, 235),
            ('p', 'Ohio State', 'OL', 77, 305),
        ])

    def test_positions_in_closed_set(self):
        out = normalize_positions(self.raw)
        self.assertTrue(out['position'].isin(config.POSITION_SET).all())
        self.assertFalse(out['position'].isin(['ATH', 'PR']).any())
        self.assertEqual(len(out), len(self.raw) - 2)

    def test_line_and_secondary_groups(self):
        out = normalize_positions(self.raw).set_index('name')['position']
        for name in 'def':
            self.assertEqual(out[name], 'OL')
        for name in 'ghi':
            self.assertEqual(out[name], 'DL')
        for name in 'jk':
            self.assertEqual(out[name], 'DB')
        self.assertEqual(out['p'], 'OL')
        self.assertEqual(out['o'], 'LB')

    def test_fullback_rule(self):
        out = normalize_positions(self.raw).set_index('name')['position']
        self.assertEqual(out['m'], 'RB')
        self.assertEqual(out['n'], 'RB')
        self.assertEqual(out['l'], 'TE')

    def test_input_not_mutated(self):
        before = self.raw.copy()
        normalize_positions(self.raw)
        pd.testing.assert_frame_equal(self.raw, before)

    def test_unknown_position_raises(self):
        raw = pd.concat([self.raw, _players([('x', 'Navy', 'ROVER', 72, 210),
                                             ('y', 'Navy', None, 72, 210)])])
        with self.assertRaises(UnknownPositionError) as ctx:
            normalize_positions(raw)
        self.assertEqual(ctx.exception.counts, {'ROVER': 1, '<missing>': 1})


class TestBMI(unittest.TestCase):

    def test_bmi_formula(self):
        out = add_bmi(_players([('a', 'Navy', 'LB', 72, 220)]))
        self.assertAlmostEqual(out['bmi'].iloc[0], 703 * 220 / 72 ** 2, places=12)
        self.assertAlmostEqual(out['bmi'].iloc[0], 29.83, places=2)

    def test_zero_height_raises(self):
        players = _players([('a', 'Navy', 'LB', 72, 220), ('b', 'Navy', 'LB', 0, 220)])
        with self.assertRaises(InvalidHeightError) as ctx:
            add_bmi(players)
        self.assertEqual(ctx.exception.n_rows, 1)
        self.assertEqual(ctx.exception.players, ['b'])

    def test_missing_height_gives_missing_bmi(self):
        players = _players([('a', 'Navy', 'LB', np.nan, 220), ('b', 'Navy', 'LB', 70, np.nan)])
        out = add_bmi(players)
        self.assertTrue(out['bmi'].isna().all())
        self.assertFalse(np.isinf(out['bmi']).any())


class TestDataPreprocessor(unittest.TestCase):

    def test_preprocess_complete(self):
        raw = _players([
            ('a', 'Army', 'FB', 71, 230),
            ('b', 'Army', 'ATH', 72, 210),
            ('c', 'Army', 'OT', 78, 310),
        ])
        pre = DataPreprocessor()
        out = pre.preprocess_complete(raw)

        self.assertListEqual(out['position'].tolist(), ['RB', 'OL'])
        self.assertIn('bmi', out.columns)
        summary = pre.get_preprocessing_summary()
        self.assertEqual(summary['original_size'], 3)
        self.assertEqual(summary['final_size'], 2)

    def test_group_outside_closed_set_raises(self):
        raw = _players([('a', 'Navy', 'OLB', 74, 235)])
        pre = DataPreprocessor()
        pre.update_config(position_groups={**config.POSITION_GROUPS, 'OLB': 'EDGE'})
        with self.assertRaises(UnknownPositionError) as ctx:
            pre.preprocess_complete(raw)
        self.assertEqual(ctx.exception.counts, {'EDGE': 1})

    def test_update_config_changes_academies(self):
        raw = _players([('a', 'Air Force', 'FB', 71, 230)])
        pre = DataPreprocessor()
        pre.update_config(triple_option_teams=['Air Force'])
        out = pre.preprocess_complete(raw)
        self.assertEqual(out['position'].iloc[0], 'RB')


if __name__ == '__main__':
    unittest.main()
