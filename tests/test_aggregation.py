"""
Unit tests for size summaries and the wide team-position table.
"""
import unittest
import numpy as np
import pandas as pd
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from cfb_size_analysis.data.aggregation import (
    join_team_records,
    pivot_team_positions,
    position_columns,
    position_summary,
    summarize,
    team_position_summary,
    team_summary,
)
from cfb_size_analysis.exceptions import UnmatchedTeamError


class TestAggregation(unittest.TestCase):

    def setUp(self):
        self.players = pd.DataFrame({
            'name': list('abcdefg'),
            'team': ['Navy', 'Navy', 'Navy', 'Army', 'Army', 'Army', 'Army'],
            'position': ['QB', 'OL', 'OL', 'QB', 'QB', 'QB', 'DL'],
            'height': [73.0, 76.0, 78.0, 72.0, 72.0, 72.0, np.nan],
            'weight': [205.0, 300.0, 310.0, 200.0, 200.0, 200.0, 290.0],
        })
        self.players['bmi'] = 703 * self.players['weight'] / self.players['height'] ** 2
        self.records = pd.DataFrame({
            'team': ['Navy', 'Army', 'Air Force'],
            'season': [2023, 2023, 2023],
            'games': [12, 12, 12],
            'wins': [5, 6, 5],
            'losses': [7, 6, 7],
            'win_percentage': [5 / 12, 0.5, 5 / 12],
        })

    def test_single_player_group(self):
        out = summarize(self.players, ['team', 'position']).set_index(['team', 'position'])
        self.assertEqual(out.loc[('Navy', 'QB'), 'height'], 73.0)
        self.assertEqual(out.loc[('Navy', 'QB'), 'player_count'], 1)

    def test_identical_values(self):
        out = summarize(self.players, ['team', 'position']).set_index(['team', 'position'])
        self.assertEqual(out.loc[('Army', 'QB'), 'weight'], 200.0)
        self.assertEqual(out.loc[('Army', 'QB'), 'player_count'], 3)

    def test_missing_values_excluded_from_mean(self):
        out = summarize(self.players, 'team').set_index('team')
        self.assertAlmostEqual(out.loc['Army', 'height'], 72.0)
        self.assertAlmostEqual(out.loc['Army', 'weight'], 222.5)
        self.assertEqual(out.loc['Army', 'player_count'], 4)

    def test_position_summary(self):
        out = position_summary(self.players).set_index('position')
        self.assertSetEqual(set(out.index), {'QB', 'OL', 'DL'})
        self.assertAlmostEqual(out.loc['OL', 'weight'], 305.0)
        self.assertTrue(np.isnan(out.loc['DL', 'height']))

    def test_team_summary_joins_record(self):
        out = team_summary(self.players, self.records).set_index('team')
        self.assertEqual(len(out), 2)
        self.assertEqual(out.loc['Navy', 'wins'], 5)
        self.assertAlmostEqual(out.loc['Army', 'win_percentage'], 0.5)

    def test_unmatched_team_raises(self):
        records = self.records[self.records['team'] != 'Navy']
        with self.assertRaises(UnmatchedTeamError) as ctx:
            team_summary(self.players, records)
        self.assertEqual(ctx.exception.teams, ['Navy'])

    def test_missing_team_name_raises(self):
        players = self.players.copy()
        players.loc[1, 'team'] = np.nan
        with self.assertRaises(UnmatchedTeamError) as ctx:
            team_summary(players, self.records)
        self.assertEqual(ctx.exception.teams, ['<missing>'])

    def test_unmatched_team_dropped_when_not_strict(self):
        records = self.records[self.records['team'] != 'Navy']
        out = join_team_records(summarize(self.players, 'team'), records, strict=False)
        self.assertListEqual(out['team'].tolist(), ['Army'])


class TestWideReshape(unittest.TestCase):

    def setUp(self):
        self.long = pd.DataFrame({
            'team': ['Navy', 'Navy', 'Army'],
            'position': ['QB', 'OL', 'QB'],
            'height': [73.0, 77.0, 72.0],
            'weight': [205.0, 305.0, 200.0],
            'bmi': [27.0, 36.0, 27.1],
            'player_count': [1, 2, 3],
        })
        self.records = pd.DataFrame({
            'team': ['Navy', 'Army'],
            'season': [2023, 2023],
            'games': [12, 12],
            'wins': [5, 6],
            'losses': [7, 6],
            'win_percentage': [5 / 12, 0.5],
        })

    def test_columns_match_positions(self):
        wide = pivot_team_positions(self.long, self.records)
        positions = set(self.long['position'])
        for metric in ('height', 'weight', 'bmi'):
            cols = position_columns(wide, metric)
            self.assertSetEqual({c[len(metric) + 1:] for c in cols}, positions)
        self.assertEqual(len(wide), 2)
        self.assertIn('wins', wide.columns)

    def test_absent_position_is_missing_not_zero(self):
        wide = pivot_team_positions(self.long, self.records).set_index('team')
        self.assertTrue(np.isnan(wide.loc['Army', 'weight_OL']))
        self.assertEqual(wide.loc['Navy', 'weight_OL'], 305.0)

    def test_long_table_from_players(self):
        players = pd.DataFrame({
            'team': ['Navy', 'Army', 'Army'],
            'position': ['QB', 'QB', 'OL'],
            'height': [73.0, 72.0, 76.0],
            'weight': [205.0, 200.0, 300.0],
            'bmi': [27.0, 27.1, 36.5],
        })
        long = team_position_summary(players, self.records)
        self.assertEqual(len(long), 3)
        wide = pivot_team_positions(long, self.records).set_index('team')
        self.assertTrue(np.isnan(wide.loc['Navy', 'height_OL']))


if __name__ == '__main__':
    unittest.main()
