"""
Data loading module for CFB size analysis.
Handles loading and validation of the player and team-record datasets.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

from ..config import config
from ..exceptions import DataQualityError, InconsistentRecordError, SchemaError

logger = logging.getLogger(__name__)


def require_columns(df: pd.DataFrame, columns, table: str) -> None:
    """Raise SchemaError if any of *columns* is absent from *df*."""
    missing = set(columns) - set(df.columns)
    if missing:
        raise SchemaError(table, missing)


class DataLoader:
    """Handles loading and validation of the two source tables."""

    def __init__(self, season: Optional[int] = None):
        """
        Initialize the data loader.

        Args:
            season: Season to keep from the team-records file. Defaults to
                ``config.SEASON``; ``None`` there requires a single-season file.
        """
        self.season = season if season is not None else config.SEASON
        self.players_df: pd.DataFrame | None = None
        self.team_records_df: pd.DataFrame | None = None

    def load_players(self, filepath: Optional[Path] = None) -> pd.DataFrame:
        """
        Load per-player biometrics.

        Args:
            filepath: Optional path to the players CSV file

        Returns:
            DataFrame with one row per rostered player
        """
        if filepath is None:
            filepath = config.PLAYERS_FILE

        try:
            df = pd.read_csv(filepath)
        except FileNotFoundError:
            raise FileNotFoundError(f"Players data file not found: {filepath}")

        self.players_df = self.clean_players(df)
        logger.info("Loaded %d players from %s", len(self.players_df), filepath)
        return self.players_df

    @staticmethod
    def clean_players(df: pd.DataFrame) -> pd.DataFrame:
        """Check columns and coerce height/weight to numbers."""
        require_columns(df, config.PLAYER_COLUMNS, "players")
        df = df.copy()
        df["position"] = df["position"].str.strip()
        df["team"] = df["team"].str.strip()

        for col in ("height", "weight"):
            raw_missing = df[col].isna()
            df[col] = pd.to_numeric(df[col], errors="coerce")
            coerced = int((df[col].isna() & ~raw_missing).sum())
            if coerced:
                logger.warning("%d non-numeric %s value(s) treated as missing", coerced, col)
        return df

    def load_team_records(self, filepath: Optional[Path] = None) -> pd.DataFrame:
        """
        Load per-team season records.

        Args:
            filepath: Optional path to the team-records CSV file

        Returns:
            DataFrame with one row per team for the selected season
        """
        if filepath is None:
            filepath = config.TEAM_RECORDS_FILE

        try:
            df = pd.read_csv(filepath)
        except FileNotFoundError:
            raise FileNotFoundError(f"Team records file not found: {filepath}")

        self.team_records_df = self.clean_team_records(df, season=self.season)
        logger.info("Loaded %d team records from %s", len(self.team_records_df), filepath)
        return self.team_records_df

    @staticmethod
    def clean_team_records(df: pd.DataFrame, season: Optional[int] = None) -> pd.DataFrame:
        """
        Validate team records and derive ``win_percentage``.

        Raises:
            SchemaError: required columns missing
            DataQualityError: season absent, several seasons left, or a team
                listed twice
            InconsistentRecordError: wins + losses != games
        """
        require_columns(df, config.TEAM_COLUMNS, "team records")
        df = df.copy()
        df["team"] = df["team"].str.strip()

        if season is not None:
            df = df[df["season"] == season].copy()
            if df.empty:
                raise DataQualityError(f"No team records for season {season}")

        seasons = df["season"].nunique()
        if seasons > 1:
            raise DataQualityError(
                f"Team records span {seasons} seasons; pick one with DataLoader(season=...)"
            )

        dupes = df.loc[df.duplicated(subset=["team"], keep=False), "team"]
        if len(dupes):
            raise DataQualityError(
                f"Duplicate team records within a season: {sorted(dupes.unique())}"
            )

        bad = df["wins"] + df["losses"] != df["games"]
        if bad.any():
            raise InconsistentRecordError(df.loc[bad, "team"].tolist())

        if "win_percentage" not in df.columns or df["win_percentage"].isna().any():
            df["win_percentage"] = df["wins"] / df["games"]

        return df.reset_index(drop=True)

    def load_complete_dataset(
        self,
        players_path: Optional[Path] = None,
        team_records_path: Optional[Path] = None,
    ) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Load both tables in one call.

        Returns:
            (players, team_records)
        """
        players = self.load_players(players_path)
        records = self.load_team_records(team_records_path)
        return players, records

    def get_data_summary(self) -> dict:
        """
        Get summary statistics of loaded data.

        Returns:
            Dictionary with data summary information
        """
        if self.players_df is None or self.team_records_df is None:
            raise ValueError("No data loaded. Call load_complete_dataset() first.")

        players = self.players_df
        records = self.team_records_df
        summary = {
            'total_players': len(players),
            'roster_teams': players['team'].nunique(),
            'record_teams': records['team'].nunique(),
            'seasons': sorted(records['season'].unique().tolist()),
            'position_counts': players['position'].value_counts().to_dict(),
            'missing_height': int(players['height'].isna().sum()),
            'missing_weight': int(players['weight'].isna().sum()),
            'height_range': (players['height'].min(), players['height'].max()),
            'weight_range': (players['weight'].min(), players['weight'].max()),
        }
        return summary


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Testing DataLoader...")

    loader = DataLoader()
    try:
        players, records = loader.load_complete_dataset()
        print(players.head())
        print(records.head())
        summary = loader.get_data_summary()
        print(f"Total players: {summary['total_players']:,}")
        print(f"Teams (rosters / records): {summary['roster_teams']} / {summary['record_teams']}")
        print(f"Positions: {summary['position_counts']}")
        print("******* DataLoader tests passed!")
    except FileNotFoundError as e:
        print(f"------------- Error testing DataLoader: {e}")
        print("Note: This is expected if data files are not present.")
