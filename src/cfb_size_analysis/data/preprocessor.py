"""
Data preprocessing module for CFB size analysis.
Handles position normalization and the derived BMI metric.

Position rules are applied in order, first match wins:

1. drop the athlete / punt-returner placeholder codes
2. collapse offensive-line sub-positions into ``OL``
3. collapse defensive-line sub-positions into ``DL``
4. collapse defensive-back sub-positions into ``DB``
5. fullbacks become ``RB`` on triple-option teams, ``TE`` everywhere else
6. everything else passes through
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..config import config
from ..exceptions import InvalidHeightError, UnknownPositionError

logger = logging.getLogger(__name__)


def normalize_positions(
    df: pd.DataFrame,
    *,
    excluded: Iterable[str] = config.EXCLUDED_POSITIONS,
    groups: Dict[str, str] = config.POSITION_GROUPS,
    triple_option_teams: Iterable[str] = config.TRIPLE_OPTION_TEAMS,
    position_set: Iterable[str] = config.POSITION_SET,
    fullback_code: str = config.FULLBACK_CODE,
) -> pd.DataFrame:
    """Return a copy of *df* with ``position`` rewritten to position groups."""
    excluded = set(excluded)
    position_set = set(position_set)

    keep = ~df["position"].isin(excluded)
    out = df.loc[keep].copy()

    recognised = position_set | set(groups) | {fullback_code}
    unknown = ~out["position"].isin(recognised)
    if unknown.any():
        counts = out.loc[unknown, "position"].fillna("<missing>").value_counts()
        raise UnknownPositionError(counts.to_dict())

    pos = out["position"].replace(groups)
    is_fb = pos == fullback_code
    on_option_team = out["team"].isin(set(triple_option_teams))
    pos = pos.mask(is_fb & on_option_team, "RB").mask(is_fb & ~on_option_team, "TE")
    out["position"] = pos

    # remapped codes must land in the closed set
    outside = ~out["position"].isin(position_set)
    if outside.any():
        raise UnknownPositionError(out.loc[outside, "position"].value_counts().to_dict())
    return out


def add_bmi(df: pd.DataFrame, *, constant: float = config.BMI_CONSTANT) -> pd.DataFrame:
    """
    Add ``bmi = 703 * weight / height**2`` (pounds and inches).

    Raises:
        InvalidHeightError: any row has a height of zero or less
    """
    bad = df["height"] <= 0
    if bad.any():
        names = df.loc[bad, "name"].tolist() if "name" in df.columns else []
        raise InvalidHeightError(int(bad.sum()), names)

    out = df.copy()
    out["bmi"] = constant * out["weight"] / np.square(out["height"])

    missing = int(out["bmi"].isna().sum())
    if missing:
        logger.warning(
            "%d player(s) missing height or weight; BMI left empty and excluded from means",
            missing,
        )
    return out


class DataPreprocessor:
    """Cleans the raw player table into the analysis-ready player table."""

    def __init__(self):
        """Create a preprocessor with defaults from central config."""
        self.EXCLUDED_POSITIONS: List[str] = []
        self.POSITION_GROUPS: Dict[str, str] = {}
        self.TRIPLE_OPTION_TEAMS: List[str] = []
        self.BMI_CONSTANT: float | None = None

        self.raw_data: pd.DataFrame | None = None
        self.processed_data: pd.DataFrame | None = None

        self.update_config(
            excluded_positions=list(config.EXCLUDED_POSITIONS),
            position_groups=dict(config.POSITION_GROUPS),
            triple_option_teams=list(config.TRIPLE_OPTION_TEAMS),
            bmi_constant=config.BMI_CONSTANT,
        )

    def update_config(
        self,
        excluded_positions: Optional[List[str]] = None,
        position_groups: Optional[Dict[str, str]] = None,
        triple_option_teams: Optional[List[str]] = None,
        bmi_constant: Optional[float] = None,
    ):
        """
        Update preprocessing configuration.

        Args:
            excluded_positions: Position codes dropped before grouping
            position_groups: Sub-position code -> position group
            triple_option_teams: Teams whose fullbacks count as running backs
            bmi_constant: Imperial BMI conversion factor
        """
        if excluded_positions is not None:
            self.EXCLUDED_POSITIONS = excluded_positions
        if position_groups is not None:
            self.POSITION_GROUPS = position_groups
        if triple_option_teams is not None:
            self.TRIPLE_OPTION_TEAMS = triple_option_teams
        if bmi_constant is not None:
            self.BMI_CONSTANT = bmi_constant

    def normalize_positions(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply the position rules and log how many rows were dropped."""
        out = normalize_positions(
            df,
            excluded=self.EXCLUDED_POSITIONS,
            groups=self.POSITION_GROUPS,
            triple_option_teams=self.TRIPLE_OPTION_TEAMS,
        )
        removed = len(df) - len(out)
        logger.info(
            "Removed %d %s players, kept %d", removed, "/".join(self.EXCLUDED_POSITIONS), len(out)
        )
        return out

    def add_bmi(self, df: pd.DataFrame) -> pd.DataFrame:
        return add_bmi(df, constant=self.BMI_CONSTANT)

    def preprocess_complete(self, raw_df: pd.DataFrame) -> pd.DataFrame:
        """
        Complete preprocessing pipeline.

        Args:
            raw_df: Player table as returned by DataLoader.load_players

        Returns:
            Player table with grouped positions and a ``bmi`` column
        """
        self.raw_data = raw_df.copy()
        df = self.normalize_positions(raw_df)
        df = self.add_bmi(df)
        self.processed_data = df.reset_index(drop=True)
        logger.info(
            "Preprocessing complete: %d players across %d position groups",
            len(self.processed_data),
            self.processed_data["position"].nunique(),
        )
        return self.processed_data

    def get_preprocessing_summary(self) -> Dict:
        """Get summary of preprocessing steps and results."""
        if self.processed_data is None:
            raise ValueError("No processed data available")

        return {
            'original_size': len(self.raw_data) if self.raw_data is not None else 0,
            'final_size': len(self.processed_data),
            'positions': self.processed_data['position'].value_counts().to_dict(),
            'missing_bmi': int(self.processed_data['bmi'].isna().sum()),
            'config': {
                'excluded_positions': self.EXCLUDED_POSITIONS,
                'position_groups': self.POSITION_GROUPS,
                'triple_option_teams': self.TRIPLE_OPTION_TEAMS,
                'bmi_constant': self.BMI_CONSTANT,
            },
        }
