"""
Group-level size summaries and the wide team-by-position table.
"""
from __future__ import annotations

import logging
from functools import reduce
from typing import List, Sequence

import pandas as pd

from ..config import config
from ..exceptions import AggregationError, UnmatchedTeamError

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["games", "wins", "losses", "win_percentage"]


def summarize(
    df: pd.DataFrame,
    keys: str | Sequence[str],
    metrics: Sequence[str] = tuple(config.METRICS),
) -> pd.DataFrame:
    """
    Mean of each metric plus ``player_count`` per unique key combination.

    Missing metric values are skipped by the mean; ``player_count`` counts
    rows regardless.
    """
    keys = [keys] if isinstance(keys, str) else list(keys)
    grouped = df.groupby(keys, sort=True, dropna=False)

    out = grouped[list(metrics)].mean()
    out["player_count"] = grouped.size()

    if (out["player_count"] == 0).any():
        raise AggregationError(f"Empty group while summarising by {keys}")
    return out.reset_index()


def join_team_records(
    summary: pd.DataFrame,
    team_records: pd.DataFrame,
    *,
    strict: bool = True,
) -> pd.DataFrame:
    """
    Attach each team's win/loss record by exact team name.

    Args:
        summary: Table with a ``team`` column
        team_records: Cleaned team records (one row per team)
        strict: Raise on teams with no record. When False the unmatched teams
            are logged and their rows dropped.

    Raises:
        UnmatchedTeamError: some teams have no record and ``strict`` is set
    """
    records = team_records[["team"] + RECORD_COLUMNS]
    unmatched = sorted(set(summary["team"].dropna()) - set(records["team"]))
    if summary["team"].isna().any():
        unmatched.append("<missing>")
    if unmatched:
        if strict:
            raise UnmatchedTeamError(unmatched)
        logger.warning(
            "Dropping %d team(s) with no matching record: %s", len(unmatched), unmatched
        )

    return summary.merge(records, on="team", how="inner", validate="many_to_one")


def position_summary(players: pd.DataFrame) -> pd.DataFrame:
    """Average size per position group."""
    return summarize(players, "position")


def team_summary(
    players: pd.DataFrame, team_records: pd.DataFrame, *, strict: bool = True
) -> pd.DataFrame:
    """Average size per team, joined with the team's record."""
    return join_team_records(summarize(players, "team"), team_records, strict=strict)


def team_position_summary(
    players: pd.DataFrame, team_records: pd.DataFrame, *, strict: bool = True
) -> pd.DataFrame:
    """Average size per (team, position), joined with the team's record."""
    return join_team_records(
        summarize(players, ["team", "position"]), team_records, strict=strict
    )


def pivot_metric(long_df: pd.DataFrame, metric: str, positions: List[str]) -> pd.DataFrame:
    """One ``<metric>_<POS>`` column per position, one row per team."""
    wide = long_df.pivot(index="team", columns="position", values=metric)
    wide = wide.reindex(columns=positions)
    wide.columns = [f"{metric}_{pos}" for pos in wide.columns]
    return wide.reset_index()


def pivot_team_positions(
    long_df: pd.DataFrame,
    team_records: pd.DataFrame,
    metrics: Sequence[str] = tuple(config.METRICS),
    *,
    strict: bool = True,
) -> pd.DataFrame:
    """
    Reshape the team-position summary into one row per team.

    Every position seen anywhere in *long_df* gets a column for each metric;
    a team with no players at a position holds NaN there, never zero.
    """
    positions = sorted(long_df["position"].dropna().unique())
    wides = [pivot_metric(long_df, metric, positions) for metric in metrics]
    wide = reduce(lambda left, right: left.merge(right, on="team", how="left"), wides)
    return join_team_records(wide, team_records, strict=strict)


def position_columns(wide: pd.DataFrame, metric: str) -> List[str]:
    """Wide-table columns holding *metric*, in table order."""
    prefix = f"{metric}_"
    return [c for c in wide.columns if c.startswith(prefix)]
