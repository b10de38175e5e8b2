"""
Error taxonomy for the CFB size analysis pipeline.

Data-quality problems subclass ``ValueError``; failed statistical fits subclass
``RuntimeError`` so callers can tell a failed fit apart from a fit that merely
came back insignificant.
"""
from __future__ import annotations

from typing import Dict, Iterable


class DataQualityError(ValueError):
    """Input tables violate an expected invariant."""


class SchemaError(DataQualityError):
    """A required column is missing from an input table."""

    def __init__(self, table: str, missing: Iterable[str]):
        self.table = table
        self.missing = sorted(missing)
        super().__init__(f"{table} table is missing required columns: {self.missing}")


class UnmatchedTeamError(DataQualityError):
    """Teams present in the biometric data have no matching team record."""

    def __init__(self, teams: Iterable[str]):
        self.teams = sorted(teams)
        super().__init__(
            f"{len(self.teams)} team(s) have no matching team record: {self.teams}"
        )


class InvalidHeightError(DataQualityError):
    """A zero or negative height makes BMI undefined."""

    def __init__(self, n_rows: int, players: Iterable[str] = ()):
        self.n_rows = n_rows
        self.players = list(players)
        super().__init__(
            f"{n_rows} player row(s) have a non-positive height: {self.players[:10]}"
        )


class UnknownPositionError(DataQualityError):
    """Position codes outside the recognised rule set."""

    def __init__(self, counts: Dict[str, int]):
        self.counts = dict(counts)
        super().__init__(f"Unrecognised position codes (code: rows): {self.counts}")


class InconsistentRecordError(DataQualityError):
    """Team records whose wins and losses do not add up to games played."""

    def __init__(self, teams: Iterable[str]):
        self.teams = sorted(teams)
        super().__init__(f"wins + losses != games for: {self.teams}")


class AggregationError(AssertionError):
    """An aggregate was computed over an empty group."""


class ModelFitError(RuntimeError):
    """A statistical model could not be fitted."""


class ConvergenceError(ModelFitError):
    """Iterative fitting stopped before converging."""


class InsufficientDataError(ModelFitError):
    """Too few usable observations, or a rank-deficient design matrix."""

    def __init__(self, message: str, nobs: int | None = None, nparams: int | None = None):
        self.nobs = nobs
        self.nparams = nparams
        super().__init__(message)


class DegenerateGroupError(ModelFitError):
    """A group in a one-way ANOVA has fewer than two members."""

    def __init__(self, metric: str, groups: Iterable[str]):
        self.metric = metric
        self.groups = sorted(groups)
        super().__init__(
            f"ANOVA on '{metric}' has single-member group(s): {self.groups}"
        )
