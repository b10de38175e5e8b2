"""
One-way ANOVA and Tukey HSD comparisons of player size across position groups.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Sequence

import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.stats.multicomp import pairwise_tukeyhsd

from ..config import config
from ..exceptions import DegenerateGroupError, InsufficientDataError

logger = logging.getLogger(__name__)


def _complete_cases(players: pd.DataFrame, metric: str, group: str) -> pd.DataFrame:
    data = players[[group, metric]].dropna()
    sizes = data.groupby(group).size()
    singletons = sizes[sizes < 2].index.tolist()
    if singletons:
        raise DegenerateGroupError(metric, [str(g) for g in singletons])
    if len(sizes) < 2:
        raise InsufficientDataError(
            f"ANOVA on '{metric}' needs at least two groups, got {len(sizes)}"
        )
    return data


def group_means(players: pd.DataFrame, metric: str, group: str = "position") -> pd.Series:
    """Mean of *metric* per group over complete cases."""
    return players.dropna(subset=[metric]).groupby(group)[metric].mean()


def anova_table(players: pd.DataFrame, metric: str, group: str = "position") -> pd.DataFrame:
    """
    One-way ANOVA of *metric* across *group*.

    Returns:
        statsmodels ANOVA table with ``df``, ``sum_sq``, ``F`` and ``PR(>F)``
        for the group term and the residual.

    Raises:
        DegenerateGroupError: a group has a single observation
    """
    data = _complete_cases(players, metric, group)
    model = smf.ols(f"{metric} ~ C({group})", data=data).fit()
    table = sm.stats.anova_lm(model, typ=2)
    logger.info(
        "ANOVA %s ~ %s: F=%.2f, p=%.3g",
        metric, group, table["F"].iloc[0], table["PR(>F)"].iloc[0],
    )
    return table


def tukey_hsd(
    players: pd.DataFrame,
    metric: str,
    group: str = "position",
    alpha: float = config.TUKEY_ALPHA,
) -> pd.DataFrame:
    """
    Tukey Honestly Significant Difference test for every pair of groups.

    ``meandiff`` is ``mean(group2) - mean(group1)``. Rows are sorted from
    least to most significant (descending ``p_adj``).
    """
    data = _complete_cases(players, metric, group)
    res = pairwise_tukeyhsd(data[metric], data[group].astype(str), alpha=alpha)

    pairs = list(combinations(res.groupsunique, 2))
    table = pd.DataFrame({
        "group1": [g1 for g1, _ in pairs],
        "group2": [g2 for _, g2 in pairs],
        "meandiff": res.meandiffs,
        "lower": res.confint[:, 0],
        "upper": res.confint[:, 1],
        "p_adj": res.pvalues,
        "reject": res.reject,
    })
    return table.sort_values("p_adj", ascending=False, kind="mergesort").reset_index(drop=True)


@dataclass
class PositionAnova:
    """Runs ANOVA and Tukey HSD for each size metric across position groups."""
    metrics: Sequence[str] = field(default_factory=lambda: list(config.METRICS))
    group: str = "position"
    alpha: float = config.TUKEY_ALPHA

    def run(self, players: pd.DataFrame) -> Dict[str, Dict[str, pd.DataFrame]]:
        """
        Returns:
            ``{metric: {"anova": table, "tukey": table, "means": series}}``
        """
        results: Dict[str, Dict[str, pd.DataFrame]] = {}
        for metric in self.metrics:
            results[metric] = {
                "anova": anova_table(players, metric, self.group),
                "tukey": tukey_hsd(players, metric, self.group, self.alpha),
                "means": group_means(players, metric, self.group),
            }
        return results
