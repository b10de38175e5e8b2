"""
CFB Player Size vs. Win Rate Analysis

End-to-end pipeline: load rosters and records, group positions, summarise
size by position and team, test position differences, and model wins on size.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
from scipy import stats

from .config import config
from .data.aggregation import (
    pivot_team_positions,
    position_columns,
    position_summary,
    team_position_summary,
    team_summary,
)
from .data.loader import DataLoader
from .data.preprocessor import DataPreprocessor
from .exceptions import ModelFitError
from .models.anova import PositionAnova
from .models.binomial import (
    BinomialFit,
    compare_encodings,
    fit_binomial,
    fit_many,
    significant_predictors,
)
from .models.scenario import ScenarioResult, evaluate_scenario

# ───────────────────── configuration ────────────────────────────
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)s │ %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@dataclass
class AnalysisResults:
    """Every table the presentation layer consumes."""
    players: pd.DataFrame
    position_summary: pd.DataFrame
    team_summary: pd.DataFrame
    team_position_long: pd.DataFrame
    team_position_wide: pd.DataFrame
    correlations: pd.DataFrame
    anova: Dict[str, Dict[str, pd.DataFrame]]
    models: Dict[str, BinomialFit] = field(default_factory=dict)
    encoding_check: Optional[pd.DataFrame] = None
    scenario: Optional[ScenarioResult] = None
    failed_fits: Dict[str, str] = field(default_factory=dict)


# ─────────────────────── analytical helpers ────────────────────
def correlation_summary(team_df: pd.DataFrame, metrics=tuple(config.METRICS)) -> pd.DataFrame:
    """Pearson correlation of team mean size with win percentage."""
    rows = []
    for metric in metrics:
        data = team_df[[metric, "win_percentage"]].dropna()
        r, p = stats.pearsonr(data[metric], data["win_percentage"])
        rows.append({"metric": metric, "pearson_r": float(r), "p_value": float(p), "n_teams": len(data)})
    return pd.DataFrame(rows)


def basic_overview(players: pd.DataFrame, records: pd.DataFrame) -> None:
    """Print high-level info about the two inputs."""
    print("\n─ BASIC OVERVIEW ─")
    print(f"Players: {len(players):,} across {players['team'].nunique()} teams")
    print(f"Team records: {len(records)}")
    print("Raw position codes:")
    print(players["position"].value_counts().to_string())
    dupe = players.duplicated().sum()
    if dupe:
        logger.warning("%d duplicate player rows detected", dupe)


def _try_fit(name: str, results: AnalysisResults, data: pd.DataFrame, predictors) -> Optional[BinomialFit]:
    try:
        fit = fit_binomial(data, predictors)
    except ModelFitError as e:
        logger.warning("Model '%s' failed: %s", name, e)
        results.failed_fits[name] = str(e)
        return None
    results.models[name] = fit
    return fit


# ───────────────────── orchestrator API ─────────────────────
def run_full_analysis(
    players_csv: Path | str | None = None,
    teams_csv: Path | str | None = None,
    *,
    season: Optional[int] = None,
    strict: bool = True,
) -> AnalysisResults:
    """Single convenience entry for the whole analysis."""
    # 1) Load
    print("── Section 1 Load ──")
    loader = DataLoader(season=season)
    raw_players, records = loader.load_complete_dataset(
        Path(players_csv) if players_csv else None,
        Path(teams_csv) if teams_csv else None,
    )
    basic_overview(raw_players, records)

    # 2) Clean positions, add BMI
    print("── Section 2 Preprocess ──")
    players = DataPreprocessor().preprocess_complete(raw_players)

    # 3) Summaries
    print("── Section 3 Summaries ──")
    pos_df = position_summary(players)
    team_df = team_summary(players, records, strict=strict)
    long_df = team_position_summary(players, records, strict=strict)
    wide_df = pivot_team_positions(long_df, records, strict=strict)
    correlations = correlation_summary(team_df)
    print(pos_df.round(2).to_string(index=False))
    print(correlations.round(3).to_string(index=False))

    # 4) Position differences
    print("── Section 4 ANOVA & Tukey HSD ──")
    anova = PositionAnova().run(players)
    for metric, tables in anova.items():
        print(f"\n{metric}:")
        print(tables["anova"].round(4).to_string())

    results = AnalysisResults(
        players=players,
        position_summary=pos_df,
        team_summary=team_df,
        team_position_long=long_df,
        team_position_wide=wide_df,
        correlations=correlations,
        anova=anova,
    )

    # 5) Binomial regression
    print("── Section 5 Binomial Regression ──")
    team_models = {f"team_{m}": [m] for m in config.METRICS}
    team_models["team_all"] = list(config.METRICS)
    fits, failures = fit_many(team_df, team_models)
    results.models.update(fits)
    results.failed_fits.update(failures)

    try:
        results.encoding_check = compare_encodings(team_df, ["weight"])
    except ModelFitError as e:
        logger.warning("Encoding check failed: %s", e)
        results.failed_fits["encoding_check"] = str(e)
    else:
        print("Counts vs proportion encoding:")
        print(results.encoding_check.to_string())

    for metric in config.METRICS:
        _try_fit(f"position_{metric}", results, wide_df, position_columns(wide_df, metric))

    full_weight = results.models.get("position_weight")
    if full_weight is not None:
        keep = significant_predictors(full_weight)
        if keep:
            _try_fit("position_weight_reduced", results, wide_df, keep)
        else:
            logger.info("No significant position-weight columns; reduced model skipped")

    for name, fit in results.models.items():
        print(f"\n{name} (n={fit.nobs}, deviance {fit.deviance:.2f} / null {fit.null_deviance:.2f})")
        print(fit.coefficients.round(4).to_string())

    # 6) Scenario
    print("── Section 6 Scenario ──")
    target = results.models.get("position_weight_reduced") or full_weight
    if target is not None:
        deltas = {k: v for k, v in config.SCENARIO_WEIGHT_DELTAS.items() if k in target.predictors}
        if deltas:
            results.scenario = evaluate_scenario(target, deltas)
            print(
                f"Adding {deltas} moves win probability by "
                f"{results.scenario.probability_change * 100:+.2f} percentage points"
            )

    if results.failed_fits:
        logger.warning("Failed fits: %s", results.failed_fits)
    return results


# ─────────────────────────── CLI demo ───────────────────────────

if __name__ == "__main__":
    run_full_analysis(config.PLAYERS_FILE, config.TEAM_RECORDS_FILE)
