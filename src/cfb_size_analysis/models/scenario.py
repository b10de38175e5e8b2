"""
Translate binomial regression coefficients into win-probability changes.

A scenario shifts one or more predictors away from a baseline (by default the
predictor means of the rows the model was fitted on) while holding the rest
fixed, and reports how the fitted win probability moves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import pandas as pd
from scipy.special import expit

from .binomial import INTERCEPT, BinomialFit


@dataclass(frozen=True)
class ScenarioResult:
    deltas: Dict[str, float]
    baseline_log_odds: float
    scenario_log_odds: float
    baseline_probability: float
    scenario_probability: float

    @property
    def probability_change(self) -> float:
        return self.scenario_probability - self.baseline_probability


def _log_odds(params: pd.Series, values: Mapping[str, float]) -> float:
    return float(params[INTERCEPT] + sum(params[name] * values[name] for name in values))


def evaluate_scenario(
    fit: BinomialFit,
    deltas: Mapping[str, float],
    baseline: Optional[Mapping[str, float]] = None,
) -> ScenarioResult:
    """
    Win-probability change when *deltas* are added to the baseline predictors.

    Args:
        fit: Fitted binomial model
        deltas: Predictor name -> change (e.g. ``{"weight_OL": 10}``)
        baseline: Predictor values to start from; defaults to the fit's
            predictor means. Missing predictors fall back to those means.

    Raises:
        KeyError: a delta names a predictor the model does not have
    """
    unknown = [name for name in deltas if name not in fit.predictors]
    if unknown:
        raise KeyError(f"Predictors not in model: {unknown}")

    base = dict(fit.predictor_means)
    if baseline is not None:
        extra = [name for name in baseline if name not in fit.predictors]
        if extra:
            raise KeyError(f"Baseline names predictors not in model: {extra}")
        base.update({k: float(v) for k, v in baseline.items()})

    shifted = {name: base[name] + float(deltas.get(name, 0.0)) for name in fit.predictors}
    base_x = _log_odds(fit.params, base)
    new_x = _log_odds(fit.params, shifted)

    return ScenarioResult(
        deltas={k: float(v) for k, v in deltas.items()},
        baseline_log_odds=base_x,
        scenario_log_odds=new_x,
        baseline_probability=float(expit(base_x)),
        scenario_probability=float(expit(new_x)),
    )


def scenario_table(
    fit: BinomialFit,
    scenarios: Mapping[str, Mapping[str, float]],
    baseline: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """Evaluate named scenarios into one row each."""
    rows = []
    for name, deltas in scenarios.items():
        res = evaluate_scenario(fit, deltas, baseline)
        rows.append({
            "scenario": name,
            "baseline_probability": res.baseline_probability,
            "scenario_probability": res.scenario_probability,
            "probability_change": res.probability_change,
        })
    return pd.DataFrame(rows)
