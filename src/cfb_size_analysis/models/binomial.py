"""
Binomial (logit) regression of team wins on average player size.

Two response encodings are supported:

* ``"counts"`` - a two-column ``[wins, losses]`` response, unweighted. This is
  the canonical encoding used for all downstream interpretation.
* ``"proportion"`` - ``win_percentage`` weighted by ``games`` played.

Both maximise the same likelihood, so their coefficients agree up to the
rounding already present in ``win_percentage``.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, List, Literal, Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from ..config import config
from ..exceptions import ConvergenceError, InsufficientDataError

logger = logging.getLogger(__name__)

Encoding = Literal["counts", "proportion"]
INTERCEPT = "const"


@dataclass(frozen=True)
class BinomialFit:
    """Immutable summary of a fitted binomial GLM."""
    predictors: tuple
    encoding: str
    coefficients: pd.DataFrame      # index: const + predictors
    predictor_means: pd.Series      # over the rows actually used
    deviance: float
    null_deviance: float
    df_resid: float
    df_null: float
    aic: float
    nobs: int
    n_dropped: int

    @property
    def params(self) -> pd.Series:
        return self.coefficients["estimate"]

    def summary_frame(self) -> pd.DataFrame:
        """Coefficient table with fit statistics attached as attrs."""
        table = self.coefficients.copy()
        table.attrs.update({
            "deviance": self.deviance,
            "null_deviance": self.null_deviance,
            "df_resid": self.df_resid,
            "df_null": self.df_null,
            "aic": self.aic,
            "nobs": self.nobs,
        })
        return table


def _design(
    data: pd.DataFrame, predictors: Sequence[str], response_cols: Sequence[str]
) -> tuple[pd.DataFrame, int]:
    """Available-case rows for the columns the model uses."""
    used = list(dict.fromkeys(list(predictors) + list(response_cols)))
    missing_cols = [c for c in used if c not in data.columns]
    if missing_cols:
        raise KeyError(f"Columns not in data: {missing_cols}")

    complete = data.dropna(subset=used)
    dropped = len(data) - len(complete)
    if dropped:
        logger.info("Dropped %d row(s) with missing values before fitting", dropped)

    nparams = len(predictors) + 1
    if len(complete) <= nparams:
        raise InsufficientDataError(
            f"{len(complete)} usable observation(s) for {nparams} parameter(s)",
            nobs=len(complete),
            nparams=nparams,
        )
    return complete, dropped


def fit_binomial(
    data: pd.DataFrame,
    predictors: Sequence[str],
    *,
    encoding: Encoding = "counts",
    maxiter: int = config.GLM_MAX_ITER,
) -> BinomialFit:
    """
    Fit a logit-link binomial GLM of team wins on *predictors*.

    Args:
        data: Team-level table (team summary or wide team-position table)
        predictors: Columns used as linear predictors
        encoding: ``"counts"`` or ``"proportion"``
        maxiter: IRLS iteration cap

    Raises:
        InsufficientDataError: too few complete rows, or a rank-deficient design
        ConvergenceError: IRLS did not converge
    """
    predictors = list(predictors)
    if not predictors:
        raise ValueError("At least one predictor is required")

    if encoding == "counts":
        response_cols = ["wins", "losses"]
    elif encoding == "proportion":
        response_cols = ["win_percentage", "games"]
    else:
        raise ValueError(f"Unknown encoding: {encoding!r}")

    complete, dropped = _design(data, predictors, response_cols)
    exog = sm.add_constant(complete[predictors].astype(float), has_constant="add")

    rank = np.linalg.matrix_rank(exog.to_numpy())
    if rank < exog.shape[1]:
        raise InsufficientDataError(
            f"Design matrix is rank deficient (rank {rank} < {exog.shape[1]} columns)",
            nobs=len(complete),
            nparams=exog.shape[1],
        )

    if encoding == "counts":
        model = sm.GLM(
            complete[response_cols].astype(float), exog, family=sm.families.Binomial()
        )
    else:
        model = sm.GLM(
            complete["win_percentage"].astype(float),
            exog,
            family=sm.families.Binomial(),
            var_weights=complete["games"].astype(float),
        )

    with warnings.catch_warnings():
        warnings.simplefilter("error", ConvergenceWarning)
        try:
            result = model.fit(maxiter=maxiter)
        except ConvergenceWarning as e:
            raise ConvergenceError(f"Binomial GLM did not converge: {e}") from e

    if not getattr(result, "converged", True) or not np.all(np.isfinite(result.bse)):
        raise ConvergenceError("Binomial GLM did not converge to finite estimates")

    coefficients = pd.DataFrame({
        "estimate": result.params,
        "std_error": result.bse,
        "z_value": result.tvalues,
        "p_value": result.pvalues,
    })

    logger.info(
        "Binomial GLM (%s) on %s: deviance %.2f vs null %.2f (n=%d)",
        encoding, predictors, result.deviance, result.null_deviance, int(result.nobs),
    )
    return BinomialFit(
        predictors=tuple(predictors),
        encoding=encoding,
        coefficients=coefficients,
        predictor_means=complete[predictors].mean(),
        deviance=float(result.deviance),
        null_deviance=float(result.null_deviance),
        df_resid=float(result.df_resid),
        df_null=float(result.df_model + result.df_resid),
        aic=float(result.aic),
        nobs=int(result.nobs),
        n_dropped=dropped,
    )


def compare_encodings(data: pd.DataFrame, predictors: Sequence[str]) -> pd.DataFrame:
    """Estimates from both encodings side by side with their absolute difference."""
    counts = fit_binomial(data, predictors, encoding="counts")
    proportion = fit_binomial(data, predictors, encoding="proportion")
    table = pd.DataFrame({
        "counts": counts.params,
        "proportion": proportion.params,
    })
    table["abs_diff"] = (table["counts"] - table["proportion"]).abs()
    return table


def significant_predictors(fit: BinomialFit, alpha: float = config.SIGNIFICANCE_ALPHA) -> List[str]:
    """Predictors (intercept excluded) whose p-value is below *alpha*."""
    pvals = fit.coefficients["p_value"].drop(INTERCEPT)
    return [name for name, p in pvals.items() if p < alpha]


def fit_many(
    data: pd.DataFrame, models: Dict[str, Sequence[str]], **kwargs
) -> tuple[Dict[str, BinomialFit], Dict[str, str]]:
    """
    Fit several named predictor sets.

    Returns:
        ``(fits, failures)`` where *failures* maps a model name to the error
        that stopped it.
    """
    fits: Dict[str, BinomialFit] = {}
    failures: Dict[str, str] = {}
    for name, predictors in models.items():
        try:
            fits[name] = fit_binomial(data, predictors, **kwargs)
        except (InsufficientDataError, ConvergenceError) as e:
            logger.warning("Model '%s' failed: %s", name, e)
            failures[name] = str(e)
    return fits, failures
