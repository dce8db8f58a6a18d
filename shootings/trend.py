from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np
import pandas as pd
from statsmodels.formula.api import ols


logger = logging.getLogger(__name__)

TREND_FORMULA = "count ~ year"
MIN_OBSERVATIONS = 3
SIGNIFICANCE_LEVEL = 0.05


@dataclass(frozen=True)
class TrendFit:
    """Ordinary least squares fit of yearly incident counts on calendar year."""

    slope: float
    intercept: float
    slope_std_error: float
    intercept_std_error: float
    slope_p_value: float
    r_squared: float
    n_obs: int
    results: Any

    @property
    def is_significant(self) -> bool:
        return bool(self.slope_p_value < SIGNIFICANCE_LEVEL)

    def coefficient_table(self) -> pd.DataFrame:
        """Coefficient summary in the layout of the statsmodels OLS report."""
        table = pd.DataFrame(
            {
                "estimate": self.results.params,
                "std_error": self.results.bse,
                "t_value": self.results.tvalues,
                "p_value": self.results.pvalues,
            }
        )
        return table.rename_axis("term").reset_index()

    def predict(self, years: Iterable[int]) -> pd.Series:
        frame = pd.DataFrame({"year": list(years)})
        return pd.Series(
            np.asarray(self.results.predict(frame), dtype=float),
            index=frame["year"],
            name="fitted",
        )


def fit_yearly_trend(yearly: pd.DataFrame) -> TrendFit:
    """Fit ``count ~ year`` over a table with one row per year."""
    data = yearly[["year", "count"]].dropna().astype(float)
    if len(data) < MIN_OBSERVATIONS:
        raise ValueError(
            f"At least {MIN_OBSERVATIONS} yearly observations are needed to fit a trend; "
            f"got {len(data)}."
        )

    results = ols(TREND_FORMULA, data=data).fit()
    fit = TrendFit(
        slope=float(results.params["year"]),
        intercept=float(results.params["Intercept"]),
        slope_std_error=float(results.bse["year"]),
        intercept_std_error=float(results.bse["Intercept"]),
        slope_p_value=float(results.pvalues["year"]),
        r_squared=float(results.rsquared),
        n_obs=int(results.nobs),
        results=results,
    )
    logger.info(
        "Yearly trend: %+.2f incidents/year (p=%.3g, n=%s)",
        fit.slope,
        fit.slope_p_value,
        fit.n_obs,
    )
    return fit
