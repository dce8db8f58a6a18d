from __future__ import annotations

from typing import List

import pandas as pd

from .aggregation import UNRECORDED_LABELS
from .trend import SIGNIFICANCE_LEVEL, TrendFit


# Unknown-share above which perpetrator breakdowns are called out as unreliable
HIGH_UNKNOWN_SHARE = 0.25


def describe_trend(fit: TrendFit) -> str:
    if fit.slope > 0:
        direction = "risen"
    elif fit.slope < 0:
        direction = "fallen"
    else:
        direction = "held flat"

    text = (
        f"Across {fit.n_obs} years, recorded shootings have {direction} by about "
        f"{abs(fit.slope):.1f} incidents per year (R² = {fit.r_squared:.2f})."
    )
    if fit.is_significant:
        text += (
            f" The slope is statistically significant (p = {fit.slope_p_value:.3g} "
            f"< {SIGNIFICANCE_LEVEL})."
        )
    else:
        text += (
            f" The slope is not statistically significant at the {SIGNIFICANCE_LEVEL} "
            f"level (p = {fit.slope_p_value:.3g}); year alone explains the series poorly."
        )
    return text


def describe_borough_counts(boroughs: pd.DataFrame) -> str:
    if boroughs.empty:
        return "No incidents were recorded."
    total = int(boroughs["count"].sum())
    top = boroughs.sort_values("count", ascending=False, kind="stable").iloc[0]
    top_count = int(top["count"])
    share = top_count / total * 100 if total else 0.0
    return (
        f"{top['boro']} recorded the most incidents: {top_count:,} of {total:,} "
        f"({share:.1f}%)."
    )


def derive_bias_caveats(unknown_shares: pd.Series, race_counts: pd.DataFrame) -> List[str]:
    caveats: List[str] = []

    for column, share in unknown_shares.items():
        if share >= HIGH_UNKNOWN_SHARE:
            label = column.replace("perp_", "perpetrator ").replace("_", " ")
            caveats.append(
                f"{share:.0%} of incidents have no recorded {label}; "
                "perpetrator breakdowns describe only the cases where a suspect was identified."
            )

    if not race_counts.empty:
        top_race = str(race_counts.iloc[0]["perp_race"])
        if top_race in UNRECORDED_LABELS:
            caveats.append(
                f"{top_race} is the largest perpetrator race group, so the ranking of the "
                "remaining groups should not be read as the distribution of all shooters."
            )

    caveats.append(
        "Counts reflect incidents reported to and recorded by the NYPD; "
        "policing intensity differs by neighborhood and shapes what enters the data."
    )
    caveats.append(
        "Totals are not adjusted for borough population, so raw counts are not rates."
    )
    return caveats
