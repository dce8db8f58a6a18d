from __future__ import annotations

import logging
from datetime import time
from typing import Dict, Iterable

import pandas as pd

from .cleaning import DATE_COLUMN, TIME_COLUMN, UNKNOWN_FILL_COLUMNS, UNKNOWN_LABEL


logger = logging.getLogger(__name__)

# The export writes UNKNOWN for age group and race, U for sex
UNRECORDED_LABELS = [UNKNOWN_LABEL, "UNKNOWN", "U"]


def _ensure_rows(df: pd.DataFrame) -> None:
    if df.empty:
        raise ValueError("Incident dataframe is empty.")


def _count_by(df: pd.DataFrame, key: str) -> pd.DataFrame:
    return (
        df.groupby(key, observed=True, dropna=False)
        .size()
        .rename("count")
        .reset_index()
    )


def count_by_borough(df: pd.DataFrame) -> pd.DataFrame:
    _ensure_rows(df)
    return _count_by(df, "boro")


def count_by_year(df: pd.DataFrame) -> pd.DataFrame:
    """Incidents per calendar year of occurrence, ascending by year.

    Rows without a parseable date form a trailing group with a null year,
    so the counts always sum to the number of incidents.
    """
    _ensure_rows(df)
    years = df[DATE_COLUMN].dt.year.astype("Int64")
    undated = int(years.isna().sum())
    if undated:
        logger.warning(
            "%s incident(s) without a parseable occurrence date counted under a null year",
            f"{undated:,}",
        )

    return (
        pd.DataFrame({"year": years})
        .groupby("year", dropna=False)
        .size()
        .rename("count")
        .reset_index()
    )


def count_by_perp_race(df: pd.DataFrame) -> pd.DataFrame:
    """Incidents per perpetrator race, largest first; ties keep grouping order."""
    _ensure_rows(df)
    return (
        _count_by(df, "perp_race")
        .sort_values("count", ascending=False, kind="stable")
        .reset_index(drop=True)
    )


def count_by_hour(df: pd.DataFrame) -> pd.DataFrame:
    """Incidents per hour of day, with all 24 hours present."""
    _ensure_rows(df)
    hours = df[TIME_COLUMN].map(lambda value: value.hour if isinstance(value, time) else None)
    hours = pd.to_numeric(hours, errors="coerce").dropna().astype(int)
    return (
        pd.DataFrame({"hour": hours})
        .groupby("hour")
        .size()
        .reindex(range(24), fill_value=0)
        .rename("count")
        .rename_axis("hour")
        .reset_index()
    )


def unknown_share(
    df: pd.DataFrame, columns: Iterable[str] = UNKNOWN_FILL_COLUMNS
) -> pd.Series:
    """Share of rows with no recorded value for each of ``columns``.

    Counts the ``Unknown`` fill as well as the export's own unknown codes.
    """
    _ensure_rows(df)
    shares = {col: float(df[col].isin(UNRECORDED_LABELS).mean()) for col in columns}
    return pd.Series(shares, name="unknown_share")


def build_summary_views(df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Return the grouped tables used by the report."""
    _ensure_rows(df)
    return {
        "borough_counts": count_by_borough(df),
        "yearly_counts": count_by_year(df),
        "perp_race_counts": count_by_perp_race(df),
        "hourly_counts": count_by_hour(df),
        "unknown_share": unknown_share(df),
    }
