"""Column cleanup and type coercion for the raw shooting incident export."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

import pandas as pd


logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"

DATE_COLUMN = "occur_date"
TIME_COLUMN = "occur_time"
DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M:%S"

CATEGORICAL_COLUMNS: List[str] = [
    "boro",
    "precinct",
    "jurisdiction_code",
    "perp_age_group",
    "perp_sex",
    "perp_race",
    "vic_age_group",
    "vic_sex",
    "vic_race",
]

DROPPED_COLUMNS: List[str] = [
    "incident_key",
    "loc_of_occur_desc",
    "loc_classfctn_desc",
    "location_desc",
]

UNKNOWN_FILL_COLUMNS: List[str] = ["perp_age_group", "perp_sex", "perp_race"]

REQUIRED_COLUMNS: List[str] = [DATE_COLUMN, TIME_COLUMN] + CATEGORICAL_COLUMNS + DROPPED_COLUMNS


def normalize_column_name(name: str) -> str:
    """Lower snake case: ``OCCUR_DATE`` -> ``occur_date``, ``Lon Lat`` -> ``lon_lat``."""
    cleaned = re.sub(r"[^0-9a-zA-Z]+", "_", str(name).strip())
    return cleaned.strip("_").lower()


def normalize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    return df.rename(columns=normalize_column_name)


def _require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"Incident data is missing expected columns: {missing}")


def _log_coerced(column: str, before: pd.Series, after: pd.Series) -> None:
    coerced = int(after.isna().sum() - before.isna().sum())
    if coerced > 0:
        logger.warning(
            "%s: %s unparseable value(s) coerced to missing", column, f"{coerced:,}"
        )


def parse_occurrence_date(series: pd.Series) -> pd.Series:
    parsed = pd.to_datetime(series, format=DATE_FORMAT, errors="coerce")
    _log_coerced(series.name or DATE_COLUMN, series, parsed)
    return parsed


def parse_occurrence_time(series: pd.Series) -> pd.Series:
    parsed = pd.to_datetime(series, format=TIME_FORMAT, errors="coerce")
    _log_coerced(series.name or TIME_COLUMN, series, parsed)
    return parsed.dt.time


def fill_unknown(series: pd.Series) -> pd.Series:
    """Replace nulls in a categorical series with the ``Unknown`` category."""
    if UNKNOWN_LABEL not in series.cat.categories:
        series = series.cat.add_categories(UNKNOWN_LABEL)
    return series.fillna(UNKNOWN_LABEL)


def clean_incident_data(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Return an analysis-ready copy of the raw export.

    Steps run in a fixed order: normalize column names, parse the occurrence
    date and time, cast the categorical fields, drop unused descriptive
    columns, then fill missing perpetrator fields with ``Unknown``. Rows are
    never removed; unparseable dates and times become missing values.
    """
    df = normalize_column_names(raw)
    _require_columns(df, REQUIRED_COLUMNS)

    df[DATE_COLUMN] = parse_occurrence_date(df[DATE_COLUMN])
    df[TIME_COLUMN] = parse_occurrence_time(df[TIME_COLUMN])

    for col in CATEGORICAL_COLUMNS:
        df[col] = df[col].astype("category")

    df = df.drop(columns=DROPPED_COLUMNS)

    for col in UNKNOWN_FILL_COLUMNS:
        df[col] = fill_unknown(df[col])

    logger.info("Cleaned incidents: %s rows x %s columns", f"{len(df):,}", len(df.columns))
    return df
