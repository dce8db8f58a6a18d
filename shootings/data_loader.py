from __future__ import annotations

import io
import logging
from os import getenv
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd
import requests


logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = REPO_ROOT / "data"

SNAPSHOT_FILE = DATA_DIR / "nypd_shooting_incidents.csv"
SOURCE_URL = "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
SOURCE_ENV_VAR = "NYPD_SHOOTINGS_SOURCE"

REQUEST_TIMEOUT = 120
REQUEST_HEADERS = {
    "User-Agent": "nypd-shootings-report/0.1 (+https://streamlit.io/)",
}

# Newer exports spell missing perpetrator fields as a literal marker
NULL_MARKERS = ["(null)"]

Source = Union[str, Path]


def request_headers() -> Dict[str, str]:
    """Return HTTP headers for NYC Open Data, with an app token when configured."""
    headers = dict(REQUEST_HEADERS)
    token = getenv("SOCRATA_APP_TOKEN")
    if token:
        headers["X-App-Token"] = token
    return headers


def resolve_source(source: Optional[Source] = None) -> Source:
    """Pick the explicit source, then the environment override, then the public URL."""
    if source:
        return source
    return getenv(SOURCE_ENV_VAR) or SOURCE_URL


def is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _read_csv(buffer) -> pd.DataFrame:
    return pd.read_csv(buffer, na_values=NULL_MARKERS, low_memory=False)


def load_incident_data(source: Optional[Source] = None) -> pd.DataFrame:
    """Load raw shooting incidents from the open data endpoint or a local snapshot."""
    resolved = resolve_source(source)

    if is_url(resolved):
        logger.info("Downloading incidents from %s", resolved)
        response = requests.get(
            resolved, headers=request_headers(), timeout=REQUEST_TIMEOUT
        )
        response.raise_for_status()
        df = _read_csv(io.StringIO(response.text))
    else:
        data_path = Path(resolved)
        if not data_path.exists():
            raise FileNotFoundError(
                f"Incident data not found at {data_path}. Run scripts/fetch_data.py first."
            )
        logger.info("Loading incidents from %s", data_path)
        df = _read_csv(data_path)

    logger.info("Loaded %s rows x %s columns", f"{len(df):,}", len(df.columns))
    return df
