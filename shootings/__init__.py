"""Utility package for the NYPD shooting incident report."""

from .aggregation import build_summary_views  # noqa: F401
from .cleaning import clean_incident_data  # noqa: F401
from .data_loader import load_incident_data  # noqa: F401
from .trend import fit_yearly_trend  # noqa: F401
