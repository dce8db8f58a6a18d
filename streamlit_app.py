from __future__ import annotations

import logging
from typing import Dict

import pandas as pd
import streamlit as st

from shootings.aggregation import build_summary_views
from shootings.charts import (
    build_incident_map,
    plot_borough_counts,
    plot_hourly_distribution,
    plot_perp_race_counts,
    plot_yearly_trend,
)
from shootings.cleaning import (
    CATEGORICAL_COLUMNS,
    DROPPED_COLUMNS,
    UNKNOWN_LABEL,
    clean_incident_data,
)
from shootings.data_loader import load_incident_data, resolve_source
from shootings.narrative import (
    derive_bias_caveats,
    describe_borough_counts,
    describe_trend,
)
from shootings.trend import fit_yearly_trend


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)

st.set_page_config(
    page_title="NYPD Shooting Incident Report",
    page_icon="📊",
    layout="wide",
)

st.markdown(
    "<style>.main { padding-top: 1.5rem; }</style>",
    unsafe_allow_html=True,
)


@st.cache_data(show_spinner="Loading NYPD shooting incidents...")
def get_data() -> Dict[str, object]:
    raw = load_incident_data()
    incidents = clean_incident_data(raw)
    views = build_summary_views(incidents)
    return {"raw_rows": len(raw), "incidents": incidents, **views}


def build_coefficient_display(table: pd.DataFrame) -> pd.DataFrame:
    rename_map = {
        "term": "Term",
        "estimate": "Estimate",
        "std_error": "Std. Error",
        "t_value": "t value",
        "p_value": "Pr(>|t|)",
    }
    return table.rename(columns=rename_map)


def main():
    data = get_data()
    incidents: pd.DataFrame = data["incidents"]
    boroughs: pd.DataFrame = data["borough_counts"]
    yearly: pd.DataFrame = data["yearly_counts"]
    races: pd.DataFrame = data["perp_race_counts"]
    hourly: pd.DataFrame = data["hourly_counts"]
    unknown_shares: pd.Series = data["unknown_share"]

    fit = fit_yearly_trend(yearly)
    first_year = int(yearly["year"].min())
    last_year = int(yearly["year"].max())

    st.title("NYPD Shooting Incidents")
    st.subheader(
        f"Every shooting incident recorded in New York City, {first_year}–{last_year}."
    )
    st.write(
        "This report reviews the NYPD Shooting Incident Data (Historic) published on "
        "NYC Open Data. Each row is one shooting incident with its date, time, borough, "
        "and the recorded demographics of the victim and, where known, the perpetrator."
    )

    cols = st.columns(3)
    cols[0].metric("Incidents", f"{len(incidents):,}")
    cols[1].metric("Years covered", f"{yearly['year'].notna().sum()}")
    cols[2].metric("Trend", f"{fit.slope:+.1f} / year", f"p = {fit.slope_p_value:.3g}")

    overview_tab, model_tab, bias_tab = st.tabs(
        ["Where & When", "Yearly Trend", "Perpetrators & Bias"]
    )

    with overview_tab:
        st.header("Where and when shootings happen")
        chart_col1, chart_col2 = st.columns(2)
        with chart_col1:
            st.plotly_chart(
                plot_borough_counts(boroughs),
                use_container_width=True,
                key="borough-counts",
            )
            st.write(describe_borough_counts(boroughs))
        with chart_col2:
            st.plotly_chart(
                plot_hourly_distribution(hourly),
                use_container_width=True,
                key="hourly-counts",
            )
            peak = hourly.sort_values("count", ascending=False, kind="stable").iloc[0]
            st.write(
                f"The busiest hour of the day starts at {int(peak['hour']):02d}:00 "
                f"with {int(peak['count']):,} incidents."
            )

        st.markdown("#### Incident density")
        st.pydeck_chart(build_incident_map(incidents), use_container_width=True)
        st.caption("Column height scales with the number of incidents in each hexagon.")

    with model_tab:
        st.header("Is gun violence trending down?")
        st.plotly_chart(
            plot_yearly_trend(yearly, fit),
            use_container_width=True,
            key="yearly-trend",
        )
        st.write(describe_trend(fit))

        st.markdown("#### Linear model: `count ~ year`")
        st.dataframe(
            build_coefficient_display(fit.coefficient_table()),
            column_config={
                "Estimate": st.column_config.NumberColumn(format="%.3f"),
                "Std. Error": st.column_config.NumberColumn(format="%.3f"),
                "t value": st.column_config.NumberColumn(format="%.2f"),
                "Pr(>|t|)": st.column_config.NumberColumn(format="%.4f"),
            },
            use_container_width=True,
            hide_index=True,
        )
        st.caption(
            f"Ordinary least squares over {fit.n_obs} yearly totals; R² = {fit.r_squared:.3f}."
        )
        with st.expander("Full regression summary"):
            st.text(str(fit.results.summary()))

        st.write(
            "A straight line is a coarse description: the series fell through the 2010s "
            "and rose sharply in 2020 before easing again, so the slope summarizes the "
            "whole period rather than any single stretch of it."
        )

    with bias_tab:
        st.header("Perpetrator demographics")
        st.plotly_chart(
            plot_perp_race_counts(races),
            use_container_width=True,
            key="perp-race-counts",
        )
        st.write(
            f"Missing perpetrator fields are labelled **{UNKNOWN_LABEL}** rather than "
            "dropped, so every incident stays in the totals."
        )

        st.markdown("#### Bias caveats")
        for caveat in derive_bias_caveats(unknown_shares, races):
            st.write(f"- {caveat}")

        st.markdown("#### Personal bias")
        st.write(
            "Expectations about which neighborhoods and groups are involved in gun violence "
            "can steer which breakdowns get examined. This report shows every borough and "
            "every recorded group, including Unknown, and fits only a single pre-declared model."
        )

    with st.expander("Data Quality & Methodology"):
        unknown_table = (
            unknown_shares.mul(100)
            .rename("Unknown (%)")
            .rename_axis("Column")
            .reset_index()
        )
        st.dataframe(unknown_table, use_container_width=True, hide_index=True)
        st.markdown(
            f"- **Source:** `{resolve_source()}` ({data['raw_rows']:,} rows loaded).\n"
            "- **Cleaning:** column names lower-cased; dates parsed as month/day/year and "
            "times as HH:MM:SS, unparseable values left missing.\n"
            f"- **Categorical fields:** {', '.join(CATEGORICAL_COLUMNS)}.\n"
            f"- **Dropped fields:** {', '.join(DROPPED_COLUMNS)}.\n"
            "- **Snapshot refresh:** `scripts/fetch_data.py` saves a local CSV; point "
            "`NYPD_SHOOTINGS_SOURCE` at it to render offline."
        )


if __name__ == "__main__":
    main()
