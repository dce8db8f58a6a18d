from __future__ import annotations

from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import pydeck as pdk

from .trend import TrendFit


CHART_HEIGHT = 360
CHART_MARGIN = dict(l=10, r=10, t=60, b=20)

NYC_VIEW = dict(latitude=40.7128, longitude=-73.95, zoom=9.5)


def plot_borough_counts(boroughs: pd.DataFrame) -> go.Figure:
    if boroughs.empty:
        return go.Figure()
    data = boroughs.assign(boro=boroughs["boro"].astype(str))
    fig = px.bar(
        data,
        x="boro",
        y="count",
        title="Shooting Incidents by Borough",
        text_auto=True,
    )
    fig.update_layout(
        xaxis_title="Borough",
        yaxis_title="Incidents",
        margin=CHART_MARGIN,
        height=CHART_HEIGHT,
    )
    return fig


def plot_yearly_trend(yearly: pd.DataFrame, fit: Optional[TrendFit] = None) -> go.Figure:
    # undated incidents have no place on the year axis
    yearly = yearly.dropna(subset=["year"])
    if yearly.empty:
        return go.Figure()
    yearly = yearly.astype({"year": int})
    fig = px.line(
        yearly,
        x="year",
        y="count",
        title="Shooting Incidents per Year",
    )
    fig.update_traces(mode="lines+markers", name="Observed", showlegend=True)
    if fit is not None:
        fitted = fit.predict(yearly["year"])
        fig.add_trace(
            go.Scatter(
                x=fitted.index,
                y=fitted.values,
                mode="lines",
                name=f"OLS trend ({fit.slope:+.1f}/yr)",
                line=dict(dash="dash"),
            )
        )
    fig.update_layout(
        xaxis_title="Year",
        yaxis_title="Incidents",
        margin=CHART_MARGIN,
        height=CHART_HEIGHT,
    )
    return fig


def plot_perp_race_counts(races: pd.DataFrame) -> go.Figure:
    if races.empty:
        return go.Figure()
    data = races.assign(perp_race=races["perp_race"].astype(str))
    fig = px.bar(
        data,
        x="perp_race",
        y="count",
        title="Shooting Incidents by Perpetrator Race",
        category_orders={"perp_race": list(data["perp_race"])},
        text_auto=True,
    )
    fig.update_layout(
        xaxis_title="Perpetrator race",
        yaxis_title="Incidents",
        margin=CHART_MARGIN,
        height=CHART_HEIGHT,
    )
    return fig


def plot_hourly_distribution(hourly: pd.DataFrame) -> go.Figure:
    if hourly.empty:
        return go.Figure()
    fig = px.bar(
        hourly,
        x="hour",
        y="count",
        title="Shooting Incidents by Hour of Day",
    )
    fig.update_layout(
        xaxis=dict(title="Hour of Day", dtick=1),
        yaxis_title="Incidents",
        margin=CHART_MARGIN,
        height=CHART_HEIGHT,
    )
    return fig


def build_incident_map(incidents: pd.DataFrame) -> pdk.Deck:
    """Hexagon density map of incident coordinates."""
    points = (
        incidents[["longitude", "latitude"]]
        .apply(pd.to_numeric, errors="coerce")
        .dropna()
    )

    hexagons = pdk.Layer(
        "HexagonLayer",
        data=points.to_dict(orient="records"),
        get_position=["longitude", "latitude"],
        radius=250,
        elevation_scale=4,
        elevation_range=[0, 1000],
        extruded=True,
        pickable=True,
        coverage=0.9,
    )

    view_state = pdk.ViewState(
        **NYC_VIEW,
        min_zoom=8,
        max_zoom=16,
        pitch=40,
    )

    return pdk.Deck(
        layers=[hexagons],
        initial_view_state=view_state,
        tooltip={"html": "<b>{elevationValue}</b> incidents"},
        height=CHART_HEIGHT,
    )
