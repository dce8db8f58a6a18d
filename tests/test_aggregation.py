import logging

import pandas as pd
import pytest

from shootings.aggregation import (
    build_summary_views,
    count_by_borough,
    count_by_hour,
    count_by_perp_race,
    count_by_year,
    unknown_share,
)
from shootings.cleaning import UNKNOWN_LABEL, clean_incident_data


def test_borough_counts_sum_to_rows(cleaned_incidents):
    boroughs = count_by_borough(cleaned_incidents)
    assert boroughs["count"].sum() == len(cleaned_incidents)
    counts = dict(zip(boroughs["boro"].astype(str), boroughs["count"]))
    assert counts == {"BRONX": 1, "BROOKLYN": 2, "QUEENS": 1}


def test_yearly_counts_sum_to_rows(cleaned_incidents):
    yearly = count_by_year(cleaned_incidents)
    assert yearly["count"].sum() == len(cleaned_incidents)
    assert list(yearly["year"]) == [2019, 2020, 2021]
    assert list(yearly["count"]) == [2, 1, 1]


def test_yearly_counts_keep_undated_rows(raw_incidents, caplog):
    raw = raw_incidents.copy()
    raw.loc[3, "OCCUR_DATE"] = "not a date"
    cleaned = clean_incident_data(raw)

    with caplog.at_level(logging.WARNING, logger="shootings.aggregation"):
        yearly = count_by_year(cleaned)

    assert yearly["count"].sum() == len(cleaned)
    undated = yearly[yearly["year"].isna()]
    assert len(undated) == 1
    assert undated["count"].item() == 1
    assert list(yearly["year"].dropna()) == [2019, 2020]
    assert "counted under a null year" in caplog.text


def test_race_counts_sorted_descending(cleaned_incidents):
    races = count_by_perp_race(cleaned_incidents)
    counts = list(races["count"])
    assert counts == sorted(counts, reverse=True)
    assert races["count"].sum() == len(cleaned_incidents)


def test_race_count_ties_keep_grouping_order(cleaned_incidents):
    races = count_by_perp_race(cleaned_incidents)
    grouped_order = [
        str(key)
        for key in cleaned_incidents.groupby("perp_race", observed=True).size().index
    ]
    tied = [str(race) for race in races.loc[races["count"] == 1, "perp_race"]]
    assert tied == [race for race in grouped_order if race in tied]
    assert list(races["perp_race"].astype(str)) == ["BLACK", "WHITE HISPANIC", UNKNOWN_LABEL]


def test_hour_counts_cover_full_day(cleaned_incidents):
    hourly = count_by_hour(cleaned_incidents)
    assert list(hourly["hour"]) == list(range(24))
    assert hourly["count"].sum() == len(cleaned_incidents)
    assert hourly.loc[hourly["hour"] == 23, "count"].item() == 2
    assert hourly.loc[hourly["hour"] == 0, "count"].item() == 0


def test_unknown_share(cleaned_incidents):
    shares = unknown_share(cleaned_incidents)
    assert shares["perp_race"] == pytest.approx(0.25)
    assert shares["perp_sex"] == pytest.approx(0.25)
    assert shares["perp_age_group"] == pytest.approx(0.25)


def test_unknown_share_counts_export_unknown_codes(raw_incidents):
    raw = raw_incidents.copy()
    raw.loc[0, "PERP_RACE"] = "UNKNOWN"
    raw.loc[0, "PERP_AGE_GROUP"] = "UNKNOWN"
    raw.loc[3, "PERP_SEX"] = "U"
    shares = unknown_share(clean_incident_data(raw))

    assert shares["perp_race"] == pytest.approx(0.5)
    assert shares["perp_age_group"] == pytest.approx(0.5)
    assert shares["perp_sex"] == pytest.approx(0.5)


def test_empty_frame_raises(cleaned_incidents):
    with pytest.raises(ValueError):
        count_by_borough(cleaned_incidents.iloc[0:0])
    with pytest.raises(ValueError):
        build_summary_views(pd.DataFrame())


def test_build_summary_views(cleaned_incidents):
    views = build_summary_views(cleaned_incidents)
    assert set(views) == {
        "borough_counts",
        "yearly_counts",
        "perp_race_counts",
        "hourly_counts",
        "unknown_share",
    }
    assert len(views["yearly_counts"]) == 3
