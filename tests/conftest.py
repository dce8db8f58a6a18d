from typing import Dict, List

import pandas as pd
import pytest

from shootings.cleaning import clean_incident_data


def _raw_rows() -> List[Dict[str, object]]:
    """Four raw export rows; the second has no recorded perpetrator race."""
    rows: List[Dict[str, object]] = []
    data = [
        (1001, "01/15/2019", "23:10:00", "BRONX", 40, "18-24", "M", "BLACK", "25-44", "M", "BLACK"),
        (1002, "06/30/2019", "02:45:00", "BROOKLYN", 73, "25-44", "M", None, "18-24", "M", "BLACK"),
        (1003, "07/04/2020", "21:30:00", "BROOKLYN", 75, None, None, "WHITE HISPANIC", "<18", "F", "WHITE HISPANIC"),
        (1004, "12/31/2021", "23:59:59", "QUEENS", 113, "45-64", "F", "BLACK", "65+", "M", "ASIAN / PACIFIC ISLANDER"),
    ]
    for idx, (key, date, time, boro, precinct, p_age, p_sex, p_race, v_age, v_sex, v_race) in enumerate(data):
        latitude = 40.70 + idx * 0.05
        longitude = -73.95 + idx * 0.02
        rows.append(
            {
                "INCIDENT_KEY": key,
                "OCCUR_DATE": date,
                "OCCUR_TIME": time,
                "BORO": boro,
                "LOC_OF_OCCUR_DESC": "OUTSIDE",
                "PRECINCT": precinct,
                "JURISDICTION_CODE": 0,
                "LOC_CLASSFCTN_DESC": "STREET",
                "LOCATION_DESC": "MULTI DWELL - PUBLIC HOUS",
                "STATISTICAL_MURDER_FLAG": idx == 2,
                "PERP_AGE_GROUP": p_age,
                "PERP_SEX": p_sex,
                "PERP_RACE": p_race,
                "VIC_AGE_GROUP": v_age,
                "VIC_SEX": v_sex,
                "VIC_RACE": v_race,
                "X_COORD_CD": 1000000.0 + idx * 1000,
                "Y_COORD_CD": 200000.0 + idx * 1000,
                "Latitude": latitude,
                "Longitude": longitude,
                "Lon_Lat": f"POINT ({longitude} {latitude})",
            }
        )
    return rows


@pytest.fixture
def raw_incidents() -> pd.DataFrame:
    return pd.DataFrame(_raw_rows())


@pytest.fixture
def cleaned_incidents(raw_incidents: pd.DataFrame) -> pd.DataFrame:
    return clean_incident_data(raw_incidents)
