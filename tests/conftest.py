from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_311(**overrides):
    rec = {
        "unique_key": "59893919",
        "created_date": "2024-01-15T10:30:00.000",
        "agency": "NYPD",
        "complaint_type": "Illegal Parking",
        "descriptor": "Blocked Hydrant",
        "latitude": "40.7128",
        "longitude": "-74.0060",
    }
    rec.update(overrides)
    return rec


def make_nypd(**overrides):
    rec = {
        "cmplnt_num": "261135476",
        "cmplnt_fr_dt": "2024-01-14T00:00:00.000",
        "rpt_dt": "2024-01-16T00:00:00.000",
        "ofns_desc": "FELONY ASSAULT",
        "pd_desc": "ASSAULT 2,1,UNCLASSIFIED",
        "latitude": "40.7506",
        "longitude": "-73.9935",
    }
    rec.update(overrides)
    return rec


@pytest.fixture
def clock():
    return fixed_clock
