from datetime import datetime, timezone

import pytest

from nyc_incidents.models.incident import Category, SourceKind
from nyc_incidents.services.normalizer import (
    PLACEHOLDER_311,
    PLACEHOLDER_NYPD,
    normalize,
    normalize_all,
    normalize_coords,
    normalize_date,
)
from tests.conftest import FIXED_NOW, make_311, make_nypd


@pytest.mark.parametrize(
    "lat, lng, ok",
    [
        ("40.7128", "-74.0060", True),
        ("40.4", "-74.3", True),
        ("40.9", "-73.7", True),
        ("0", "0", False),
        ("abc", "-74", False),
        ("91", "-74", False),
        ("40.7", "-73.69", False),
        ("40.39", "-74.0", False),
        (None, "-74.0", False),
        ("", "", False),
        ("nan", "-74.0", False),
        ("40.7", "inf", False),
    ],
)
def test_normalize_coords_bounding_box(lat, lng, ok):
    assert (normalize_coords(lat, lng) is not None) is ok


def test_normalize_coords_returns_floats():
    assert normalize_coords(" 40.7128 ", "-74.0060") == (40.7128, -74.006)


def test_normalize_date_parses_socrata_timestamp(clock):
    dt = normalize_date("2024-01-15T10:30:00.000", clock)
    assert dt == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_normalize_date_accepts_z_suffix(clock):
    assert normalize_date("2024-01-15T10:30:00Z", clock) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "13/45/2024"])
def test_normalize_date_falls_back_to_clock(value, clock):
    assert normalize_date(value, clock) == FIXED_NOW


def test_normalize_311(clock):
    raw = make_311(complaint_type="Abandoned Vehicle")
    inc = normalize(SourceKind.THREE_ONE_ONE, raw, clock)
    assert inc is not None
    assert inc.id == "59893919"
    assert inc.source_kind is SourceKind.THREE_ONE_ONE
    assert inc.description == "Abandoned Vehicle"
    assert inc.category is Category.VEHICLE
    assert inc.coordinates == (40.7128, -74.006)
    assert inc.occurred_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert inc.raw == raw


def test_normalize_311_description_fallbacks(clock):
    inc = normalize(SourceKind.THREE_ONE_ONE, make_311(complaint_type=None), clock)
    assert inc.description == "Blocked Hydrant"

    inc = normalize(SourceKind.THREE_ONE_ONE, make_311(complaint_type="", descriptor=None), clock)
    assert inc.description == PLACEHOLDER_311
    assert inc.category is Category.OTHER


def test_normalize_nypd(clock):
    inc = normalize(SourceKind.NYPD, make_nypd(), clock)
    assert inc.id == "261135476"
    assert inc.source_kind is SourceKind.NYPD
    assert inc.description == "FELONY ASSAULT"
    assert inc.category is Category.ASSAULT
    assert inc.occurred_at == datetime(2024, 1, 14, tzinfo=timezone.utc)


def test_normalize_nypd_falls_back_to_report_date_and_pd_desc(clock):
    inc = normalize(SourceKind.NYPD, make_nypd(cmplnt_fr_dt=None, ofns_desc=None, pd_desc="PETIT LARCENY"), clock)
    assert inc.occurred_at == datetime(2024, 1, 16, tzinfo=timezone.utc)
    assert inc.description == "PETIT LARCENY"
    assert inc.category is Category.THEFT

    inc = normalize(SourceKind.NYPD, make_nypd(ofns_desc=None, pd_desc=None), clock)
    assert inc.description == PLACEHOLDER_NYPD


def test_missing_date_uses_clock(clock):
    inc = normalize(SourceKind.NYPD, make_nypd(cmplnt_fr_dt=None, rpt_dt=None), clock)
    assert inc.occurred_at == FIXED_NOW


def test_out_of_box_record_is_rejected(clock):
    assert normalize(SourceKind.THREE_ONE_ONE, make_311(latitude="91", longitude="-74"), clock) is None
    assert normalize(SourceKind.NYPD, make_nypd(latitude=None), clock) is None


def test_numeric_fields_are_accepted(clock):
    inc = normalize(SourceKind.THREE_ONE_ONE, make_311(unique_key=123, latitude=40.7, longitude=-74.0), clock)
    assert inc.id == "123"
    assert inc.coordinates == (40.7, -74.0)


def test_missing_id_is_generated(clock):
    a = normalize(SourceKind.THREE_ONE_ONE, make_311(unique_key=None), clock)
    b = normalize(SourceKind.NYPD, make_nypd(cmplnt_num=""), clock)
    assert a.id.startswith("311-")
    assert b.id.startswith("nypd-")


def test_normalize_is_idempotent(clock):
    raw = make_nypd(cmplnt_fr_dt=None, rpt_dt=None)
    assert normalize(SourceKind.NYPD, raw, clock) == normalize(SourceKind.NYPD, raw, clock)

    a = normalize(SourceKind.NYPD, make_nypd(cmplnt_num=None), clock)
    b = normalize(SourceKind.NYPD, make_nypd(cmplnt_num=None), clock)
    assert a.id != b.id
    assert a.model_dump(exclude={"id"}) == b.model_dump(exclude={"id"})


def test_normalize_all_drops_bad_records(clock):
    records = [make_311(), make_311(latitude="0", longitude="0"), "garbage", None, make_311(unique_key="2")]
    out = normalize_all(SourceKind.THREE_ONE_ONE, records, clock)
    assert [i.id for i in out] == ["59893919", "2"]
