# nyc_incidents/services/normalizer.py
from __future__ import annotations

import math
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from nyc_incidents.models.incident import (
    NormalizedIncident,
    NypdRecord,
    SourceKind,
    ThreeOneOneRecord,
)
from nyc_incidents.services.categories import categorize

Clock = Callable[[], datetime]

# Approximate NYC extent (inclusive)
NYC_MIN_LAT, NYC_MAX_LAT = 40.4, 40.9
NYC_MIN_LNG, NYC_MAX_LNG = -74.3, -73.7

PLACEHOLDER_311 = "311 Service Request"
PLACEHOLDER_NYPD = "NYPD Complaint"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _in_nyc(lat: float, lng: float) -> bool:
    return (NYC_MIN_LAT <= lat <= NYC_MAX_LAT) and (NYC_MIN_LNG <= lng <= NYC_MAX_LNG)


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        f = float(str(value).strip())
    except ValueError:
        return None
    return f if math.isfinite(f) else None


def normalize_coords(lat: Any, lng: Any) -> Optional[Tuple[float, float]]:
    """(lat, lng) if both parse and sit inside the NYC box, else None."""
    lat_f, lng_f = _to_float(lat), _to_float(lng)
    if lat_f is None or lng_f is None:
        return None
    if not _in_nyc(lat_f, lng_f):
        return None
    return lat_f, lng_f


def normalize_date(value: Optional[str], clock: Clock = utcnow) -> datetime:
    """
    Parse a Socrata timestamp (ISO8601, with/without 'Z', fractional seconds).
    Naive values are taken as UTC. Never fails: blank or garbage -> clock().
    """
    if not value or not value.strip():
        return clock()
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return clock()
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _first_text(*values: Optional[str]) -> Optional[str]:
    for v in values:
        if v and v.strip():
            return v
    return None


def normalize_311(raw: Dict[str, Any], clock: Clock = utcnow) -> Optional[NormalizedIncident]:
    try:
        rec = ThreeOneOneRecord.model_validate(raw)
    except ValidationError:
        return None

    coords = normalize_coords(rec.latitude, rec.longitude)
    if coords is None:
        return None

    text = _first_text(rec.complaint_type, rec.descriptor)
    return NormalizedIncident(
        id=rec.unique_key or f"311-{uuid.uuid4()}",
        source_kind=SourceKind.THREE_ONE_ONE,
        occurred_at=normalize_date(rec.created_date, clock),
        description=text or PLACEHOLDER_311,
        category=categorize(text),
        coordinates=coords,
        raw=raw,
    )


def normalize_nypd(raw: Dict[str, Any], clock: Clock = utcnow) -> Optional[NormalizedIncident]:
    try:
        rec = NypdRecord.model_validate(raw)
    except ValidationError:
        return None

    coords = normalize_coords(rec.latitude, rec.longitude)
    if coords is None:
        return None

    text = _first_text(rec.ofns_desc, rec.pd_desc)
    return NormalizedIncident(
        id=rec.cmplnt_num or f"nypd-{uuid.uuid4()}",
        source_kind=SourceKind.NYPD,
        occurred_at=normalize_date(_first_text(rec.cmplnt_fr_dt, rec.rpt_dt), clock),
        description=text or PLACEHOLDER_NYPD,
        category=categorize(text),
        coordinates=coords,
        raw=raw,
    )


_NORMALIZERS: Dict[SourceKind, Callable[..., Optional[NormalizedIncident]]] = {
    SourceKind.THREE_ONE_ONE: normalize_311,
    SourceKind.NYPD: normalize_nypd,
}


def normalize(
    kind: SourceKind, raw: Dict[str, Any], clock: Clock = utcnow
) -> Optional[NormalizedIncident]:
    """Map one raw record of the given source; None means 'drop it'."""
    if not isinstance(raw, dict):
        return None
    return _NORMALIZERS[kind](raw, clock)


def normalize_all(
    kind: SourceKind, records: Iterable[Any], clock: Clock = utcnow
) -> List[NormalizedIncident]:
    out: List[NormalizedIncident] = []
    for raw in records:
        inc = normalize(kind, raw, clock)
        if inc is not None:
            out.append(inc)
    return out
