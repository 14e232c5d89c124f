# nyc_incidents/models/incident.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SourceKind(str, Enum):
    THREE_ONE_ONE = "311"
    NYPD = "NYPD"


class Category(str, Enum):
    ASSAULT = "ASSAULT"
    THEFT = "THEFT"
    BURGLARY = "BURGLARY"
    ROBBERY = "ROBBERY"
    VEHICLE = "VEHICLE"
    DRUGS = "DRUGS"
    VANDALISM = "VANDALISM"
    HARASSMENT = "HARASSMENT"
    OTHER = "OTHER"


# ---------- RAW (what Socrata sends; keep these names exactly) ----------

class _RawRecord(BaseModel):
    # Socrata makes no guarantees: everything optional, numbers become strings
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class ThreeOneOneRecord(_RawRecord):
    unique_key: Optional[str] = None
    created_date: Optional[str] = None
    complaint_type: Optional[str] = None
    descriptor: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    agency: Optional[str] = None


class NypdRecord(_RawRecord):
    cmplnt_num: Optional[str] = None
    cmplnt_fr_dt: Optional[str] = None
    rpt_dt: Optional[str] = None
    ofns_desc: Optional[str] = None
    pd_desc: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None


# ---------- CANONICAL ----------

class NormalizedIncident(BaseModel):
    """
    One incident in the common shape. Only built for records whose
    coordinates fell inside the NYC bounding box.
    Wire names (type/date/coords) are what the dashboard reads.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    source_kind: SourceKind = Field(..., alias="type")
    occurred_at: datetime = Field(..., alias="date")
    description: str
    category: Category
    coordinates: Tuple[float, float] = Field(..., alias="coords", description="(lat, lng)")
    raw: Dict[str, Any] = Field(default_factory=dict)


class IncidentsResponse(BaseModel):
    success: bool
    count: int = 0
    data: List[NormalizedIncident] = Field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthCheckResponse(BaseModel):
    success: bool
    connected: bool
    status: Optional[int] = None
    message: str
    error: Optional[str] = None
    suggestion: Optional[str] = None
