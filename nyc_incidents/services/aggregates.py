# nyc_incidents/services/aggregates.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from nyc_incidents.models.incident import Category, NormalizedIncident

LatLng = Tuple[float, float]


def counts_by_category(incidents: Iterable[NormalizedIncident]) -> Dict[Category, int]:
    # dict keeps first-seen order, which is what the bar chart labels follow
    counts: Dict[Category, int] = {}
    for inc in incidents:
        counts[inc.category] = counts.get(inc.category, 0) + 1
    return counts


def counts_by_hour(incidents: Iterable[NormalizedIncident]) -> List[int]:
    """24 buckets, hour-of-day of each incident's timestamp."""
    counts = [0] * 24
    for inc in incidents:
        counts[inc.occurred_at.hour] += 1
    return counts


def map_bounds(incidents: Iterable[NormalizedIncident]) -> Optional[Tuple[LatLng, LatLng]]:
    """
    ((south, west), (north, east)) enclosing every visible marker,
    or None when nothing is on the map yet.
    """
    lats: List[float] = []
    lngs: List[float] = []
    for inc in incidents:
        lat, lng = inc.coordinates
        lats.append(lat)
        lngs.append(lng)
    if not lats:
        return None
    return (min(lats), min(lngs)), (max(lats), max(lngs))
