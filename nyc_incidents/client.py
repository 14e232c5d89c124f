# nyc_incidents/client.py
"""
Terminal replay of the incident dashboard.

Fetches /incidents once, then reveals the incidents one per tick through
PlaybackScheduler: each tick prints a feed line, and the run ends with the
chart aggregates and the map extent of what was shown.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import requests

from nyc_incidents import config
from nyc_incidents.models.incident import IncidentsResponse, NormalizedIncident
from nyc_incidents.services.aggregates import counts_by_category, counts_by_hour, map_bounds
from nyc_incidents.services.categories import CATEGORY_COLORS, SOURCE_COLORS
from nyc_incidents.services.playback import PlaybackScheduler

log = logging.getLogger(__name__)

TROUBLESHOOTING = [
    "Check your internet connection",
    "Verify the backend server is running",
    "Check if DNS resolution is working (try: ping data.cityofnewyork.us)",
    "Check the backend logs for more details",
]


def fetch_incidents(base_url: str = config.API_URL, timeout: float = 30) -> IncidentsResponse:
    """GET {base_url}/incidents. Never raises: failures come back as success=False."""
    try:
        r = requests.get(f"{base_url.rstrip('/')}/incidents", timeout=timeout)
        r.raise_for_status()
        return IncidentsResponse.model_validate(r.json())
    except Exception as e:
        log.error("Error fetching incidents: %s", e)
        return IncidentsResponse(
            success=False,
            error="Failed to fetch incidents",
            message=str(e) or type(e).__name__,
        )


def format_feed_line(inc: NormalizedIncident) -> str:
    lat, lng = inc.coordinates
    return (
        f"[{inc.source_kind.value:>4} {SOURCE_COLORS[inc.source_kind]:<4}] "
        f"{inc.occurred_at:%Y-%m-%d %H:%M} {inc.category.value:<10} "
        f"{CATEGORY_COLORS[inc.category]} {inc.description} ({lat:.4f}, {lng:.4f})"
    )


def _log_error_banner(message: str) -> None:
    log.error("Connection Error: %s", message)
    log.error("Troubleshooting steps:")
    for step in TROUBLESHOOTING:
        log.error("  - %s", step)


def _log_summary(shown: List[NormalizedIncident]) -> None:
    for category, n in counts_by_category(shown).items():
        log.info("%-10s %s %d", category.value, CATEGORY_COLORS[category], n)
    hours = counts_by_hour(shown)
    log.info("By hour: %s", " ".join(f"{h:02d}:{n}" for h, n in enumerate(hours) if n))
    bounds = map_bounds(shown)
    if bounds is not None:
        (south, west), (north, east) = bounds
        log.info("Map extent: SW (%.4f, %.4f) NE (%.4f, %.4f)", south, west, north, east)


async def replay(incidents: List[NormalizedIncident], delay_ms: int = config.PLAYBACK_DELAY_MS) -> List[NormalizedIncident]:
    def show(inc: NormalizedIncident) -> None:
        log.info("%*d/%d %s", len(str(scheduler.total)), scheduler.position, scheduler.total, format_feed_line(inc))

    scheduler: PlaybackScheduler[NormalizedIncident] = PlaybackScheduler(
        incidents, delay_ms=delay_ms, on_tick=show
    )
    try:
        scheduler.start()
        await scheduler.wait()
    finally:
        scheduler.close()
    return scheduler.displayed


def run_dashboard(base_url: str = config.API_URL, delay_ms: int = config.PLAYBACK_DELAY_MS) -> int:
    log.info("Fetching data from %s ...", base_url)
    resp = fetch_incidents(base_url)
    if not resp.success or not resp.data:
        _log_error_banner(resp.message or resp.error or "Failed to load data")
        return 1

    log.info("Ready. %d incidents loaded.", len(resp.data))
    shown = asyncio.run(replay(resp.data, delay_ms))
    _log_summary(shown)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay NYC incidents from the API in the terminal")
    parser.add_argument("--api-url", default=config.API_URL, help="Base URL of the incidents API")
    parser.add_argument("--delay-ms", type=int, default=config.PLAYBACK_DELAY_MS, help="Milliseconds per revealed incident")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    return run_dashboard(args.api_url, args.delay_ms)


if __name__ == "__main__":
    sys.exit(main())
