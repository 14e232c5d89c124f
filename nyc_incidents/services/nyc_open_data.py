# nyc_incidents/services/nyc_open_data.py
from __future__ import annotations

import asyncio
import logging
from itertools import chain
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from nyc_incidents import config
from nyc_incidents.models.incident import NormalizedIncident, SourceKind
from nyc_incidents.services.normalizer import Clock, normalize_all, utcnow

log = logging.getLogger(__name__)


class SourceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: SourceKind
    name: str
    url: str
    params: Dict[str, Any] = Field(default_factory=dict)


class FetchResult(BaseModel):
    """
    Outcome of one source fetch. A failed fetch carries no records and an
    error string; callers merge it exactly like an empty upstream page.
    """
    source: SourceConfig
    # raw JSON items as received; non-objects are dropped by the normalizer
    records: List[Any] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# Socrata wants the literal "$limit" key
SOURCE_311 = SourceConfig(
    kind=SourceKind.THREE_ONE_ONE,
    name="311",
    url=config.NYC_311_URL,
    params={"$limit": config.SOURCE_PAGE_SIZE, "agency": config.NYC_311_AGENCY},
)
SOURCE_NYPD = SourceConfig(
    kind=SourceKind.NYPD,
    name="NYPD",
    url=config.NYPD_URL,
    params={"$limit": config.SOURCE_PAGE_SIZE},
)
SOURCES: List[SourceConfig] = [SOURCE_311, SOURCE_NYPD]


async def fetch_source(
    client: httpx.AsyncClient,
    source: SourceConfig,
    timeout_ms: int = config.FETCH_TIMEOUT_MS,
) -> FetchResult:
    """One bounded GET against one source. Never raises for upstream trouble."""
    log.info("Fetching %s data from: %s", source.name, source.url)
    try:
        r = await client.get(
            source.url,
            params=source.params,
            headers={"Accept": "application/json"},
            timeout=timeout_ms / 1000.0,
        )
        r.raise_for_status()
        data = r.json()
    except httpx.TimeoutException:
        log.error("Error fetching %s data: request timed out after %d ms", source.name, timeout_ms)
        return FetchResult(source=source, error=f"timeout after {timeout_ms} ms")
    except httpx.HTTPStatusError as e:
        msg = f"{source.name} API failed: {e.response.status_code} {e.response.reason_phrase}"
        log.error("Error fetching %s data: %s", source.name, msg)
        return FetchResult(source=source, error=msg)
    except httpx.HTTPError as e:
        log.error("Error fetching %s data: %s", source.name, e)
        return FetchResult(source=source, error=str(e) or type(e).__name__)
    except ValueError as e:
        log.error("Error fetching %s data: malformed JSON (%s)", source.name, e)
        return FetchResult(source=source, error="malformed JSON")

    if not isinstance(data, list):
        log.error("Error fetching %s data: expected a JSON array, got %s", source.name, type(data).__name__)
        return FetchResult(source=source, error="unexpected payload")

    log.info("Successfully fetched %d %s records", len(data), source.name)
    return FetchResult(source=source, records=data)


def merge_incidents(*groups: Iterable[NormalizedIncident]) -> List[NormalizedIncident]:
    """Concatenate and order newest first. No dedup across sources."""
    return sorted(chain.from_iterable(groups), key=lambda i: i.occurred_at, reverse=True)


async def fetch_all_data(
    client: httpx.AsyncClient,
    sources: Optional[List[SourceConfig]] = None,
    clock: Clock = utcnow,
) -> List[NormalizedIncident]:
    """Fan out to every source, wait for all, normalize, merge."""
    sources = SOURCES if sources is None else sources
    log.info("Fetching all data from NYC Open Data APIs...")

    results = await asyncio.gather(*(fetch_source(client, s) for s in sources))

    groups = [normalize_all(res.source.kind, res.records, clock) for res in results]
    log.info(
        "Combined: %s",
        ", ".join(f"{len(g)} {res.source.name} records" for res, g in zip(results, groups)),
    )

    combined = merge_incidents(*groups)
    log.info("Total normalized incidents: %d", len(combined))
    return combined


async def probe(client: httpx.AsyncClient, timeout_ms: int = config.PROBE_TIMEOUT_MS) -> httpx.Response:
    """Lightweight reachability check against the 311 dataset. Raises on network failure."""
    return await client.get(
        SOURCE_311.url,
        params={"$limit": 1},
        timeout=timeout_ms / 1000.0,
    )
