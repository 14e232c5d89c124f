# nyc_incidents/routes/incidents.py
from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from nyc_incidents.models.incident import HealthCheckResponse, IncidentsResponse
from nyc_incidents.services import nyc_open_data

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["incidents"])

# Resolver / connection failures, as they show up in exception text
NETWORK_ERROR_MARKERS = (
    "ENOTFOUND",
    "getaddrinfo",
    "fetch failed",
    "Name or service not known",
    "nodename nor servname",
    "Temporary failure in name resolution",
    "All connection attempts failed",
    "Connection refused",
)

NO_DATA_MESSAGE = (
    "Unable to fetch data from NYC Open Data APIs. This may be due to network "
    "connectivity issues, API unavailability, or DNS resolution problems. "
    "Please check your internet connection and try again."
)
NETWORK_ERROR_MESSAGE = (
    "Network error: Unable to reach NYC Open Data APIs. "
    "Please check your internet connection and DNS settings."
)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Outbound client for one request; overridden in tests."""
    async with httpx.AsyncClient() as client:
        yield client


def is_network_error(message: str) -> bool:
    return any(marker in message for marker in NETWORK_ERROR_MARKERS)


@router.get("/health-check", response_model=HealthCheckResponse, response_model_exclude_none=True)
async def health_check(client: httpx.AsyncClient = Depends(get_http_client)):
    """Single bounded probe against NYC Open Data. Does not touch the pipeline."""
    try:
        r = await nyc_open_data.probe(client)
    except Exception as e:
        log.warning("NYC Open Data health check failed: %s", e)
        body = HealthCheckResponse(
            success=False,
            connected=False,
            error="Cannot reach NYC Open Data API",
            message=str(e) or type(e).__name__,
            suggestion="Please check your internet connection and DNS settings",
        )
        return JSONResponse(status_code=503, content=body.model_dump(exclude_none=True))

    return HealthCheckResponse(
        success=True,
        connected=r.is_success,
        status=r.status_code,
        message="Successfully connected to NYC Open Data API",
    )


@router.get("/incidents")
async def incidents(client: httpx.AsyncClient = Depends(get_http_client)):
    """
    Fetch both sources concurrently, normalize, merge newest-first.
    Empty result is a soft failure (200, success=false); anything unexpected is a 500.
    """
    try:
        data = await nyc_open_data.fetch_all_data(client)
    except Exception as e:
        log.exception("Error fetching incidents: %s", e)
        message = str(e) or type(e).__name__
        body = IncidentsResponse(
            success=False,
            error="Failed to fetch incidents",
            message=NETWORK_ERROR_MESSAGE if is_network_error(message) else message,
        )
        return JSONResponse(status_code=500, content=body.to_json())

    if not data:
        log.warning("No incidents fetched - APIs may be unavailable or network issue")
        body = IncidentsResponse(success=False, error="No data available", message=NO_DATA_MESSAGE)
        return JSONResponse(content=body.to_json())

    return JSONResponse(content=IncidentsResponse(success=True, count=len(data), data=data).to_json())
