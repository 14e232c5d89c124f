# nyc_incidents/config.py
from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory (if present) before reading os.getenv
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


# ---------- Upstream (NYC Open Data / Socrata) ----------
OPEN_DATA_BASE_URL = os.getenv(
    "NYC_OPEN_DATA_BASE_URL", "https://data.cityofnewyork.us/resource"
).rstrip("/")
NYC_311_DATASET = os.getenv("NYC_311_DATASET", "erm2-nwe9")
NYPD_DATASET = os.getenv("NYPD_DATASET", "5uac-w243")
NYC_311_AGENCY = os.getenv("NYC_311_AGENCY", "NYPD")

NYC_311_URL = f"{OPEN_DATA_BASE_URL}/{NYC_311_DATASET}.json"
NYPD_URL = f"{OPEN_DATA_BASE_URL}/{NYPD_DATASET}.json"

SOURCE_PAGE_SIZE = _int_env("SOURCE_PAGE_SIZE", 50)
FETCH_TIMEOUT_MS = _int_env("FETCH_TIMEOUT_MS", 15000)
PROBE_TIMEOUT_MS = _int_env("PROBE_TIMEOUT_MS", 5000)

# ---------- Playback ----------
PLAYBACK_DELAY_MS = _int_env("PLAYBACK_DELAY_MS", 200)

# ---------- HTTP surface ----------
# Optional global API prefix (e.g., "/api")
API_PREFIX = os.getenv("API_PREFIX", "").strip()
if API_PREFIX:
    if not API_PREFIX.startswith("/"):
        API_PREFIX = "/" + API_PREFIX
    API_PREFIX = API_PREFIX.rstrip("/")

CORS_ORIGINS = os.getenv("CORS_ORIGINS")
PORT = _int_env("PORT", 8000)

# Base URL the replay client talks to
API_URL = os.getenv("API_URL", f"http://localhost:{PORT}{API_PREFIX}").rstrip("/")
