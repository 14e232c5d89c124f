# nyc_incidents/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import RedirectResponse

from nyc_incidents import __version__, config
from nyc_incidents.routes.incidents import router as incidents_router

log = logging.getLogger("uvicorn.error")

app = FastAPI(
    title="NYC Incidents API",
    version=__version__,
    description="Proxy over NYC Open Data (311 + NYPD complaints), normalized for the replay dashboard.",
)

# ---------------- CORS (browser dashboard needs this) ----------------
# Prefer explicit origins via CORS_ORIGINS="https://app.example.com,https://staging.example.com"
# For local dev we allow any localhost/127.0.0.1 on any port.
cors_kwargs = dict(allow_methods=["GET"], allow_headers=["*"])

if config.CORS_ORIGINS:
    allow_origins = [o.strip() for o in config.CORS_ORIGINS.split(",") if o.strip()]
    cors_kwargs.update(allow_origins=allow_origins)
else:
    cors_kwargs.update(allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")

app.add_middleware(CORSMiddleware, **cors_kwargs)
log.info("CORS configured: %s", cors_kwargs)

# ---------------- Routers ----------------
# Final paths are {API_PREFIX}/incidents and {API_PREFIX}/health-check
app.include_router(incidents_router, prefix=config.API_PREFIX)


# ---------------- Meta/utility ----------------
@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    # Visiting the root opens Swagger UI
    return RedirectResponse(url="/docs")


@app.get(f"{config.API_PREFIX or ''}/health", tags=["meta"])
def health():
    return {"status": "ok", "prefix": config.API_PREFIX or ""}


# ---------------- Local dev entrypoint ----------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nyc_incidents.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=True,
    )
