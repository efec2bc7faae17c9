# metarmap/main.py
"""
METAR Map - Main Application

Backend for a browser-based aviation weather map: resolves airport
queries (ICAO list, states, region, bounding box), fetches the latest
METARs from AviationWeather.gov and returns normalized observations with
their flight categories.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from . import __version__
from .api import metar_router
from .geo.reference import get_reference
from .logging import configure_logging, get_logger
from .settings import settings

configure_logging(level=settings.log_level, json_output=settings.log_json)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Builds the geographic reference table once before serving.
    """
    reference = get_reference()
    logger.info(
        "metarmap_starting",
        states=len(reference.states),
        regions=len(reference.regions),
        upstream=settings.awc_base_url,
    )

    yield

    logger.info("metarmap_stopping")


app = FastAPI(
    title="METAR Map",
    description="""
    Aviation weather map backend.

    Turns a map query into AviationWeather.gov METAR requests and returns
    the latest observation per airport.

    Key features:
    - Queries by ICAO list, state, region or bounding box
    - Identifier lists batched 50 per upstream call, fetched in parallel
    - Partial upstream failures tolerated per batch
    - US-only filtering for bounding-box queries
    - Flight category (VFR, MVFR, IFR, LIFR) per airport
    """,
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Server"] = "METAR Map"
        return response


app.add_middleware(SecurityHeadersMiddleware)

app.include_router(metar_router)


@app.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok", "service": "metarmap", "version": __version__}


def run():
    """Run the server (entry point for CLI)."""
    import uvicorn
    uvicorn.run(
        "metarmap.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
