# metarmap/api/routes_metar.py
"""
METAR API routes.

Endpoints consumed by the map client: weather for a query, and the
state/region tables used to populate its selectors.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..ingestion.aviationweather import UpstreamUnavailable
from ..logging import get_api_logger
from ..observations.category import CATEGORY_LEGEND
from ..query.models import query_from_params
from ..query.resolver import InvalidInput
from ..service import MetarService, NoDataFound, get_service
from ..settings import settings

router = APIRouter(prefix="/api/metar", tags=["metar"])

logger = get_api_logger()

GENERIC_ERROR = "Failed to fetch METAR data"


class StateInfo(BaseModel):
    """One selectable state."""
    code: str
    name: str
    airportCount: int


class RegionInfo(BaseModel):
    """One selectable region."""
    id: str
    name: str
    states: List[str]


class CategoryInfo(BaseModel):
    """Legend entry for a flight category."""
    category: str
    description: str


class MetadataResponse(BaseModel):
    """Selector data for the map client."""
    states: List[StateInfo]
    regions: List[RegionInfo]
    categories: List[CategoryInfo]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
def get_metars(
    ids: Optional[str] = Query(default=None, description="Comma separated ICAO codes"),
    states: Optional[List[str]] = Query(default=None, description="State codes, repeated or comma separated"),
    region: Optional[str] = Query(default=None, description="Region key, e.g. northeast"),
    bbox: Optional[str] = Query(default=None, description="south,west,north,east"),
    service: MetarService = Depends(get_service),
):
    """
    Latest METAR observations for a query.

    At most one of ids, states, region, bbox is honored, in that order
    of precedence. With none, the default airport set is returned.

    Returns:
        JSON list of observations, or {"error": ...}:
        - 400 for an unresolvable query
        - 200 when an identifier search matched nothing
        - 502 when the weather service could not be reached at all
        - 500 for anything else
    """
    query = query_from_params(ids=ids, states=states, region=region, bbox=bbox)

    try:
        result = service.run(query)
    except InvalidInput as e:
        logger.info("metar_query_rejected", query_kind=query.kind.value, error=str(e))
        return _error(400, str(e))
    except NoDataFound as e:
        return JSONResponse(status_code=200, content={"error": str(e)})
    except UpstreamUnavailable as e:
        logger.warning("metar_upstream_unavailable", query_kind=query.kind.value, error=str(e))
        return _error(502, str(e))
    except Exception:
        logger.exception("metar_query_failed", query_kind=query.kind.value)
        return _error(500, GENERIC_ERROR)

    headers = {"Cache-Control": f"public, max-age={settings.cache_max_age_seconds}"}
    if result.partial:
        headers["X-Partial-Result"] = f"{len(result.failures)}/{result.batch.chunk_count}"

    return JSONResponse(
        content=[obs.to_dict() for obs in result.observations],
        headers=headers,
    )


@router.get("/meta", response_model=MetadataResponse)
def get_metadata(service: MetarService = Depends(get_service)) -> MetadataResponse:
    """State and region tables for the map client's selectors."""
    reference = service.reference
    return MetadataResponse(
        states=[
            StateInfo(code=s.code, name=s.name, airportCount=len(s.airports))
            for s in reference.states.values()
        ],
        regions=[
            RegionInfo(id=r.key, name=r.name, states=list(r.states))
            for r in reference.regions.values()
        ],
        categories=[
            CategoryInfo(category=c.value, description=desc)
            for c, desc in CATEGORY_LEGEND.items()
        ],
    )
