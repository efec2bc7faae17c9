# Geo module - static state/region reference data
from .reference import (
    BoundingBox,
    State,
    Region,
    GeoReference,
    build_reference,
    get_reference,
    bbox_to_param,
    DEFAULT_AIRPORTS,
)

__all__ = [
    "BoundingBox",
    "State",
    "Region",
    "GeoReference",
    "build_reference",
    "get_reference",
    "bbox_to_param",
    "DEFAULT_AIRPORTS",
]
