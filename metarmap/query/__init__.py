# Query module - request shapes and their resolution
from .models import (
    QueryKind,
    QuerySpec,
    ByIdentifiers,
    ByStates,
    ByRegion,
    ByBoundingBox,
    DefaultQuery,
    ResolvedQuery,
    query_from_params,
)
from .resolver import QueryResolver, InvalidInput, normalize_identifiers, parse_bbox

__all__ = [
    "QueryKind",
    "QuerySpec",
    "ByIdentifiers",
    "ByStates",
    "ByRegion",
    "ByBoundingBox",
    "DefaultQuery",
    "ResolvedQuery",
    "query_from_params",
    "QueryResolver",
    "InvalidInput",
    "normalize_identifiers",
    "parse_bbox",
]
