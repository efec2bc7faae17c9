# metarmap/query/resolver.py
"""
Query resolution.

Turns a QuerySpec into either a deduplicated identifier list or a single
bounding box. Resolution never touches the network.

States resolve in one of two modes:
- "bbox": the enclosing box of all selected states (one upstream call)
- "airports": the concatenated representative airport lists
"""

import math
from typing import Iterable, List

from ..geo.reference import BoundingBox, GeoReference
from .models import (
    ByBoundingBox,
    ByIdentifiers,
    ByRegion,
    ByStates,
    DefaultQuery,
    QueryKind,
    QuerySpec,
    ResolvedQuery,
)

STATE_RESOLUTION_MODES = ("bbox", "airports")


class InvalidInput(ValueError):
    """Raised when a query cannot be resolved from its parameters."""
    pass


def normalize_identifiers(raw: str) -> List[str]:
    """
    Split a comma separated ICAO list.

    Tokens are trimmed and uppercased; duplicates keep their first
    position; empty tokens are ignored.

    Example:
        >>> normalize_identifiers("kjfk, KJFK ,kord")
        ['KJFK', 'KORD']
    """
    seen = set()
    ids = []
    for token in raw.split(","):
        icao = token.strip().upper()
        if icao and icao not in seen:
            seen.add(icao)
            ids.append(icao)
    return ids


def parse_bbox(raw: str) -> BoundingBox:
    """
    Parse "south,west,north,east".

    Values are not range-checked.

    Raises:
        InvalidInput: Unless exactly four finite numbers are given
    """
    tokens = [t.strip() for t in raw.split(",")]
    if len(tokens) != 4:
        raise InvalidInput(
            f"Bounding box needs four comma-separated numbers (south,west,north,east), got: {raw!r}"
        )
    try:
        values = [float(t) for t in tokens]
    except ValueError:
        raise InvalidInput(f"Bounding box values must be numeric, got: {raw!r}")
    if not all(math.isfinite(v) for v in values):
        raise InvalidInput(f"Bounding box values must be finite, got: {raw!r}")
    return BoundingBox(*values)


class QueryResolver:
    """
    Resolves QuerySpecs against a GeoReference.

    Usage:
        resolver = QueryResolver(get_reference())
        resolved = resolver.resolve(query_from_params(region="west"))
    """

    def __init__(self, reference: GeoReference, state_resolution: str = "bbox"):
        if state_resolution not in STATE_RESOLUTION_MODES:
            raise ValueError(
                f"state_resolution must be one of {STATE_RESOLUTION_MODES}, got {state_resolution!r}"
            )
        self.reference = reference
        self.state_resolution = state_resolution

    def resolve(self, query: QuerySpec) -> ResolvedQuery:
        """
        Resolve a query.

        Raises:
            InvalidInput: Empty identifier list, no known state, unknown
                region, or malformed bounding box
        """
        if isinstance(query, ByIdentifiers):
            return self._resolve_identifiers(query.raw)
        if isinstance(query, ByStates):
            return self._resolve_states(query.codes, QueryKind.STATES)
        if isinstance(query, ByRegion):
            return self._resolve_region(query.key)
        if isinstance(query, ByBoundingBox):
            return ResolvedQuery(kind=QueryKind.BBOX, bbox=parse_bbox(query.raw))
        if isinstance(query, DefaultQuery):
            return ResolvedQuery(
                kind=QueryKind.DEFAULT,
                ids=tuple(self.reference.default_airports),
            )
        raise TypeError(f"Unsupported query type: {type(query).__name__}")

    def _resolve_identifiers(self, raw: str) -> ResolvedQuery:
        ids = normalize_identifiers(raw)
        if not ids:
            raise InvalidInput("No airport identifiers supplied")
        return ResolvedQuery(kind=QueryKind.IDENTIFIERS, ids=tuple(ids))

    def _resolve_states(self, codes: Iterable[str], kind: QueryKind) -> ResolvedQuery:
        codes = list(codes)
        if self.state_resolution == "airports":
            ids = self.reference.airports_for_states(codes)
            if not ids:
                raise InvalidInput(f"No known states in: {', '.join(codes)}")
            return ResolvedQuery(kind=kind, ids=tuple(ids))

        bbox = self.reference.combine_state_bboxes(codes)
        if bbox is None:
            raise InvalidInput(f"No known states in: {', '.join(codes)}")
        return ResolvedQuery(kind=kind, bbox=bbox)

    def _resolve_region(self, key: str) -> ResolvedQuery:
        region = self.reference.region(key)
        if region is None:
            known = ", ".join(self.reference.regions)
            raise InvalidInput(f"Unknown region: {key}. Known regions: {known}")
        return self._resolve_states(region.states, QueryKind.REGION)
