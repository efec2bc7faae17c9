# metarmap/query/models.py
"""
Query specification: exactly one of five request shapes.

The inbound request may carry several of `ids`, `states`, `region` and
`bbox`; `query_from_params` picks one by fixed precedence
(ids > states > region > bbox > default) so downstream code only ever
sees a single variant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable, Optional, Tuple, Union

from ..geo.reference import BoundingBox


class QueryKind(str, Enum):
    """Discriminant of a QuerySpec."""
    IDENTIFIERS = "identifiers"
    STATES = "states"
    REGION = "region"
    BBOX = "bbox"
    DEFAULT = "default"


@dataclass(frozen=True)
class ByIdentifiers:
    """Explicit ICAO list, as typed by the user (comma separated)."""
    raw: str
    kind: ClassVar[QueryKind] = QueryKind.IDENTIFIERS


@dataclass(frozen=True)
class ByStates:
    """One or more state codes."""
    codes: Tuple[str, ...]
    kind: ClassVar[QueryKind] = QueryKind.STATES


@dataclass(frozen=True)
class ByRegion:
    """A single region key."""
    key: str
    kind: ClassVar[QueryKind] = QueryKind.REGION


@dataclass(frozen=True)
class ByBoundingBox:
    """Four comma separated coordinates: south,west,north,east."""
    raw: str
    kind: ClassVar[QueryKind] = QueryKind.BBOX


@dataclass(frozen=True)
class DefaultQuery:
    """No discriminant: the popular-airports set."""
    kind: ClassVar[QueryKind] = QueryKind.DEFAULT


QuerySpec = Union[ByIdentifiers, ByStates, ByRegion, ByBoundingBox, DefaultQuery]


@dataclass(frozen=True)
class ResolvedQuery:
    """
    Output of the resolver: an identifier list or a bounding box.

    `us_only` marks queries whose upstream call is box-based and may
    return airports outside US prefixes.
    """
    kind: QueryKind
    ids: Tuple[str, ...] = ()
    bbox: Optional[BoundingBox] = None

    @property
    def is_bbox(self) -> bool:
        return self.bbox is not None

    @property
    def us_only(self) -> bool:
        return self.is_bbox


def _split_codes(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    if value is None:
        return ()
    items = [value] if isinstance(value, str) else list(value)
    codes = []
    for item in items:
        codes.extend(part.strip() for part in item.split(","))
    return tuple(code for code in codes if code)


def query_from_params(
    ids: Optional[str] = None,
    states: Union[str, Iterable[str], None] = None,
    region: Optional[str] = None,
    bbox: Optional[str] = None,
) -> QuerySpec:
    """
    Build a QuerySpec from raw request parameters.

    Empty or whitespace-only values count as absent.
    """
    if ids and ids.strip():
        return ByIdentifiers(raw=ids)

    state_codes = _split_codes(states)
    if state_codes:
        return ByStates(codes=state_codes)

    if region and region.strip():
        return ByRegion(key=region.strip())

    if bbox and bbox.strip():
        return ByBoundingBox(raw=bbox)

    return DefaultQuery()
