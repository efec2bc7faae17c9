# metarmap/observations/normalize.py
"""
Upstream record normalization.

Maps loosely-typed upstream METAR records onto MetarObservation. Mapping
is permissive: a missing or mistyped field becomes None rather than
rejecting the record. Only records without a usable identifier are
dropped, since the identifier is the merge key.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .category import FlightCategory, ceiling_feet, derive_category, parse_category, visibility_miles

# ICAO prefixes of US airports and territories
# K: contiguous US, P: Alaska/Hawaii/Pacific, TJ: Puerto Rico, TI: US Virgin Islands
US_PREFIXES = ("K", "P", "TJ", "TI")


@dataclass
class CloudLayer:
    """One reported cloud layer."""
    cover: str
    base: Optional[int]  # feet AGL


@dataclass
class MetarObservation:
    """Latest observation for one airport."""
    icao: str
    name: Optional[str]
    lat: Optional[float]
    lon: Optional[float]
    flight_category: Optional[FlightCategory]
    temp_c: Optional[float] = None
    dewpoint_c: Optional[float] = None
    wind_direction: Optional[Union[int, str]] = None  # degrees, or "VRB"
    wind_speed: Optional[int] = None  # knots
    wind_gust: Optional[int] = None  # knots
    visibility: Optional[Union[float, str]] = None  # SM, or "10+"
    altimeter: Optional[float] = None  # hPa or inHg as reported
    raw_text: Optional[str] = None
    obs_time: Optional[int] = None  # Unix epoch seconds
    clouds: List[CloudLayer] = field(default_factory=list)

    @property
    def ceiling_feet(self) -> Optional[int]:
        return ceiling_feet((c.cover, c.base) for c in self.clouds)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the upstream field names the map client expects."""
        return {
            "icaoId": self.icao,
            "name": self.name,
            "lat": self.lat,
            "lon": self.lon,
            "temp": self.temp_c,
            "dewp": self.dewpoint_c,
            "wdir": self.wind_direction,
            "wspd": self.wind_speed,
            "wgst": self.wind_gust,
            "visib": self.visibility,
            "altim": self.altimeter,
            "fltCat": self.flight_category.value if self.flight_category else None,
            "rawOb": self.raw_text,
            "obsTime": self.obs_time,
            "clouds": [{"cover": c.cover, "base": c.base} for c in self.clouds],
        }


def is_us_airport(icao: str) -> bool:
    """True for K*, P*, TJ* and TI* identifiers."""
    return icao.upper().startswith(US_PREFIXES)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _integer(value: Any) -> Optional[int]:
    number = _number(value)
    return int(round(number)) if number is not None else None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _wind_direction(value: Any) -> Optional[Union[int, str]]:
    number = _integer(value)
    if number is not None:
        return number
    return _text(value)  # "VRB"


def _visibility(value: Any) -> Optional[Union[float, str]]:
    if isinstance(value, str):
        return _text(value)
    return _number(value)


def _clouds(value: Any) -> List[CloudLayer]:
    if not isinstance(value, list):
        return []
    layers = []
    for item in value:
        if not isinstance(item, dict):
            continue
        cover = _text(item.get("cover"))
        if cover is None:
            continue
        layers.append(CloudLayer(cover=cover.upper(), base=_integer(item.get("base"))))
    return layers


def parse_record(record: Any) -> Optional[MetarObservation]:
    """
    Map one upstream record; None when it has no identifier.

    The upstream category wins; when absent it is derived from ceiling
    and visibility.
    """
    if not isinstance(record, dict):
        return None

    icao = _text(record.get("icaoId"))
    if icao is None:
        return None

    clouds = _clouds(record.get("clouds"))
    visibility = _visibility(record.get("visib"))

    category = parse_category(record.get("fltCat", record.get("fltcat")))
    if category is None:
        category = derive_category(
            ceiling_feet((c.cover, c.base) for c in clouds),
            visibility_miles(visibility),
        )

    return MetarObservation(
        icao=icao.upper(),
        name=_text(record.get("name")),
        lat=_number(record.get("lat")),
        lon=_number(record.get("lon")),
        flight_category=category,
        temp_c=_number(record.get("temp")),
        dewpoint_c=_number(record.get("dewp")),
        wind_direction=_wind_direction(record.get("wdir")),
        wind_speed=_integer(record.get("wspd")),
        wind_gust=_integer(record.get("wgst")),
        visibility=visibility,
        altimeter=_number(record.get("altim")),
        raw_text=_text(record.get("rawOb")),
        obs_time=_integer(record.get("obsTime")),
        clouds=clouds,
    )


def normalize_payload(payload: Any, us_only: bool = False) -> List[MetarObservation]:
    """
    Turn a merged upstream payload into observations.

    A payload that is not a list yields no observations. Duplicate
    identifiers keep their first occurrence.

    Args:
        payload: Raw upstream records
        us_only: Drop non-US identifiers (box-based queries)
    """
    if not isinstance(payload, list):
        return []
    return dedupe_observations(
        obs for obs in (parse_record(r) for r in payload)
        if obs is not None and (not us_only or is_us_airport(obs.icao))
    )


def dedupe_observations(observations: Iterable[MetarObservation]) -> List[MetarObservation]:
    """Keep the first observation per identifier, preserving order."""
    seen = set()
    unique = []
    for obs in observations:
        if obs.icao not in seen:
            seen.add(obs.icao)
            unique.append(obs)
    return unique
