# metarmap/display/format.py
"""
Display formatting for observation fields.

All functions are total: missing or unusable input yields a placeholder
("--", "Calm", gray) instead of an exception.
"""

import math
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Union

from ..observations.category import FlightCategory, parse_category
from ..observations.normalize import MetarObservation

PLACEHOLDER = "--"

# hPa -> inHg
HPA_TO_INHG = 0.02953

# Category -> (color name, hex used for map markers)
CATEGORY_COLORS = {
    FlightCategory.VFR: ("green", "#22c55e"),
    FlightCategory.MVFR: ("blue", "#3b82f6"),
    FlightCategory.IFR: ("red", "#ef4444"),
    FlightCategory.LIFR: ("purple", "#a855f7"),
}
UNKNOWN_COLOR = ("gray", "#6b7280")

Category = Union[FlightCategory, str, None]


def _category(category: Category) -> Optional[FlightCategory]:
    if isinstance(category, FlightCategory):
        return category
    return parse_category(category)


def category_color(category: Category) -> str:
    """VFR green, MVFR blue, IFR red, LIFR purple, anything else gray."""
    return CATEGORY_COLORS.get(_category(category), UNKNOWN_COLOR)[0]


def category_hex(category: Category) -> str:
    """Marker fill color for a category."""
    return CATEGORY_COLORS.get(_category(category), UNKNOWN_COLOR)[1]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _plain(value: Union[int, float]) -> str:
    """15.0 -> "15", 1.5 -> "1.5"."""
    return f"{value:g}"


def format_visibility(visib: Union[float, str, None]) -> str:
    """
    Visibility in statute miles.

    Examples:
        10 -> "10 SM"
        "10+" -> "10+  SM"
    """
    if isinstance(visib, str):
        return visib.replace("+", "+ ") + " SM"
    if _is_number(visib):
        return f"{_plain(visib)} SM"
    return PLACEHOLDER


def format_wind(
    wdir: Union[int, str, None],
    wspd: Optional[float],
    wgst: Optional[float] = None,
) -> str:
    """
    Wind as "DDD° @ S kt[ GG]".

    "Calm" when direction or speed is missing, or speed is zero.

    Example:
        >>> format_wind(270, 15, 25)
        '270° @ 15 kt G25'
    """
    if wdir is None or wspd is None or not _is_number(wspd) or wspd == 0:
        return "Calm"

    if _is_number(wdir):
        direction = f"{int(wdir):03d}"
    else:
        direction = str(wdir).zfill(3)

    wind = f"{direction}° @ {_plain(wspd)} kt"
    if _is_number(wgst) and wgst:
        wind += f" G{_plain(wgst)}"
    return wind


def format_temperature(temp: Optional[float]) -> str:
    """Nearest whole degree Celsius, halves rounded up."""
    if not _is_number(temp) or not math.isfinite(temp):
        return PLACEHOLDER
    return f"{math.floor(temp + 0.5)}°C"


def format_altimeter(altim: Optional[float]) -> str:
    """
    Altimeter in inches of mercury.

    Values above 100 are taken as hPa and converted.

    Example:
        >>> format_altimeter(29.92)
        '29.92"'
    """
    if not _is_number(altim) or not math.isfinite(altim):
        return PLACEHOLDER
    inhg = altim * HPA_TO_INHG if altim > 100 else altim
    return f'{inhg:.2f}"'


def format_obs_time(obs_time: Optional[int], tz: Optional[tzinfo] = None) -> str:
    """
    Observation time as "HH:MM AM/PM TZ".

    Args:
        obs_time: Unix epoch seconds
        tz: Display timezone; the host's local zone when None
    """
    if not _is_number(obs_time):
        return PLACEHOLDER
    try:
        moment = datetime.fromtimestamp(obs_time, tz=timezone.utc).astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return PLACEHOLDER
    return moment.strftime("%I:%M %p %Z").strip()


def format_cloud_layer(cover: str, base: Optional[int]) -> str:
    """Cloud layer as "BKN @ 3,500 ft"."""
    base_text = f"{base:,}" if _is_number(base) else PLACEHOLDER
    return f"{cover} @ {base_text} ft"


def describe_observation(obs: MetarObservation, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    """Detail panel fields for one airport."""
    clouds: List[str] = [format_cloud_layer(c.cover, c.base) for c in obs.clouds]
    return {
        "icao": obs.icao or "Unknown",
        "name": obs.name or "Unknown Airport",
        "category": obs.flight_category.value if obs.flight_category else "N/A",
        "color": category_hex(obs.flight_category),
        "visibility": format_visibility(obs.visibility),
        "wind": format_wind(obs.wind_direction, obs.wind_speed, obs.wind_gust),
        "temperature": format_temperature(obs.temp_c),
        "dewpoint": format_temperature(obs.dewpoint_c),
        "altimeter": format_altimeter(obs.altimeter),
        "observed": format_obs_time(obs.obs_time, tz),
        "clouds": clouds,
        "raw": obs.raw_text,
    }
