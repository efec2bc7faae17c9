# metarmap/observations/category.py
"""
Flight categories.

Thresholds (ceiling in feet AGL, visibility in statute miles):
- LIFR: ceiling < 500 or visibility < 1
- IFR:  ceiling < 1000 or visibility < 3
- MVFR: ceiling <= 3000 or visibility <= 5
- VFR:  otherwise
"""

from enum import Enum
from fractions import Fraction
from typing import Any, Iterable, Optional, Tuple

# Cloud covers that constitute a ceiling
CEILING_COVERS = ("BKN", "OVC", "OVX", "VV")


class FlightCategory(str, Enum):
    VFR = "VFR"
    MVFR = "MVFR"
    IFR = "IFR"
    LIFR = "LIFR"


# Legend text shown next to each category
CATEGORY_LEGEND = {
    FlightCategory.VFR: ">3000ft, >5SM",
    FlightCategory.MVFR: "1000-3000ft, 3-5SM",
    FlightCategory.IFR: "500-1000ft, 1-3SM",
    FlightCategory.LIFR: "<500ft, <1SM",
}


def parse_category(value: Any) -> Optional[FlightCategory]:
    """Map an upstream category string to FlightCategory; anything else is None."""
    if not isinstance(value, str):
        return None
    try:
        return FlightCategory(value.strip().upper())
    except ValueError:
        return None


def visibility_miles(value: Any) -> Optional[float]:
    """
    Numeric visibility from an upstream value.

    Handles numbers, "10+", "1/2" and "1 1/2"; returns None otherwise.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    text = value.strip().rstrip("+").strip()
    if not text:
        return None
    try:
        return float(sum(Fraction(part) for part in text.split()))
    except (ValueError, ZeroDivisionError):
        return None


def ceiling_feet(layers: Iterable[Tuple[str, Optional[int]]]) -> Optional[int]:
    """Lowest base among ceiling-forming layers, or None."""
    ceiling = None
    for cover, base in layers:
        if cover in CEILING_COVERS and base is not None:
            if ceiling is None or base < ceiling:
                ceiling = base
    return ceiling


def derive_category(
    ceiling: Optional[int],
    visibility: Optional[float],
) -> Optional[FlightCategory]:
    """
    Classify from ceiling and visibility.

    A missing ceiling counts as unlimited when visibility is known; with
    neither known the category is None.
    """
    if ceiling is None and visibility is None:
        return None

    if (ceiling is not None and ceiling < 500) or (visibility is not None and visibility < 1):
        return FlightCategory.LIFR
    if (ceiling is not None and ceiling < 1000) or (visibility is not None and visibility < 3):
        return FlightCategory.IFR
    if (ceiling is not None and ceiling <= 3000) or (visibility is not None and visibility <= 5):
        return FlightCategory.MVFR
    return FlightCategory.VFR
