# Observations module - airport observation model and normalization
from .category import (
    FlightCategory,
    CATEGORY_LEGEND,
    parse_category,
    derive_category,
    visibility_miles,
    ceiling_feet,
)
from .normalize import (
    CloudLayer,
    MetarObservation,
    US_PREFIXES,
    is_us_airport,
    parse_record,
    normalize_payload,
    dedupe_observations,
)

__all__ = [
    "FlightCategory",
    "CATEGORY_LEGEND",
    "parse_category",
    "derive_category",
    "visibility_miles",
    "ceiling_feet",
    "CloudLayer",
    "MetarObservation",
    "US_PREFIXES",
    "is_us_airport",
    "parse_record",
    "normalize_payload",
    "dedupe_observations",
]
