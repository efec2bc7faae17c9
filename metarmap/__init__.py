"""METAR map backend: airport query resolution and weather aggregation."""

__version__ = "0.1.0"

from .board import AirportBoard  # noqa: E402

__all__ = ["AirportBoard", "__version__"]
