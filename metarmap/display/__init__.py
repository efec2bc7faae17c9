# Display module - human-readable observation formatting
from .format import (
    category_color,
    category_hex,
    format_visibility,
    format_wind,
    format_temperature,
    format_altimeter,
    format_obs_time,
    format_cloud_layer,
    describe_observation,
)

__all__ = [
    "category_color",
    "category_hex",
    "format_visibility",
    "format_wind",
    "format_temperature",
    "format_altimeter",
    "format_obs_time",
    "format_cloud_layer",
    "describe_observation",
]
