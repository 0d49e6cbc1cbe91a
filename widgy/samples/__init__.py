"""Sample widget configs."""

from .lib import (
    ALL_SAMPLES,
    BATTERY_WIDGET,
    SAMPLES,
    SIMPLE_CLOCK,
    WEATHER_WIDGET,
    get_sample,
)

__all__ = [
    "SIMPLE_CLOCK",
    "WEATHER_WIDGET",
    "BATTERY_WIDGET",
    "SAMPLES",
    "ALL_SAMPLES",
    "get_sample",
]
