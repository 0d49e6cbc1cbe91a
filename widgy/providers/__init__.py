"""Data providers and render-context building.

Example:
    >>> from widgy.providers import DataResolver
    >>> context = await DataResolver().make_context(config)
    >>> context.binding_values["date_time.time"]
    '9:41 AM'
"""

from .lib import (
    DEFAULT_STATIC_VALUES,
    DataProvider,
    DataProviderRegistry,
    DateTimeProvider,
    StaticProvider,
    format_date_time,
)
from .resolver import DataResolver

__all__ = [
    "DataProvider",
    "StaticProvider",
    "DateTimeProvider",
    "DEFAULT_STATIC_VALUES",
    "format_date_time",
    "DataProviderRegistry",
    "DataResolver",
]
