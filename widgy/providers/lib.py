"""Data providers that supply binding values.

Each provider serves one `DataSource` and returns a flat map keyed by
``"source.field"``. The registry fetches several sources concurrently and
merges the results; a provider that fails or times out contributes nothing.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import datetime

from widgy.config import EnvVar, get_environment
from widgy.schema import DataSource

logger = logging.getLogger(__name__)


class DataProvider(ABC):
    """Abstract base class for binding value providers.

    Subclasses must implement:
        - source: The DataSource served
        - fetch_values: Current values keyed by ``"source.field"``

    Example:
        >>> class DeviceProvider(DataProvider):
        ...     source = DataSource.DEVICE
        ...     async def fetch_values(self) -> dict[str, str]:
        ...         return {"device.name": "Test"}
    """

    @property
    @abstractmethod
    def source(self) -> DataSource:
        """Data source this provider serves."""
        ...

    @abstractmethod
    async def fetch_values(self) -> dict[str, str]:
        """Fetch current values for every field this provider supports.

        May raise; the registry isolates failures.
        """
        ...


class StaticProvider(DataProvider):
    """Provider returning a fixed value map."""

    def __init__(self, source: DataSource, values: dict[str, str]):
        self._source = source
        self._values = dict(values)

    @property
    def source(self) -> DataSource:
        return self._source

    async def fetch_values(self) -> dict[str, str]:
        return dict(self._values)


# Values reported where the live data is unavailable.
DEFAULT_STATIC_VALUES: dict[DataSource, dict[str, str]] = {
    DataSource.BATTERY: {
        "battery.level": "100",
        "battery.state": "full",
    },
    DataSource.CALENDAR: {
        "calendar.next.title": "No events",
        "calendar.next.time": "--",
        "calendar.next.location": "",
        "calendar.count": "0",
    },
    DataSource.HEALTH: {
        "health.steps": "0",
        "health.distance": "0.0",
        "health.calories": "0",
    },
    DataSource.LOCATION: {
        "location.city": "Unknown",
        "location.country": "Unknown",
        "location.latitude": "0.0000",
        "location.longitude": "0.0000",
    },
    DataSource.WEATHER: {
        "weather.temperature": "72",
        "weather.condition": "Partly Cloudy",
        "weather.high": "78",
        "weather.low": "62",
        "weather.icon": "cloud.sun.fill",
    },
}


class DateTimeProvider(DataProvider):
    """Live clock values.

    Args:
        clock: Returns the current local time; defaults to `datetime.now`.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or datetime.now

    @property
    def source(self) -> DataSource:
        return DataSource.DATE_TIME

    async def fetch_values(self) -> dict[str, str]:
        return format_date_time(self._clock())


def format_date_time(now: datetime) -> dict[str, str]:
    """Binding values for a moment in time.

    Example:
        >>> format_date_time(datetime(2026, 2, 23, 9, 41))["date_time.time"]
        '9:41 AM'
    """
    hour12 = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    weekday = now.strftime("%A")
    return {
        "date_time.time": f"{hour12}:{now.minute:02d} {meridiem}",
        "date_time.date": f"{weekday}, {now.strftime('%b')} {now.day}",
        "date_time.hour": str(now.hour),
        "date_time.minute": f"{now.minute:02d}",
        "date_time.weekday": weekday,
        "date_time.day": weekday,
        "date_time.month": now.strftime("%B"),
        "date_time.year": str(now.year),
    }


class DataProviderRegistry:
    """Providers keyed by source, with concurrent resolution.

    Args:
        providers: Providers to register; a later provider for the same
            source replaces an earlier one.
        timeout: Seconds allowed per provider fetch. Defaults to
            WIDGY_PROVIDER_TIMEOUT.
    """

    def __init__(
        self,
        providers: Iterable[DataProvider] = (),
        timeout: float | None = None,
    ):
        self._providers: dict[DataSource, DataProvider] = {}
        self.timeout = get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT, override=timeout)
        for provider in providers:
            self.register(provider)

    @classmethod
    def make_default(cls, timeout: float | None = None) -> "DataProviderRegistry":
        """Registry with the live clock and static values for other sources."""
        providers: list[DataProvider] = [DateTimeProvider()]
        providers.extend(
            StaticProvider(source, values) for source, values in DEFAULT_STATIC_VALUES.items()
        )
        return cls(providers, timeout=timeout)

    def register(self, provider: DataProvider) -> None:
        self._providers[provider.source] = provider

    @property
    def sources(self) -> set[DataSource]:
        return set(self._providers)

    def get(self, source: DataSource) -> DataProvider | None:
        return self._providers.get(source)

    async def _fetch(self, provider: DataProvider) -> dict[str, str]:
        try:
            return await asyncio.wait_for(provider.fetch_values(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Provider {provider.source.value} timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"Provider {provider.source.value} failed: {e}")
        return {}

    async def resolve_bindings(self, sources: Iterable[DataSource]) -> dict[str, str]:
        """Fetch and merge values for `sources`.

        Sources without a registered provider are skipped. Fetches run
        concurrently; on a key collision the later source in sorted order
        wins.
        """
        ordered = sorted(set(sources), key=lambda s: s.value)
        providers = [self._providers[s] for s in ordered if s in self._providers]
        if not providers:
            return {}

        results = await asyncio.gather(*[self._fetch(p) for p in providers])

        merged: dict[str, str] = {}
        for values in results:
            merged.update(values)
        logger.debug(f"Resolved {len(merged)} binding values from {len(providers)} provider(s)")
        return merged

    async def resolve_all_bindings(self) -> dict[str, str]:
        """Fetch values from every registered provider."""
        return await self.resolve_bindings(self._providers)


__all__ = [
    "DataProvider",
    "StaticProvider",
    "DateTimeProvider",
    "DEFAULT_STATIC_VALUES",
    "format_date_time",
    "DataProviderRegistry",
]
