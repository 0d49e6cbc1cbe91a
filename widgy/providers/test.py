"""Unit tests for data providers and the render-context builder."""

import asyncio
from datetime import datetime

import pytest

from widgy.schema import DataBinding, DataSource, TextNode, TextProperties

from . import (
    DEFAULT_STATIC_VALUES,
    DataProvider,
    DataProviderRegistry,
    DataResolver,
    DateTimeProvider,
    StaticProvider,
    format_date_time,
)


class FailingProvider(DataProvider):
    source = DataSource.HEALTH

    async def fetch_values(self) -> dict[str, str]:
        raise RuntimeError("permission denied")


class SlowProvider(DataProvider):
    source = DataSource.LOCATION

    async def fetch_values(self) -> dict[str, str]:
        await asyncio.sleep(5)
        return {"location.city": "Late"}


class TestDateTime:
    """Tests for clock formatting."""

    @pytest.mark.unit
    def test_morning(self):
        values = format_date_time(datetime(2026, 2, 23, 9, 5))
        assert values["date_time.time"] == "9:05 AM"
        assert values["date_time.hour"] == "9"
        assert values["date_time.minute"] == "05"
        assert values["date_time.year"] == "2026"

    @pytest.mark.unit
    def test_afternoon_and_midnight(self):
        assert format_date_time(datetime(2026, 2, 23, 13, 30))["date_time.time"] == "1:30 PM"
        assert format_date_time(datetime(2026, 2, 23, 0, 0))["date_time.time"] == "12:00 AM"
        assert format_date_time(datetime(2026, 2, 23, 12, 0))["date_time.time"] == "12:00 PM"

    @pytest.mark.unit
    def test_all_keys_prefixed(self):
        values = format_date_time(datetime(2026, 2, 23, 9, 41))
        assert all(key.startswith("date_time.") for key in values)
        assert values["date_time.day"] == values["date_time.weekday"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_provider_uses_clock(self):
        provider = DateTimeProvider(clock=lambda: datetime(2026, 2, 23, 21, 7))
        values = await provider.fetch_values()
        assert values["date_time.time"] == "9:07 PM"
        assert values["date_time.hour"] == "21"


class TestRegistry:
    """Tests for concurrent resolution."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_merges_requested_sources(self):
        registry = DataProviderRegistry(
            [
                StaticProvider(DataSource.BATTERY, {"battery.level": "50"}),
                StaticProvider(DataSource.WEATHER, {"weather.temperature": "20"}),
            ]
        )
        values = await registry.resolve_bindings({DataSource.BATTERY})
        assert values == {"battery.level": "50"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unregistered_source_skipped(self):
        registry = DataProviderRegistry([StaticProvider(DataSource.BATTERY, {"battery.level": "50"})])
        values = await registry.resolve_bindings({DataSource.BATTERY, DataSource.MUSIC})
        assert values == {"battery.level": "50"}
        assert await DataProviderRegistry().resolve_bindings({DataSource.MUSIC}) == {}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, caplog):
        registry = DataProviderRegistry(
            [FailingProvider(), StaticProvider(DataSource.BATTERY, {"battery.level": "50"})]
        )
        values = await registry.resolve_bindings({DataSource.HEALTH, DataSource.BATTERY})
        assert values == {"battery.level": "50"}
        assert "permission denied" in caplog.text

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout_is_isolated(self):
        registry = DataProviderRegistry(
            [SlowProvider(), StaticProvider(DataSource.BATTERY, {"battery.level": "50"})],
            timeout=0.05,
        )
        values = await registry.resolve_bindings({DataSource.LOCATION, DataSource.BATTERY})
        assert values == {"battery.level": "50"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_collision_is_deterministic(self):
        registry = DataProviderRegistry(
            [
                StaticProvider(DataSource.BATTERY, {"shared.key": "battery"}),
                StaticProvider(DataSource.WEATHER, {"shared.key": "weather"}),
            ]
        )
        values = await registry.resolve_bindings({DataSource.WEATHER, DataSource.BATTERY})
        assert values == {"shared.key": "weather"}

    @pytest.mark.unit
    def test_register_replaces(self):
        registry = DataProviderRegistry([StaticProvider(DataSource.BATTERY, {"battery.level": "1"})])
        replacement = StaticProvider(DataSource.BATTERY, {"battery.level": "2"})
        registry.register(replacement)
        assert registry.get(DataSource.BATTERY) is replacement
        assert registry.sources == {DataSource.BATTERY}

    @pytest.mark.unit
    def test_timeout_from_environment(self, monkeypatch):
        monkeypatch.setenv("WIDGY_PROVIDER_TIMEOUT", "1.5")
        assert DataProviderRegistry().timeout == 1.5
        assert DataProviderRegistry(timeout=3.0).timeout == 3.0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_default_registry(self):
        registry = DataProviderRegistry.make_default()
        assert registry.sources == {DataSource.DATE_TIME, *DEFAULT_STATIC_VALUES}
        values = await registry.resolve_all_bindings()
        assert values["weather.condition"] == "Partly Cloudy"
        assert values["battery.level"] == "100"
        assert "date_time.time" in values


class TestDataResolver:
    """Tests for render-context building."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetches_only_needed_sources(self, battery_widget):
        resolver = DataResolver(DataProviderRegistry.make_default())
        values = await resolver.resolve_bindings(battery_widget)
        assert values["battery.level"] == "100"
        assert "date_time.time" in values
        assert not any(key.startswith("weather.") for key in values)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_fills_missing_key(self, make_config):
        config = make_config(
            TextNode(properties=TextProperties(content="{{music.title}}")),
            data_bindings={
                "song": DataBinding(source=DataSource.MUSIC, field="title", fallback="Nothing playing"),
            },
        )
        context = await DataResolver(DataProviderRegistry.make_default()).make_context(config)
        assert context.binding_values["music.title"] == "Nothing playing"
        assert context.resolve_bindings("{{music.title}}") == "Nothing playing"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_does_not_override_provider(self, make_config):
        config = make_config(
            TextNode(properties=TextProperties(content="x")),
            data_bindings={
                "level": DataBinding(source=DataSource.BATTERY, field="level", fallback="?"),
            },
        )
        values = await DataResolver(DataProviderRegistry.make_default()).resolve_bindings(config)
        assert values["battery.level"] == "100"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_context_flag(self, simple_clock):
        resolver = DataResolver(DataProviderRegistry.make_default())
        context = await resolver.make_context(simple_clock, is_widget_extension=True)
        assert context.is_widget_extension is True
        assert context.resolve_bindings("{{date_time.year}}").isdigit()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_multi_segment_placeholder_resolves_live(self, make_config):
        from widgy.render import render_config

        config = make_config(TextNode(properties=TextProperties(content="Next: {{calendar.next.title}}")))
        context = await DataResolver(DataProviderRegistry.make_default()).make_context(config)
        visual = render_config(config, context)
        assert visual.params["text"] == "Next: No events"
