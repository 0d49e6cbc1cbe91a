"""Tests for the bundled sample configs."""

import pytest

from widgy.bindings import collect_placeholders, required_sources
from widgy.render import RenderContext, VisualKind, render_config
from widgy.schema import DataSource, decode_config, dumps_config, iter_nodes
from widgy.validation import validate

from . import ALL_SAMPLES, BATTERY_WIDGET, SAMPLES, WEATHER_WIDGET, get_sample


def _texts(visual):
    found = [visual.params["text"]] if visual.kind == VisualKind.TEXT else []
    for child in visual.children:
        found.extend(_texts(child))
    return found


class TestSamples:
    """Sanity checks for each sample."""

    @pytest.mark.unit
    @pytest.mark.parametrize("config", ALL_SAMPLES, ids=lambda c: c.name)
    def test_valid_without_warnings(self, config):
        result = validate(config)
        assert result.is_valid
        assert result.warnings == []

    @pytest.mark.unit
    @pytest.mark.parametrize("config", ALL_SAMPLES, ids=lambda c: c.name)
    def test_survives_serialization(self, config):
        assert decode_config(dumps_config(config)) == config

    @pytest.mark.unit
    @pytest.mark.parametrize("config", ALL_SAMPLES, ids=lambda c: c.name)
    def test_preview_resolves_every_placeholder(self, config):
        visual = render_config(config, RenderContext.preview())
        assert all("{{" not in text for text in _texts(visual))

    @pytest.mark.unit
    def test_sample_ids_are_unique(self):
        assert len({config.id for config in ALL_SAMPLES}) == len(ALL_SAMPLES)

    @pytest.mark.unit
    def test_weather_needs_weather_source(self):
        assert required_sources(WEATHER_WIDGET) == {DataSource.DATE_TIME, DataSource.WEATHER}
        assert ("weather", "temperature") in collect_placeholders(WEATHER_WIDGET.root)

    @pytest.mark.unit
    def test_battery_has_gauge(self):
        types = [node.type for node in iter_nodes(BATTERY_WIDGET.root)]
        assert "Gauge" in types


class TestGetSample:
    """Tests for sample lookup."""

    @pytest.mark.unit
    def test_known(self):
        for name, config in SAMPLES.items():
            assert get_sample(name) is config

    @pytest.mark.unit
    def test_unknown(self):
        with pytest.raises(KeyError, match="Available"):
            get_sample("nope")
