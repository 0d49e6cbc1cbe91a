"""Unit tests for binding extraction and substitution."""

import pytest

from widgy.schema import DataSource, decode_config

from . import (
    collect_placeholders,
    compile_bindings,
    extract_placeholders,
    placeholder_sources,
    required_sources,
    resolve_text,
)


class TestExtractPlaceholders:
    """Tests for placeholder extraction."""

    @pytest.mark.unit
    def test_ordered_pairs(self):
        text = "Temperature: {{weather.temperature}} Battery: {{battery.level}}"
        assert extract_placeholders(text) == [("weather", "temperature"), ("battery", "level")]

    @pytest.mark.unit
    def test_duplicates_kept(self):
        text = "{{a.b}}{{a.b}}"
        assert extract_placeholders(text) == [("a", "b"), ("a", "b")]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        ["plain text", "{{weather}}", "{{ weather.temperature }}", "{weather.temperature}", "{{a.b-c}}"],
    )
    def test_non_matching(self, text):
        assert extract_placeholders(text) == []

    @pytest.mark.unit
    def test_word_characters(self):
        assert extract_placeholders("{{date_time.time2}}") == [("date_time", "time2")]


class TestResolveText:
    """Tests for placeholder substitution."""

    @pytest.mark.unit
    def test_substitution(self):
        result = resolve_text("It's {{weather.temperature}} outside", {"weather.temperature": "72°F"})
        assert result == "It's 72°F outside"

    @pytest.mark.unit
    def test_unmapped_left_literal(self):
        assert resolve_text("{{unknown.key}}", {"weather.temperature": "72"}) == "{{unknown.key}}"

    @pytest.mark.unit
    def test_every_occurrence_replaced(self):
        assert resolve_text("{{a.b}} and {{a.b}}", {"a.b": "x"}) == "x and x"

    @pytest.mark.unit
    def test_single_pass(self):
        values = {"a.b": "{{c.d}}", "c.d": "deep"}
        assert resolve_text("{{a.b}}", values) == "{{c.d}}"

    @pytest.mark.unit
    def test_arbitrary_keys(self):
        values = {"calendar.next.title": "Standup"}
        assert resolve_text("Next: {{calendar.next.title}}", values) == "Next: Standup"

    @pytest.mark.unit
    def test_precompiled_pattern(self):
        values = {"a.b": "x", "a.bc": "y"}
        pattern = compile_bindings(values)
        assert resolve_text("{{a.bc}} {{a.b}}", values, pattern) == "y x"
        assert resolve_text("{{a.b}}!", values, pattern) == "x!"
        assert compile_bindings({}) is None

    @pytest.mark.unit
    def test_empty_map(self):
        assert resolve_text("{{a.b}}", {}) == "{{a.b}}"


class TestSourceDiscovery:
    """Tests for tree-wide placeholder collection."""

    @pytest.mark.unit
    def test_collect_from_text_and_gauge(self):
        config = decode_config(
            {
                "name": "n",
                "root": {
                    "type": "VStack",
                    "children": [
                        {"type": "Text", "properties": {"content": "{{weather.temperature}}"}},
                        {
                            "type": "Padding",
                            "properties": {
                                "child": {
                                    "type": "Gauge",
                                    "properties": {"value": 0.2, "current_value_label": "{{battery.level}}"},
                                }
                            },
                        },
                    ],
                },
            }
        )
        assert collect_placeholders(config.root) == [("weather", "temperature"), ("battery", "level")]
        assert required_sources(config) == {
            DataSource.DATE_TIME,
            DataSource.WEATHER,
            DataSource.BATTERY,
        }

    @pytest.mark.unit
    def test_date_time_always_required(self, make_config):
        from widgy.schema import SpacerNode

        assert required_sources(make_config(SpacerNode())) == {DataSource.DATE_TIME}

    @pytest.mark.unit
    def test_unknown_sources_ignored(self):
        config = decode_config(
            {"name": "n", "root": {"type": "Text", "properties": {"text": "{{stocks.aapl}}"}}}
        )
        assert required_sources(config) == {DataSource.DATE_TIME}

    @pytest.mark.unit
    def test_explicit_bindings_included(self):
        config = decode_config(
            {
                "name": "n",
                "root": {"type": "Text", "properties": {"text": "hi"}},
                "data_bindings": {"steps": {"source": "health", "field": "steps"}},
            }
        )
        assert DataSource.HEALTH in required_sources(config)

    @pytest.mark.unit
    def test_samples(self, battery_widget, weather_widget):
        assert required_sources(battery_widget) == {DataSource.DATE_TIME, DataSource.BATTERY}
        assert DataSource.WEATHER in required_sources(weather_widget)

    @pytest.mark.unit
    def test_multi_segment_keys_name_their_source(self):
        assert placeholder_sources("{{calendar.next.title}} at {{calendar.next.time}}") == [
            "calendar",
            "calendar",
        ]
        config = decode_config(
            {
                "name": "n",
                "root": {"type": "Text", "properties": {"text": "Next: {{calendar.next.title}}"}},
            }
        )
        assert required_sources(config) == {DataSource.DATE_TIME, DataSource.CALENDAR}
