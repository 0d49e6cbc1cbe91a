"""Unit tests for the widget schema and codec."""

import math
from datetime import datetime, timezone
from uuid import UUID

import pytest

from widgy.style import ColorValue, FontWeight, NodeStyle, SystemColor

from . import (
    CURRENT_SCHEMA_VERSION,
    ContainerRelativeShapeNode,
    DataSource,
    DecodeError,
    FrameNode,
    GaugeNode,
    GaugeStyle,
    HStackNode,
    ImageNode,
    ImageSourceType,
    PaddingNode,
    PaddingProperties,
    SFSymbolProperties,
    SpacerNode,
    StackAlignment,
    TextNode,
    TextProperties,
    VStackNode,
    WidgetConfig,
    WidgetFamily,
    count_nodes,
    decode_config,
    decode_node,
    dumps_config,
    encode_config,
    encode_node,
    extract_json,
    iter_nodes,
    migrate,
    node_children,
    parse_widget_config,
    touch,
)


def _text(content: str) -> dict:
    return {"type": "Text", "properties": {"content": content}}


def _config(root: dict, **extra) -> dict:
    return {
        "id": "6F9619FF-8B86-D011-B42D-00C04FC964FF",
        "schema_version": "1.0",
        "name": "Test",
        "family": "systemSmall",
        "root": root,
        **extra,
    }


# =============================================================================
# Alias handling
# =============================================================================


class TestTextAliases:
    """Tests for Text content spellings."""

    @pytest.mark.unit
    def test_content_and_text_are_equivalent(self):
        assert TextProperties.model_validate({"content": "hi"}) == TextProperties.model_validate(
            {"text": "hi"}
        )

    @pytest.mark.unit
    def test_content_wins_over_text(self):
        props = TextProperties.model_validate({"content": "a", "text": "b"})
        assert props.content == "a"

    @pytest.mark.unit
    def test_missing_content_defaults_to_empty(self):
        assert TextProperties.model_validate({}).content == ""

    @pytest.mark.unit
    def test_invalid_optional_fields_are_dropped(self):
        props = TextProperties.model_validate(
            {"content": "x", "alignment": "justified", "line_limit": "two", "font": {"style": "x"}}
        )
        assert props.alignment is None
        assert props.line_limit is None
        assert props.font is None
        assert props.content == "x"

    @pytest.mark.unit
    def test_color_shorthand(self):
        props = TextProperties.model_validate({"content": "x", "color": "red"})
        assert props.color == ColorValue.from_system(SystemColor.RED)


class TestSymbolAliases:
    """Tests for SF Symbol name spellings."""

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["system_name", "symbol", "name", "icon"])
    def test_name_spellings_are_equivalent(self, key):
        props = SFSymbolProperties.model_validate({key: "heart.fill"})
        assert props.system_name == "heart.fill"

    @pytest.mark.unit
    def test_priority_order(self):
        props = SFSymbolProperties.model_validate({"icon": "d", "name": "c", "symbol": "b"})
        assert props.system_name == "b"

    @pytest.mark.unit
    def test_missing_name_uses_placeholder_glyph(self):
        assert SFSymbolProperties.model_validate({}).system_name == "questionmark"

    @pytest.mark.unit
    def test_empty_name_is_kept(self):
        assert SFSymbolProperties.model_validate({"system_name": ""}).system_name == ""

    @pytest.mark.unit
    def test_size_and_weight_borrowed_from_font(self):
        props = SFSymbolProperties.model_validate(
            {"symbol": "bolt", "font": {"size": 24, "weight": "bold"}}
        )
        assert props.font_size == 24
        assert props.font_weight == FontWeight.BOLD

    @pytest.mark.unit
    def test_direct_size_beats_font(self):
        props = SFSymbolProperties.model_validate(
            {"symbol": "bolt", "font_size": 12, "font": {"size": 24, "weight": "bold"}}
        )
        assert props.font_size == 12
        assert props.font_weight == FontWeight.BOLD

    @pytest.mark.unit
    def test_canonical_encoding_drops_aliases(self):
        node = decode_node({"type": "SFSymbol", "properties": {"icon": "star", "font": {"size": 9}}})
        assert encode_node(node) == {
            "type": "SFSymbol",
            "properties": {"system_name": "star", "font_size": 9.0},
        }


class TestGaugeDecoding:
    """Tests for Gauge value, style and tint spellings."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (0.25, 0.25),
            (1, 1.0),
            ("0.8", 0.8),
            (".75", 0.75),
            ("2.5e-1", 0.25),
            ("{{battery.level}}", 0.5),
            ("1_0", 0.5),
            (" 0.25 ", 0.5),
            (None, 0.5),
            (True, 0.5),
        ],
    )
    def test_value(self, raw, expected):
        node = decode_node({"type": "Gauge", "properties": {"value": raw}})
        assert node.properties.value == expected

    @pytest.mark.unit
    def test_missing_value_defaults(self):
        node = decode_node({"type": "Gauge", "properties": {}})
        assert node.properties.value == 0.5

    @pytest.mark.unit
    def test_style_string_is_gauge_style(self):
        node = decode_node({"type": "Gauge", "properties": {"value": 0.3, "style": "circular"}})
        assert node.properties.gauge_style == GaugeStyle.CIRCULAR
        assert node.properties.style is None

    @pytest.mark.unit
    def test_gauge_style_wins(self):
        node = decode_node(
            {"type": "Gauge", "properties": {"gauge_style": "linear", "style": "circular"}}
        )
        assert node.properties.gauge_style == GaugeStyle.LINEAR

    @pytest.mark.unit
    def test_invalid_gauge_style_falls_back_to_style(self):
        node = decode_node(
            {"type": "Gauge", "properties": {"gauge_style": "bar", "style": "accessoryLinear"}}
        )
        assert node.properties.gauge_style == GaugeStyle.ACCESSORY_LINEAR

    @pytest.mark.unit
    def test_style_object_is_style_bag(self):
        node = decode_node(
            {"type": "Gauge", "properties": {"style": {"opacity": 0.5}, "gauge_style": "linear"}}
        )
        assert node.properties.style == NodeStyle(opacity=0.5)
        assert node.properties.gauge_style == GaugeStyle.LINEAR

    @pytest.mark.unit
    def test_color_is_tint(self):
        node = decode_node({"type": "Gauge", "properties": {"color": "green"}})
        assert node.properties.tint == ColorValue.from_system(SystemColor.GREEN)

    @pytest.mark.unit
    def test_tint_wins_over_color(self):
        node = decode_node({"type": "Gauge", "properties": {"tint": "#00FF00", "color": "red"}})
        assert node.properties.tint == ColorValue.from_hex("#00FF00")


class TestContainerRelativeShape:
    """Tests for fill spellings and glass effect merging."""

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["fill", "fill_color", "background_color", "color"])
    def test_fill_spellings(self, key):
        node = decode_node({"type": "ContainerRelativeShape", "properties": {key: "#112233"}})
        assert node.properties.fill == ColorValue.from_hex("#112233")

    @pytest.mark.unit
    def test_fill_priority(self):
        node = decode_node(
            {"type": "ContainerRelativeShape", "properties": {"color": "red", "fill_color": "blue"}}
        )
        assert node.properties.fill == ColorValue.from_system(SystemColor.BLUE)

    @pytest.mark.unit
    def test_glass_effect_creates_style(self):
        node = decode_node({"type": "ContainerRelativeShape", "properties": {"glass_effect": True}})
        assert node.properties.style == NodeStyle(glass_effect=True)

    @pytest.mark.unit
    def test_glass_effect_merges_into_existing_style(self):
        node = decode_node(
            {
                "type": "ContainerRelativeShape",
                "properties": {"style": {"corner_radius": 8}, "glass_effect": False},
            }
        )
        assert node.properties.style == NodeStyle(corner_radius=8, glass_effect=False)

    @pytest.mark.unit
    def test_properties_optional(self):
        node = decode_node({"type": "ContainerRelativeShape"})
        assert isinstance(node, ContainerRelativeShapeNode)
        assert node.properties is None


class TestStacks:
    """Tests for stack children placement and style merging."""

    @pytest.mark.unit
    def test_canonical_children(self):
        node = decode_node({"type": "VStack", "properties": {"children": [_text("a")]}})
        assert isinstance(node, VStackNode)
        assert [c.properties.content for c in node.children] == ["a"]

    @pytest.mark.unit
    @pytest.mark.parametrize("properties", ["oops", 3, ["a"], None])
    def test_non_object_properties_fall_back_to_empty(self, properties):
        node = decode_node({"type": "VStack", "properties": properties})
        assert isinstance(node, VStackNode)
        assert node.children == []

    @pytest.mark.unit
    def test_non_object_properties_keep_hoisted_children(self):
        node = decode_node({"type": "ZStack", "properties": "oops", "children": [_text("a")]})
        assert [c.properties.content for c in node.children] == ["a"]

    @pytest.mark.unit
    def test_hoisted_children(self):
        node = decode_node({"type": "HStack", "children": [_text("a"), _text("b")]})
        assert isinstance(node, HStackNode)
        assert len(node.children) == 2

    @pytest.mark.unit
    def test_canonical_children_win_when_non_empty(self):
        node = decode_node(
            {
                "type": "ZStack",
                "properties": {"children": [_text("inner")]},
                "children": [_text("outer1"), _text("outer2")],
            }
        )
        assert [c.properties.content for c in node.children] == ["inner"]

    @pytest.mark.unit
    def test_empty_canonical_children_fall_back(self):
        node = decode_node(
            {
                "type": "VStack",
                "properties": {"children": [], "spacing": 2},
                "children": [_text("outer")],
            }
        )
        assert [c.properties.content for c in node.children] == ["outer"]
        assert node.properties.spacing == 2

    @pytest.mark.unit
    def test_properties_may_be_absent(self):
        node = decode_node({"type": "VStack"})
        assert node.children == []

    @pytest.mark.unit
    def test_glass_effect_merged(self):
        node = decode_node({"type": "VStack", "properties": {"glass_effect": True}})
        assert node.properties.style.glass_effect is True

    @pytest.mark.unit
    def test_unknown_alignment_dropped(self):
        node = decode_node({"type": "VStack", "properties": {"alignment": "middle"}})
        assert node.properties.alignment is None

    @pytest.mark.unit
    def test_baseline_alignment(self):
        node = decode_node({"type": "HStack", "properties": {"alignment": "firstTextBaseline"}})
        assert node.properties.alignment == StackAlignment.FIRST_TEXT_BASELINE

    @pytest.mark.unit
    def test_invalid_child_fails(self):
        with pytest.raises(DecodeError):
            decode_node({"type": "VStack", "properties": {"children": [{"type": "Button"}]}})


class TestOtherNodes:
    """Tests for wrappers, images, spacers and dispatch errors."""

    @pytest.mark.unit
    def test_frame_infinity(self):
        node = decode_node(
            {
                "type": "Frame",
                "properties": {"child": _text("x"), "max_width": "infinity", "height": 40},
            }
        )
        assert isinstance(node, FrameNode)
        assert node.properties.max_width == math.inf
        encoded = encode_node(node)
        assert encoded["properties"]["max_width"] == "infinity"
        assert encoded["properties"]["height"] == 40

    @pytest.mark.unit
    def test_frame_requires_child(self):
        with pytest.raises(DecodeError):
            decode_node({"type": "Frame", "properties": {"width": 10}})

    @pytest.mark.unit
    def test_padding(self):
        node = decode_node(
            {"type": "Padding", "properties": {"child": _text("x"), "edges": "horizontal"}}
        )
        assert isinstance(node, PaddingNode)
        assert node.properties.value is None
        assert node_children(node)[0].properties.content == "x"

    @pytest.mark.unit
    def test_image_source_unknown_type_is_asset(self):
        node = decode_node(
            {"type": "Image", "properties": {"source": {"type": "file", "value": "logo"}}}
        )
        assert isinstance(node, ImageNode)
        assert node.properties.source.type == ImageSourceType.ASSET

    @pytest.mark.unit
    def test_spacer_without_properties(self):
        node = decode_node({"type": "Spacer"})
        assert isinstance(node, SpacerNode)
        assert encode_node(node) == {"type": "Spacer"}

    @pytest.mark.unit
    def test_unknown_type_fails(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_node({"type": "Button", "properties": {}})
        assert exc_info.value.errors

    @pytest.mark.unit
    def test_text_requires_properties(self):
        with pytest.raises(DecodeError):
            decode_node({"type": "Text"})

    @pytest.mark.unit
    def test_malformed_json(self):
        with pytest.raises(DecodeError, match="Malformed JSON"):
            decode_node("{not json")

    @pytest.mark.unit
    def test_leaf_nodes_have_no_children(self):
        assert TextNode(properties=TextProperties(content="x")).children == []
        assert GaugeNode.model_validate({"type": "Gauge", "properties": {}}).children == []


# =============================================================================
# Config envelope
# =============================================================================


class TestWidgetConfig:
    """Tests for config decoding, encoding and lifecycle helpers."""

    @pytest.mark.unit
    def test_decode(self):
        config = decode_config(_config(_text("hello"), description="d"))
        assert config.id == UUID("6F9619FF-8B86-D011-B42D-00C04FC964FF")
        assert config.family == WidgetFamily.SYSTEM_SMALL
        assert config.description == "d"

    @pytest.mark.unit
    def test_defaults_when_absent(self):
        config = decode_config({"name": "n", "root": _text("x")})
        assert isinstance(config.id, UUID)
        assert config.schema_version == CURRENT_SCHEMA_VERSION
        assert config.family == WidgetFamily.SYSTEM_SMALL

    @pytest.mark.unit
    def test_missing_root_fails(self):
        with pytest.raises(DecodeError, match="root"):
            decode_config({"name": "n"})

    @pytest.mark.unit
    def test_round_trip(self):
        raw = _config(
            {
                "type": "VStack",
                "children": [
                    {"type": "Text", "properties": {"text": "{{weather.temperature}}", "color": "red"}},
                    {"type": "Gauge", "properties": {"value": "0.4", "style": "circular"}},
                    {"type": "Frame", "properties": {"child": {"type": "Divider"}, "max_width": "infinity"}},
                ],
            },
            metadata={
                "created_at": "2026-01-02T03:04:05Z",
                "tags": ["weather"],
                "thumbnail_data": "aGVsbG8=",
            },
            data_bindings={"temp": {"source": "weather", "field": "temperature", "fallback": "--"}},
        )
        config = decode_config(raw)
        assert decode_config(encode_config(config)) == config
        assert decode_config(dumps_config(config)) == config

    @pytest.mark.unit
    def test_metadata_types(self):
        config = decode_config(
            _config(
                _text("x"),
                metadata={
                    "created_at": "2026-01-02T03:04:05Z",
                    "conversation_id": "6F9619FF-8B86-D011-B42D-00C04FC964FF",
                    "thumbnail_data": "aGVsbG8=",
                },
            )
        )
        assert config.metadata.created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert config.metadata.thumbnail_data == b"hello"

    @pytest.mark.unit
    def test_data_binding_key(self):
        config = decode_config(
            _config(_text("x"), data_bindings={"b": {"source": "date_time", "field": "time"}})
        )
        binding = config.data_bindings["b"]
        assert binding.source == DataSource.DATE_TIME
        assert binding.key == "date_time.time"

    @pytest.mark.unit
    def test_migrate_normalizes_version(self):
        config = decode_config(_config(_text("x"), schema_version="0.9"))
        migrated = migrate(config)
        assert migrated.schema_version == CURRENT_SCHEMA_VERSION
        assert migrated.id == config.id

    @pytest.mark.unit
    def test_migrate_current_is_noop(self):
        config = decode_config(_config(_text("x")))
        assert migrate(config) == config

    @pytest.mark.unit
    def test_touch_keeps_id(self):
        config = decode_config(_config(_text("x")))
        now = datetime(2026, 5, 1, tzinfo=timezone.utc)
        touched = touch(config, now)
        assert touched.id == config.id
        assert touched.metadata.updated_at == now
        assert touched.metadata.created_at == now


class TestTreeHelpers:
    """Tests for tree traversal."""

    @pytest.mark.unit
    def test_iter_and_count(self):
        node = decode_node(
            {
                "type": "VStack",
                "children": [
                    _text("a"),
                    {"type": "Padding", "properties": {"child": _text("b")}},
                ],
            }
        )
        types = [n.type for n in iter_nodes(node)]
        assert types == ["VStack", "Text", "Padding", "Text"]
        assert count_nodes(node) == 4

    @pytest.mark.unit
    def test_wrapper_children_are_singletons(self):
        inner = TextNode(properties=TextProperties(content="x"))
        assert PaddingNode(properties=PaddingProperties(child=inner)).children == [inner]


# =============================================================================
# Generator output parsing
# =============================================================================


class TestExtractJson:
    """Tests for JSON extraction from generator output."""

    @pytest.mark.unit
    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"a": 1}\n```\nEnjoy!'
        assert extract_json(text) == '{"a": 1}'

    @pytest.mark.unit
    def test_brace_span(self):
        text = 'Sure! {"a": {"b": 2}} Hope that helps.'
        assert extract_json(text) == '{"a": {"b": 2}}'

    @pytest.mark.unit
    def test_plain_text(self):
        assert extract_json("no json here") == "no json here"

    @pytest.mark.unit
    def test_unterminated_fence_uses_braces(self):
        text = '```json\n{"a": 1}'
        assert extract_json(text) == '{"a": 1}'

    @pytest.mark.unit
    def test_parse_widget_config_migrates(self):
        text = "```json\n" + '{"name": "n", "schema_version": "0.1", "root": {"type": "Spacer"}}' + "\n```"
        config = parse_widget_config(text)
        assert config.schema_version == CURRENT_SCHEMA_VERSION
        assert isinstance(config.root, SpacerNode)

    @pytest.mark.unit
    def test_parse_widget_config_failure(self):
        with pytest.raises(DecodeError):
            parse_widget_config("I could not build that widget.")


class TestDirectConstruction:
    """Tests for building configs in code."""

    @pytest.mark.unit
    def test_construct_and_encode(self):
        config = WidgetConfig(name="n", root=SpacerNode())
        encoded = encode_config(config)
        assert encoded["root"] == {"type": "Spacer"}
        assert encoded["schema_version"] == CURRENT_SCHEMA_VERSION
        assert encoded["family"] == "systemSmall"
        assert "metadata" not in encoded
