"""Unit tests for render module."""

import base64
import math

import pytest

from widgy.schema import (
    ContainerRelativeShapeNode,
    ContainerRelativeShapeProperties,
    DividerNode,
    DividerProperties,
    FrameNode,
    FrameProperties,
    GaugeNode,
    GaugeProperties,
    GaugeStyle,
    HStackNode,
    ImageNode,
    ImageProperties,
    ImageSource,
    ImageSourceType,
    PaddingEdges,
    PaddingNode,
    PaddingProperties,
    SFSymbolNode,
    SFSymbolProperties,
    SpacerNode,
    StackAlignment,
    StackProperties,
    TextNode,
    TextProperties,
    VStackNode,
    ZStackAlignment,
    ZStackNode,
    ZStackProperties,
    decode_node,
)
from widgy.style import (
    BackgroundValue,
    BorderDescriptor,
    ColorValue,
    FontDescriptor,
    FontStyle,
    FontWeight,
    GradientDescriptor,
    GradientPoint,
    GradientType,
    NodeStyle,
    SemanticColor,
    ShadowDescriptor,
    SystemColor,
)

from . import (
    CLEAR,
    DEFAULT_PADDING,
    ERROR_SYMBOL,
    HAIRLINE_THICKNESS,
    PLACEHOLDER_SYMBOL,
    RGBA,
    SYSTEM_COLORS,
    DynamicColor,
    RenderContext,
    ResolvedFont,
    VisualKind,
    apply_style,
    color_from_hex,
    render,
    render_config,
    resolve_background,
    resolve_color,
    resolve_font,
)
from .lib import VisualNode


def _text(content: str, **kwargs) -> TextNode:
    return TextNode(properties=TextProperties(content=content, **kwargs))


class TestColors:
    """Tests for color resolution."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#FF0000", RGBA(1.0, 0.0, 0.0)),
            ("#F00", RGBA(1.0, 0.0, 0.0)),
            ("#0F0F", RGBA(0.0, 1.0, 0.0, 1.0)),
            ("  #0000FF\n", RGBA(0.0, 0.0, 1.0)),
            ("FFFFFF00", RGBA(1.0, 1.0, 1.0, 0.0)),
        ],
    )
    def test_hex_lengths(self, value, expected):
        assert color_from_hex(value) == expected

    @pytest.mark.unit
    def test_hex_eight_digit_alpha(self):
        color = color_from_hex("#00000080")
        assert color.alpha == pytest.approx(128 / 255)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["#12345", "", "#FF00000"])
    def test_bad_length_is_clear(self, value):
        assert color_from_hex(value) == CLEAR

    @pytest.mark.unit
    def test_non_hex_digits_read_as_zero(self):
        assert color_from_hex("#GGGGGG") == RGBA(0.0, 0.0, 0.0)

    @pytest.mark.unit
    def test_to_hex(self):
        assert RGBA(1.0, 0.0, 0.0).to_hex() == "#FF0000"
        assert RGBA(0.0, 0.0, 0.0, 0.0).to_hex() == "#00000000"

    @pytest.mark.unit
    def test_system_color(self):
        paint = resolve_color(ColorValue.from_system(SystemColor.ORANGE))
        assert paint == SYSTEM_COLORS[SystemColor.ORANGE]

    @pytest.mark.unit
    def test_semantic_color_is_dynamic(self):
        assert resolve_color(ColorValue.from_semantic(SemanticColor.SECONDARY_LABEL)) == DynamicColor(
            "secondaryLabel"
        )
        assert resolve_color(ColorValue.from_semantic(SemanticColor.ACCENT)) == DynamicColor(
            "accentColor"
        )

    @pytest.mark.unit
    def test_every_system_color_resolves(self):
        for color in SystemColor:
            assert isinstance(resolve_color(ColorValue.from_system(color)), RGBA)


class TestBackgrounds:
    """Tests for background and gradient resolution."""

    @pytest.mark.unit
    def test_solid(self):
        fill = resolve_background(BackgroundValue.model_validate("#000000"))
        assert fill == RGBA(0.0, 0.0, 0.0)

    @pytest.mark.unit
    def test_linear_defaults(self):
        gradient = resolve_background(
            BackgroundValue.from_gradient(GradientDescriptor(colors=["red", "blue"]))
        )
        assert gradient.type == GradientType.LINEAR
        assert gradient.start == (0.5, 0.0)
        assert gradient.end == (0.5, 1.0)
        assert len(gradient.colors) == 2

    @pytest.mark.unit
    def test_radial_centered_on_start(self):
        descriptor = GradientDescriptor(
            type=GradientType.RADIAL,
            colors=["red"],
            start_point=GradientPoint(x=0.2, y=0.3),
        )
        gradient = resolve_background(BackgroundValue.from_gradient(descriptor))
        assert gradient.start == (0.2, 0.3)
        assert gradient.start_radius == 0.0
        assert gradient.end_radius == 200.0

    @pytest.mark.unit
    def test_angular_has_no_end(self):
        descriptor = GradientDescriptor(type=GradientType.ANGULAR, colors=["red"])
        gradient = resolve_background(BackgroundValue.from_gradient(descriptor))
        assert gradient.end is None
        assert gradient.start == (0.5, 0.0)


class TestFonts:
    """Tests for font resolution."""

    @pytest.mark.unit
    def test_named_style_wins_over_size(self):
        font = resolve_font(FontDescriptor(style=FontStyle.TITLE, size=40, weight=FontWeight.BOLD))
        assert font == ResolvedFont(text_style=FontStyle.TITLE, weight=FontWeight.BOLD)

    @pytest.mark.unit
    def test_size_only(self):
        assert resolve_font(FontDescriptor(size=22)) == ResolvedFont(size=22)

    @pytest.mark.unit
    def test_empty_descriptor_is_body(self):
        assert resolve_font(FontDescriptor()) == ResolvedFont(text_style=FontStyle.BODY)

    @pytest.mark.unit
    def test_absent_font(self):
        assert resolve_font(None) is None


class TestStylePipeline:
    """Tests for the fixed order of style modifiers."""

    @pytest.mark.unit
    def test_full_order(self):
        style = NodeStyle(
            background=BackgroundValue.model_validate("#FFFFFF"),
            corner_radius=12,
            opacity=0.8,
            shadow=ShadowDescriptor(radius=4),
            border=BorderDescriptor(color=ColorValue.model_validate("red"), width=2),
            glass_effect=True,
        )
        visual = apply_style(VisualNode(VisualKind.SPACER), style)
        assert visual.modifier_names == ["background", "clip", "opacity", "shadow", "stroke", "glass"]
        assert visual.modifier("stroke").params["corner_radius"] == 12
        assert visual.modifier("glass").params["corner_radius"] == 16.0

    @pytest.mark.unit
    def test_shadow_defaults(self):
        visual = apply_style(VisualNode(VisualKind.SPACER), NodeStyle(shadow=ShadowDescriptor(radius=3)))
        shadow = visual.modifier("shadow").params
        assert shadow["color"] == RGBA(0.0, 0.0, 0.0, 0.33)
        assert (shadow["x"], shadow["y"]) == (0.0, 0.0)

    @pytest.mark.unit
    def test_border_without_radius(self):
        style = NodeStyle(border=BorderDescriptor(color=ColorValue.model_validate("blue")))
        visual = apply_style(VisualNode(VisualKind.SPACER), style)
        assert visual.modifier_names == ["border"]
        assert visual.modifier("border").params["width"] == 1.0

    @pytest.mark.unit
    def test_glass_false_is_ignored(self):
        visual = apply_style(VisualNode(VisualKind.SPACER), NodeStyle(glass_effect=False))
        assert visual.modifiers == []

    @pytest.mark.unit
    def test_no_style(self):
        assert apply_style(VisualNode(VisualKind.SPACER), None).modifiers == []


class TestStacks:
    """Tests for stack rendering and alignment mapping."""

    @pytest.mark.unit
    def test_vstack(self):
        node = VStackNode(
            properties=StackProperties(
                children=[_text("a"), _text("b")],
                alignment=StackAlignment.LEADING,
                spacing=4,
            )
        )
        visual = render(node)
        assert visual.kind == VisualKind.VSTACK
        assert visual.params == {"alignment": "leading", "spacing": 4}
        assert [c.params["text"] for c in visual.children] == ["a", "b"]

    @pytest.mark.unit
    def test_vstack_ignores_vertical_alignment(self):
        node = VStackNode(properties=StackProperties(alignment=StackAlignment.TOP))
        assert render(node).params["alignment"] == "center"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "alignment,expected",
        [
            (StackAlignment.TOP, "top"),
            (StackAlignment.FIRST_TEXT_BASELINE, "firstTextBaseline"),
            (StackAlignment.LEADING, "center"),
            (None, "center"),
        ],
    )
    def test_hstack_alignment(self, alignment, expected):
        node = HStackNode(properties=StackProperties(alignment=alignment))
        assert render(node).params["alignment"] == expected

    @pytest.mark.unit
    def test_zstack_alignment(self):
        node = ZStackNode(properties=ZStackProperties(alignment=ZStackAlignment.BOTTOM_TRAILING))
        assert render(node).params["alignment"] == "bottomTrailing"
        assert render(ZStackNode()).params["alignment"] == "center"


class TestText:
    """Tests for text rendering."""

    @pytest.mark.unit
    def test_bindings_substituted(self):
        visual = render(_text("{{battery.level}} left"), RenderContext.preview())
        assert visual.params["text"] == "85% left"

    @pytest.mark.unit
    def test_unmapped_binding_left_literal(self):
        visual = render(_text("{{unknown.key}}"), RenderContext.preview())
        assert visual.params["text"] == "{{unknown.key}}"

    @pytest.mark.unit
    def test_substitution_is_single_pass(self):
        context = RenderContext({"a.b": "{{c.d}}", "c.d": "nope"})
        assert render(_text("{{a.b}}"), context).params["text"] == "{{c.d}}"

    @pytest.mark.unit
    def test_modifier_order(self):
        node = _text(
            "hi",
            font=FontDescriptor(style=FontStyle.CAPTION),
            color=ColorValue.model_validate("red"),
            line_limit=2,
            style=NodeStyle(opacity=0.5),
        )
        visual = render(node)
        assert visual.modifier_names == [
            "font",
            "foreground",
            "line_limit",
            "minimum_scale_factor",
            "opacity",
        ]
        assert visual.modifier("line_limit").params["value"] == 2

    @pytest.mark.unit
    def test_scale_factor_default(self):
        assert render(_text("x")).modifier("minimum_scale_factor").params["value"] == 1.0


class TestLeaves:
    """Tests for symbols, images, gauges and other leaves."""

    @pytest.mark.unit
    def test_symbol_font_defaults(self):
        visual = render(SFSymbolNode(properties=SFSymbolProperties(system_name="star")))
        assert visual.params["name"] == "star"
        assert visual.modifier("font").params["font"] == ResolvedFont(size=17.0, weight=FontWeight.REGULAR)

    @pytest.mark.unit
    def test_asset_image(self):
        node = ImageNode(properties=ImageProperties(source=ImageSource(type=ImageSourceType.ASSET, value="logo")))
        visual = render(node)
        assert visual.kind == VisualKind.IMAGE
        assert visual.params == {"asset": "logo"}
        assert visual.modifier("aspect_ratio").params["content_mode"] == "fit"

    @pytest.mark.unit
    def test_remote_image_is_placeholder(self):
        source = ImageSource(type=ImageSourceType.REMOTE, value="https://example.com/a.png")
        visual = render(ImageNode(properties=ImageProperties(source=source)))
        assert visual.kind == VisualKind.SYMBOL
        assert visual.params["name"] == PLACEHOLDER_SYMBOL
        assert visual.params["url"] == "https://example.com/a.png"

    @pytest.mark.unit
    def test_data_image_decoded(self):
        payload = base64.b64encode(b"\x89PNG fake").decode()
        source = ImageSource(type=ImageSourceType.DATA, value=payload)
        visual = render(ImageNode(properties=ImageProperties(source=source, corner_radius=8)))
        assert visual.params["data"] == b"\x89PNG fake"
        assert "clip" in visual.modifier_names

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", ["not base64!!", ""])
    def test_bad_data_image_is_placeholder(self, payload):
        source = ImageSource(type=ImageSourceType.DATA, value=payload)
        visual = render(ImageNode(properties=ImageProperties(source=source)))
        assert visual.kind == VisualKind.SYMBOL
        assert visual.params["name"] == PLACEHOLDER_SYMBOL

    @pytest.mark.unit
    def test_spacer(self):
        assert render(SpacerNode()).params == {"min_length": None}

    @pytest.mark.unit
    def test_plain_divider(self):
        visual = render(DividerNode())
        assert visual.kind == VisualKind.DIVIDER
        assert visual.modifiers == []

    @pytest.mark.unit
    def test_colored_divider_default_thickness(self):
        node = DividerNode(properties=DividerProperties(color=ColorValue.model_validate("red")))
        visual = render(node)
        assert visual.modifier_names == ["overlay", "frame"]
        assert visual.modifier("frame").params["height"] == HAIRLINE_THICKNESS

    @pytest.mark.unit
    def test_colored_divider_thickness(self):
        node = DividerNode(
            properties=DividerProperties(color=ColorValue.model_validate("red"), thickness=3)
        )
        assert render(node).modifier("frame").params["height"] == 3

    @pytest.mark.unit
    def test_gauge_range_and_label(self):
        node = GaugeNode(
            properties=GaugeProperties(
                value=40,
                max_value=100,
                label="Steps",
                current_value_label="{{health.steps}}",
            )
        )
        visual = render(node, RenderContext.preview())
        assert visual.params["range"] == (0.0, 100)
        assert visual.params["current_value_label"] == "4,328"
        assert visual.params["label"] == "Steps"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "style,expected",
        [
            (GaugeStyle.LINEAR, "linearCapacity"),
            (GaugeStyle.CIRCULAR, "accessoryCircularCapacity"),
            (GaugeStyle.ACCESSORY_CIRCULAR, "accessoryCircularCapacity"),
            (GaugeStyle.ACCESSORY_LINEAR, "accessoryLinear"),
            (GaugeStyle.AUTOMATIC, "automatic"),
            (None, "automatic"),
        ],
    )
    def test_gauge_styles(self, style, expected):
        node = GaugeNode(properties=GaugeProperties(gauge_style=style))
        assert render(node).modifier("gauge_style").params["value"] == expected

    @pytest.mark.unit
    def test_shape_fill_defaults_to_clear(self):
        visual = render(ContainerRelativeShapeNode())
        assert visual.kind == VisualKind.SHAPE
        assert visual.modifier("fill").params["fill"] == CLEAR

    @pytest.mark.unit
    def test_shape_fill(self):
        node = ContainerRelativeShapeNode(
            properties=ContainerRelativeShapeProperties(fill=ColorValue.model_validate("#000"))
        )
        assert render(node).modifier("fill").params["fill"] == RGBA(0.0, 0.0, 0.0)


class TestWrappers:
    """Tests for frame and padding."""

    @pytest.mark.unit
    def test_frame_two_stage(self):
        node = FrameNode(
            properties=FrameProperties(
                child=_text("x"),
                width=100,
                max_height=50,
                alignment=ZStackAlignment.TOP_LEADING,
                style=NodeStyle(opacity=0.5),
            )
        )
        visual = render(node)
        assert visual.kind == VisualKind.TEXT
        names = visual.modifier_names
        assert names.index("flexible_frame") < names.index("frame") < names.index("opacity")
        assert visual.modifier("flexible_frame").params["max_height"] == 50
        assert visual.modifier("flexible_frame").params["alignment"] == "topLeading"
        assert visual.modifier("frame").params == {"width": 100, "height": None}

    @pytest.mark.unit
    def test_frame_infinity(self):
        node = decode_node(
            {
                "type": "Frame",
                "properties": {"child": {"type": "Spacer"}, "max_width": "infinity"},
            }
        )
        assert render(node).modifier("flexible_frame").params["max_width"] == math.inf

    @pytest.mark.unit
    def test_padding_defaults(self):
        visual = render(PaddingNode(properties=PaddingProperties(child=_text("x"))))
        assert visual.modifier("padding").params == {"edges": "all", "amount": DEFAULT_PADDING}

    @pytest.mark.unit
    def test_padding_edges(self):
        node = PaddingNode(
            properties=PaddingProperties(child=_text("x"), edges=PaddingEdges.HORIZONTAL, value=8)
        )
        assert render(node).modifier("padding").params == {"edges": "horizontal", "amount": 8}


class TestRenderConfig:
    """Tests for the config entry point."""

    @pytest.mark.unit
    def test_valid_config_renders_tree(self, weather_widget):
        visual = render_config(weather_widget, RenderContext.preview(), show_errors=True)
        assert visual.kind == VisualKind.VSTACK
        assert visual.modifier_names == ["glass"]
        assert visual.children[2].params["text"] == "24°"

    @pytest.mark.unit
    def test_invalid_config_renders_tree_by_default(self, make_config):
        visual = render_config(make_config(_text("")))
        assert visual.kind == VisualKind.TEXT

    @pytest.mark.unit
    def test_error_summary(self, make_config):
        root = VStackNode(properties=StackProperties(children=[_text("") for _ in range(5)]))
        visual = render_config(make_config(root), show_errors=True)
        assert visual.kind == VisualKind.VSTACK
        assert visual.params["spacing"] == 8.0
        icon, *lines = visual.children
        assert icon.params["name"] == ERROR_SYMBOL
        assert icon.modifier("foreground").params["color"] == SYSTEM_COLORS[SystemColor.ORANGE]
        assert len(lines) == 3
        assert lines[0].params["text"] == "Text node has empty content"
        assert visual.modifier_names == ["padding"]

    @pytest.mark.unit
    def test_samples_render(self, sample_configs):
        for config in sample_configs:
            assert render_config(config, RenderContext.preview()).kind == VisualKind.VSTACK

    @pytest.mark.unit
    def test_context_flag_threaded(self, simple_clock):
        context = RenderContext(is_widget_extension=True)
        visual = render_config(simple_clock, context)
        assert visual.children[0].params["text"] == "{{date_time.time}}"


class TestRenderContext:
    """Tests for RenderContext."""

    @pytest.mark.unit
    def test_pattern_reused_until_keys_change(self):
        context = RenderContext(binding_values={"a.b": "1"})
        assert context.resolve_bindings("{{a.b}}") == "1"
        pattern = context._pattern
        context.binding_values["a.b"] = "2"
        assert context.resolve_bindings("{{a.b}}") == "2"
        assert context._pattern is pattern
        context.binding_values["calendar.next.title"] = "Standup"
        assert context.resolve_bindings("{{a.b}} {{calendar.next.title}}") == "2 Standup"
        assert context._pattern is not pattern

    @pytest.mark.unit
    def test_default_is_empty(self):
        context = RenderContext.default()
        assert context.binding_values == {}
        assert context.is_widget_extension is False

    @pytest.mark.unit
    def test_preview_is_a_copy(self):
        context = RenderContext.preview()
        context.binding_values["date_time.time"] = "changed"
        assert RenderContext.preview().binding_values["date_time.time"] == "9:41"

    @pytest.mark.unit
    def test_render_rejects_non_nodes(self):
        with pytest.raises(TypeError):
            render("not a node")
