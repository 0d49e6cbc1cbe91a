"""Tests for output module."""

import pytest

from widgy.output import (
    format_validation,
    format_visual_tree,
    format_widget_tree,
    generate_output,
)
from widgy.render import RenderContext, VisualKind, VisualNode, render
from widgy.schema import (
    FrameNode,
    FrameProperties,
    SpacerNode,
    TextNode,
    TextProperties,
)
from widgy.validation import validate


class TestFormatWidgetTree:
    """Tests for format_widget_tree function."""

    @pytest.mark.unit
    def test_single_node(self):
        """Test formatting single node."""
        result = format_widget_tree(TextNode(properties=TextProperties(content="Hello")))
        assert result == "Text ['Hello']"

    @pytest.mark.unit
    def test_nested_tree(self, weather_widget):
        """Test formatting nested tree."""
        lines = format_widget_tree(weather_widget.root).splitlines()
        assert lines[0] == "VStack"
        assert lines[1] == "├── HStack"
        assert lines[2] == "│   ├── SFSymbol [sun.max.fill]"
        assert lines[3] == "│   └── Spacer"
        assert lines[-1] == "└── Text ['{{weather.condition}}']"

    @pytest.mark.unit
    def test_long_text_truncated(self):
        node = TextNode(properties=TextProperties(content="x" * 100))
        assert "..." in format_widget_tree(node)

    @pytest.mark.unit
    def test_frame_dimensions(self):
        node = FrameNode(properties=FrameProperties(child=SpacerNode(), width=40))
        lines = format_widget_tree(node).splitlines()
        assert lines == ["Frame [40xauto]", "└── Spacer"]


class TestFormatVisualTree:
    """Tests for format_visual_tree function."""

    @pytest.mark.unit
    def test_bare_primitive(self):
        assert format_visual_tree(VisualNode(VisualKind.SPACER)) == "spacer"

    @pytest.mark.unit
    def test_modifiers_listed_in_order(self):
        visual = VisualNode(VisualKind.TEXT, {"text": "hi"}).add("opacity", value=0.5).add("resizable")
        assert format_visual_tree(visual) == "text [text='hi'] .opacity(value=0.5) .resizable"

    @pytest.mark.unit
    def test_rendered_sample(self, battery_widget):
        visual = render(battery_widget.root, RenderContext.preview())
        result = format_visual_tree(visual)
        assert result.startswith("vstack [alignment='leading', spacing=8]")
        assert "gauge" in result
        assert "text [text='85%']" in result
        assert "gauge_style(value='linearCapacity')" in result
        assert "└── " in result


class TestGenerateOutput:
    """Tests for generate_output function."""

    @pytest.mark.unit
    def test_valid_config(self, simple_clock):
        output = generate_output(simple_clock, render(simple_clock.root), validate(simple_clock))
        text = output.to_text()
        assert text.startswith("VStack")
        assert "error:" not in text

    @pytest.mark.unit
    def test_validation_lines(self, make_config):
        config = make_config(TextNode(properties=TextProperties(content="")), schema_version="0.1")
        summary = format_validation(validate(config))
        assert "error: root: Text node has empty content" in summary
        assert "warning: root: Schema version 0.1 differs from current 1.0" in summary
