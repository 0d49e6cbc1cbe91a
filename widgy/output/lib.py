"""Output formatting for widget visualization.

Generates human-readable text representations of widget trees and their
rendered visual trees for CLI output and debugging.
"""

from dataclasses import dataclass
from collections.abc import Callable
from typing import Any

from widgy.render import RGBA, DynamicColor, Gradient, Modifier, ResolvedFont, VisualNode
from widgy.schema import (
    FrameNode,
    GaugeNode,
    ImageNode,
    PaddingNode,
    SFSymbolNode,
    TextNode,
    WidgetConfig,
    WidgetNode,
    node_children,
)
from widgy.validation import ValidationResult

MAX_LABEL_LENGTH = 40


@dataclass
class WidgetOutput:
    """Complete text output for one config.

    Attributes:
        widget_tree: Tree of schema nodes.
        visual_tree: Tree of rendered primitives.
        validation: Validation outcome.
    """

    widget_tree: str
    visual_tree: str
    validation: ValidationResult

    def to_text(self) -> str:
        sections = [self.widget_tree, "", self.visual_tree]
        summary = format_validation(self.validation)
        if summary:
            sections += ["", summary]
        return "\n".join(sections)


def _truncate(text: str) -> str:
    text = text.replace("\n", "\\n")
    if len(text) > MAX_LABEL_LENGTH:
        return text[: MAX_LABEL_LENGTH - 3] + "..."
    return text


def _walk(
    node: Any,
    lines: list[str],
    prefix: str,
    is_last: bool,
    label: Callable[[Any], str],
    children: Callable[[Any], list],
    is_root: bool = False,
) -> None:
    if is_root:
        connector = ""
        child_prefix = ""
    else:
        connector = "└── " if is_last else "├── "
        child_prefix = prefix + ("    " if is_last else "│   ")

    lines.append(f"{prefix}{connector}{label(node)}")

    kids = children(node)
    for i, child in enumerate(kids):
        _walk(child, lines, child_prefix, i == len(kids) - 1, label, children)


# =============================================================================
# Widget trees
# =============================================================================


def _dimension(value: float | None) -> str:
    return "auto" if value is None else f"{value:g}"


def _widget_label(node: WidgetNode) -> str:
    attrs: list[str] = []
    if isinstance(node, TextNode):
        attrs.append(repr(_truncate(node.properties.content)))
    elif isinstance(node, SFSymbolNode):
        attrs.append(node.properties.system_name)
    elif isinstance(node, ImageNode):
        attrs.append(node.properties.source.type.value)
    elif isinstance(node, GaugeNode):
        attrs.append(f"value={node.properties.value:g}")
    elif isinstance(node, FrameNode):
        props = node.properties
        if props.width is not None or props.height is not None:
            attrs.append(f"{_dimension(props.width)}x{_dimension(props.height)}")
    elif isinstance(node, PaddingNode) and node.properties.value is not None:
        attrs.append(f"{node.properties.value:g}")
    return f"{node.type} [{', '.join(attrs)}]" if attrs else node.type


def format_widget_tree(node: WidgetNode) -> str:
    """Format a widget node tree.

    Example output:
        VStack
        ├── HStack
        │   ├── SFSymbol [sun.max.fill]
        │   └── Spacer
        └── Text ['{{weather.temperature}}']
    """
    lines: list[str] = []
    _walk(node, lines, "", True, _widget_label, node_children, is_root=True)
    return "\n".join(lines)


# =============================================================================
# Visual trees
# =============================================================================


def _format_value(value: Any) -> str:
    if isinstance(value, RGBA):
        return value.to_hex()
    if isinstance(value, DynamicColor):
        return value.role
    if isinstance(value, Gradient):
        return f"{value.type.value}-gradient({', '.join(_format_value(c) for c in value.colors)})"
    if isinstance(value, ResolvedFont):
        parts = [value.text_style.value if value.text_style else f"{value.size:g}pt"]
        if value.weight:
            parts.append(value.weight.value)
        if value.design:
            parts.append(value.design.value)
        return " ".join(parts)
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, str):
        return repr(_truncate(value))
    return str(value)


def _format_modifier(modifier: Modifier) -> str:
    params = [f"{k}={_format_value(v)}" for k, v in modifier.params.items() if v is not None]
    return f"{modifier.name}({', '.join(params)})" if params else modifier.name


def _visual_label(visual: VisualNode) -> str:
    params = [f"{k}={_format_value(v)}" for k, v in visual.params.items() if v is not None]
    label = visual.kind.value
    if params:
        label += f" [{', '.join(params)}]"
    if visual.modifiers:
        label += " ." + " .".join(_format_modifier(m) for m in visual.modifiers)
    return label


def format_visual_tree(visual: VisualNode) -> str:
    """Format a rendered visual tree.

    Example output:
        vstack [alignment='leading', spacing=4] .glass(shape='roundedRectangle', corner_radius=16)
        ├── symbol [name='star'] .font(font=17pt regular)
        └── text [text='24°'] .font(font=largeTitle bold) .line_limit .minimum_scale_factor(value=1)
    """
    lines: list[str] = []
    _walk(visual, lines, "", True, _visual_label, lambda v: v.children, is_root=True)
    return "\n".join(lines)


def format_validation(result: ValidationResult) -> str:
    """Error and warning lines, or an empty string when there are none."""
    lines = [f"error: {e.path}: {e.message}" for e in result.errors]
    lines += [f"warning: {w.path}: {w.message}" for w in result.warnings]
    return "\n".join(lines)


def generate_output(config: WidgetConfig, visual: VisualNode, validation: ValidationResult) -> WidgetOutput:
    """Bundle the text views of a config and its rendering."""
    return WidgetOutput(
        widget_tree=format_widget_tree(config.root),
        visual_tree=format_visual_tree(visual),
        validation=validation,
    )


__all__ = [
    "WidgetOutput",
    "format_widget_tree",
    "format_visual_tree",
    "format_validation",
    "generate_output",
]
