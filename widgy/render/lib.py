"""Widget tree renderer.

Interprets a `WidgetNode` tree into a toolkit-neutral `VisualNode` tree:
each widget node becomes one primitive (a stack, a text run, a symbol, ...)
and its layout and decoration become an ordered list of `Modifier`s, in the
order a host toolkit must apply them.

Example:
    >>> from widgy.render import RenderContext, render_config
    >>> visual = render_config(config, RenderContext.preview())
    >>> visual.kind
    <VisualKind.VSTACK: 'vstack'>
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from widgy.bindings import compile_bindings, resolve_text
from widgy.schema import (
    ContainerRelativeShapeNode,
    DividerNode,
    FrameNode,
    GaugeNode,
    GaugeStyle,
    HStackNode,
    ImageContentMode,
    ImageNode,
    ImageSourceType,
    PaddingEdges,
    PaddingNode,
    SFSymbolNode,
    SpacerNode,
    StackAlignment,
    TextNode,
    VStackNode,
    WidgetConfig,
    WidgetNode,
    ZStackAlignment,
    ZStackNode,
)
from widgy.style import FontStyle, NodeStyle, SemanticColor, SystemColor
from widgy.validation import validate

from .colors import (
    BLACK,
    CLEAR,
    SYSTEM_COLORS,
    ResolvedFont,
    resolve_background,
    resolve_color,
    resolve_font,
    resolve_semantic,
    symbol_font,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_SYMBOL = "photo"
ERROR_SYMBOL = "exclamationmark.triangle"
MAX_SHOWN_ERRORS = 3
DEFAULT_PADDING = 16.0
HAIRLINE_THICKNESS = 0.5
GLASS_CORNER_RADIUS = 16.0
SHADOW_OPACITY = 0.33


# =============================================================================
# Render context
# =============================================================================


PREVIEW_VALUES: dict[str, str] = {
    "date_time.time": "9:41",
    "date_time.date": "Mon, Feb 23",
    "date_time.day": "Monday",
    "date_time.month": "February",
    "date_time.year": "2026",
    "date_time.hour": "9",
    "date_time.minute": "41",
    "weather.temperature": "24°",
    "weather.condition": "Sunny",
    "weather.high": "28°",
    "weather.low": "19°",
    "weather.icon": "sun.max.fill",
    "battery.level": "85%",
    "battery.state": "Charging",
    "calendar.next.title": "Team Standup",
    "calendar.next.time": "10:00 AM",
    "calendar.next.location": "Zoom",
    "health.steps": "4,328",
    "health.calories": "312",
    "location.city": "Singapore",
    "location.country": "SG",
}


@dataclass
class RenderContext:
    """Values threaded through a render pass.

    Attributes:
        binding_values: Resolved ``"source.field" -> display value`` map.
        is_widget_extension: True when drawing inside a widget host rather
            than an in-app preview.
    """

    binding_values: dict[str, str] = field(default_factory=dict)
    is_widget_extension: bool = False
    _pattern: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)
    _pattern_keys: frozenset[str] = field(default=frozenset(), init=False, repr=False, compare=False)

    @classmethod
    def default(cls) -> "RenderContext":
        return cls()

    @classmethod
    def preview(cls) -> "RenderContext":
        """Context with fixed sample values for in-app previews."""
        return cls(binding_values=dict(PREVIEW_VALUES))

    def resolve_bindings(self, text: str) -> str:
        """Substitute any ``{{source.field}}`` placeholders in `text`."""
        if self._pattern is None or self.binding_values.keys() != self._pattern_keys:
            self._pattern = compile_bindings(self.binding_values)
            self._pattern_keys = frozenset(self.binding_values)
        return resolve_text(text, self.binding_values, self._pattern)


# =============================================================================
# Visual output
# =============================================================================


class VisualKind(str, Enum):
    """Drawing primitives a host toolkit must provide."""

    VSTACK = "vstack"
    HSTACK = "hstack"
    ZSTACK = "zstack"
    TEXT = "text"
    SYMBOL = "symbol"
    IMAGE = "image"
    SPACER = "spacer"
    DIVIDER = "divider"
    GAUGE = "gauge"
    SHAPE = "shape"


@dataclass
class Modifier:
    """One layout or decoration step applied to a primitive."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class VisualNode:
    """A drawable primitive with its children and ordered modifiers.

    Attributes:
        kind: Primitive to draw.
        params: Primitive arguments (text, symbol name, gauge range, ...).
        children: Nested primitives, for stacks.
        modifiers: Steps applied in order, innermost first.
    """

    kind: VisualKind
    params: dict[str, Any] = field(default_factory=dict)
    children: list["VisualNode"] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)

    def add(self, name: str, **params: Any) -> "VisualNode":
        """Append a modifier and return self for chaining."""
        self.modifiers.append(Modifier(name, params))
        return self

    @property
    def modifier_names(self) -> list[str]:
        return [m.name for m in self.modifiers]

    def modifier(self, name: str) -> Modifier | None:
        """First modifier called `name`, if any."""
        for m in self.modifiers:
            if m.name == name:
                return m
        return None


# =============================================================================
# Alignment mapping
# =============================================================================


def horizontal_alignment(alignment: StackAlignment | None) -> str:
    """Cross-axis alignment for a vertical stack."""
    if alignment in (StackAlignment.LEADING, StackAlignment.TRAILING):
        return alignment.value
    return "center"


def vertical_alignment(alignment: StackAlignment | None) -> str:
    """Cross-axis alignment for a horizontal stack."""
    if alignment in (
        StackAlignment.TOP,
        StackAlignment.BOTTOM,
        StackAlignment.FIRST_TEXT_BASELINE,
        StackAlignment.LAST_TEXT_BASELINE,
    ):
        return alignment.value
    return "center"


def box_alignment(alignment: ZStackAlignment | None) -> str:
    return alignment.value if alignment is not None else "center"


def gauge_style(style: GaugeStyle | None) -> str:
    """Drawing strategy for a gauge style; circular variants share one."""
    if style == GaugeStyle.LINEAR:
        return "linearCapacity"
    if style in (GaugeStyle.CIRCULAR, GaugeStyle.ACCESSORY_CIRCULAR):
        return "accessoryCircularCapacity"
    if style == GaugeStyle.ACCESSORY_LINEAR:
        return "accessoryLinear"
    return "automatic"


def padding_edges(edges: PaddingEdges | None) -> str:
    return edges.value if edges is not None else PaddingEdges.ALL.value


# =============================================================================
# Style pipeline
# =============================================================================


def apply_style(visual: VisualNode, style: NodeStyle | None) -> VisualNode:
    """Apply a style bag: background, clip, opacity, shadow, border, glass."""
    if style is None:
        return visual

    if style.background is not None:
        visual.add("background", fill=resolve_background(style.background))

    if style.corner_radius is not None:
        visual.add("clip", shape="roundedRectangle", corner_radius=style.corner_radius)

    if style.opacity is not None:
        visual.add("opacity", value=style.opacity)

    if style.shadow is not None:
        shadow = style.shadow
        color = resolve_color(shadow.color) if shadow.color else BLACK.with_alpha(SHADOW_OPACITY)
        visual.add(
            "shadow",
            color=color,
            radius=shadow.radius,
            x=shadow.x if shadow.x is not None else 0.0,
            y=shadow.y if shadow.y is not None else 0.0,
        )

    if style.border is not None:
        color = resolve_color(style.border.color)
        if style.corner_radius is not None:
            visual.add(
                "stroke",
                shape="roundedRectangle",
                corner_radius=style.corner_radius,
                color=color,
                width=style.border.width,
            )
        else:
            visual.add("border", color=color, width=style.border.width)

    if style.glass_effect is True:
        visual.add("glass", shape="roundedRectangle", corner_radius=GLASS_CORNER_RADIUS)

    return visual


# =============================================================================
# Node renderers
# =============================================================================


def _render_vstack(node: VStackNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = VisualNode(
        VisualKind.VSTACK,
        {"alignment": horizontal_alignment(props.alignment), "spacing": props.spacing},
        [render(child, context) for child in props.children],
    )
    return apply_style(visual, props.style)


def _render_hstack(node: HStackNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = VisualNode(
        VisualKind.HSTACK,
        {"alignment": vertical_alignment(props.alignment), "spacing": props.spacing},
        [render(child, context) for child in props.children],
    )
    return apply_style(visual, props.style)


def _render_zstack(node: ZStackNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = VisualNode(
        VisualKind.ZSTACK,
        {"alignment": box_alignment(props.alignment)},
        [render(child, context) for child in props.children],
    )
    return apply_style(visual, props.style)


def _render_text(node: TextNode, context: RenderContext) -> VisualNode:
    props = node.properties
    # Substitution happens first and only once
    visual = VisualNode(VisualKind.TEXT, {"text": context.resolve_bindings(props.content)})

    font = resolve_font(props.font)
    if font is not None:
        visual.add("font", font=font)
    if props.color is not None:
        visual.add("foreground", color=resolve_color(props.color))
    if props.alignment is not None:
        visual.add("text_alignment", value=props.alignment.value)
    visual.add("line_limit", value=props.line_limit)
    visual.add(
        "minimum_scale_factor",
        value=props.minimum_scale_factor if props.minimum_scale_factor is not None else 1.0,
    )
    return apply_style(visual, props.style)


def _render_symbol(node: SFSymbolNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = VisualNode(VisualKind.SYMBOL, {"name": props.system_name})
    visual.add("font", font=symbol_font(props.font_size, props.font_weight))
    if props.rendering_mode is not None:
        visual.add("rendering_mode", value=props.rendering_mode.value)
    if props.color is not None:
        visual.add("foreground", color=resolve_color(props.color))
    return apply_style(visual, props.style)


def decode_image_data(value: str) -> bytes | None:
    """Decode inline base64 image data; None when it is not decodable."""
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None
    return data or None


def _render_image(node: ImageNode, context: RenderContext) -> VisualNode:
    props = node.properties
    source = props.source

    if source.type == ImageSourceType.ASSET:
        visual = VisualNode(VisualKind.IMAGE, {"asset": source.value})
    elif source.type == ImageSourceType.DATA and (data := decode_image_data(source.value)):
        visual = VisualNode(VisualKind.IMAGE, {"data": data})
    else:
        # Remote images load outside the render pass
        logger.debug(f"Image source {source.type.value} shown as placeholder")
        visual = VisualNode(VisualKind.SYMBOL, {"name": PLACEHOLDER_SYMBOL})
        if source.type == ImageSourceType.REMOTE:
            visual.params["url"] = source.value

    visual.add("resizable")
    visual.add("aspect_ratio", content_mode=(props.content_mode or ImageContentMode.FIT).value)
    if props.corner_radius is not None:
        visual.add("clip", shape="roundedRectangle", corner_radius=props.corner_radius)
    return apply_style(visual, props.style)


def _render_spacer(node: SpacerNode, context: RenderContext) -> VisualNode:
    min_length = node.properties.min_length if node.properties else None
    return VisualNode(VisualKind.SPACER, {"min_length": min_length})


def _render_divider(node: DividerNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = VisualNode(VisualKind.DIVIDER)
    if props is None:
        return visual

    if props.color is not None:
        thickness = props.thickness if props.thickness is not None else HAIRLINE_THICKNESS
        visual.add("overlay", fill=resolve_color(props.color))
        visual.add("frame", height=thickness)
    return apply_style(visual, props.style)


def _render_gauge(node: GaugeNode, context: RenderContext) -> VisualNode:
    props = node.properties
    lower = props.min_value if props.min_value is not None else 0.0
    upper = props.max_value if props.max_value is not None else 1.0
    current_label = (
        context.resolve_bindings(props.current_value_label)
        if props.current_value_label is not None
        else None
    )
    visual = VisualNode(
        VisualKind.GAUGE,
        {
            "value": props.value,
            "range": (lower, upper),
            "label": props.label,
            "current_value_label": current_label,
        },
    )
    visual.add("gauge_style", value=gauge_style(props.gauge_style))
    if props.tint is not None:
        visual.add("tint", color=resolve_color(props.tint))
    return apply_style(visual, props.style)


def _render_frame(node: FrameNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = render(props.child, context)
    visual.add(
        "flexible_frame",
        min_width=props.min_width,
        max_width=props.max_width,
        min_height=props.min_height,
        max_height=props.max_height,
        alignment=box_alignment(props.alignment),
    )
    visual.add("frame", width=props.width, height=props.height)
    return apply_style(visual, props.style)


def _render_padding(node: PaddingNode, context: RenderContext) -> VisualNode:
    props = node.properties
    visual = render(props.child, context)
    visual.add(
        "padding",
        edges=padding_edges(props.edges),
        amount=props.value if props.value is not None else DEFAULT_PADDING,
    )
    return apply_style(visual, props.style)


def _render_shape(node: ContainerRelativeShapeNode, context: RenderContext) -> VisualNode:
    props = node.properties
    fill = resolve_color(props.fill) if props and props.fill else CLEAR
    visual = VisualNode(VisualKind.SHAPE, {"shape": "containerRelative"})
    visual.add("fill", fill=fill)
    return apply_style(visual, props.style if props else None)


_RENDERERS = {
    VStackNode: _render_vstack,
    HStackNode: _render_hstack,
    ZStackNode: _render_zstack,
    TextNode: _render_text,
    SFSymbolNode: _render_symbol,
    ImageNode: _render_image,
    SpacerNode: _render_spacer,
    DividerNode: _render_divider,
    GaugeNode: _render_gauge,
    FrameNode: _render_frame,
    PaddingNode: _render_padding,
    ContainerRelativeShapeNode: _render_shape,
}


def render(node: WidgetNode, context: RenderContext | None = None) -> VisualNode:
    """Render a node and its subtree.

    Args:
        node: Tree to render.
        context: Binding values; an empty context when omitted.

    Returns:
        The visual tree.

    Raises:
        TypeError: If `node` is not a widget node.
    """
    renderer = _RENDERERS.get(type(node))
    if renderer is None:
        raise TypeError(f"Cannot render {type(node).__name__}")
    return renderer(node, context or RenderContext.default())


# =============================================================================
# Config entry point
# =============================================================================


def render_error_summary(messages: list[str]) -> VisualNode:
    """Warning glyph above the first few error descriptions."""
    icon = VisualNode(VisualKind.SYMBOL, {"name": ERROR_SYMBOL})
    icon.add("font", font=ResolvedFont(text_style=FontStyle.TITLE2))
    icon.add("foreground", color=SYSTEM_COLORS[SystemColor.ORANGE])

    lines = []
    for message in messages[:MAX_SHOWN_ERRORS]:
        line = VisualNode(VisualKind.TEXT, {"text": message})
        line.add("font", font=ResolvedFont(text_style=FontStyle.CAPTION))
        line.add("foreground", color=resolve_semantic(SemanticColor.SECONDARY))
        line.add("text_alignment", value="center")
        lines.append(line)

    summary = VisualNode(VisualKind.VSTACK, {"alignment": "center", "spacing": 8.0}, [icon, *lines])
    return summary.add("padding", edges=PaddingEdges.ALL.value, amount=DEFAULT_PADDING)


def render_config(
    config: WidgetConfig,
    context: RenderContext | None = None,
    show_errors: bool = False,
) -> VisualNode:
    """Validate and render a whole config.

    An invalid config still renders its tree unless `show_errors` is set,
    in which case an error summary is drawn instead.
    """
    result = validate(config)
    if result.is_valid or not show_errors:
        return render(config.root, context)

    logger.info(f"Rendering error summary for {config.name!r}: {len(result.errors)} error(s)")
    return render_error_summary(result.error_messages)


__all__ = [
    "PREVIEW_VALUES",
    "PLACEHOLDER_SYMBOL",
    "ERROR_SYMBOL",
    "DEFAULT_PADDING",
    "HAIRLINE_THICKNESS",
    "RenderContext",
    "VisualKind",
    "Modifier",
    "VisualNode",
    "horizontal_alignment",
    "vertical_alignment",
    "box_alignment",
    "gauge_style",
    "padding_edges",
    "apply_style",
    "decode_image_data",
    "render",
    "render_error_summary",
    "render_config",
]
