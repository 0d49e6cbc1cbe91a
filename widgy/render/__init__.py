"""Render module: interprets widget trees into visual primitives.

Example:
    >>> from widgy.render import RenderContext, render
    >>> visual = render(config.root, RenderContext.preview())
"""

from .colors import (
    CLEAR,
    RGBA,
    SYSTEM_COLORS,
    DynamicColor,
    Gradient,
    Paint,
    ResolvedFont,
    color_from_hex,
    resolve_background,
    resolve_color,
    resolve_font,
    resolve_gradient,
)
from .lib import (
    DEFAULT_PADDING,
    ERROR_SYMBOL,
    HAIRLINE_THICKNESS,
    PLACEHOLDER_SYMBOL,
    PREVIEW_VALUES,
    Modifier,
    RenderContext,
    VisualKind,
    VisualNode,
    apply_style,
    decode_image_data,
    render,
    render_config,
    render_error_summary,
)

__all__ = [
    # Context
    "RenderContext",
    "PREVIEW_VALUES",
    # Output
    "VisualKind",
    "VisualNode",
    "Modifier",
    # Rendering
    "render",
    "render_config",
    "render_error_summary",
    "apply_style",
    "decode_image_data",
    "PLACEHOLDER_SYMBOL",
    "ERROR_SYMBOL",
    "DEFAULT_PADDING",
    "HAIRLINE_THICKNESS",
    # Colors and fonts
    "RGBA",
    "DynamicColor",
    "Paint",
    "CLEAR",
    "SYSTEM_COLORS",
    "Gradient",
    "ResolvedFont",
    "color_from_hex",
    "resolve_color",
    "resolve_background",
    "resolve_gradient",
    "resolve_font",
]
