"""widgy: widget config schema, validation, data binding and rendering."""

from widgy.bindings import extract_placeholders, required_sources, resolve_text
from widgy.render import RenderContext, VisualNode, render, render_config
from widgy.schema import (
    DecodeError,
    WidgetConfig,
    WidgetFamily,
    WidgetNode,
    decode_config,
    encode_config,
    parse_widget_config,
)
from widgy.validation import ValidationError, ValidationResult, is_valid, validate

__version__ = "0.1.0"

__all__ = [
    # Schema
    "WidgetConfig",
    "WidgetNode",
    "WidgetFamily",
    "DecodeError",
    "decode_config",
    "encode_config",
    "parse_widget_config",
    # Validation
    "validate",
    "is_valid",
    "ValidationError",
    "ValidationResult",
    # Bindings
    "extract_placeholders",
    "resolve_text",
    "required_sources",
    # Rendering
    "RenderContext",
    "VisualNode",
    "render",
    "render_config",
]
