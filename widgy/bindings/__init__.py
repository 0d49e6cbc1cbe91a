"""Binding resolution for ``{{source.field}}`` placeholders."""

from .lib import (
    PLACEHOLDER_PATTERN,
    SOURCE_PREFIX_PATTERN,
    collect_placeholders,
    compile_bindings,
    extract_placeholders,
    placeholder_sources,
    required_sources,
    resolve_text,
)

__all__ = [
    "PLACEHOLDER_PATTERN",
    "SOURCE_PREFIX_PATTERN",
    "extract_placeholders",
    "compile_bindings",
    "resolve_text",
    "collect_placeholders",
    "placeholder_sources",
    "required_sources",
]
