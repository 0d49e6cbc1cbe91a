"""Widget config validation.

Checks a decoded `WidgetConfig` for structural and semantic problems before
rendering. Errors make a config invalid; warnings are advisory only.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from widgy.schema import (
    CURRENT_SCHEMA_VERSION,
    FrameNode,
    GaugeNode,
    HStackNode,
    PaddingNode,
    SFSymbolNode,
    TextNode,
    VStackNode,
    WidgetConfig,
    WidgetNode,
    ZStackNode,
)
from widgy.style import ColorType, ColorValue

MAX_NESTING_DEPTH = 5
MAX_NODE_COUNT = 50

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_VALID_HEX_LENGTHS = (3, 4, 6, 8)


class ValidationErrorType(str, Enum):
    """Categories of validation findings."""

    EMPTY_ROOT = "empty_root"
    NESTING_TOO_DEEP = "nesting_too_deep"
    TOO_MANY_NODES = "too_many_nodes"
    INVALID_SCHEMA_VERSION = "invalid_schema_version"
    EMPTY_TEXT_CONTENT = "empty_text_content"
    INVALID_HEX_COLOR = "invalid_hex_color"
    INVALID_GAUGE_VALUE = "invalid_gauge_value"
    EMPTY_STACK_CHILDREN = "empty_stack_children"
    EMPTY_SYMBOL_NAME = "empty_symbol_name"
    INVALID_IMAGE_SOURCE = "invalid_image_source"


@dataclass
class ValidationError:
    """A single validation finding.

    Attributes:
        error_type: Category of the finding.
        message: Human-readable description, safe to show to users.
        path: Location of the node, e.g. ``root.children[1].child``.
    """

    error_type: ValidationErrorType
    message: str
    path: str = "root"

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Outcome of `validate`.

    Attributes:
        is_valid: True when there are no errors. Warnings never affect it.
        errors: Blocking problems.
        warnings: Advisory findings.
    """

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [w.message for w in self.warnings]


def validate(config: WidgetConfig) -> ValidationResult:
    """Validate a widget config.

    Performs the following checks:
        - Schema version matches the current version (warning)
        - Nesting depth <= 5, counting the root as depth 1
        - Node count <= 50
        - Per-node rules for Text, Gauge, stacks and SF Symbols, applied to
          every node in the tree

    Args:
        config: The config to validate. It is not modified.

    Returns:
        ValidationResult with separate error and warning lists.

    Example:
        >>> result = validate(config)
        >>> if not result.is_valid:
        ...     for e in result.errors:
        ...         print(f"{e.path}: {e.message}")
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if config.schema_version != CURRENT_SCHEMA_VERSION:
        warnings.append(
            ValidationError(
                error_type=ValidationErrorType.INVALID_SCHEMA_VERSION,
                message=(
                    f"Schema version {config.schema_version} differs from "
                    f"current {CURRENT_SCHEMA_VERSION}"
                ),
            )
        )

    if config.root is None:
        errors.append(
            ValidationError(
                error_type=ValidationErrorType.EMPTY_ROOT,
                message="Widget config has no root node",
            )
        )
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    node_count, max_depth = measure_tree(config.root)

    if max_depth > MAX_NESTING_DEPTH:
        errors.append(
            ValidationError(
                error_type=ValidationErrorType.NESTING_TOO_DEEP,
                message=f"Nesting depth {max_depth} exceeds maximum of {MAX_NESTING_DEPTH}",
            )
        )
    if node_count > MAX_NODE_COUNT:
        errors.append(
            ValidationError(
                error_type=ValidationErrorType.TOO_MANY_NODES,
                message=f"Node count {node_count} exceeds maximum of {MAX_NODE_COUNT}",
            )
        )

    _validate_node(config.root, "root", errors, warnings)

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def is_valid(config: WidgetConfig) -> bool:
    """Check if a config is valid.

    Convenience function that returns True if no validation errors exist.
    """
    return validate(config).is_valid


def measure_tree(node: WidgetNode) -> tuple[int, int]:
    """Return ``(node_count, max_depth)`` for a tree, root at depth 1."""
    count = 0
    max_depth = 0

    def _walk(n: WidgetNode, depth: int) -> None:
        nonlocal count, max_depth
        count += 1
        max_depth = max(max_depth, depth)
        for child in n.children:
            _walk(child, depth + 1)

    _walk(node, 1)
    return count, max_depth


def is_valid_hex(hex_string: str) -> bool:
    """Check a hex color string: optional ``#`` then 3, 4, 6 or 8 hex digits."""
    stripped = hex_string[1:] if hex_string.startswith("#") else hex_string
    return len(stripped) in _VALID_HEX_LENGTHS and bool(_HEX_DIGITS.fullmatch(stripped))


def _validate_color(color: ColorValue, path: str, errors: list[ValidationError]) -> None:
    if color.type == ColorType.HEX and not is_valid_hex(color.value):
        errors.append(
            ValidationError(
                error_type=ValidationErrorType.INVALID_HEX_COLOR,
                message=f"Invalid hex color: {color.value}",
                path=path,
            )
        )


def _validate_node(
    node: WidgetNode,
    path: str,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    if isinstance(node, TextNode):
        content = node.properties.content
        if not content.strip() and "{{" not in content:
            errors.append(
                ValidationError(
                    error_type=ValidationErrorType.EMPTY_TEXT_CONTENT,
                    message="Text node has empty content",
                    path=path,
                )
            )
        if node.properties.color is not None:
            _validate_color(node.properties.color, path, errors)

    elif isinstance(node, GaugeNode):
        value = node.properties.value
        if not 0.0 <= value <= 1.0:
            errors.append(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_GAUGE_VALUE,
                    message=f"Gauge value {value} must be between 0.0 and 1.0",
                    path=path,
                )
            )

    elif isinstance(node, (VStackNode, HStackNode, ZStackNode)):
        if not node.children:
            label = "ZStack" if isinstance(node, ZStackNode) else "Stack"
            warnings.append(
                ValidationError(
                    error_type=ValidationErrorType.EMPTY_STACK_CHILDREN,
                    message=f"{label} has no children; it will render as empty space",
                    path=path,
                )
            )
        for index, child in enumerate(node.children):
            _validate_node(child, f"{path}.children[{index}]", errors, warnings)

    elif isinstance(node, (FrameNode, PaddingNode)):
        _validate_node(node.properties.child, f"{path}.child", errors, warnings)

    elif isinstance(node, SFSymbolNode):
        if not node.properties.system_name:
            warnings.append(
                ValidationError(
                    error_type=ValidationErrorType.EMPTY_SYMBOL_NAME,
                    message="SF Symbol has empty system name",
                    path=path,
                )
            )

    # Image, Spacer, Divider and ContainerRelativeShape have no extra rules


__all__ = [
    "MAX_NESTING_DEPTH",
    "MAX_NODE_COUNT",
    "ValidationErrorType",
    "ValidationError",
    "ValidationResult",
    "validate",
    "is_valid",
    "is_valid_hex",
    "measure_tree",
]
