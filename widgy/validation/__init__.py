"""Validation module for widget configs."""

from .lib import (
    MAX_NESTING_DEPTH,
    MAX_NODE_COUNT,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    is_valid,
    is_valid_hex,
    measure_tree,
    validate,
)

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
