"""Centralized environment configuration management for widgy.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from widgy.config import EnvVar, get_environment
    >>>
    >>> timeout = get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT)  # float
    >>> api_key = get_environment(EnvVar.WIDGY_API_KEY)  # str | None
    >>>
    >>> # Override at runtime
    >>> retries = get_environment(EnvVar.WIDGY_GENERATION_RETRIES, override=5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "WIDGY_STORE_DIR").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by widgy.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - generation: Widget generation backend
        - providers: Data provider behaviour
        - storage: Config persistence
        - logging: Log output
    """

    # -------------------------------------------------------------------------
    # Generation Backend
    # -------------------------------------------------------------------------
    WIDGY_GENERATE_URL = EnvConfig(
        name="WIDGY_GENERATE_URL",
        default=None,
        var_type=str,
        description="Streaming endpoint that turns prompts into widget configs",
        category="generation",
    )
    WIDGY_API_KEY = EnvConfig(
        name="WIDGY_API_KEY",
        default=None,
        var_type=str,
        description="Bearer token sent to the generation endpoint",
        category="generation",
    )
    WIDGY_GENERATION_RETRIES = EnvConfig(
        name="WIDGY_GENERATION_RETRIES",
        default=2,
        var_type=int,
        description="Re-prompt attempts after a decode or validation failure",
        category="generation",
    )
    WIDGY_GENERATION_TIMEOUT = EnvConfig(
        name="WIDGY_GENERATION_TIMEOUT",
        default=60.0,
        var_type=float,
        description="Request timeout in seconds for the generation endpoint",
        category="generation",
    )

    # -------------------------------------------------------------------------
    # Data Providers
    # -------------------------------------------------------------------------
    WIDGY_PROVIDER_TIMEOUT = EnvConfig(
        name="WIDGY_PROVIDER_TIMEOUT",
        default=5.0,
        var_type=float,
        description="Seconds a single data provider may take before it is skipped",
        category="providers",
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    WIDGY_STORE_DIR = EnvConfig(
        name="WIDGY_STORE_DIR",
        default=None,  # Computed from the home directory
        var_type=Path,
        description="Directory holding saved widget configs",
        category="storage",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    WIDGY_LOG_LEVEL = EnvConfig(
        name="WIDGY_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value).expanduser()

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, float, bool, or Path).

    Example:
        >>> get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT)
        5.0
        >>> get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT, override=1.5)
        1.5
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_store_dir(override: Path | str | None = None) -> Path:
    """Get the widget config store directory.

    Resolution: override > WIDGY_STORE_DIR > ~/.widgy/widgets
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.WIDGY_STORE_DIR)
    if env_path:
        return env_path

    return Path.home() / ".widgy" / "widgets"


def get_generate_url(override: str | None = None) -> str | None:
    """Get the generation endpoint URL, if one is configured."""
    if override:
        return override
    return get_environment(EnvVar.WIDGY_GENERATE_URL)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (generation, providers, storage, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_store_dir",
    "get_generate_url",
    # Introspection
    "list_environment_variables",
]
