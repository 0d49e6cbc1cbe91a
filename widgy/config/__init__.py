"""Centralized configuration management for widgy.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from widgy.config import EnvVar, get_environment
    >>>
    >>> timeout = get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT)  # 5.0
    >>> store = get_store_dir()  # ~/.widgy/widgets unless overridden
    >>>
    >>> for var in list_environment_variables("generation"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    generation: Generation endpoint, credentials, retry and timeout
    providers: Data provider timeout
    storage: Config store directory
    logging: CLI log level
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_generate_url,
    get_store_dir,
    list_environment_variables,
)

__all__ = [
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "get_store_dir",
    "get_generate_url",
    "list_environment_variables",
]
