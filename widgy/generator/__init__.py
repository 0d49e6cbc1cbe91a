"""Widget generation from natural language.

Example:
    >>> from widgy.generator import WidgetGenerator
    >>> output = await WidgetGenerator().generate("battery gauge", family="systemSmall")
    >>> output.config.root.type
    'VStack'
"""

from .backend import (
    ConversationMessage,
    EdgeFunctionBackend,
    GenerationBackend,
    GenerationError,
    GenerationRequest,
    InvalidJSONError,
    InvalidResponseError,
    MaxRetriesExceededError,
    NetworkError,
    ServerError,
    ValidationFailedError,
    parse_sse_line,
)
from .lib import GenerationOutput, GenerationStats, WidgetGenerator

__all__ = [
    # Orchestration
    "WidgetGenerator",
    "GenerationOutput",
    "GenerationStats",
    # Backends
    "GenerationBackend",
    "EdgeFunctionBackend",
    "GenerationRequest",
    "ConversationMessage",
    "parse_sse_line",
    # Errors
    "GenerationError",
    "NetworkError",
    "ServerError",
    "InvalidResponseError",
    "InvalidJSONError",
    "ValidationFailedError",
    "MaxRetriesExceededError",
]
