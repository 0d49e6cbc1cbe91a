"""Generation backends.

A backend sends one generation request and streams back the raw text the
model produces. Parsing and validation happen in `WidgetGenerator`.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from widgy.config import EnvVar, get_environment, get_generate_url
from widgy.schema import WidgetConfig, WidgetFamily, encode_config

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class GenerationError(Exception):
    """Base exception for widget generation errors."""


class NetworkError(GenerationError):
    """Raised when the endpoint cannot be reached."""

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")
        self.detail = detail


class ServerError(GenerationError):
    """Raised when the endpoint answers with a non-200 status.

    Attributes:
        status_code: HTTP status returned.
    """

    def __init__(self, status_code: int):
        super().__init__(f"Server error: {status_code}")
        self.status_code = status_code


class InvalidResponseError(GenerationError):
    """Raised when the endpoint's response is not a usable stream."""

    def __init__(self, detail: str | None = None):
        super().__init__("Invalid server response" + (f": {detail}" if detail else ""))


class InvalidJSONError(GenerationError):
    """Raised when the generated text does not decode to a config."""

    def __init__(self, detail: str):
        super().__init__(f"Invalid widget config: {detail}")
        self.detail = detail


class ValidationFailedError(GenerationError):
    """Raised when a decoded config fails validation.

    Attributes:
        errors: Validation error descriptions.
    """

    def __init__(self, errors: list[str]):
        super().__init__(f"Validation failed: {'; '.join(errors)}")
        self.errors = errors


class MaxRetriesExceededError(GenerationError):
    """Raised when every attempt failed."""

    def __init__(self, attempts: int, last_error: Exception | None = None):
        message = "Failed after multiple attempts"
        if last_error is not None:
            message += f" ({attempts} attempts, last error: {last_error})"
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


# =============================================================================
# Request
# =============================================================================


@dataclass
class ConversationMessage:
    """One prior turn of the conversation.

    Attributes:
        role: "user" or "assistant".
        content: Message text.
    """

    role: str
    content: str


@dataclass
class GenerationRequest:
    """Payload for one generation attempt.

    Attributes:
        prompt: What the user asked for.
        conversation_history: Earlier turns, oldest first.
        existing_config: Config being edited, if any.
        family: Target widget family.
        previous_error: Why the previous attempt was rejected.
    """

    prompt: str
    conversation_history: list[ConversationMessage] = field(default_factory=list)
    existing_config: WidgetConfig | None = None
    family: WidgetFamily = WidgetFamily.SYSTEM_SMALL
    previous_error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body as the endpoint expects it."""
        return {
            "prompt": self.prompt,
            "conversation_history": [
                {"role": m.role, "content": m.content} for m in self.conversation_history
            ],
            "existing_config": (
                encode_config(self.existing_config) if self.existing_config is not None else None
            ),
            "family": WidgetFamily(self.family).value,
            "previous_error": self.previous_error,
        }


# =============================================================================
# Backends
# =============================================================================


class GenerationBackend(ABC):
    """Abstract interface for widget generation endpoints.

    Example:
        >>> backend = EdgeFunctionBackend(url="https://example.com/generate")
        >>> async for chunk in backend.stream(GenerationRequest(prompt="clock")):
        ...     print(chunk, end="")
    """

    @abstractmethod
    def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Stream the generated text in chunks.

        Raises:
            GenerationError: If the request fails.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier for logging."""


def parse_sse_line(line: str) -> str | None:
    """Content carried by one server-sent event line.

    Returns None for lines that are not ``data:`` events or carry no
    content. The ``[DONE]`` sentinel is handled by the caller.
    """
    if not line.startswith("data: "):
        return None
    data_str = line[6:]
    try:
        data = json.loads(data_str)
    except json.JSONDecodeError:
        return None
    content = data.get("content") if isinstance(data, dict) else None
    return content if isinstance(content, str) else None


class EdgeFunctionBackend(GenerationBackend):
    """Streams from an HTTP endpoint speaking server-sent events.

    The endpoint receives the request as JSON and answers with
    ``data: {"content": "..."}`` lines, ending with ``data: [DONE]``.

    Args:
        url: Endpoint URL. Defaults to WIDGY_GENERATE_URL.
        api_key: Bearer token. Defaults to WIDGY_API_KEY.
        timeout: Request timeout in seconds. Defaults to
            WIDGY_GENERATION_TIMEOUT.
        client: Shared client to use; one is created per request otherwise.

    Raises:
        ValueError: If no endpoint URL is configured.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        resolved_url = get_generate_url(url)
        if not resolved_url:
            raise ValueError(
                f"No generation endpoint configured. Set {EnvVar.WIDGY_GENERATE_URL.value.name}."
            )
        self.url = resolved_url
        self._api_key = get_environment(EnvVar.WIDGY_API_KEY, override=api_key)
        self.timeout = get_environment(EnvVar.WIDGY_GENERATION_TIMEOUT, override=timeout)
        self._client = client

    @property
    def name(self) -> str:
        return f"edge:{httpx.URL(self.url).host}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            async with client.stream(
                "POST", self.url, json=request.to_payload(), headers=self._headers()
            ) as response:
                if response.status_code != 200:
                    raise ServerError(response.status_code)

                async for line in response.aiter_lines():
                    if line == "data: [DONE]":
                        break
                    content = parse_sse_line(line)
                    if content:
                        yield content
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__) from e
        finally:
            if self._client is None:
                await client.aclose()


__all__ = [
    "GenerationError",
    "NetworkError",
    "ServerError",
    "InvalidResponseError",
    "InvalidJSONError",
    "ValidationFailedError",
    "MaxRetriesExceededError",
    "ConversationMessage",
    "GenerationRequest",
    "GenerationBackend",
    "EdgeFunctionBackend",
    "parse_sse_line",
]
