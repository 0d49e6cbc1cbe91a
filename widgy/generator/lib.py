"""WidgetGenerator orchestrator for prompt-driven widget generation.

Streams text from a generation backend, extracts and decodes the widget
config, validates it and re-prompts with the error when an attempt fails.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from widgy.config import EnvVar, get_environment
from widgy.schema import DecodeError, WidgetConfig, WidgetFamily, parse_widget_config
from widgy.validation import ValidationResult, validate

from .backend import (
    ConversationMessage,
    EdgeFunctionBackend,
    GenerationBackend,
    GenerationError,
    GenerationRequest,
    InvalidJSONError,
    InvalidResponseError,
    MaxRetriesExceededError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Statistics from widget generation.

    Attributes:
        attempts: Number of attempts made.
        decode_retries: Retries caused by undecodable output.
        validation_retries: Retries caused by validation errors.
    """

    attempts: int = 0
    decode_retries: int = 0
    validation_retries: int = 0


@dataclass
class GenerationOutput:
    """Complete output from widget generation.

    Attributes:
        config: The validated config.
        validation: Its validation result, possibly with warnings.
        stats: Generation statistics.
        raw_response: Full text streamed for the successful attempt.
    """

    config: WidgetConfig
    validation: ValidationResult
    stats: GenerationStats
    raw_response: str


class WidgetGenerator:
    """Generates validated widget configs from natural language.

    Pipeline:
        1. Stream text for the request
        2. Extract, decode and migrate the config
        3. Validate it
        4. On failure, retry with the error attached as `previous_error`

    Args:
        backend: Generation backend. Defaults to `EdgeFunctionBackend()`.
        max_retries: Retries after the first attempt. Defaults to
            WIDGY_GENERATION_RETRIES.
        on_chunk: Called with the accumulated text after every chunk.

    Example:
        >>> generator = WidgetGenerator()
        >>> output = await generator.generate("a minimal clock")
        >>> output.config.name
        'Minimal Clock'
    """

    def __init__(
        self,
        backend: GenerationBackend | None = None,
        max_retries: int | None = None,
        on_chunk: Callable[[str], None] | None = None,
    ):
        self._backend = backend or EdgeFunctionBackend()
        self.max_retries = get_environment(EnvVar.WIDGY_GENERATION_RETRIES, override=max_retries)
        self._on_chunk = on_chunk

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationMessage] = (),
        existing_config: WidgetConfig | None = None,
        family: WidgetFamily = WidgetFamily.SYSTEM_SMALL,
    ) -> GenerationOutput:
        """Generate a config, retrying on bad output.

        Args:
            prompt: What to build.
            history: Earlier conversation turns.
            existing_config: Config to edit instead of starting fresh.
            family: Target widget family.

        Returns:
            GenerationOutput with a valid config.

        Raises:
            GenerationError: The last attempt's error once retries run out.
        """
        stats = GenerationStats()
        last_error: GenerationError | None = None

        for attempt in range(self.max_retries + 1):
            stats.attempts += 1
            request = GenerationRequest(
                prompt=prompt,
                conversation_history=list(history),
                existing_config=existing_config,
                family=family,
                previous_error=str(last_error) if last_error else None,
            )
            logger.info(
                f"Generation attempt {attempt + 1}/{self.max_retries + 1} via {self._backend.name}"
            )

            try:
                text = await self._collect(request)
                config = self._parse(text)
            except InvalidJSONError as e:
                stats.decode_retries += 1
                last_error = e
                logger.warning(f"Attempt {attempt + 1} produced invalid config: {e}")
                continue
            except GenerationError as e:
                last_error = e
                logger.warning(f"Attempt {attempt + 1} failed: {e}")
                continue

            result = validate(config)
            if result.is_valid:
                logger.info(f"Generated '{config.name}' after {stats.attempts} attempt(s)")
                return GenerationOutput(
                    config=config, validation=result, stats=stats, raw_response=text
                )

            stats.validation_retries += 1
            last_error = ValidationFailedError(result.error_messages)
            logger.warning(f"Attempt {attempt + 1} failed validation: {last_error}")

        if last_error is not None:
            raise last_error
        raise MaxRetriesExceededError(stats.attempts)

    async def _collect(self, request: GenerationRequest) -> str:
        text = ""
        async for chunk in self._backend.stream(request):
            text += chunk
            if self._on_chunk:
                self._on_chunk(text)
        if not text.strip():
            raise InvalidResponseError("empty response")
        return text

    def _parse(self, text: str) -> WidgetConfig:
        try:
            return parse_widget_config(text)
        except DecodeError as e:
            detail = "; ".join(e.errors) if e.errors else str(e)
            raise InvalidJSONError(detail) from e


__all__ = [
    "GenerationStats",
    "GenerationOutput",
    "WidgetGenerator",
]
