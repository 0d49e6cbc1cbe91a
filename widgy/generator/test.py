"""Tests for generator module.

Covers:
- EdgeFunctionBackend: request payload and SSE parsing over a mock transport
- WidgetGenerator: retry loop with a scripted backend
"""

import json

import httpx
import pytest

from widgy.schema import WidgetFamily

from . import (
    ConversationMessage,
    EdgeFunctionBackend,
    GenerationRequest,
    InvalidJSONError,
    InvalidResponseError,
    MaxRetriesExceededError,
    NetworkError,
    ServerError,
    ValidationFailedError,
    WidgetGenerator,
    parse_sse_line,
)

URL = "https://widgets.example.com/functions/v1/generate-widget"

VALID_CONFIG_JSON = json.dumps(
    {
        "name": "Minimal Clock",
        "family": "systemSmall",
        "root": {
            "type": "VStack",
            "properties": {
                "children": [
                    {"type": "Text", "properties": {"text": "{{date_time.time}}"}},
                ]
            },
        },
    }
)

INVALID_CONFIG_JSON = json.dumps(
    {
        "name": "Broken Gauge",
        "root": {"type": "Gauge", "properties": {"value": 1.5}},
    }
)


def _sse(*chunks: str, done: bool = True) -> str:
    lines = [f"data: {json.dumps({'content': c})}" for c in chunks]
    if done:
        lines.append("data: [DONE]")
    return "\n\n".join(lines) + "\n\n"


async def _collect(backend: EdgeFunctionBackend, request: GenerationRequest) -> str:
    return "".join([chunk async for chunk in backend.stream(request)])


# =============================================================================
# Request and SSE Tests
# =============================================================================


class TestGenerationRequest:
    """Tests for the request payload."""

    @pytest.mark.unit
    def test_payload_keys(self, simple_clock):
        request = GenerationRequest(
            prompt="make it blue",
            conversation_history=[ConversationMessage("user", "a clock")],
            existing_config=simple_clock,
            family=WidgetFamily.SYSTEM_MEDIUM,
            previous_error="Validation failed: x",
        )
        payload = request.to_payload()
        assert payload["prompt"] == "make it blue"
        assert payload["conversation_history"] == [{"role": "user", "content": "a clock"}]
        assert payload["existing_config"]["name"] == "Simple Clock"
        assert payload["family"] == "systemMedium"
        assert payload["previous_error"] == "Validation failed: x"
        json.dumps(payload)

    @pytest.mark.unit
    def test_payload_defaults(self):
        payload = GenerationRequest(prompt="clock").to_payload()
        assert payload["existing_config"] is None
        assert payload["previous_error"] is None
        assert payload["family"] == "systemSmall"


class TestParseSseLine:
    """Tests for parse_sse_line function."""

    @pytest.mark.unit
    def test_content(self):
        assert parse_sse_line('data: {"content": "hi"}') == "hi"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "line",
        ["", ": keepalive", "event: ping", "data: not json", 'data: {"other": 1}', "data: []"],
    )
    def test_ignored(self, line):
        assert parse_sse_line(line) is None


class TestEdgeFunctionBackend:
    """Tests for EdgeFunctionBackend with httpx.MockTransport."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_streams_content(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, text=_sse('{"name":', ' "x"}'))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        backend = EdgeFunctionBackend(url=URL, api_key="secret", client=client)
        text = await _collect(backend, GenerationRequest(prompt="clock"))

        assert text == '{"name": "x"}'
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["prompt"] == "clock"
        await client.aclose()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stops_at_done(self):
        body = _sse("a") + _sse("b", done=False)
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=body)))
        backend = EdgeFunctionBackend(url=URL, client=client)
        assert await _collect(backend, GenerationRequest(prompt="x")) == "a"
        await client.aclose()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_server_error(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(429)))
        backend = EdgeFunctionBackend(url=URL, client=client)
        with pytest.raises(ServerError) as exc_info:
            await _collect(backend, GenerationRequest(prompt="x"))
        assert exc_info.value.status_code == 429
        assert str(exc_info.value) == "Server error: 429"
        await client.aclose()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        backend = EdgeFunctionBackend(url=URL, client=client)
        with pytest.raises(NetworkError, match="Network error: connection refused"):
            await _collect(backend, GenerationRequest(prompt="x"))
        await client.aclose()

    @pytest.mark.unit
    def test_requires_url(self, monkeypatch):
        monkeypatch.delenv("WIDGY_GENERATE_URL", raising=False)
        with pytest.raises(ValueError, match="WIDGY_GENERATE_URL"):
            EdgeFunctionBackend()

    @pytest.mark.unit
    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("WIDGY_GENERATE_URL", URL)
        monkeypatch.setenv("WIDGY_GENERATION_TIMEOUT", "12.5")
        monkeypatch.delenv("WIDGY_API_KEY", raising=False)
        backend = EdgeFunctionBackend()
        assert backend.url == URL
        assert backend.timeout == 12.5
        assert backend.name == "edge:widgets.example.com"
        assert "Authorization" not in backend._headers()


# =============================================================================
# WidgetGenerator Tests
# =============================================================================


class TestWidgetGenerator:
    """Tests for the retry loop."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self, scripted_backend):
        backend = scripted_backend([f"Here you go:\n```json\n{VALID_CONFIG_JSON}\n```"])
        chunks = []
        generator = WidgetGenerator(backend, max_retries=2, on_chunk=chunks.append)

        output = await generator.generate("a clock", family=WidgetFamily.SYSTEM_SMALL)

        assert output.config.name == "Minimal Clock"
        assert output.validation.is_valid
        assert output.stats.attempts == 1
        assert backend.requests[0].previous_error is None
        assert chunks[-1] == output.raw_response

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_after_invalid_json(self, scripted_backend):
        backend = scripted_backend(["{not json}", VALID_CONFIG_JSON])
        output = await WidgetGenerator(backend, max_retries=2).generate("a clock")

        assert output.stats.attempts == 2
        assert output.stats.decode_retries == 1
        assert backend.requests[1].previous_error.startswith("Invalid widget config:")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_after_validation_failure(self, scripted_backend):
        backend = scripted_backend([INVALID_CONFIG_JSON, VALID_CONFIG_JSON])
        output = await WidgetGenerator(backend, max_retries=2).generate("a gauge")

        assert output.stats.validation_retries == 1
        assert backend.requests[1].previous_error == (
            "Validation failed: Gauge value 1.5 must be between 0.0 and 1.0"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_after_server_error(self, scripted_backend):
        backend = scripted_backend([ServerError(503), VALID_CONFIG_JSON])
        output = await WidgetGenerator(backend, max_retries=1).generate("a clock")
        assert output.stats.attempts == 2
        assert backend.requests[1].previous_error == "Server error: 503"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_last_error_raised_when_exhausted(self, scripted_backend):
        backend = scripted_backend([INVALID_CONFIG_JSON] * 3)
        with pytest.raises(ValidationFailedError) as exc_info:
            await WidgetGenerator(backend, max_retries=2).generate("a gauge")
        assert len(backend.requests) == 3
        assert exc_info.value.errors == ["Gauge value 1.5 must be between 0.0 and 1.0"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_response(self, scripted_backend):
        backend = scripted_backend([""])
        with pytest.raises(InvalidResponseError):
            await WidgetGenerator(backend, max_retries=0).generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_decode_error_raised_when_exhausted(self, scripted_backend):
        backend = scripted_backend(["no json here"])
        with pytest.raises(InvalidJSONError):
            await WidgetGenerator(backend, max_retries=0).generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_history_and_existing_config_forwarded(self, scripted_backend, weather_widget):
        backend = scripted_backend([VALID_CONFIG_JSON])
        history = [ConversationMessage("user", "weather"), ConversationMessage("assistant", "done")]
        await WidgetGenerator(backend, max_retries=0).generate(
            "bigger text",
            history=history,
            existing_config=weather_widget,
            family=WidgetFamily.SYSTEM_LARGE,
        )
        request = backend.requests[0]
        assert request.conversation_history == history
        assert request.existing_config is weather_widget
        assert request.family == WidgetFamily.SYSTEM_LARGE

    @pytest.mark.unit
    def test_retries_from_environment(self, monkeypatch, scripted_backend):
        monkeypatch.setenv("WIDGY_GENERATION_RETRIES", "4")
        assert WidgetGenerator(scripted_backend([])).max_retries == 4

    @pytest.mark.unit
    def test_max_retries_error_message(self):
        assert str(MaxRetriesExceededError(0)) == "Failed after multiple attempts"
