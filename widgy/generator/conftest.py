"""Generator module test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from widgy.generator import GenerationBackend, GenerationError, GenerationRequest


class ScriptedBackend(GenerationBackend):
    """Backend replaying one scripted response per attempt.

    A response is either text (streamed in two chunks) or an exception to
    raise. Every request received is recorded.
    """

    def __init__(self, responses: list[str | GenerationError]):
        self.responses = list(responses)
        self.requests: list[GenerationRequest] = []

    @property
    def name(self) -> str:
        return "scripted"

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        middle = len(response) // 2
        yield response[:middle]
        yield response[middle:]


@pytest.fixture
def scripted_backend():
    """Factory for a ScriptedBackend."""
    return ScriptedBackend
