"""Mock AI provider for testing."""

from __future__ import annotations

from maestro.providers.ai.base import AIContext, AIProvider, AIResponse, ProviderError


class MockAIProvider(AIProvider):
    """Round-robin response provider for tests.

    Pass ``error`` to make every call raise it instead.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.responses = responses or [""]
        self.error = error
        self.calls: list[AIContext] = []
        self.closed = False
        self._index = 0

    @property
    def model_name(self) -> str:
        return "mock"

    async def generate(self, context: AIContext) -> AIResponse:
        self.calls.append(context)
        if self.error is not None:
            raise self.error
        content = self.responses[self._index % len(self.responses)]
        self._index += 1
        return AIResponse(
            content=content,
            finish_reason="stop",
            usage={"prompt_tokens": 10, "completion_tokens": 1},
        )

    async def close(self) -> None:
        self.closed = True


class FailingAIProvider(MockAIProvider):
    """Provider whose every call fails like an unreachable API."""

    def __init__(self, message: str = "connection refused") -> None:
        super().__init__(error=ProviderError(message, retryable=True, provider="mock"))
