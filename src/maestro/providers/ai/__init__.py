"""AI provider interface and test double."""

from maestro.providers.ai.base import (
    AIContext,
    AIMessage,
    AIProvider,
    AIResponse,
    ProviderError,
)
from maestro.providers.ai.mock import FailingAIProvider, MockAIProvider

__all__ = [
    "AIContext",
    "AIMessage",
    "AIProvider",
    "AIResponse",
    "FailingAIProvider",
    "MockAIProvider",
    "ProviderError",
]
