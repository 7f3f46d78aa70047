"""OpenAI provider."""

from maestro.providers.openai.ai import OpenAIAIProvider
from maestro.providers.openai.config import OpenAIConfig

__all__ = ["OpenAIAIProvider", "OpenAIConfig"]
