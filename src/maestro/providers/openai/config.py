"""OpenAI provider configuration."""

from __future__ import annotations

from pydantic import BaseModel, SecretStr


class OpenAIConfig(BaseModel):
    """OpenAI oracle configuration.

    Attributes:
        api_key: API key for authentication.
        base_url: Custom base URL for OpenAI-compatible APIs (e.g. Ollama,
            LM Studio, vLLM). If None, uses the default OpenAI API.
        model: Model identifier to use.
        max_tokens: Maximum tokens in the response. A routing answer is a
            single name, so this stays small.
        temperature: Sampling temperature.
    """

    api_key: SecretStr
    base_url: str | None = None
    model: str = "gpt-4o-mini"
    max_tokens: int = 100
    temperature: float = 1.0
    timeout: float = 60.0
    """HTTP request timeout in seconds."""
