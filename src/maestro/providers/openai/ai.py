"""OpenAI oracle — answers routing questions via the Chat Completions API."""

from __future__ import annotations

import re
import time
from typing import Any

from maestro.providers.ai.base import (
    AIContext,
    AIMessage,
    AIProvider,
    AIResponse,
    ProviderError,
)
from maestro.providers.openai.config import OpenAIConfig

_THINK_RE = re.compile(r"<think>(.*?)</think>", re.DOTALL)

# Chat Completions only accepts this alphabet in the ``name`` field.
_NAME_INVALID_RE = re.compile(r"[^a-zA-Z0-9_-]")


class OpenAIAIProvider(AIProvider):
    """AI provider using the OpenAI Chat Completions API."""

    def __init__(self, config: OpenAIConfig) -> None:
        try:
            import openai as _openai
        except ImportError as exc:
            raise ImportError(
                "openai is required for OpenAIAIProvider. "
                "Install it with: pip install maestro-router"
            ) from exc
        self._config = config
        self._api_status_error = _openai.APIStatusError
        self._client = _openai.AsyncOpenAI(
            api_key=config.api_key.get_secret_value(),
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def _provider_name(self) -> str:
        """Provider identifier used in error messages."""
        return "openai"

    @property
    def model_name(self) -> str:
        return self._config.model

    def _build_messages(
        self,
        messages: list[AIMessage],
        system_prompt: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build OpenAI-formatted messages, carrying the author as ``name``."""
        result: list[dict[str, Any]] = []
        if system_prompt:
            result.append({"role": "system", "content": system_prompt})
        for m in messages:
            msg: dict[str, Any] = {"role": m.role, "content": m.content}
            name = _sanitize_name(m.metadata.get("name"))
            if name:
                msg["name"] = name
            result.append(msg)
        return result

    async def generate(self, context: AIContext) -> AIResponse:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": context.max_tokens or self._config.max_tokens,
            "messages": self._build_messages(context.messages, context.system_prompt),
            "stream": False,
        }
        temperature = context.temperature
        if temperature is None:
            temperature = self._config.temperature
        kwargs["temperature"] = temperature

        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except ProviderError:
            raise
        except self._api_status_error as exc:
            retryable = exc.status_code in (429, 500, 502, 503)
            raise ProviderError(
                str(exc),
                retryable=retryable,
                provider=self._provider_name,
                status_code=exc.status_code,
            ) from exc
        except Exception as exc:
            raise ProviderError(
                str(exc),
                retryable=False,
                provider=self._provider_name,
                status_code=None,
            ) from exc
        latency_ms = (time.monotonic() - t0) * 1000

        if not response.choices:
            return AIResponse(content="", metadata={"latency_ms": latency_ms})

        choice = response.choices[0]
        usage: dict[str, int] = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            }

        # Reasoning models served through OpenAI-compatible APIs wrap their
        # deliberation in <think> tags; only the answer is a routing token.
        content = _strip_think_tags(choice.message.content or "")

        return AIResponse(
            content=content,
            finish_reason=choice.finish_reason,
            usage=usage,
            metadata={"model": response.model, "latency_ms": latency_ms},
        )

    async def close(self) -> None:
        await self._client.close()


def _sanitize_name(name: object) -> str | None:
    if not isinstance(name, str):
        return None
    cleaned = _NAME_INVALID_RE.sub("_", name.strip())[:64]
    return cleaned or None


def _strip_think_tags(text: str) -> str:
    if "<think>" not in text:
        return text
    return _THINK_RE.sub("", text).strip()
