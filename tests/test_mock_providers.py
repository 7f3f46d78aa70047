"""Tests for the mock collaborators."""

from __future__ import annotations

import pytest

from maestro.core.errors import TransportConnectError
from maestro.providers.ai.base import AIContext, AIMessage, ProviderError
from maestro.providers.ai.mock import FailingAIProvider, MockAIProvider
from maestro.sources.presence import MockPresenceSource
from maestro.transport.base import Credentials, TransportStatus
from maestro.transport.mock import MockTransport


class TestMockAIProvider:
    async def test_round_robin(self) -> None:
        provider = MockAIProvider(responses=["A", "B"])
        ctx = AIContext(messages=[AIMessage(role="user", content="x")])
        results = [await provider.generate(ctx) for _ in range(3)]
        assert [r.content for r in results] == ["A", "B", "A"]
        assert len(provider.calls) == 3

    async def test_failing(self) -> None:
        provider = FailingAIProvider()
        with pytest.raises(ProviderError):
            await provider.generate(AIContext())
        assert len(provider.calls) == 1


class TestMockPresenceSource:
    async def test_repeats_last_snapshot(self) -> None:
        source = MockPresenceSource([["a"], ["a", "b"]])
        assert await source.fetch_participants() == ["a"]
        assert await source.fetch_participants() == ["a", "b"]
        assert await source.fetch_participants() == ["a", "b"]


class TestMockTransport:
    async def test_connect_and_emit(self) -> None:
        transport = MockTransport()
        received = []
        transport.on_text(received.append)

        await transport.connect("ws://x", "r", Credentials(user="u", password="p"))
        transport.emit("a", "Alice", "hi")

        assert transport.status == TransportStatus.CONNECTED
        assert [m.content for m in received] == ["hi"]

    async def test_connect_failure(self) -> None:
        transport = MockTransport(fail_connect="refused")
        with pytest.raises(TransportConnectError):
            await transport.connect("ws://x", "r", Credentials(user="u", password="p"))
        assert transport.status == TransportStatus.ERROR
