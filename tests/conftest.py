"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import pytest

from maestro.core.backlog import ConversationBacklog
from maestro.core.registry import ParticipantRegistry
from maestro.models.message import ChatMessage
from maestro.transport.mock import MockTransport


@pytest.fixture
def advance() -> Callable[[int], Coroutine[Any, Any, None]]:
    """Yield control to let pending tasks run without real delay."""

    async def _advance(n: int = 5) -> None:
        for _ in range(n):
            await asyncio.sleep(0)

    return _advance


@pytest.fixture
def registry() -> ParticipantRegistry:
    return ParticipantRegistry()


@pytest.fixture
def backlog() -> ConversationBacklog:
    return ConversationBacklog()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


def make_message(
    sender_id: str = "u-alice",
    display_name: str = "Alice",
    content: str = "hello",
) -> ChatMessage:
    return ChatMessage(sender_id=sender_id, display_name=display_name, content=content)


class SequenceRandom:
    """Stands in for ``random.Random``: ``choice`` returns scripted picks by id."""

    def __init__(self, picks: list[str]) -> None:
        self._picks = picks
        self.draws = 0

    def choice(self, seq: Any) -> Any:
        wanted = self._picks[min(self.draws, len(self._picks) - 1)]
        self.draws += 1
        return next(p for p in seq if p.id == wanted)
