"""Bounded conversation backlog."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from maestro.models.message import ChatMessage

DEFAULT_MAX_BACKLOG = 10


class ConversationBacklog:
    """Chronological window of the most recent messages.

    Once ``max_size`` messages are held, appending evicts the oldest.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_BACKLOG) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self._messages: deque[ChatMessage] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._messages.maxlen or 0

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def snapshot(self) -> list[ChatMessage]:
        """Return a copy of the backlog, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.snapshot())
