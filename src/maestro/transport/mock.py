"""In-memory chat transport for tests."""

from __future__ import annotations

from typing import Any

from maestro.core.errors import TransportConnectError
from maestro.models.message import ChatMessage
from maestro.transport.base import ChatTransport, Credentials, TransportStatus


class MockTransport(ChatTransport):
    """Records every send; :meth:`emit` simulates an inbound message."""

    def __init__(self, *, fail_connect: str | None = None) -> None:
        super().__init__()
        self.fail_connect = fail_connect
        self.connected_to: tuple[str, str, str] | None = None
        self.visible: list[dict[str, Any]] = []
        self.silent: list[dict[str, Any]] = []

    async def connect(self, url: str, room: str, credentials: Credentials) -> None:
        if self.fail_connect is not None:
            self._status = TransportStatus.ERROR
            raise TransportConnectError(self.fail_connect)
        self.connected_to = (url, room, credentials.user)
        self._status = TransportStatus.CONNECTED

    async def send_visible(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        self.visible.append({"name": display_name, "content": content, "to": list(recipient_ids)})

    async def send_silent(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        self.silent.append({"name": display_name, "content": content, "to": list(recipient_ids)})

    def drop(self) -> None:
        """Simulate the server dropping an established connection."""
        self._status = TransportStatus.ERROR
        self._notify_disconnect()

    def emit(self, sender_id: str, display_name: str, content: str) -> ChatMessage:
        message = ChatMessage(sender_id=sender_id, display_name=display_name, content=content)
        self._deliver(message)
        return message
