"""Abstract chat transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum, unique

from pydantic import BaseModel, SecretStr

from maestro.models.message import ChatMessage

# Inbound text handler. Called synchronously from the transport's receive
# loop, so it must not block; the orchestrator spawns a task per message.
TextHandler = Callable[[ChatMessage], None]

# Called once when an established connection is lost.
DisconnectHandler = Callable[[], None]


@unique
class TransportStatus(StrEnum):
    """Connection status for a chat transport."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class Credentials(BaseModel):
    """Account used by the engine to join the room."""

    user: str
    password: SecretStr


class ChatTransport(ABC):
    """Connection to a chat room.

    A transport delivers inbound text messages to the registered handler
    and accepts two kinds of outbound sends:

    * **visible** — shown to the recipients and prompts them to respond.
    * **silent** — delivered as background data so recipients keep their
      context current without being asked to act.

    Sends are fire-and-forget: delivery confirmation is the transport's
    concern.
    """

    def __init__(self) -> None:
        self._handler: TextHandler | None = None
        self._disconnect_handler: DisconnectHandler | None = None
        self._status = TransportStatus.DISCONNECTED

    @property
    def status(self) -> TransportStatus:
        return self._status

    def on_text(self, handler: TextHandler) -> None:
        """Register the handler for inbound text messages."""
        self._handler = handler

    def on_disconnect(self, handler: DisconnectHandler) -> None:
        """Register a callback for when an established connection drops.

        Not called for disconnects requested through :meth:`close`.
        """
        self._disconnect_handler = handler

    def _deliver(self, message: ChatMessage) -> None:
        if self._handler is not None:
            self._handler(message)

    def _notify_disconnect(self) -> None:
        if self._disconnect_handler is not None:
            self._disconnect_handler()

    @abstractmethod
    async def connect(self, url: str, room: str, credentials: Credentials) -> None:
        """Connect and authenticate to *room*.

        Raises:
            TransportConnectError: The server was unreachable or refused
                the credentials.
        """
        ...

    @abstractmethod
    async def send_visible(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        """Send *content* attributed to *display_name* as a visible message."""
        ...

    @abstractmethod
    async def send_silent(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        """Send *content* attributed to *display_name* as background data."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Disconnect. Override in subclasses that hold connections."""
        self._status = TransportStatus.DISCONNECTED
