"""Chat transports."""

from maestro.transport.base import (
    ChatTransport,
    Credentials,
    DisconnectHandler,
    TextHandler,
    TransportStatus,
)
from maestro.transport.mock import MockTransport
from maestro.transport.websocket import (
    WebSocketTransport,
    WebSocketTransportConfig,
    parse_frame,
)

__all__ = [
    "ChatTransport",
    "Credentials",
    "DisconnectHandler",
    "MockTransport",
    "TextHandler",
    "TransportStatus",
    "WebSocketTransport",
    "WebSocketTransportConfig",
    "parse_frame",
]
