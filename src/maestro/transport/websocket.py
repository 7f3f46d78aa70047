"""WebSocket chat transport.

Speaks a small JSON protocol, one object per text frame::

    -> {"type": "login", "room": "...", "user": "...", "pass": "..."}
    <- {"type": "login", "ok": true}
    <- {"type": "text", "from": "<id>", "payload": {"name": "...", "content": "..."}}
    -> {"type": "text", "to": ["<id>"], "payload": {"name": "...", "content": "..."}}
    -> {"type": "data", "to": ["<id>"], "payload": {"name": "...", "content": "..."}}

``text`` frames are shown to their recipients, ``data`` frames are
delivered silently.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any

import websockets
from pydantic import BaseModel

from maestro.core.errors import TransportConnectError, TransportNotConnectedError
from maestro.models.message import ChatMessage
from maestro.transport.base import ChatTransport, Credentials, TransportStatus

logger = logging.getLogger("maestro.transport.websocket")


class WebSocketTransportConfig(BaseModel):
    """Connection tuning for :class:`WebSocketTransport`."""

    login_timeout: float = 10.0
    ping_interval: float | None = 20.0
    ping_timeout: float | None = 20.0
    close_timeout: float = 10.0
    max_size: int = 2**20  # 1 MB


def parse_frame(raw: str | bytes) -> ChatMessage | None:
    """Convert an inbound frame into a :class:`ChatMessage`.

    Returns ``None`` for anything that is not a text message (acks,
    presence notices, malformed JSON).
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        if not isinstance(data, dict) or data.get("type", "text") != "text":
            return None
        payload = data["payload"]
        return ChatMessage(
            sender_id=str(data["from"]),
            display_name=str(payload.get("name") or data["from"]),
            content=str(payload.get("content", "")),
        )
    except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, AttributeError) as e:
        logger.debug("Failed to parse frame: %s", e)
        return None


class WebSocketTransport(ChatTransport):
    """Chat transport over a single WebSocket connection.

    The connection is not re-established if it drops; the session ends and
    the status moves to ``ERROR``.
    """

    def __init__(self, config: WebSocketTransportConfig | None = None) -> None:
        super().__init__()
        self._config = config or WebSocketTransportConfig()
        self._ws: Any = None
        self._receive_task: asyncio.Task[None] | None = None
        self._messages_received = 0

    @property
    def messages_received(self) -> int:
        return self._messages_received

    async def connect(self, url: str, room: str, credentials: Credentials) -> None:
        self._status = TransportStatus.CONNECTING
        try:
            ws = await websockets.connect(
                url,
                ping_interval=self._config.ping_interval,
                ping_timeout=self._config.ping_timeout,
                close_timeout=self._config.close_timeout,
                max_size=self._config.max_size,
            )
        except Exception as exc:
            self._status = TransportStatus.ERROR
            raise TransportConnectError(f"Could not reach {url}: {exc}") from exc

        try:
            await self._login(ws, room, credentials)
        except BaseException:
            self._status = TransportStatus.ERROR
            with contextlib.suppress(Exception):
                await ws.close()
            raise

        self._ws = ws
        self._status = TransportStatus.CONNECTED
        logger.info("Connected to %s (room %s) as %s", url, room, credentials.user)
        self._receive_task = asyncio.create_task(self._receive_loop(ws))

    async def _login(self, ws: Any, room: str, credentials: Credentials) -> None:
        frame = {
            "type": "login",
            "room": room,
            "user": credentials.user,
            "pass": credentials.password.get_secret_value(),
        }
        try:
            await ws.send(json.dumps(frame))
            raw = await asyncio.wait_for(ws.recv(), timeout=self._config.login_timeout)
        except TimeoutError as exc:
            raise TransportConnectError("Timed out waiting for login reply") from exc
        except Exception as exc:
            raise TransportConnectError(f"Login failed: {exc}") from exc

        try:
            reply = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise TransportConnectError(f"Malformed login reply: {raw!r}") from exc
        if not isinstance(reply, dict) or not reply.get("ok"):
            reason = reply.get("reason", "refused") if isinstance(reply, dict) else "refused"
            raise TransportConnectError(f"Login rejected: {reason}")

    async def _receive_loop(self, ws: Any) -> None:
        """Read frames until the connection closes."""
        while True:
            try:
                raw = await ws.recv()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._ws = None
                if self._status == TransportStatus.CONNECTED:
                    logger.error("WebSocket connection lost: %s", e)
                    self._status = TransportStatus.ERROR
                    self._notify_disconnect()
                return

            message = parse_frame(raw)
            if message is None:
                continue
            self._messages_received += 1
            try:
                self._deliver(message)
            except Exception:
                logger.exception("Text handler failed for message from %s", message.sender_id)

    async def _send_frame(
        self, kind: str, display_name: str, content: str, recipient_ids: list[str]
    ) -> None:
        if self._ws is None or self._status != TransportStatus.CONNECTED:
            raise TransportNotConnectedError("WebSocket not connected")
        frame = {
            "type": kind,
            "to": list(recipient_ids),
            "payload": {"name": display_name, "content": content},
        }
        await self._ws.send(json.dumps(frame))

    async def send_visible(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        await self._send_frame("text", display_name, content, recipient_ids)

    async def send_silent(self, display_name: str, content: str, recipient_ids: list[str]) -> None:
        await self._send_frame("data", display_name, content, recipient_ids)

    async def close(self) -> None:
        self._status = TransportStatus.DISCONNECTED
        if self._receive_task is not None:
            self._receive_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._receive_task
            self._receive_task = None
        if self._ws is not None:
            with contextlib.suppress(Exception):
                await self._ws.close()
            self._ws = None
        logger.info("WebSocket transport closed")
