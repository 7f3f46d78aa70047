"""Tests for the WebSocket chat transport."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from maestro.core.errors import TransportConnectError, TransportNotConnectedError
from maestro.models.message import ChatMessage
from maestro.transport.base import Credentials, TransportStatus
from maestro.transport.websocket import (
    WebSocketTransport,
    WebSocketTransportConfig,
    parse_frame,
)

CREDS = Credentials(user="maestro", password="secret")
LOGIN_OK = json.dumps({"type": "login", "ok": True})


def _text_frame(sender: str, name: str, content: str) -> str:
    return json.dumps({"type": "text", "from": sender, "payload": {"name": name, "content": content}})


# =============================================================================
# parse_frame
# =============================================================================


class TestParseFrame:
    def test_text_frame(self) -> None:
        msg = parse_frame(_text_frame("u-1", "Alice", "hi"))
        assert msg is not None
        assert (msg.sender_id, msg.display_name, msg.content) == ("u-1", "Alice", "hi")

    def test_bytes_frame(self) -> None:
        msg = parse_frame(_text_frame("u-1", "Alice", "hi").encode())
        assert msg is not None
        assert msg.content == "hi"

    def test_untyped_frame_is_text(self) -> None:
        msg = parse_frame(json.dumps({"from": "u-1", "payload": {"name": "A", "content": "x"}}))
        assert msg is not None

    def test_missing_name_uses_sender_id(self) -> None:
        msg = parse_frame(json.dumps({"from": "u-1", "payload": {"content": "x"}}))
        assert msg is not None
        assert msg.display_name == "u-1"

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2]",
            json.dumps({"type": "data", "from": "u-1", "payload": {}}),
            json.dumps({"type": "text", "payload": {"content": "x"}}),
            json.dumps({"type": "text", "from": "u-1"}),
            json.dumps({"type": "text", "from": "u-1", "payload": "oops"}),
            b"\xff\xfe",
        ],
    )
    def test_ignored_frames(self, raw: str | bytes) -> None:
        assert parse_frame(raw) is None


# =============================================================================
# WebSocketTransport with mocked websockets
# =============================================================================


class TestWebSocketTransport:
    @pytest.fixture
    def mock_websockets(self):
        """Replace the websockets module used by the transport."""
        import maestro.transport.websocket as ws_module

        original = ws_module.websockets
        mock = MagicMock()
        ws_module.websockets = mock
        yield mock
        ws_module.websockets = original

    @staticmethod
    def _mock_ws(frames: list[object]) -> AsyncMock:
        ws = AsyncMock()
        ws.recv = AsyncMock(side_effect=frames)
        ws.send = AsyncMock()
        ws.close = AsyncMock()
        return ws

    async def test_login_and_receive(self, mock_websockets) -> None:
        ws = self._mock_ws(
            [
                LOGIN_OK,
                _text_frame("u-1", "Alice", "hello"),
                json.dumps({"type": "data", "from": "u-2", "payload": {}}),
                _text_frame("u-2", "Bob", "hey"),
                ConnectionError("closed"),
            ]
        )
        mock_websockets.connect = AsyncMock(return_value=ws)

        transport = WebSocketTransport()
        received: list[ChatMessage] = []
        transport.on_text(received.append)

        await transport.connect("ws://chat.example.com", "room-1", CREDS)
        await asyncio.sleep(0.01)

        login = json.loads(ws.send.call_args_list[0].args[0])
        assert login == {"type": "login", "room": "room-1", "user": "maestro", "pass": "secret"}
        assert [(m.sender_id, m.content) for m in received] == [("u-1", "hello"), ("u-2", "hey")]
        assert transport.messages_received == 2
        # Connection loss ends the session without reconnecting.
        assert transport.status == TransportStatus.ERROR
        assert mock_websockets.connect.await_count == 1

        await transport.close()

    async def test_sends_visible_and_silent(self, mock_websockets) -> None:
        gate = asyncio.Event()
        calls = 0

        async def recv() -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                return LOGIN_OK
            await gate.wait()
            raise ConnectionError("closed")

        ws = self._mock_ws([])
        ws.recv = AsyncMock(side_effect=recv)
        mock_websockets.connect = AsyncMock(return_value=ws)

        transport = WebSocketTransport()
        await transport.connect("ws://chat.example.com", "room-1", CREDS)
        await transport.send_visible("Alice", "hi Bob", ["u-2"])
        await transport.send_silent("Alice", "hi Bob", ["u-3"])

        frames = [json.loads(c.args[0]) for c in ws.send.call_args_list[1:]]
        assert frames == [
            {"type": "text", "to": ["u-2"], "payload": {"name": "Alice", "content": "hi Bob"}},
            {"type": "data", "to": ["u-3"], "payload": {"name": "Alice", "content": "hi Bob"}},
        ]

        await transport.close()
        ws.close.assert_awaited()
        assert transport.status == TransportStatus.DISCONNECTED

    async def test_login_rejected(self, mock_websockets) -> None:
        ws = self._mock_ws([json.dumps({"type": "login", "ok": False, "reason": "bad password"})])
        mock_websockets.connect = AsyncMock(return_value=ws)

        transport = WebSocketTransport()
        with pytest.raises(TransportConnectError, match="bad password"):
            await transport.connect("ws://chat.example.com", "room-1", CREDS)

        assert transport.status == TransportStatus.ERROR
        ws.close.assert_awaited()

    async def test_login_timeout(self, mock_websockets) -> None:
        async def never() -> str:
            await asyncio.Event().wait()
            return ""

        ws = self._mock_ws([])
        ws.recv = AsyncMock(side_effect=never)
        mock_websockets.connect = AsyncMock(return_value=ws)

        transport = WebSocketTransport(WebSocketTransportConfig(login_timeout=0.01))
        with pytest.raises(TransportConnectError, match="Timed out"):
            await transport.connect("ws://chat.example.com", "room-1", CREDS)

    async def test_unreachable_server(self, mock_websockets) -> None:
        mock_websockets.connect = AsyncMock(side_effect=OSError("connection refused"))

        transport = WebSocketTransport()
        with pytest.raises(TransportConnectError, match="connection refused"):
            await transport.connect("ws://chat.example.com", "room-1", CREDS)
        assert transport.status == TransportStatus.ERROR

    async def test_send_when_not_connected(self) -> None:
        transport = WebSocketTransport()
        with pytest.raises(TransportNotConnectedError):
            await transport.send_visible("Alice", "hi", ["u-2"])

    async def test_handler_error_does_not_stop_loop(self, mock_websockets) -> None:
        ws = self._mock_ws(
            [
                LOGIN_OK,
                _text_frame("u-1", "Alice", "boom"),
                _text_frame("u-1", "Alice", "fine"),
                ConnectionError("closed"),
            ]
        )
        mock_websockets.connect = AsyncMock(return_value=ws)

        seen: list[str] = []

        def handler(msg: ChatMessage) -> None:
            seen.append(msg.content)
            if msg.content == "boom":
                raise RuntimeError("handler failed")

        transport = WebSocketTransport()
        transport.on_text(handler)
        await transport.connect("ws://chat.example.com", "room-1", CREDS)
        await asyncio.sleep(0.01)

        assert seen == ["boom", "fine"]
        await transport.close()

    async def test_connection_loss_notifies_once(self, mock_websockets) -> None:
        ws = self._mock_ws([LOGIN_OK, ConnectionError("reset by peer")])
        mock_websockets.connect = AsyncMock(return_value=ws)

        drops: list[TransportStatus] = []
        transport = WebSocketTransport()
        transport.on_disconnect(lambda: drops.append(transport.status))
        await transport.connect("ws://chat.example.com", "room-1", CREDS)
        await asyncio.sleep(0.01)

        assert drops == [TransportStatus.ERROR]
        with pytest.raises(TransportNotConnectedError):
            await transport.send_visible("Alice", "hi", ["u-2"])
        await transport.close()

    async def test_requested_close_does_not_notify(self, mock_websockets) -> None:
        gate = asyncio.Event()
        calls = 0

        async def recv() -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                return LOGIN_OK
            await gate.wait()
            raise ConnectionError("closed")

        ws = self._mock_ws([])
        ws.recv = AsyncMock(side_effect=recv)
        mock_websockets.connect = AsyncMock(return_value=ws)

        drops: list[str] = []
        transport = WebSocketTransport()
        transport.on_disconnect(lambda: drops.append("lost"))
        await transport.connect("ws://chat.example.com", "room-1", CREDS)
        await asyncio.sleep(0)
        await transport.close()

        assert drops == []
