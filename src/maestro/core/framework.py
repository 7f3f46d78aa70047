"""The routing engine for one chat room."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING

from maestro.core.backlog import DEFAULT_MAX_BACKLOG, ConversationBacklog
from maestro.core.errors import MaestroError, TransportConnectError, TransportNotConnectedError
from maestro.core.registry import ParticipantRegistry
from maestro.models.message import ChatMessage, ResolvedTarget
from maestro.orchestration.dispatch import DispatchCoordinator
from maestro.orchestration.resolver import DEFAULT_MAX_FALLBACK_DRAWS, TargetResolver
from maestro.providers.ai.base import AIProvider
from maestro.sources.poller import DEFAULT_POLL_INTERVAL, PresencePoller
from maestro.sources.presence import PresenceSource
from maestro.transport.base import ChatTransport, Credentials

if TYPE_CHECKING:
    from maestro.config import MaestroConfig

__all__ = [
    "Maestro",
    "MaestroError",
    "TransportConnectError",
    "TransportNotConnectedError",
]

logger = logging.getLogger("maestro.core.framework")


class Maestro:
    """Routes every message in a room to the participant who should answer.

    Owns the participant registry, the conversation backlog, the resolver,
    the dispatch coordinator and (when a presence source is given) the
    presence poller for exactly one room.

    Each inbound message is handled in its own task. Because resolution
    awaits the oracle, two messages arriving close together may see each
    other in their backlog context. Pass ``serialize_resolution=True`` to
    resolve one message at a time instead.

    Usage::

        maestro = Maestro(transport, provider, presence=presence, self_id="maestro")
        await maestro.start(url, room, Credentials(user="maestro", password="..."))
        await maestro.run_forever()
    """

    def __init__(
        self,
        transport: ChatTransport,
        provider: AIProvider,
        *,
        presence: PresenceSource | None = None,
        self_id: str | None = None,
        max_backlog: int = DEFAULT_MAX_BACKLOG,
        max_fallback_draws: int = DEFAULT_MAX_FALLBACK_DRAWS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        serialize_resolution: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.transport = transport
        self.provider = provider
        self.presence = presence
        self.registry = ParticipantRegistry(exclude_ids=[self_id] if self_id else ())
        self.backlog = ConversationBacklog(max_backlog)
        self.resolver = TargetResolver(
            provider,
            self.registry,
            self.backlog,
            max_fallback_draws=max_fallback_draws,
            rng=rng,
        )
        self.dispatcher = DispatchCoordinator(transport)
        self.poller = (
            PresencePoller(presence, self.registry, interval=poll_interval)
            if presence is not None
            else None
        )
        self._resolution_lock = asyncio.Lock() if serialize_resolution else None
        self._tasks: set[asyncio.Task[ResolvedTarget | None]] = set()
        self._closed = asyncio.Event()
        self._session_lost = False

    @classmethod
    def from_config(cls, config: MaestroConfig) -> Maestro:
        """Build an engine wired to the WebSocket, HTTP and OpenAI bindings."""
        from maestro.providers.openai import OpenAIAIProvider, OpenAIConfig
        from maestro.sources.presence import HTTPPresenceConfig, HTTPPresenceSource
        from maestro.transport.websocket import WebSocketTransport

        provider = OpenAIAIProvider(
            OpenAIConfig(
                api_key=config.openai_key,
                base_url=config.openai_base_url,
                model=config.model,
            )
        )
        presence = HTTPPresenceSource(
            HTTPPresenceConfig(url=config.presence_url or "", room=config.room)
        )
        return cls(
            WebSocketTransport(),
            provider,
            presence=presence,
            self_id=config.user,
            max_backlog=config.max_backlog,
            max_fallback_draws=config.max_fallback_draws,
            poll_interval=config.poll_interval,
            serialize_resolution=config.serialize_resolution,
        )

    # -- Inbound ---------------------------------------------------------------

    async def handle_text(self, message: ChatMessage) -> ResolvedTarget | None:
        """Learn the sender, resolve a target and dispatch the message."""
        logger.info("Incoming: %s : %s", message.display_name, message.content)
        self.registry.observe_speaker(message.sender_id, message.display_name)

        if self._resolution_lock is not None:
            async with self._resolution_lock:
                target = await self.resolver.resolve(message)
        else:
            target = await self.resolver.resolve(message)

        await self.dispatcher.dispatch(
            message.sender_id,
            message.display_name,
            message.content,
            target,
            self.registry.all(),
        )
        return target

    def on_text(self, message: ChatMessage) -> asyncio.Task[ResolvedTarget | None]:
        """Transport callback: handle *message* in its own task."""
        task = asyncio.create_task(self.handle_text(message))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[ResolvedTarget | None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Message handling failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait until every in-flight message has been dispatched."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -- Lifecycle -------------------------------------------------------------

    async def start(self, url: str, room: str, credentials: Credentials) -> None:
        """Connect to *room* and begin routing.

        Raises:
            TransportConnectError: The transport could not connect. This
                ends the session; there is no automatic reconnect.
        """
        try:
            await self.transport.connect(url, room, credentials)
        except TransportConnectError as exc:
            logger.error("Failed to connect to server. Reason: %s", exc)
            raise
        self.transport.on_text(self.on_text)
        self.transport.on_disconnect(self._on_disconnect)
        if self.poller is not None:
            self.poller.start()
        logger.info("Routing room %s", room)

    @property
    def session_lost(self) -> bool:
        """True once the transport dropped a connection this engine did not close."""
        return self._session_lost

    def _on_disconnect(self) -> None:
        logger.error("Connection to the chat server was lost")
        self._session_lost = True
        self._closed.set()

    async def run_forever(self) -> None:
        """Block until :meth:`close` is called or the connection is lost.

        A lost connection is not re-established; call :meth:`close` afterwards
        to stop the poller and release the oracle and presence clients.
        """
        await self._closed.wait()

    async def close(self) -> None:
        if self.poller is not None:
            await self.poller.stop()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self.transport.close()
        await self.provider.close()
        if self.presence is not None:
            await self.presence.close()
        self._closed.set()
