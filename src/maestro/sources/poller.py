"""Periodic presence polling."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from maestro.core.registry import ParticipantRegistry
from maestro.sources.presence import PresenceSource

logger = logging.getLogger("maestro.sources.poller")

DEFAULT_POLL_INTERVAL = 15.0


class PresencePoller:
    """Adds participants reported by a :class:`PresenceSource` to a registry.

    The poller only ever adds participants; nobody is forgotten when they
    leave the room. A failed tick is logged and the next tick runs as
    usual.
    """

    def __init__(
        self,
        source: PresenceSource,
        registry: ParticipantRegistry,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._source = source
        self._registry = registry
        self._interval = interval
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> list[str]:
        """Fetch presence once and register unknown ids. Returns the new ids."""
        ids = await self._source.fetch_participants()
        added = self._registry.upsert_from_presence(ids)
        self.ticks += 1
        if added:
            logger.info("New participants: %s", added)
        logger.debug("Known participants: %s", [p.label for p in self._registry.all()])
        return added

    async def run(self) -> None:
        """Poll until :meth:`stop` is called."""
        self._stop_event.clear()
        while not self._stop_event.is_set():
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Presence poll failed")
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)

    def start(self) -> asyncio.Task[None]:
        """Spawn :meth:`run` as a background task."""
        if self.running:
            assert self._task is not None
            return self._task
        self._task = asyncio.create_task(self.run(), name="presence-poller")
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
