"""Presence sources: who is currently in the room."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger("maestro.sources.presence")

PRESENCE_PORT = 5000
PRESENCE_PATH = "/Websocket"


def presence_url_from_endpoint(url: str) -> str:
    """Derive the presence endpoint from the chat server endpoint.

    The presence API lives on the same host, over plain HTTP, on port
    5000 at ``/Websocket``.
    """
    parts = urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return urlunsplit(("http", f"{host}:{PRESENCE_PORT}", PRESENCE_PATH, "", ""))


class PresenceSource(ABC):
    """Returns the ids of the participants currently in the room."""

    @abstractmethod
    async def fetch_participants(self) -> list[str]:
        """Fetch participant ids.

        Implementations must not raise for network or format problems;
        they return an empty list instead.
        """
        ...

    async def close(self) -> None:  # noqa: B027
        """Release resources. Override in subclasses that hold connections."""


class HTTPPresenceConfig(BaseModel):
    """Configuration for :class:`HTTPPresenceSource`."""

    url: str
    room: str
    timeout: float = 10.0
    headers: dict[str, str] = Field(default_factory=lambda: {"Accept": "application/json"})


class HTTPPresenceSource(PresenceSource):
    """Polls ``GET <url>?roomId=<room>`` for a JSON array of ids."""

    def __init__(self, config: HTTPPresenceConfig) -> None:
        self._config = config
        self._client = httpx.AsyncClient(timeout=config.timeout)

    async def fetch_participants(self) -> list[str]:
        logger.debug("Fetching users from %s", self._config.url)
        try:
            resp = await self._client.get(
                self._config.url,
                params={"roomId": self._config.room},
                headers=self._config.headers,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Presence server returned HTTP %d", exc.response.status_code
            )
            return []
        except httpx.HTTPError as exc:
            logger.warning("Error when contacting server for user data: %s", exc)
            return []

        try:
            data: Any = resp.json()
        except ValueError:
            logger.warning("Error when parsing server user data")
            return []

        if not isinstance(data, list):
            logger.warning("Received wrong user data from server: %r", type(data).__name__)
            return []

        ids = [item for item in data if isinstance(item, str)]
        logger.debug("Users: %s", ids)
        return ids

    async def close(self) -> None:
        await self._client.aclose()


class MockPresenceSource(PresenceSource):
    """Returns scripted snapshots in order, repeating the last one."""

    def __init__(self, snapshots: list[list[str]] | None = None) -> None:
        self.snapshots = snapshots or [[]]
        self.calls = 0

    async def fetch_participants(self) -> list[str]:
        snapshot = self.snapshots[min(self.calls, len(self.snapshots) - 1)]
        self.calls += 1
        return list(snapshot)
