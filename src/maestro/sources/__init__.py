"""Presence sources and polling."""

from maestro.sources.poller import DEFAULT_POLL_INTERVAL, PresencePoller
from maestro.sources.presence import (
    HTTPPresenceConfig,
    HTTPPresenceSource,
    MockPresenceSource,
    PresenceSource,
    presence_url_from_endpoint,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "HTTPPresenceConfig",
    "HTTPPresenceSource",
    "MockPresenceSource",
    "PresencePoller",
    "PresenceSource",
    "presence_url_from_endpoint",
]
