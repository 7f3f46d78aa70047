"""Exception hierarchy for maestro."""

from __future__ import annotations


class MaestroError(Exception):
    """Base exception for all maestro errors."""


class TransportConnectError(MaestroError):
    """The chat transport could not connect or authenticate to the room."""


class TransportNotConnectedError(MaestroError):
    """A send was attempted on a transport that is not connected."""
