"""String enums for maestro."""

from __future__ import annotations

from enum import StrEnum, unique


@unique
class TargetSource(StrEnum):
    """How a routing target was chosen."""

    ORACLE = "oracle"
    FALLBACK_RANDOM = "fallback_random"
    FALLBACK_SELF = "fallback_self"


@unique
class SendMode(StrEnum):
    """Delivery tier for an outbound copy of a message."""

    VISIBLE = "visible"
    SILENT = "silent"
