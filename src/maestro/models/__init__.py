"""Data models for maestro."""

from maestro.models.enums import SendMode, TargetSource
from maestro.models.message import ChatMessage, ResolvedTarget, SendInstruction
from maestro.models.participant import Participant

__all__ = [
    "ChatMessage",
    "Participant",
    "ResolvedTarget",
    "SendInstruction",
    "SendMode",
    "TargetSource",
]
