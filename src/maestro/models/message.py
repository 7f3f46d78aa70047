"""Message, routing target and send instruction models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from maestro.models.enums import SendMode, TargetSource


class ChatMessage(BaseModel):
    """A text message as received from the chat transport."""

    sender_id: str
    display_name: str
    content: str
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ResolvedTarget(BaseModel):
    """The participant a message is routed to, and how it was picked."""

    participant_id: str
    source: TargetSource
    oracle_answer: str = ""


class SendInstruction(BaseModel):
    """One outbound delivery produced by the dispatch coordinator."""

    mode: SendMode
    display_name: str
    content: str
    recipient_ids: list[str] = Field(default_factory=list)
