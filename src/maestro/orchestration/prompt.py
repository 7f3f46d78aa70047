"""Prompt construction for the routing oracle."""

from __future__ import annotations

from collections.abc import Iterable

from maestro.models.message import ChatMessage
from maestro.models.participant import Participant
from maestro.providers.ai.base import AIContext, AIMessage

SYSTEM_PROMPT = (
    "# Dialogue Orchestration\n"
    "## Goal\n"
    "Given a dialogue between a variable number of people, "
    "return the name of the person the last message "
    "is destined to, or the name of person who *should* "
    "respond to the last message.\n"
    "The provided name should never be the same as the person who sent the "
    "last message.\n"
    "If the message is not really destined to anyone, try to pick the name of someone who "
    "hasn't spoken yet from the list of known participants.\n"
    "If the last message mentions someone in their response, they should be prioritized as "
    "the person who should be receiving it.\n"
    "## Response\n"
    "Your response should only contain the name of the chosen person and "
    "nothing else. No other commentary needed.\n"
)

_PARTICIPANTS_HEADER = "## Known Participants\n"


def build_system_prompt(participants: Iterable[Participant]) -> str:
    """Return the instruction text followed by the known participant labels."""
    return SYSTEM_PROMPT + _PARTICIPANTS_HEADER + ", ".join(p.label for p in participants)


def build_turns(messages: Iterable[ChatMessage]) -> list[AIMessage]:
    """Render each backlog message as one user turn attributed to its author."""
    return [
        AIMessage(
            role="user",
            content=f"{m.display_name or m.sender_id}: {m.content.strip()}",
            metadata={"name": m.display_name or m.sender_id},
        )
        for m in messages
    ]


def build_context(
    participants: Iterable[Participant],
    messages: Iterable[ChatMessage],
    *,
    temperature: float = 1.0,
    max_tokens: int = 100,
) -> AIContext:
    return AIContext(
        system_prompt=build_system_prompt(participants),
        messages=build_turns(messages),
        temperature=temperature,
        max_tokens=max_tokens,
    )
