"""Turn a resolved target into outbound sends.

Every participant sees every message, but only the target is prompted to
respond: the target gets a visible copy, everyone else except the sender
gets a silent one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from maestro.models.enums import SendMode
from maestro.models.message import ResolvedTarget, SendInstruction
from maestro.models.participant import Participant
from maestro.transport.base import ChatTransport

logger = logging.getLogger("maestro.orchestration.dispatch")


def plan_dispatch(
    sender_id: str,
    display_name: str,
    content: str,
    target: ResolvedTarget,
    participants: Iterable[Participant],
) -> list[SendInstruction]:
    """Build the send instructions for one routed message.

    The visible send always comes first.
    """
    instructions = [
        SendInstruction(
            mode=SendMode.VISIBLE,
            display_name=display_name,
            content=content,
            recipient_ids=[target.participant_id],
        )
    ]
    for participant in participants:
        if participant.id in (target.participant_id, sender_id):
            continue
        instructions.append(
            SendInstruction(
                mode=SendMode.SILENT,
                display_name=display_name,
                content=content,
                recipient_ids=[participant.id],
            )
        )
    return instructions


class DispatchCoordinator:
    """Hands send instructions to the chat transport."""

    def __init__(self, transport: ChatTransport) -> None:
        self._transport = transport

    async def dispatch(
        self,
        sender_id: str,
        display_name: str,
        content: str,
        target: ResolvedTarget | None,
        participants: Iterable[Participant],
    ) -> list[SendInstruction]:
        """Deliver one routed message.

        Transport failures are logged per send and do not stop the remaining
        sends. Returns the instructions that were issued.
        """
        if target is None:
            logger.critical(
                "Could not find a participant to send the message to",
                extra={"sender": sender_id},
            )
            return []

        instructions = plan_dispatch(sender_id, display_name, content, target, participants)
        logger.info(
            "Sending to %s (%s), silent copies to %d participant(s)",
            target.participant_id,
            target.source,
            len(instructions) - 1,
        )
        for instruction in instructions:
            send = (
                self._transport.send_visible
                if instruction.mode == SendMode.VISIBLE
                else self._transport.send_silent
            )
            try:
                await send(instruction.display_name, instruction.content, instruction.recipient_ids)
            except Exception:
                logger.exception(
                    "Failed %s send to %s", instruction.mode, instruction.recipient_ids
                )
        return instructions
