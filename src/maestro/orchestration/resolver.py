"""Target resolution: ask the oracle who should answer, then validate.

The oracle's answer is untrusted free text. It may name somebody who is not
in the room, echo the sender, or not arrive at all. :class:`TargetResolver`
therefore walks a fallback ladder whenever the answer is unusable:

1. the oracle's answer, if it names a known participant other than the
   sender;
2. a uniformly random known participant, redrawn while it is the sender,
   at most ``max_fallback_draws`` draws in total;
3. the sender itself.

The ladder always ends on a deliverable id as long as at least one
participant is known, so callers never have to handle an exception.
"""

from __future__ import annotations

import logging
import random

from maestro.core.backlog import ConversationBacklog
from maestro.core.registry import ParticipantRegistry
from maestro.models.enums import TargetSource
from maestro.models.message import ChatMessage, ResolvedTarget
from maestro.orchestration.prompt import build_context
from maestro.providers.ai.base import AIProvider, ProviderError

logger = logging.getLogger("maestro.orchestration.resolver")

DEFAULT_MAX_FALLBACK_DRAWS = 5

_WRAPPING_CHARS = "\"'`* \t"
_TRAILING_PUNCTUATION = ".!?,:;"


def normalize_answer(answer: str) -> str:
    """Reduce a raw oracle answer to a single name or id token.

    Keeps the first non-blank line and strips surrounding quotes, markdown
    emphasis, a leading ``@`` and trailing punctuation.
    """
    line = next((ln for ln in answer.splitlines() if ln.strip()), "")
    token = line.strip().strip(_WRAPPING_CHARS)
    token = token.removeprefix("@")
    token = token.rstrip(_TRAILING_PUNCTUATION).strip(_WRAPPING_CHARS)
    return token


class TargetResolver:
    """Decides which participant receives a newly arrived message."""

    def __init__(
        self,
        provider: AIProvider,
        registry: ParticipantRegistry,
        backlog: ConversationBacklog,
        *,
        max_fallback_draws: int = DEFAULT_MAX_FALLBACK_DRAWS,
        temperature: float = 1.0,
        max_tokens: int = 100,
        rng: random.Random | None = None,
    ) -> None:
        if max_fallback_draws < 0:
            raise ValueError(f"max_fallback_draws must be >= 0, got {max_fallback_draws}")
        self._provider = provider
        self._registry = registry
        self._backlog = backlog
        self._max_fallback_draws = max_fallback_draws
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._rng = rng or random.Random()

    async def resolve(self, message: ChatMessage) -> ResolvedTarget | None:
        """Route *message* to a participant.

        The message joins the backlog before the oracle is asked, even if
        resolution ends up on a fallback. The answer is matched verbatim
        first and only normalized when that finds nobody, so ids and names
        that contain punctuation still match exactly. Returns ``None`` only
        when no participant is known at all.
        """
        self._backlog.append(message)
        answer = await self._ask_oracle()

        candidate = self._registry.resolve(answer.strip())
        if candidate is None:
            candidate = self._registry.resolve(normalize_answer(answer))
        if candidate is not None and candidate.id != message.sender_id:
            logger.debug(
                "Oracle picked %s",
                candidate.id,
                extra={"sender": message.sender_id, "answer": answer},
            )
            return ResolvedTarget(
                participant_id=candidate.id,
                source=TargetSource.ORACLE,
                oracle_answer=answer,
            )

        logger.info(
            "Failed to find target from oracle answer %r, picking random one",
            answer,
            extra={"sender": message.sender_id},
        )
        return self._fallback(message.sender_id, answer)

    async def _ask_oracle(self) -> str:
        context = build_context(
            self._registry.all(),
            self._backlog.snapshot(),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        try:
            response = await self._provider.generate(context)
        except ProviderError as exc:
            logger.warning(
                "Error while contacting oracle %s (%s): %s",
                exc.provider or self._provider.name,
                "transient" if exc.retryable else "permanent",
                exc,
                extra={"status_code": exc.status_code, "retryable": exc.retryable},
            )
            return ""
        except Exception:
            logger.exception("Oracle %s raised unexpectedly", self._provider.name)
            return ""
        return response.content or ""

    def _fallback(self, sender_id: str, answer: str) -> ResolvedTarget | None:
        participants = self._registry.all()
        if not participants:
            logger.critical("Could not find a participant to route the message to")
            return None

        for _ in range(self._max_fallback_draws):
            pick = self._rng.choice(participants)
            if pick.id != sender_id:
                return ResolvedTarget(
                    participant_id=pick.id,
                    source=TargetSource.FALLBACK_RANDOM,
                    oracle_answer=answer,
                )

        logger.info("No other participant drawn, routing back to sender %s", sender_id)
        return ResolvedTarget(
            participant_id=sender_id,
            source=TargetSource.FALLBACK_SELF,
            oracle_answer=answer,
        )
