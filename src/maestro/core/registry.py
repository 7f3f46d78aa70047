"""Participant registry for a single room."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from maestro.models.participant import Participant

logger = logging.getLogger("maestro.core.registry")


class ParticipantRegistry:
    """Insertion-ordered mapping of participant ids to :class:`Participant`.

    Entries are created lazily, either from presence data (id only) or
    when a participant is observed speaking (id and display name), and are
    never removed.

    Name lookups are ambiguous when two participants share a display name:
    :meth:`resolve` returns the first one registered.
    """

    def __init__(self, exclude_ids: Iterable[str] = ()) -> None:
        self._participants: dict[str, Participant] = {}
        self._exclude_ids = frozenset(exclude_ids)

    def upsert_from_presence(self, ids: Iterable[str]) -> list[str]:
        """Register every unknown id with no display name.

        Known participants are left untouched, so a name learned from a
        message is never overwritten. Returns the ids that were added.
        """
        added: list[str] = []
        for participant_id in ids:
            if participant_id in self._exclude_ids or participant_id in self._participants:
                continue
            self._participants[participant_id] = Participant(id=participant_id)
            added.append(participant_id)
        if added:
            logger.debug("Registered %d participant(s) from presence: %s", len(added), added)
        return added

    def observe_speaker(self, participant_id: str, display_name: str) -> Participant:
        """Record that *participant_id* spoke under *display_name*."""
        participant = self._participants.get(participant_id)
        if participant is None:
            participant = Participant(id=participant_id, display_name=display_name)
            self._participants[participant_id] = participant
            logger.debug("New speaker %s (%s)", participant_id, display_name)
        elif participant.display_name != display_name:
            participant.display_name = display_name
        return participant

    def resolve(self, token: str) -> Participant | None:
        """Find a participant by exact id, then by exact display name."""
        if not token:
            return None
        participant = self._participants.get(token)
        if participant is not None:
            return participant
        for candidate in self._participants.values():
            if candidate.display_name == token:
                return candidate
        return None

    def get(self, participant_id: str) -> Participant | None:
        return self._participants.get(participant_id)

    def all(self) -> list[Participant]:
        return list(self._participants.values())

    def ids(self) -> list[str]:
        return list(self._participants)

    def __len__(self) -> int:
        return len(self._participants)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(self.all())
