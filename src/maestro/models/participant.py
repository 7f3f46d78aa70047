"""Participant model."""

from __future__ import annotations

from pydantic import BaseModel


class Participant(BaseModel):
    """A participant known to the room.

    ``display_name`` stays ``None`` until the participant is observed
    speaking; presence data only ever carries ids.
    """

    id: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        """Name shown to the oracle: the display name if known, else the id."""
        return self.display_name or self.id
