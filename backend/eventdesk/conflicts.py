"""Date-collision lookup for new proposals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .dates import DateLike, calendar_key
from .models import Event


@dataclass(frozen=True)
class ConflictAdvisory:
    """Non-blocking note that a proposal date is already taken by ``event``."""

    event: Event

    @property
    def message(self) -> str:
        return f"{self.event.date.isoformat()} is already booked: {self.event.title}"


def find_conflict(candidate: DateLike, events: Iterable[Event]) -> Event | None:
    """Return the first event sharing the candidate's calendar day, in caller order."""

    target = calendar_key(candidate)
    for event in events:
        if calendar_key(event.date) == target:
            return event
    return None


__all__ = ["ConflictAdvisory", "find_conflict"]
