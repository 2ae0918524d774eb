"""Unified calendar view: explicit events plus contract events from closed proposals."""

from __future__ import annotations

from typing import Iterable, List

from .dates import to_calendar_date
from .models import Event, EventCategory, Proposal, ProposalStage

DERIVED_ID_PREFIX = "prop-"
CONTRACT_TITLE_PREFIX = "(Contract) "
DAY_START = "00:00"
DAY_END = "23:59"


def derived_event_id(proposal_id: str) -> str:
    return f"{DERIVED_ID_PREFIX}{proposal_id}"


def contract_event(proposal: Proposal) -> Event:
    """Synthesize the read-only calendar entry for a closed proposal."""

    return Event(
        id=derived_event_id(proposal.id),
        title=f"{CONTRACT_TITLE_PREFIX}{proposal.event_name}",
        date=to_calendar_date(proposal.date),
        category=EventCategory.OTHER,
        client_name=proposal.client_name,
        start_time=DAY_START,
        end_time=DAY_END,
        amount=proposal.amount,
        proposal_id=proposal.id,
    )


def project_schedule(events: Iterable[Event], proposals: Iterable[Proposal]) -> List[Event]:
    """Return explicit events followed by one contract event per closed proposal.

    Explicit events that happen to describe the same occasion as a closed
    proposal are kept side by side; the two are different records.
    """

    schedule = list(events)
    schedule.extend(contract_event(p) for p in proposals if p.stage == ProposalStage.CLOSED)
    return schedule


__all__ = [
    "CONTRACT_TITLE_PREFIX",
    "DERIVED_ID_PREFIX",
    "contract_event",
    "derived_event_id",
    "project_schedule",
]
