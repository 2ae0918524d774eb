"""Receivable generation for proposals that reach the Closed stage."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from .models import Proposal, Transaction, TransactionStatus, TransactionType

SERVICE_CATEGORY = "Service"


def receivable_description(proposal: Proposal) -> str:
    return f"Contract - {proposal.event_name}"


def on_proposal_closed(proposal: Proposal, *, today: date | None = None) -> Transaction:
    """Build the Pending income owed for a freshly closed proposal.

    The transaction is dated on the day of closing, not on the event date.
    Whether to call this at all is the pipeline's decision.
    """

    return Transaction(
        id=str(uuid4()),
        description=receivable_description(proposal),
        amount=proposal.amount,
        date=today or date.today(),
        client_name=proposal.client_name,
        category=SERVICE_CATEGORY,
        status=TransactionStatus.PENDING,
        type=TransactionType.INCOME,
        proposal_id=proposal.id,
    )


__all__ = ["SERVICE_CATEGORY", "on_proposal_closed", "receivable_description"]
