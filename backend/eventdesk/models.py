"""Domain models used by the EventDesk lifecycle engine."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

DEFAULT_MONTHLY_GOAL = Decimal("10000")


class ProposalStage(str, enum.Enum):
    SENT = "Sent"
    ANALYSIS = "Analysis"
    CLOSING = "Closing"
    CLOSED = "Closed"
    LOST = "Lost"


TERMINAL_STAGES = (ProposalStage.CLOSED, ProposalStage.LOST)


class EventCategory(str, enum.Enum):
    DJ = "DJ"
    PHOTOGRAPHY = "Photography"
    DECORATION = "Decoration"
    OTHER = "Other"


class CostCategory(str, enum.Enum):
    CREW = "Crew"
    TRANSPORT = "Transport"
    FOOD = "Food"
    EQUIPMENT = "Equipment"
    OTHER = "Other"


class TransactionStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


class TransactionType(str, enum.Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


@dataclass(frozen=True)
class Proposal:
    """A sales quote tracked through the pipeline until won or lost."""

    id: str
    client_name: str
    event_name: str
    amount: Decimal
    date: date
    stage: ProposalStage = ProposalStage.SENT
    description: Optional[str] = None
    service_type: Optional[str] = None


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    text: str
    done: bool = False


@dataclass(frozen=True)
class TimelineItem:
    id: str
    time: str
    title: str
    description: str = ""


@dataclass(frozen=True)
class EventCost:
    id: str
    description: str
    amount: Decimal
    category: CostCategory = CostCategory.OTHER


@dataclass(frozen=True)
class Event:
    """A calendar entry, either created explicitly or derived from a closed proposal."""

    id: str
    title: str
    date: date
    category: EventCategory = EventCategory.OTHER
    client_name: str = ""
    location: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    checklist: tuple[ChecklistItem, ...] = ()
    timeline: tuple[TimelineItem, ...] = ()
    costs: tuple[EventCost, ...] = ()
    amount: Optional[Decimal] = None
    proposal_id: Optional[str] = None

    @property
    def is_derived(self) -> bool:
        return self.proposal_id is not None


@dataclass(frozen=True)
class Transaction:
    """An income or expense entry; ``proposal_id`` is set only on auto-generated receivables."""

    id: str
    description: str
    amount: Decimal
    date: date
    client_name: str = ""
    category: str = ""
    status: TransactionStatus = TransactionStatus.PENDING
    type: TransactionType = TransactionType.INCOME
    proposal_id: Optional[str] = None


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    phone: str = ""
    email: str = ""


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    category: str = ""
    phone: str = ""


@dataclass(frozen=True)
class ServicePackage:
    id: str
    name: str
    price: Decimal
    description: str = ""


@dataclass(frozen=True)
class MessageTemplates:
    proposal_send: str = ""
    review_request: str = ""
    timeline_share: str = ""


@dataclass(frozen=True)
class BusinessProfile:
    """Per-account singleton; only ``monthly_goal`` feeds the ledger."""

    name: str = ""
    category: str = ""
    phone: str = ""
    email: str = ""
    pix_key_type: str = ""
    pix_key: str = ""
    monthly_goal: Optional[Decimal] = None
    contract_terms: str = ""
    bio: str = ""
    instagram: str = ""
    website: str = ""
    message_templates: MessageTemplates = field(default_factory=MessageTemplates)


__all__ = [
    "BusinessProfile",
    "ChecklistItem",
    "Client",
    "CostCategory",
    "DEFAULT_MONTHLY_GOAL",
    "Event",
    "EventCategory",
    "EventCost",
    "MessageTemplates",
    "Proposal",
    "ProposalStage",
    "ServicePackage",
    "Supplier",
    "TERMINAL_STAGES",
    "TimelineItem",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
]
