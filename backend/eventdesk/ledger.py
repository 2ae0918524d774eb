"""Read-side finance projections: dashboard KPIs, event margins and list filters.

Nothing here holds state. Every helper is a pure function of the records it is
given, so callers recompute whenever transactions, proposals or the goal change.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Literal, Sequence

from .models import (
    TERMINAL_STAGES,
    Event,
    Proposal,
    Transaction,
    TransactionStatus,
    TransactionType,
)

ZERO = Decimal("0")
RECEIVABLE_STATUSES = (TransactionStatus.PENDING, TransactionStatus.OVERDUE)

TransactionView = Literal["all", "pending", "paid"]


@dataclass(frozen=True)
class KPISet:
    receivable_total: Decimal
    received_total: Decimal
    expense_total: Decimal
    net_balance: Decimal
    active_proposals: int
    goal_attainment_pct: int


@dataclass(frozen=True)
class EventFinancials:
    revenue: Decimal
    total_costs: Decimal
    profit: Decimal
    margin_pct: Decimal


def _total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def is_receivable(transaction: Transaction) -> bool:
    return transaction.type == TransactionType.INCOME and transaction.status in RECEIVABLE_STATUSES


def goal_attainment(received: Decimal, monthly_goal: Decimal | int | float | None) -> int:
    """Percentage of the goal reached, rounded half up.

    A zero, missing or non-finite goal divides by 1 instead, which yields a
    large but finite percentage.
    """

    goal = Decimal(str(monthly_goal)) if monthly_goal else ZERO
    divisor = goal if goal.is_finite() and goal > 0 else Decimal("1")
    pct = (Decimal("100") * received / divisor).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(pct)


def compute_kpis(
    transactions: Sequence[Transaction],
    proposals: Sequence[Proposal],
    monthly_goal: Decimal | int | float | None,
) -> KPISet:
    receivable = _total(t for t in transactions if is_receivable(t))
    paid_income = _total(
        t for t in transactions if t.type == TransactionType.INCOME and t.status == TransactionStatus.PAID
    )
    paid_expense = _total(
        t for t in transactions if t.type == TransactionType.EXPENSE and t.status == TransactionStatus.PAID
    )
    active = sum(1 for p in proposals if p.stage not in TERMINAL_STAGES)
    return KPISet(
        receivable_total=receivable,
        received_total=paid_income,
        expense_total=paid_expense,
        net_balance=paid_income - paid_expense,
        active_proposals=active,
        goal_attainment_pct=goal_attainment(paid_income, monthly_goal),
    )


def event_financials(event: Event) -> EventFinancials:
    revenue = event.amount or ZERO
    total_costs = sum((c.amount for c in event.costs), ZERO)
    profit = revenue - total_costs
    margin = (profit / revenue * Decimal("100")) if revenue > 0 else ZERO
    return EventFinancials(revenue=revenue, total_costs=total_costs, profit=profit, margin_pct=margin)


def filter_transactions(transactions: Iterable[Transaction], view: TransactionView = "all") -> List[Transaction]:
    """Finance list: ``pending`` covers Pending and Overdue; newest first."""

    if view == "pending":
        selected = [t for t in transactions if t.status in RECEIVABLE_STATUSES]
    elif view == "paid":
        selected = [t for t in transactions if t.status == TransactionStatus.PAID]
    else:
        selected = list(transactions)
    return sorted(selected, key=lambda t: t.date, reverse=True)


def proposals_in_month(proposals: Iterable[Proposal], month: str | None) -> List[Proposal]:
    """Keep proposals whose date falls in ``month`` (``YYYY-MM``); ``None`` keeps all."""

    if not month:
        return list(proposals)
    return [p for p in proposals if p.date.isoformat().startswith(month)]


__all__ = [
    "EventFinancials",
    "KPISet",
    "TransactionView",
    "compute_kpis",
    "event_financials",
    "filter_transactions",
    "goal_attainment",
    "is_receivable",
    "proposals_in_month",
]
