"""Pydantic schemas for transactions and dashboard figures."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from eventdesk.models import TransactionStatus, TransactionType


class TransactionSchema(BaseModel):
    id: str
    description: str
    client_name: str = ""
    category: str = ""
    amount: float
    date: date
    status: TransactionStatus
    type: TransactionType
    proposal_id: str | None = Field(default=None, description="Proposal that generated this receivable")

    class Config:
        from_attributes = True


class TransactionCreateRequest(BaseModel):
    description: str = ""
    amount: Decimal | None = None
    date: str = Field(default="", examples=["2025-11-02"])
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.PAID
    client_name: str = ""
    category: str = ""


class TransactionStatusUpdateRequest(BaseModel):
    status: TransactionStatus


class KPISchema(BaseModel):
    receivable_total: float
    received_total: float
    expense_total: float
    net_balance: float
    active_proposals: int
    goal_attainment_pct: int

    class Config:
        from_attributes = True


class MonthlyRevenueSchema(BaseModel):
    month: str = Field(..., examples=["2025-11"])
    revenue: float

    class Config:
        from_attributes = True


class DashboardSchema(BaseModel):
    kpis: KPISchema
    monthly_goal: float
    revenue_history: list[MonthlyRevenueSchema]


__all__ = [
    "DashboardSchema",
    "KPISchema",
    "MonthlyRevenueSchema",
    "TransactionCreateRequest",
    "TransactionSchema",
    "TransactionStatusUpdateRequest",
]
