"""Revenue history helpers backing the finance analytics view."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

import pandas as pd

from eventdesk.models import Transaction, TransactionStatus, TransactionType


@dataclass(frozen=True)
class MonthlyRevenue:
    month: str
    revenue: float


def monthly_revenue(
    transactions: Iterable[Transaction],
    *,
    months: int = 6,
    today: date | None = None,
) -> List[MonthlyRevenue]:
    """Paid income per calendar month for the ``months`` months ending at ``today``.

    Months without receipts are reported as zero so the series is continuous.
    """

    today = today or date.today()
    index = pd.period_range(end=pd.Period(today.strftime("%Y-%m"), freq="M"), periods=months, freq="M")
    rows = [
        {"date": t.date, "amount": float(t.amount)}
        for t in transactions
        if t.type == TransactionType.INCOME and t.status == TransactionStatus.PAID
    ]
    if rows:
        frame = pd.DataFrame(rows)
        frame["month"] = pd.to_datetime(frame["date"]).dt.to_period("M")
        series = frame.groupby("month")["amount"].sum().reindex(index, fill_value=0.0)
    else:
        series = pd.Series(0.0, index=index)
    return [MonthlyRevenue(month=str(period), revenue=round(float(value), 2)) for period, value in series.items()]


__all__ = ["MonthlyRevenue", "monthly_revenue"]
