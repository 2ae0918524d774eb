from datetime import date
from decimal import Decimal

from app.services.analytics import MonthlyRevenue, monthly_revenue
from eventdesk.models import Transaction, TransactionStatus, TransactionType


def _txn(txn_id, amount, day, status=TransactionStatus.PAID, kind=TransactionType.INCOME) -> Transaction:
    return Transaction(id=txn_id, description=txn_id, amount=Decimal(amount), date=day, status=status, type=kind)


def test_paid_income_is_grouped_per_month_with_gaps_filled():
    transactions = [
        _txn("a", "1000", date(2025, 9, 3)),
        _txn("b", "250.50", date(2025, 9, 28)),
        _txn("c", "700", date(2025, 11, 1)),
        _txn("pending", "999", date(2025, 11, 2), status=TransactionStatus.PENDING),
        _txn("expense", "300", date(2025, 11, 3), kind=TransactionType.EXPENSE),
        _txn("too-old", "50", date(2024, 1, 1)),
    ]

    history = monthly_revenue(transactions, months=3, today=date(2025, 11, 10))

    assert history == [
        MonthlyRevenue(month="2025-09", revenue=1250.5),
        MonthlyRevenue(month="2025-10", revenue=0.0),
        MonthlyRevenue(month="2025-11", revenue=700.0),
    ]


def test_empty_ledger_gives_zero_series():
    history = monthly_revenue([], months=2, today=date(2025, 1, 15))

    assert [(h.month, h.revenue) for h in history] == [("2024-12", 0.0), ("2025-01", 0.0)]
