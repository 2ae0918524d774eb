"""Service layer: the relational store backend and read-side analytics."""

from .analytics import MonthlyRevenue, monthly_revenue
from .store import SqlStore

__all__ = ["MonthlyRevenue", "SqlStore", "monthly_revenue"]
