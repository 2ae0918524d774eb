"""SQLAlchemy declarative base shared by every EventDesk table."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


__all__ = ["Base"]
