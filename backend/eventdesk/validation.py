"""Field checks shared by every write path. All failures raise ValidationError."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from .dates import to_calendar_date
from .errors import ValidationError

E = TypeVar("E", bound=Enum)


def require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must not be empty")
    return value.strip()


def parse_amount(field: str, value: Any, *, allow_zero: bool = False) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(field, f"{value!r} is not a number") from exc
    if not amount.is_finite():
        raise ValidationError(field, "must be finite")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(field, "must be positive")
    return amount


def parse_date(field: str, value: Any) -> date:
    try:
        return to_calendar_date(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(field, f"{value!r} is not a calendar date") from exc


def parse_choice(field: str, value: Any, choices: type[E]) -> E:
    try:
        return choices(value)
    except ValueError as exc:
        allowed = ", ".join(c.value for c in choices)
        raise ValidationError(field, f"{value!r} is not one of: {allowed}") from exc


__all__ = ["parse_amount", "parse_choice", "parse_date", "require_text"]
