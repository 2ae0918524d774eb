"""Calendar-date helpers that never cross a time-zone boundary.

Dates arrive as ``date`` objects, naive or aware ``datetime`` objects, or ISO
strings such as ``2025-11-20`` and ``2025-11-20T00:00:00-03:00``. All of them
are reduced to their wall-clock (year, month, day) fields; no offset is ever
applied, so UTC midnight and local midnight of the same day compare equal.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime, str]

CalendarKey = tuple[int, int, int]


def calendar_key(value: DateLike) -> CalendarKey:
    """Return the local (year, month, day) fields of ``value``."""

    if isinstance(value, (date, datetime)):
        return value.year, value.month, value.day
    if isinstance(value, str):
        head = value.strip().split("T", 1)[0].split(" ", 1)[0]
        parts = head.split("-")
        if len(parts) != 3:
            raise ValueError(f"Not a calendar date: {value!r}")
        year, month, day = (int(part) for part in parts)
        # validates ranges (month 13, Feb 30, ...)
        date(year, month, day)
        return year, month, day
    raise TypeError(f"Unsupported date value: {type(value).__name__}")


def to_calendar_date(value: DateLike) -> date:
    year, month, day = calendar_key(value)
    return date(year, month, day)


__all__ = ["CalendarKey", "DateLike", "calendar_key", "to_calendar_date"]
