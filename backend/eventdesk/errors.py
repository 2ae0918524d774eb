"""Exceptions raised by the lifecycle engine and its stores."""

from __future__ import annotations


class EventDeskError(Exception):
    """Base class for domain errors."""


class ValidationError(EventDeskError, ValueError):
    """A required field is missing or malformed; nothing was persisted."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class RecordNotFound(EventDeskError, LookupError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id!r} not found")
        self.kind = kind
        self.record_id = record_id


class PersistenceError(EventDeskError):
    """The store failed to read or write. Optimistic state is left in place."""


__all__ = ["EventDeskError", "ValidationError", "RecordNotFound", "PersistenceError"]
