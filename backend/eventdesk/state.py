"""In-memory application state and the reducer that every update flows through.

Two producers feed the reducer: optimistic local mutations and full snapshots
re-fetched after a store change notification. Whichever is applied last wins.
Applying the same snapshot twice leaves the state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from .models import (
    BusinessProfile,
    Client,
    Event,
    Proposal,
    ServicePackage,
    Supplier,
    Transaction,
)

CollectionName = Literal["proposals", "events", "transactions", "clients", "suppliers", "services"]
COLLECTIONS: tuple[CollectionName, ...] = (
    "proposals",
    "events",
    "transactions",
    "clients",
    "suppliers",
    "services",
)


@dataclass(frozen=True)
class AppState:
    proposals: tuple[Proposal, ...] = ()
    events: tuple[Event, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    clients: tuple[Client, ...] = ()
    suppliers: tuple[Supplier, ...] = ()
    services: tuple[ServicePackage, ...] = ()
    profile: BusinessProfile = field(default_factory=BusinessProfile)

    def find(self, name: CollectionName, record_id: str) -> Any | None:
        return next((r for r in getattr(self, name) if r.id == record_id), None)


def apply_snapshot(state: AppState, snapshot: AppState) -> AppState:
    """Replace the whole state with a re-fetched snapshot."""

    if snapshot == state:
        return state
    return snapshot


def upsert(state: AppState, name: CollectionName, record: Any) -> AppState:
    """Replace the record with the same id in place, or prepend it when new."""

    records = getattr(state, name)
    if any(r.id == record.id for r in records):
        updated = tuple(record if r.id == record.id else r for r in records)
    else:
        updated = (record,) + records
    return replace(state, **{name: updated})


def remove(state: AppState, name: CollectionName, record_id: str) -> AppState:
    records = getattr(state, name)
    return replace(state, **{name: tuple(r for r in records if r.id != record_id)})


def replace_profile(state: AppState, profile: BusinessProfile) -> AppState:
    return replace(state, profile=profile)


__all__ = [
    "AppState",
    "COLLECTIONS",
    "CollectionName",
    "apply_snapshot",
    "remove",
    "replace_profile",
    "upsert",
]
