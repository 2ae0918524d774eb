"""Data store facade and the local (demo mode) JSON backend.

The lifecycle engine only talks to :class:`DataStore`. Which implementation
backs it is decided once at startup and passed in; business code never checks
which backend it is running against.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from .errors import PersistenceError, RecordNotFound, ValidationError
from .models import (
    BusinessProfile,
    Client,
    Event,
    Proposal,
    ServicePackage,
    Supplier,
    Transaction,
)
from .state import AppState

logger = logging.getLogger(__name__)

T = TypeVar("T")
ChangeListener = Callable[[str], Awaitable[None]]

RECORD_TYPES: dict[str, type] = {
    "proposals": Proposal,
    "events": Event,
    "transactions": Transaction,
    "clients": Client,
    "suppliers": Supplier,
    "services": ServicePackage,
}


class RecordCodec(Generic[T]):
    """Convert domain dataclasses to JSON-ready dicts and back."""

    def __init__(self, record_type: type[T]):
        self.record_type = record_type
        self._adapter: TypeAdapter[T] = TypeAdapter(record_type)

    def to_dict(self, record: T) -> dict[str, Any]:
        return self._adapter.dump_python(record, mode="json")

    def from_dict(self, data: Mapping[str, Any]) -> T:
        return self._adapter.validate_python(dict(data))

    def merge(self, record: T, changes: Mapping[str, Any]) -> T:
        data = self.to_dict(record)
        for key, value in changes.items():
            if key not in data:
                raise ValidationError(key, f"unknown field for {self.record_type.__name__}")
            if key == "id":
                continue
            data[key] = to_jsonable_python(value)
        try:
            return self.from_dict(data)
        except PydanticValidationError as exc:
            raise ValidationError(self.record_type.__name__, str(exc)) from exc


class ChangeFeed:
    """Fan-out of change notifications; listeners run as separate tasks."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []
        self._tasks: set[asyncio.Task] = set()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, kind: str) -> None:
        for listener in list(self._listeners):
            task = asyncio.ensure_future(listener(kind))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for notifications already in flight."""

        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)


class Collection(ABC, Generic[T]):
    """Per-entity read/write contract."""

    def __init__(self, name: str, record_type: type[T]):
        self.name = name
        self.codec: RecordCodec[T] = RecordCodec(record_type)

    @abstractmethod
    async def list(self) -> list[T]:
        ...

    async def get(self, record_id: str) -> T | None:
        return next((r for r in await self.list() if r.id == record_id), None)

    @abstractmethod
    async def insert(self, record: T) -> T:
        ...

    @abstractmethod
    async def update_by_id(self, record_id: str, changes: Mapping[str, Any]) -> T:
        ...

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> None:
        ...


class DataStore(ABC):
    """Everything the controller needs from a persistence backend."""

    proposals: Collection[Proposal]
    events: Collection[Event]
    transactions: Collection[Transaction]
    clients: Collection[Client]
    suppliers: Collection[Supplier]
    services: Collection[ServicePackage]

    def __init__(self) -> None:
        self.changes = ChangeFeed()

    def collection(self, name: str) -> Collection[Any]:
        if name not in RECORD_TYPES:
            raise KeyError(name)
        return getattr(self, name)

    @abstractmethod
    async def load_profile(self) -> BusinessProfile | None:
        ...

    @abstractmethod
    async def save_profile(self, profile: BusinessProfile) -> BusinessProfile:
        ...

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        return self.changes.subscribe(listener)

    async def snapshot(self, default_profile: BusinessProfile | None = None) -> AppState:
        """Read every collection and the profile into a fresh :class:`AppState`."""

        profile = await self.load_profile()
        return AppState(
            proposals=tuple(await self.proposals.list()),
            events=tuple(await self.events.list()),
            transactions=tuple(await self.transactions.list()),
            clients=tuple(await self.clients.list()),
            suppliers=tuple(await self.suppliers.list()),
            services=tuple(await self.services.list()),
            profile=profile or default_profile or BusinessProfile(),
        )

    async def close(self) -> None:
        await self.changes.drain()


class _LocalCollection(Collection[T]):
    def __init__(self, store: "LocalJsonStore", name: str, record_type: type[T]):
        super().__init__(name, record_type)
        self._store = store

    def _rows(self, document: dict[str, Any]) -> list[dict[str, Any]]:
        return list(document.get(self.name, []))

    async def list(self) -> list[T]:
        return [self.codec.from_dict(row) for row in self._rows(self._store.read())]

    async def insert(self, record: T) -> T:
        document = self._store.read()
        rows = self._rows(document)
        if any(row.get("id") == record.id for row in rows):
            raise PersistenceError(f"{self.name}: duplicate id {record.id!r}")
        document[self.name] = [self.codec.to_dict(record)] + rows
        self._store.write(document)
        return record

    async def update_by_id(self, record_id: str, changes: Mapping[str, Any]) -> T:
        document = self._store.read()
        rows = self._rows(document)
        for index, row in enumerate(rows):
            if row.get("id") == record_id:
                updated = self.codec.merge(self.codec.from_dict(row), changes)
                rows[index] = self.codec.to_dict(updated)
                document[self.name] = rows
                self._store.write(document)
                return updated
        raise RecordNotFound(self.name, record_id)

    async def delete_by_id(self, record_id: str) -> None:
        document = self._store.read()
        rows = self._rows(document)
        document[self.name] = [row for row in rows if row.get("id") != record_id]
        self._store.write(document)


class LocalJsonStore(DataStore):
    """Demo-mode backend: one JSON document per account on the local disk.

    Writes are synchronous and already mirrored by the optimistic state, so
    this backend never publishes change notifications.
    """

    def __init__(self, data_dir: str | os.PathLike[str], owner_id: str):
        super().__init__()
        self.path = Path(data_dir) / f"{owner_id}.json"
        self._profile_codec = RecordCodec(BusinessProfile)
        for name, record_type in RECORD_TYPES.items():
            setattr(self, name, _LocalCollection(self, name, record_type))

    def read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc

    def write(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Saved local document %s", self.path)

    async def load_profile(self) -> BusinessProfile | None:
        raw = self.read().get("profile")
        return self._profile_codec.from_dict(raw) if raw else None

    async def save_profile(self, profile: BusinessProfile) -> BusinessProfile:
        document = self.read()
        document["profile"] = self._profile_codec.to_dict(profile)
        self.write(document)
        return profile


__all__ = [
    "ChangeFeed",
    "ChangeListener",
    "Collection",
    "DataStore",
    "LocalJsonStore",
    "RECORD_TYPES",
    "RecordCodec",
]
