"""Relational (live mode) implementation of the EventDesk data store.

Every row carries the ``owner_id`` of the account it belongs to and every
query is scoped by it. After each committed write the store publishes a change
notification, which the controller answers with a full re-fetch.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from typing import Any, AsyncIterator, Generic, Mapping, TypeVar

from sqlalchemy import Date, Numeric, delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import Database
from app.models import (
    BusinessProfileRecord,
    ClientRecord,
    EventRecord,
    ProposalRecord,
    ServicePackageRecord,
    SupplierRecord,
    TransactionRecord,
)
from eventdesk.errors import PersistenceError, RecordNotFound
from eventdesk.models import BusinessProfile
from eventdesk.store import RECORD_TYPES, Collection, DataStore, RecordCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

TABLES = {
    "proposals": (ProposalRecord, ProposalRecord.created_at.desc()),
    "events": (EventRecord, EventRecord.date.asc()),
    "transactions": (TransactionRecord, TransactionRecord.date.desc()),
    "clients": (ClientRecord, ClientRecord.created_at.desc()),
    "suppliers": (SupplierRecord, SupplierRecord.created_at.desc()),
    "services": (ServicePackageRecord, ServicePackageRecord.created_at.asc()),
}


class _RowMapper(Generic[T]):
    """Moves values between a domain dataclass and same-named table columns."""

    def __init__(self, codec: RecordCodec[T], table: type):
        self.codec = codec
        self.table = table
        self.columns = {
            column.key: column
            for column in inspect(table).columns
            if column.key not in ("owner_id", "created_at", "updated_at")
        }

    def to_record(self, row: Any) -> T:
        return self.codec.from_dict({key: getattr(row, key) for key in self.columns})

    def to_columns(self, record: T) -> dict[str, Any]:
        data = self.codec.to_dict(record)
        values: dict[str, Any] = {}
        for key, column in self.columns.items():
            value = data.get(key)
            if value is not None and isinstance(column.type, Date):
                value = date.fromisoformat(value)
            elif value is not None and isinstance(column.type, Numeric):
                value = Decimal(str(value))
            values[key] = value
        return values


class SqlCollection(Collection[T]):
    def __init__(self, store: "SqlStore", name: str, record_type: type[T]):
        super().__init__(name, record_type)
        self._store = store
        self._table, self._order_by = TABLES[name]
        self._mapper: _RowMapper[T] = _RowMapper(self.codec, self._table)

    async def _owned_row(self, session, record_id: str) -> Any | None:
        row = await session.get(self._table, record_id)
        if row is None or row.owner_id != self._store.owner_id:
            return None
        return row

    async def list(self) -> list[T]:
        async with self._store.guard(f"list {self.name}") as session:
            stmt = (
                select(self._table)
                .where(self._table.owner_id == self._store.owner_id)
                .order_by(self._order_by)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [self._mapper.to_record(row) for row in rows]

    async def get(self, record_id: str) -> T | None:
        async with self._store.guard(f"get {self.name}") as session:
            row = await self._owned_row(session, record_id)
            return self._mapper.to_record(row) if row is not None else None

    async def insert(self, record: T) -> T:
        async with self._store.guard(f"insert {self.name}") as session:
            session.add(self._table(owner_id=self._store.owner_id, **self._mapper.to_columns(record)))
            await session.commit()
        self._store.changes.publish(self.name)
        return record

    async def update_by_id(self, record_id: str, changes: Mapping[str, Any]) -> T:
        async with self._store.guard(f"update {self.name}") as session:
            row = await self._owned_row(session, record_id)
            if row is None:
                raise RecordNotFound(self.name, record_id)
            updated = self.codec.merge(self._mapper.to_record(row), changes)
            for key, value in self._mapper.to_columns(updated).items():
                setattr(row, key, value)
            await session.commit()
        self._store.changes.publish(self.name)
        return updated

    async def delete_by_id(self, record_id: str) -> None:
        async with self._store.guard(f"delete {self.name}") as session:
            await session.execute(
                delete(self._table).where(
                    self._table.id == record_id,
                    self._table.owner_id == self._store.owner_id,
                )
            )
            await session.commit()
        self._store.changes.publish(self.name)


class SqlStore(DataStore):
    def __init__(self, database: Database, owner_id: str):
        super().__init__()
        self.database = database
        self.owner_id = owner_id
        self._profile_mapper = _RowMapper(RecordCodec(BusinessProfile), BusinessProfileRecord)
        for name, record_type in RECORD_TYPES.items():
            setattr(self, name, SqlCollection(self, name, record_type))

    @asynccontextmanager
    async def guard(self, action: str) -> AsyncIterator[Any]:
        """Open a session and turn driver failures into PersistenceError."""

        try:
            async with self.database.session() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.warning("Database failure during %s for %s: %s", action, self.owner_id, exc)
            raise PersistenceError(f"{action} failed") from exc

    async def load_profile(self) -> BusinessProfile | None:
        async with self.guard("load profile") as session:
            row = await session.get(BusinessProfileRecord, self.owner_id)
            return self._profile_mapper.to_record(row) if row is not None else None

    async def save_profile(self, profile: BusinessProfile) -> BusinessProfile:
        async with self.guard("save profile") as session:
            row = await session.get(BusinessProfileRecord, self.owner_id)
            if row is None:
                row = BusinessProfileRecord(owner_id=self.owner_id)
                session.add(row)
            for key, value in self._profile_mapper.to_columns(profile).items():
                setattr(row, key, value)
            await session.commit()
        self.changes.publish("profile")
        return profile


__all__ = ["SqlCollection", "SqlStore"]
