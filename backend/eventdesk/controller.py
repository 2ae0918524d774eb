"""The single owner of application state for one account."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, TypeVar
from uuid import uuid4

from .conflicts import ConflictAdvisory, find_conflict
from .errors import PersistenceError, RecordNotFound, ValidationError
from .ledger import KPISet, TransactionView, compute_kpis, filter_transactions, proposals_in_month
from .models import (
    DEFAULT_MONTHLY_GOAL,
    BusinessProfile,
    ChecklistItem,
    Client,
    CostCategory,
    Event,
    EventCategory,
    EventCost,
    Proposal,
    ProposalStage,
    ServicePackage,
    Supplier,
    TimelineItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from .pipeline import ProposalPipeline, group_by_stage, persist
from .schedule import DERIVED_ID_PREFIX, project_schedule
from .state import AppState, CollectionName, apply_snapshot, remove, replace_profile, upsert
from .store import DataStore
from .validation import parse_amount, parse_choice, parse_date, require_text

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _new_id() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class ProposalCreated:
    proposal: Proposal
    advisory: Optional[ConflictAdvisory] = None


class DashboardController:
    """Applies every mutation optimistically, then writes it through the store.

    Store change notifications trigger a full re-fetch that replaces the
    state. A re-fetch that overlaps a local write is dropped, since the
    store publishes again once that write commits; otherwise the last
    applied update wins.
    """

    def __init__(
        self,
        store: DataStore,
        *,
        default_monthly_goal: Decimal = DEFAULT_MONTHLY_GOAL,
        clock: Callable[[], date] = date.today,
    ):
        self._store = store
        self._state = AppState()
        self._default_goal = default_monthly_goal
        self._unsubscribe: Callable[[], None] | None = None
        self._revision = 0
        self._writes_in_flight = 0
        self.pipeline = ProposalPipeline(store, self, clock=clock)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def store(self) -> DataStore:
        return self._store

    def apply(self, update: Callable[[AppState], AppState]) -> AppState:
        self._revision += 1
        self._state = update(self._state)
        return self._state

    async def persist(self, action: str, operation: Awaitable[R]) -> R:
        self._writes_in_flight += 1
        try:
            return await persist(action, operation)
        finally:
            self._writes_in_flight -= 1

    # lifecycle

    async def start(self) -> None:
        await self.refresh()
        if self._unsubscribe is None:
            self._unsubscribe = self._store.on_change(self._on_store_change)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self._store.close()

    async def refresh(self) -> AppState:
        revision, busy = self._revision, self._writes_in_flight > 0
        snapshot = await self._store.snapshot()
        if busy or self._writes_in_flight or revision != self._revision:
            logger.debug("Dropping re-fetched snapshot overtaken by local writes")
            return self._state
        self._state = apply_snapshot(self._state, snapshot)
        return self._state

    async def _on_store_change(self, kind: str) -> None:
        logger.debug("Store reported change in %s; re-fetching", kind)
        try:
            await self.refresh()
        except PersistenceError:
            logger.warning("Re-fetch after %s change failed; keeping current state", kind, exc_info=True)

    # read views

    @property
    def monthly_goal(self) -> Decimal:
        goal = self._state.profile.monthly_goal
        return self._default_goal if goal is None else goal

    def schedule(self) -> List[Event]:
        return project_schedule(self._state.events, self._state.proposals)

    def kpis(self) -> KPISet:
        return compute_kpis(self._state.transactions, self._state.proposals, self.monthly_goal)

    def conflict_for(self, candidate: Any) -> ConflictAdvisory | None:
        event = find_conflict(parse_date("date", candidate), self.schedule())
        return ConflictAdvisory(event) if event else None

    def proposal_board(self, month: str | None = None) -> Dict[ProposalStage, List[Proposal]]:
        return group_by_stage(proposals_in_month(self._state.proposals, month))

    def transactions(self, view: TransactionView = "all") -> List[Transaction]:
        return filter_transactions(self._state.transactions, view)

    def event(self, event_id: str) -> Event:
        found = next((e for e in self.schedule() if e.id == event_id), None)
        if found is None:
            raise RecordNotFound("events", event_id)
        return found

    # proposals

    async def create_proposal(
        self,
        client_name: Any,
        event_name: Any,
        amount: Any,
        event_date: Any,
        *,
        stage: Any = None,
        description: str | None = None,
        service_type: str | None = None,
    ) -> ProposalCreated:
        proposal = await self.pipeline.create(
            client_name,
            event_name,
            amount,
            event_date,
            stage=stage,
            description=description,
            service_type=service_type,
        )
        advisory = self.conflict_for(proposal.date)
        if advisory:
            logger.info("Proposal %s overlaps %s", proposal.id, advisory.message)
        return ProposalCreated(proposal=proposal, advisory=advisory)

    async def update_proposal(self, proposal_id: str, stage: Any, *, amount: Any = None) -> Proposal:
        proposal = self._state.find("proposals", proposal_id)
        if proposal is None:
            raise RecordNotFound("proposals", proposal_id)
        return await self.pipeline.update_stage(proposal, stage, amount=amount)

    # events

    async def create_event(
        self,
        title: Any,
        event_date: Any,
        *,
        category: Any = EventCategory.OTHER,
        client_name: str = "",
        location: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        amount: Any = None,
        checklist: Iterable[str] = (),
    ) -> Event:
        event = Event(
            id=_new_id(),
            title=require_text("title", title),
            date=parse_date("date", event_date),
            category=parse_choice("category", category, EventCategory),
            client_name=client_name.strip(),
            location=location,
            start_time=start_time,
            end_time=end_time,
            checklist=tuple(ChecklistItem(id=_new_id(), text=require_text("checklist", t)) for t in checklist),
            amount=parse_amount("amount", amount, allow_zero=True) if amount is not None else None,
        )
        return await self._insert("events", event)

    async def delete_event(self, event_id: str) -> None:
        self._explicit_event(event_id)
        await self._delete("events", event_id)

    async def toggle_task(self, event_id: str, task_id: str) -> Event:
        event = self._explicit_event(event_id)
        if not any(t.id == task_id for t in event.checklist):
            raise RecordNotFound("checklist", task_id)
        checklist = tuple(replace(t, done=not t.done) if t.id == task_id else t for t in event.checklist)
        return await self._update("events", event, checklist=checklist)

    async def add_event_cost(self, event_id: str, description: Any, amount: Any, category: Any = CostCategory.OTHER) -> Event:
        event = self._explicit_event(event_id)
        cost = EventCost(
            id=_new_id(),
            description=require_text("description", description),
            amount=parse_amount("amount", amount),
            category=parse_choice("category", category, CostCategory),
        )
        return await self._update("events", event, costs=event.costs + (cost,))

    async def delete_event_cost(self, event_id: str, cost_id: str) -> Event:
        event = self._explicit_event(event_id)
        return await self._update("events", event, costs=tuple(c for c in event.costs if c.id != cost_id))

    async def add_timeline_item(self, event_id: str, time: Any, title: Any, description: str = "") -> Event:
        event = self._explicit_event(event_id)
        item = TimelineItem(
            id=_new_id(),
            time=require_text("time", time),
            title=require_text("title", title),
            description=description or "",
        )
        return await self._update("events", event, timeline=event.timeline + (item,))

    async def delete_timeline_item(self, event_id: str, item_id: str) -> Event:
        event = self._explicit_event(event_id)
        return await self._update("events", event, timeline=tuple(t for t in event.timeline if t.id != item_id))

    def _explicit_event(self, event_id: str) -> Event:
        event = self._state.find("events", event_id)
        if event is None:
            if event_id.startswith(DERIVED_ID_PREFIX):
                raise ValidationError("event_id", "contract events are derived from proposals and read-only")
            raise RecordNotFound("events", event_id)
        return event

    # transactions

    async def record_transaction(
        self,
        description: Any,
        amount: Any,
        entry_date: Any,
        *,
        type: Any = TransactionType.EXPENSE,
        status: Any = TransactionStatus.PAID,
        client_name: str = "",
        category: str = "",
    ) -> Transaction:
        transaction = Transaction(
            id=_new_id(),
            description=require_text("description", description),
            amount=parse_amount("amount", amount),
            date=parse_date("date", entry_date),
            client_name=client_name,
            category=category,
            status=parse_choice("status", status, TransactionStatus),
            type=parse_choice("type", type, TransactionType),
        )
        return await self._insert("transactions", transaction)

    async def set_transaction_status(self, transaction_id: str, status: Any) -> Transaction:
        transaction = self._state.find("transactions", transaction_id)
        if transaction is None:
            raise RecordNotFound("transactions", transaction_id)
        new_status = parse_choice("status", status, TransactionStatus)
        return await self._update("transactions", transaction, status=new_status)

    # clients, suppliers and service packages

    async def add_client(self, name: Any, phone: str = "", email: str = "") -> Client:
        client = Client(id=_new_id(), name=require_text("name", name), phone=phone, email=email)
        return await self._insert("clients", client)

    async def add_supplier(self, name: Any, category: str = "", phone: str = "") -> Supplier:
        supplier = Supplier(id=_new_id(), name=require_text("name", name), category=category, phone=phone)
        return await self._insert("suppliers", supplier)

    async def delete_supplier(self, supplier_id: str) -> None:
        await self._delete("suppliers", supplier_id)

    async def add_service(self, name: Any, price: Any, description: str = "") -> ServicePackage:
        package = ServicePackage(
            id=_new_id(),
            name=require_text("name", name),
            price=parse_amount("price", price, allow_zero=True),
            description=description,
        )
        return await self._insert("services", package)

    async def delete_service(self, service_id: str) -> None:
        await self._delete("services", service_id)

    # profile

    async def update_profile(self, profile: BusinessProfile) -> BusinessProfile:
        if profile.monthly_goal is not None:
            profile = replace(profile, monthly_goal=parse_amount("monthly_goal", profile.monthly_goal, allow_zero=True))
        self.apply(lambda s: replace_profile(s, profile))
        return await self.persist("profile save", self._store.save_profile(profile))

    async def update_monthly_goal(self, amount: Any) -> BusinessProfile:
        goal = parse_amount("monthly_goal", amount, allow_zero=True)
        return await self.update_profile(replace(self._state.profile, monthly_goal=goal))

    # write-through helpers

    async def _insert(self, name: CollectionName, record: Any) -> Any:
        self.apply(lambda s: upsert(s, name, record))
        await self.persist(f"{name} insert", self._store.collection(name).insert(record))
        return record

    async def _update(self, name: CollectionName, record: Any, **changes: Any) -> Any:
        updated = replace(record, **changes)
        self.apply(lambda s: upsert(s, name, updated))
        await self.persist(f"{name} update", self._store.collection(name).update_by_id(record.id, changes))
        return updated

    async def _delete(self, name: CollectionName, record_id: str) -> None:
        self.apply(lambda s: remove(s, name, record_id))
        await self.persist(f"{name} delete", self._store.collection(name).delete_by_id(record_id))


__all__ = ["DashboardController", "ProposalCreated"]
