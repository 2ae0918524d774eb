"""Proposal pipeline: Sent -> Analysis -> Closing -> Closed | Lost.

New proposals always start in Sent. Moving a proposal into Closed from any
other persisted stage books a Pending receivable; moving it into Closed again
while it is already Closed books nothing.

Writes are optimistic: the owner's state is updated before the store call and
is not rolled back when the store fails. The failure is logged and re-raised
as :class:`PersistenceError`; a re-fetch reconciles. A receivable whose insert
failed is the one exception and is dropped from the state at once.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import fields, replace
from datetime import date
from typing import Any, Awaitable, Callable, DefaultDict, Dict, Iterable, List, Protocol, TypeVar
from uuid import uuid4

from .errors import PersistenceError, RecordNotFound
from .models import Client, Proposal, ProposalStage, Transaction
from .receivables import on_proposal_closed
from .state import AppState, remove, upsert
from .store import DataStore
from .validation import parse_amount, parse_choice, parse_date, require_text

logger = logging.getLogger(__name__)

R = TypeVar("R")

STAGE_ORDER = (
    ProposalStage.SENT,
    ProposalStage.ANALYSIS,
    ProposalStage.CLOSING,
    ProposalStage.CLOSED,
    ProposalStage.LOST,
)


class StateOwner(Protocol):
    @property
    def state(self) -> AppState:
        ...

    def apply(self, update: Callable[[AppState], AppState]) -> AppState:
        ...

    async def persist(self, action: str, operation: Awaitable[R]) -> R:
        ...


def closes_deal(previous: ProposalStage, new: ProposalStage) -> bool:
    """True only on the edge into Closed."""

    return new == ProposalStage.CLOSED and previous != ProposalStage.CLOSED


def find_client(clients: Iterable[Client], name: str) -> Client | None:
    wanted = name.strip().lower()
    return next((c for c in clients if c.name.strip().lower() == wanted), None)


def group_by_stage(proposals: Iterable[Proposal]) -> Dict[ProposalStage, List[Proposal]]:
    """Bucket proposals per stage, keeping the caller's order inside each bucket."""

    grouped: Dict[ProposalStage, List[Proposal]] = {stage: [] for stage in STAGE_ORDER}
    for proposal in proposals:
        grouped[proposal.stage].append(proposal)
    return grouped


def build_proposal(
    client_name: Any,
    event_name: Any,
    amount: Any,
    event_date: Any,
    *,
    description: str | None = None,
    service_type: str | None = None,
) -> Proposal:
    return Proposal(
        id=str(uuid4()),
        client_name=require_text("client_name", client_name),
        event_name=require_text("event_name", event_name),
        amount=parse_amount("amount", amount),
        date=parse_date("date", event_date),
        stage=ProposalStage.SENT,
        description=description,
        service_type=service_type,
    )


async def persist(action: str, operation: Awaitable[R]) -> R:
    try:
        return await operation
    except PersistenceError:
        logger.exception("Store rejected %s; keeping optimistic state", action)
        raise


class ProposalPipeline:
    def __init__(
        self,
        store: DataStore,
        owner: StateOwner,
        *,
        clock: Callable[[], date] = date.today,
    ):
        self._store = store
        self._owner = owner
        self._clock = clock
        self._stage_locks: DefaultDict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def create(
        self,
        client_name: Any,
        event_name: Any,
        amount: Any,
        event_date: Any,
        *,
        stage: Any = None,
        description: str | None = None,
        service_type: str | None = None,
    ) -> Proposal:
        """Validate and persist a new proposal in stage Sent.

        ``stage`` is accepted for form compatibility and ignored. When no
        client matches ``client_name`` a minimal client is stored first; the
        two writes are independent, so a failure in between leaves the client
        without a proposal.
        """

        proposal = build_proposal(
            client_name,
            event_name,
            amount,
            event_date,
            description=description,
            service_type=service_type,
        )
        if stage is not None and stage != ProposalStage.SENT:
            logger.debug("Ignoring stage %r on new proposal; proposals start in Sent", stage)

        await self.ensure_client(proposal.client_name)
        self._owner.apply(lambda s: upsert(s, "proposals", proposal))
        await self._owner.persist("proposal insert", self._store.proposals.insert(proposal))
        logger.info("Created proposal %s for %s on %s", proposal.id, proposal.client_name, proposal.date)
        return proposal

    async def ensure_client(self, name: str) -> Client:
        existing = find_client(self._owner.state.clients, name)
        if existing is not None:
            return existing
        client = Client(id=str(uuid4()), name=name)
        self._owner.apply(lambda s: upsert(s, "clients", client))
        await self._owner.persist("client insert", self._store.clients.insert(client))
        logger.info("Registered new client %r from proposal", name)
        return client

    async def update_stage(self, proposal: Proposal, new_stage: Any, *, amount: Any = None) -> Proposal:
        """Replace the stored proposal with ``proposal`` moved to ``new_stage``.

        The closing edge is judged against the stage currently persisted, not
        against ``proposal.stage``, which may be stale. Updates to the same
        proposal are serialised from that read to the final write.

        On a close the receivable is inserted before the stage is written. If
        the receivable insert fails the stage stays unclosed in the store; if
        the stage write fails the receivable is deleted again. Either way a
        retry books exactly one receivable.
        """

        stage = parse_choice("stage", new_stage, ProposalStage)
        new_amount = parse_amount("amount", amount) if amount is not None else proposal.amount

        async with self._stage_locks[proposal.id]:
            stored = await self._owner.persist("proposal read", self._store.proposals.get(proposal.id))
            if stored is None:
                raise RecordNotFound("proposals", proposal.id)

            updated = replace(proposal, stage=stage, amount=new_amount)
            self._owner.apply(lambda s: upsert(s, "proposals", updated))
            changes = {f.name: getattr(updated, f.name) for f in fields(updated) if f.name != "id"}

            if not closes_deal(stored.stage, stage):
                await self._owner.persist("proposal update", self._store.proposals.update_by_id(updated.id, changes))
                return updated

            # receivable first; the stage write commits the close
            transaction = await self._book_receivable(updated)
            try:
                await self._owner.persist("proposal update", self._store.proposals.update_by_id(updated.id, changes))
            except (PersistenceError, RecordNotFound):
                await self._withdraw_receivable(transaction)
                raise
        return updated

    async def _book_receivable(self, proposal: Proposal) -> Transaction:
        transaction = on_proposal_closed(proposal, today=self._clock())
        self._owner.apply(lambda s: upsert(s, "transactions", transaction))
        try:
            await self._owner.persist("receivable insert", self._store.transactions.insert(transaction))
        except PersistenceError:
            self._owner.apply(lambda s: remove(s, "transactions", transaction.id))
            raise
        logger.info("Proposal %s closed; receivable %s of %s booked", proposal.id, transaction.id, transaction.amount)
        return transaction

    async def _withdraw_receivable(self, transaction: Transaction) -> None:
        self._owner.apply(lambda s: remove(s, "transactions", transaction.id))
        try:
            await self._owner.persist("receivable withdrawal", self._store.transactions.delete_by_id(transaction.id))
        except PersistenceError:
            logger.error(
                "Receivable %s for proposal %s is stored but the proposal is not Closed",
                transaction.id,
                transaction.proposal_id,
            )


__all__ = [
    "ProposalPipeline",
    "STAGE_ORDER",
    "StateOwner",
    "build_proposal",
    "closes_deal",
    "find_client",
    "group_by_stage",
    "persist",
]
