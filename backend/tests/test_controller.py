from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from eventdesk.controller import DashboardController
from eventdesk.errors import RecordNotFound, ValidationError
from eventdesk.models import (
    BusinessProfile,
    CostCategory,
    EventCategory,
    ProposalStage,
    TransactionStatus,
    TransactionType,
)
from eventdesk.store import LocalJsonStore


async def test_new_proposal_on_booked_day_is_created_with_advisory(controller: DashboardController):
    booked = await controller.create_event("Silva Birthday", "2025-12-05", category=EventCategory.DJ)

    created = await controller.create_proposal("Ana", "Souza Wedding", 4500, "2025-12-05T00:00:00-03:00")

    assert created.advisory is not None
    assert created.advisory.event.id == booked.id
    assert controller.state.find("proposals", created.proposal.id) is not None


async def test_contract_events_count_as_conflicts(controller: DashboardController):
    first = (await controller.create_proposal("Ana", "Souza Wedding", 4500, "2025-12-05")).proposal
    await controller.update_proposal(first.id, ProposalStage.CLOSED)

    created = await controller.create_proposal("Bruno", "Gala", 900, "2025-12-05")

    assert created.advisory.event.id == f"prop-{first.id}"
    assert controller.conflict_for("2025-12-06") is None


async def test_schedule_merges_explicit_and_contract_events(controller: DashboardController):
    await controller.create_event("Birthday", "2025-12-01")
    proposal = (await controller.create_proposal("Ana", "Souza Wedding", 4500, "2025-12-05")).proposal
    await controller.update_proposal(proposal.id, ProposalStage.CLOSED)

    schedule = controller.schedule()

    assert [e.title for e in schedule] == ["Birthday", "(Contract) Souza Wedding"]
    assert controller.event(f"prop-{proposal.id}").amount == Decimal("4500")


async def test_event_checklist_costs_and_timeline(controller: DashboardController):
    event = await controller.create_event(
        "Gala", date(2025, 12, 10), amount="3000", checklist=["Confirm venue", "Send playlist"]
    )
    task = event.checklist[0]

    event = await controller.toggle_task(event.id, task.id)
    assert event.checklist[0].done is True
    event = await controller.toggle_task(event.id, task.id)
    assert event.checklist[0].done is False

    event = await controller.add_event_cost(event.id, "Crew", "600", CostCategory.CREW)
    event = await controller.add_event_cost(event.id, "Van", 150, "Transport")
    assert [c.category for c in event.costs] == [CostCategory.CREW, CostCategory.TRANSPORT]
    event = await controller.delete_event_cost(event.id, event.costs[1].id)
    assert len(event.costs) == 1

    event = await controller.add_timeline_item(event.id, "19:30", "Guests arrive")
    event = await controller.add_timeline_item(event.id, "21:00", "First dance", "Song chosen by the couple")
    assert [t.title for t in event.timeline] == ["Guests arrive", "First dance"]
    event = await controller.delete_timeline_item(event.id, event.timeline[0].id)

    [stored] = await controller.store.events.list()
    assert stored == event
    assert stored.costs[0].amount == Decimal("600")


async def test_event_validation(controller: DashboardController):
    with pytest.raises(ValidationError):
        await controller.create_event("", "2025-12-10")
    with pytest.raises(ValidationError):
        await controller.create_event("Gala", "2025-12-10", category="Karaoke")

    event = await controller.create_event("Gala", "2025-12-10")
    with pytest.raises(ValidationError):
        await controller.add_event_cost(event.id, "Crew", 0)
    with pytest.raises(RecordNotFound):
        await controller.toggle_task(event.id, "no-such-task")
    with pytest.raises(RecordNotFound):
        await controller.delete_event("no-such-event")


async def test_contract_events_are_read_only(controller: DashboardController):
    proposal = (await controller.create_proposal("Ana", "Party", 900, "2025-12-05")).proposal
    await controller.update_proposal(proposal.id, ProposalStage.CLOSED)

    with pytest.raises(ValidationError):
        await controller.add_event_cost(f"prop-{proposal.id}", "Crew", 100)
    with pytest.raises(ValidationError):
        await controller.delete_event(f"prop-{proposal.id}")


async def test_delete_event(controller: DashboardController):
    event = await controller.create_event("Gala", "2025-12-10")

    await controller.delete_event(event.id)

    assert controller.schedule() == []
    assert await controller.store.events.list() == []


async def test_transactions_and_status_changes(controller: DashboardController):
    expense = await controller.record_transaction("Speakers rental", "350", "2025-11-02")
    income = await controller.record_transaction(
        "Deposit", 1000, "2025-11-05", type="Income", status="Pending", client_name="Ana"
    )

    assert expense.type == TransactionType.EXPENSE and expense.status == TransactionStatus.PAID
    assert [t.id for t in controller.transactions("pending")] == [income.id]

    await controller.set_transaction_status(income.id, TransactionStatus.PAID)

    kpis = controller.kpis()
    assert kpis.received_total == Decimal("1000")
    assert kpis.expense_total == Decimal("350")
    assert kpis.net_balance == Decimal("650")
    assert kpis.receivable_total == 0
    assert kpis.goal_attainment_pct == 10

    with pytest.raises(ValidationError):
        await controller.set_transaction_status(income.id, "Refunded")
    with pytest.raises(RecordNotFound):
        await controller.set_transaction_status("missing", "Paid")


async def test_monthly_goal_defaults_and_updates(controller: DashboardController):
    assert controller.monthly_goal == Decimal("10000")

    await controller.update_monthly_goal("2000")
    await controller.record_transaction("Show", 500, "2025-11-05", type="Income")

    assert controller.kpis().goal_attainment_pct == 25
    assert (await controller.store.load_profile()).monthly_goal == Decimal("2000")

    await controller.update_monthly_goal(0)
    assert controller.monthly_goal == 0
    assert controller.kpis().goal_attainment_pct == 50000

    with pytest.raises(ValidationError):
        await controller.update_monthly_goal(-1)


async def test_profile_round_trip(controller: DashboardController):
    profile = BusinessProfile(name="DJ Ana", category="DJ", phone="+55 11 99999-0000")
    profile = replace(profile, message_templates=replace(profile.message_templates, review_request="Thanks {cliente}!"))

    await controller.update_profile(profile)

    assert controller.state.profile.name == "DJ Ana"
    assert (await controller.store.load_profile()) == profile


async def test_suppliers_and_services(controller: DashboardController):
    supplier = await controller.add_supplier("Lights Co", "Lighting", "555-0100")
    package = await controller.add_service("Full night", "2500", "Six hours of DJ")

    assert controller.state.suppliers == (supplier,)
    assert package.price == Decimal("2500")

    await controller.delete_supplier(supplier.id)
    await controller.delete_service(package.id)

    assert controller.state.suppliers == ()
    assert controller.state.services == ()
    with pytest.raises(ValidationError):
        await controller.add_supplier("  ")


async def test_refresh_is_idempotent_and_picks_up_other_writers(local_store: LocalJsonStore, today: date):
    first = DashboardController(local_store, clock=lambda: today)
    await first.start()
    await first.create_proposal("Ana", "Party", 900, "2025-12-05")

    second = DashboardController(LocalJsonStore(local_store.path.parent, "owner-1"))
    await second.start()
    assert [p.event_name for p in second.state.proposals] == ["Party"]

    before = second.state
    await second.refresh()
    assert second.state is before

    await first.stop()
    await second.stop()


async def test_proposal_board_filters_by_month(controller: DashboardController):
    await controller.create_proposal("Ana", "November party", 900, "2025-11-20")
    await controller.create_proposal("Bruno", "December party", 900, "2025-12-20")

    board = controller.proposal_board("2025-12")

    assert [p.event_name for p in board[ProposalStage.SENT]] == ["December party"]
    assert board[ProposalStage.CLOSED] == []


async def test_alice_santos_contract_end_to_end(controller: DashboardController):
    created = await controller.create_proposal("Alice Santos", "Casamento Civil", 2500, "2025-11-20")
    assert created.proposal.stage == ProposalStage.SENT

    await controller.update_proposal(created.proposal.id, ProposalStage.CLOSING)
    await controller.update_proposal(created.proposal.id, ProposalStage.CLOSED)

    [transaction] = controller.state.transactions
    assert transaction.amount == Decimal("2500")
    assert transaction.status == TransactionStatus.PENDING
    assert transaction.type == TransactionType.INCOME
    [contract] = controller.schedule()
    assert contract.date == date(2025, 11, 20)
    assert contract.amount == Decimal("2500")


async def test_conflict_on_a_doubly_booked_day_still_creates_proposal(controller: DashboardController):
    first = await controller.create_event("Morning shoot", "2025-12-05")
    second = await controller.create_event("Evening party", "2025-12-05")

    created = await controller.create_proposal("Carla", "Reception", 1200, "2025-12-05")

    assert created.advisory.event.id in {first.id, second.id}
    assert [p.id for p in await controller.store.proposals.list()] == [created.proposal.id]


async def test_lost_proposal_reopened_and_closed_books_receivable(controller: DashboardController):
    proposal = (await controller.create_proposal("Ana", "Party", 900, "2025-12-05")).proposal
    await controller.update_proposal(proposal.id, ProposalStage.LOST)
    await controller.update_proposal(proposal.id, ProposalStage.ANALYSIS)

    await controller.update_proposal(proposal.id, ProposalStage.CLOSED)

    assert len(controller.state.transactions) == 1
