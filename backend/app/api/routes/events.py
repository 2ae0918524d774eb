"""Endpoints for the calendar: explicit events plus contract events from closed proposals."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.dependencies import get_controller
from app.schemas import (
    ConflictCheckSchema,
    EventCostCreateRequest,
    EventCreateRequest,
    EventFinancialsSchema,
    EventMessagesSchema,
    EventSchema,
    TimelineItemCreateRequest,
)
from eventdesk.controller import DashboardController
from eventdesk.ledger import event_financials
from eventdesk.templating import review_request, timeline_share

router = APIRouter()


def _serialize(event) -> EventSchema:
    return EventSchema.model_validate(event)


@router.get("", response_model=list[EventSchema])
async def list_schedule(controller: DashboardController = Depends(get_controller)) -> list[EventSchema]:
    return [_serialize(event) for event in controller.schedule()]


@router.get("/conflicts", response_model=ConflictCheckSchema)
async def check_conflict(
    on: str = Query(..., alias="date", description="Candidate day as YYYY-MM-DD"),
    controller: DashboardController = Depends(get_controller),
) -> ConflictCheckSchema:
    advisory = controller.conflict_for(on)
    if advisory is None:
        return ConflictCheckSchema()
    return ConflictCheckSchema(conflict=_serialize(advisory.event), advisory=advisory.message)


@router.post("", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    event = await controller.create_event(
        payload.title,
        payload.date,
        category=payload.category,
        client_name=payload.client_name,
        location=payload.location,
        start_time=payload.start_time,
        end_time=payload.end_time,
        amount=payload.amount,
        checklist=payload.checklist,
    )
    return _serialize(event)


@router.get("/{event_id}", response_model=EventSchema)
async def get_event(event_id: str, controller: DashboardController = Depends(get_controller)) -> EventSchema:
    return _serialize(controller.event(event_id))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, controller: DashboardController = Depends(get_controller)) -> Response:
    await controller.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/checklist/{task_id}/toggle", response_model=EventSchema)
async def toggle_task(
    event_id: str,
    task_id: str,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    return _serialize(await controller.toggle_task(event_id, task_id))


@router.post("/{event_id}/costs", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
async def add_cost(
    event_id: str,
    payload: EventCostCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    event = await controller.add_event_cost(event_id, payload.description, payload.amount, payload.category)
    return _serialize(event)


@router.delete("/{event_id}/costs/{cost_id}", response_model=EventSchema)
async def delete_cost(
    event_id: str,
    cost_id: str,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    return _serialize(await controller.delete_event_cost(event_id, cost_id))


@router.post("/{event_id}/timeline", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
async def add_timeline_item(
    event_id: str,
    payload: TimelineItemCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    event = await controller.add_timeline_item(event_id, payload.time, payload.title, payload.description)
    return _serialize(event)


@router.delete("/{event_id}/timeline/{item_id}", response_model=EventSchema)
async def delete_timeline_item(
    event_id: str,
    item_id: str,
    controller: DashboardController = Depends(get_controller),
) -> EventSchema:
    return _serialize(await controller.delete_timeline_item(event_id, item_id))


@router.get("/{event_id}/financials", response_model=EventFinancialsSchema)
async def get_event_financials(
    event_id: str,
    controller: DashboardController = Depends(get_controller),
) -> EventFinancialsSchema:
    return EventFinancialsSchema.model_validate(event_financials(controller.event(event_id)))


@router.get("/{event_id}/messages", response_model=EventMessagesSchema)
async def get_event_messages(
    event_id: str,
    link: str = Query(default="", description="Review link included in the review request"),
    controller: DashboardController = Depends(get_controller),
) -> EventMessagesSchema:
    event = controller.event(event_id)
    templates = controller.state.profile.message_templates
    return EventMessagesSchema(
        review_request=review_request(event, templates.review_request, link),
        timeline_share=timeline_share(event, templates.timeline_share),
    )


__all__ = ["router"]
