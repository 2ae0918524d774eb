"""Pydantic schemas for calendar events and their operational details."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from eventdesk.models import CostCategory, EventCategory


class ChecklistItemSchema(BaseModel):
    id: str
    text: str
    done: bool

    class Config:
        from_attributes = True


class TimelineItemSchema(BaseModel):
    id: str
    time: str
    title: str
    description: str = ""

    class Config:
        from_attributes = True


class EventCostSchema(BaseModel):
    id: str
    description: str
    amount: float
    category: CostCategory

    class Config:
        from_attributes = True


class EventSchema(BaseModel):
    id: str
    title: str
    date: date
    category: EventCategory
    client_name: str = ""
    location: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    checklist: list[ChecklistItemSchema] = Field(default_factory=list)
    timeline: list[TimelineItemSchema] = Field(default_factory=list)
    costs: list[EventCostSchema] = Field(default_factory=list)
    amount: float | None = None
    proposal_id: str | None = Field(default=None, description="Set on contract events derived from proposals")

    class Config:
        from_attributes = True


class EventCreateRequest(BaseModel):
    title: str = ""
    date: str = Field(default="", examples=["2025-12-05"])
    category: EventCategory = EventCategory.OTHER
    client_name: str = ""
    location: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    amount: Decimal | None = None
    checklist: list[str] = Field(default_factory=list, description="Task texts, all start undone")


class EventCostCreateRequest(BaseModel):
    description: str = ""
    amount: Decimal | None = None
    category: CostCategory = CostCategory.OTHER


class TimelineItemCreateRequest(BaseModel):
    time: str = Field(default="", examples=["19:30"])
    title: str = ""
    description: str = ""


class EventFinancialsSchema(BaseModel):
    revenue: float
    total_costs: float
    profit: float
    margin_pct: float

    class Config:
        from_attributes = True


class EventMessagesSchema(BaseModel):
    review_request: str
    timeline_share: str


class ConflictCheckSchema(BaseModel):
    conflict: EventSchema | None = None
    advisory: str | None = None


__all__ = [
    "ChecklistItemSchema",
    "ConflictCheckSchema",
    "EventCostCreateRequest",
    "EventCostSchema",
    "EventCreateRequest",
    "EventFinancialsSchema",
    "EventMessagesSchema",
    "EventSchema",
    "TimelineItemCreateRequest",
    "TimelineItemSchema",
]
