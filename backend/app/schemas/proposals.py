"""Pydantic schemas for the proposal pipeline."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from eventdesk.models import ProposalStage

from .events import EventSchema


class ProposalSchema(BaseModel):
    id: str
    client_name: str
    event_name: str
    amount: float
    date: date
    stage: ProposalStage
    description: str | None = None
    service_type: str | None = None

    class Config:
        from_attributes = True


class ProposalCreateRequest(BaseModel):
    """New proposal form. Field checks happen in the pipeline so errors share one format."""

    client_name: str = Field(default="", description="Client name; a client record is created when new")
    event_name: str = Field(default="")
    amount: Decimal | None = Field(default=None, description="Quoted amount, must be positive")
    date: str = Field(default="", description="Event day as YYYY-MM-DD", examples=["2025-11-20"])
    stage: ProposalStage | None = Field(default=None, description="Ignored; proposals start in Sent")
    description: str | None = None
    service_type: str | None = None


class ProposalCreatedResponse(BaseModel):
    proposal: ProposalSchema
    conflict: EventSchema | None = Field(
        default=None, description="Already scheduled event on the same day, if any"
    )
    advisory: str | None = None


class ProposalStageUpdateRequest(BaseModel):
    stage: ProposalStage
    amount: Decimal | None = Field(default=None, description="Revised amount, when renegotiated")


class ProposalDraftRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4000, description="Free text such as a pasted chat message")


class ProposalDraftSchema(BaseModel):
    client_name: str | None = None
    event_name: str | None = None
    event_date: date | None = None
    service_type: str | None = None
    conflict: EventSchema | None = None

    class Config:
        from_attributes = True


class ProposalMessageSchema(BaseModel):
    text: str


__all__ = [
    "ProposalCreateRequest",
    "ProposalCreatedResponse",
    "ProposalDraftRequest",
    "ProposalDraftSchema",
    "ProposalMessageSchema",
    "ProposalSchema",
    "ProposalStageUpdateRequest",
]
