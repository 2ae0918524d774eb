"""Endpoints for the proposal pipeline: creation, stage moves and drafts."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_controller
from app.schemas import (
    EventSchema,
    ProposalCreateRequest,
    ProposalCreatedResponse,
    ProposalDraftRequest,
    ProposalDraftSchema,
    ProposalMessageSchema,
    ProposalSchema,
    ProposalStageUpdateRequest,
)
from eventdesk.controller import DashboardController
from eventdesk.errors import RecordNotFound
from eventdesk.extraction import extract_draft
from eventdesk.ledger import proposals_in_month
from eventdesk.models import ProposalStage
from eventdesk.templating import proposal_message

router = APIRouter()

_MONTH_QUERY = Query(default=None, pattern=r"^\d{4}-\d{2}$", description="Only proposals dated in this YYYY-MM month")


@router.get("", response_model=list[ProposalSchema])
async def list_proposals(
    month: str | None = _MONTH_QUERY,
    stage: ProposalStage | None = Query(default=None, description="Optional stage filter"),
    controller: DashboardController = Depends(get_controller),
) -> list[ProposalSchema]:
    proposals = proposals_in_month(controller.state.proposals, month)
    if stage is not None:
        proposals = [p for p in proposals if p.stage == stage]
    return [ProposalSchema.model_validate(p) for p in proposals]


@router.get("/board", response_model=Dict[ProposalStage, list[ProposalSchema]])
async def proposal_board(
    month: str | None = _MONTH_QUERY,
    controller: DashboardController = Depends(get_controller),
) -> Dict[ProposalStage, list[ProposalSchema]]:
    board = controller.proposal_board(month)
    return {stage: [ProposalSchema.model_validate(p) for p in items] for stage, items in board.items()}


@router.post("", response_model=ProposalCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_proposal(
    payload: ProposalCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> ProposalCreatedResponse:
    created = await controller.create_proposal(
        payload.client_name,
        payload.event_name,
        payload.amount,
        payload.date,
        stage=payload.stage,
        description=payload.description,
        service_type=payload.service_type,
    )
    advisory = created.advisory
    return ProposalCreatedResponse(
        proposal=ProposalSchema.model_validate(created.proposal),
        conflict=EventSchema.model_validate(advisory.event) if advisory else None,
        advisory=advisory.message if advisory else None,
    )


@router.put("/{proposal_id}", response_model=ProposalSchema)
async def update_proposal(
    proposal_id: str,
    payload: ProposalStageUpdateRequest,
    controller: DashboardController = Depends(get_controller),
) -> ProposalSchema:
    proposal = await controller.update_proposal(proposal_id, payload.stage, amount=payload.amount)
    return ProposalSchema.model_validate(proposal)


@router.post("/extract", response_model=ProposalDraftSchema)
async def extract_proposal(
    payload: ProposalDraftRequest,
    controller: DashboardController = Depends(get_controller),
) -> ProposalDraftSchema:
    draft = extract_draft(payload.text)
    advisory = controller.conflict_for(draft.event_date) if draft.event_date else None
    return ProposalDraftSchema(
        client_name=draft.client_name,
        event_name=draft.event_name,
        event_date=draft.event_date,
        service_type=draft.service_type,
        conflict=EventSchema.model_validate(advisory.event) if advisory else None,
    )


@router.get("/{proposal_id}/message", response_model=ProposalMessageSchema)
async def proposal_send_message(
    proposal_id: str,
    link: str = Query(default="", description="Link to the proposal document"),
    controller: DashboardController = Depends(get_controller),
) -> ProposalMessageSchema:
    proposal = controller.state.find("proposals", proposal_id)
    if proposal is None:
        raise RecordNotFound("proposals", proposal_id)
    template = controller.state.profile.message_templates.proposal_send
    return ProposalMessageSchema(text=proposal_message(proposal, template, link))


__all__ = ["router"]
