"""Endpoints for the financial ledger."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_controller
from app.schemas import TransactionCreateRequest, TransactionSchema, TransactionStatusUpdateRequest
from eventdesk.controller import DashboardController

router = APIRouter()


@router.get("", response_model=list[TransactionSchema])
async def list_transactions(
    view: Literal["all", "pending", "paid"] = Query(default="all", description="Status view, newest first"),
    controller: DashboardController = Depends(get_controller),
) -> list[TransactionSchema]:
    return [TransactionSchema.model_validate(t) for t in controller.transactions(view)]


@router.post("", response_model=TransactionSchema, status_code=status.HTTP_201_CREATED)
async def record_transaction(
    payload: TransactionCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> TransactionSchema:
    transaction = await controller.record_transaction(
        payload.description,
        payload.amount,
        payload.date,
        type=payload.type,
        status=payload.status,
        client_name=payload.client_name,
        category=payload.category,
    )
    return TransactionSchema.model_validate(transaction)


@router.put("/{transaction_id}/status", response_model=TransactionSchema)
async def set_transaction_status(
    transaction_id: str,
    payload: TransactionStatusUpdateRequest,
    controller: DashboardController = Depends(get_controller),
) -> TransactionSchema:
    transaction = await controller.set_transaction_status(transaction_id, payload.status)
    return TransactionSchema.model_validate(transaction)


__all__ = ["router"]
