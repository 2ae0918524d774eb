"""Endpoints for the business profile and monthly goal."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_controller
from app.schemas import BusinessProfileSchema, MonthlyGoalUpdateRequest
from eventdesk.controller import DashboardController

router = APIRouter()


@router.get("", response_model=BusinessProfileSchema)
async def get_profile(controller: DashboardController = Depends(get_controller)) -> BusinessProfileSchema:
    return BusinessProfileSchema.model_validate(controller.state.profile)


@router.put("", response_model=BusinessProfileSchema)
async def save_profile(
    payload: BusinessProfileSchema,
    controller: DashboardController = Depends(get_controller),
) -> BusinessProfileSchema:
    profile = await controller.update_profile(payload.to_domain())
    return BusinessProfileSchema.model_validate(profile)


@router.put("/goal", response_model=BusinessProfileSchema)
async def update_goal(
    payload: MonthlyGoalUpdateRequest,
    controller: DashboardController = Depends(get_controller),
) -> BusinessProfileSchema:
    profile = await controller.update_monthly_goal(payload.monthly_goal)
    return BusinessProfileSchema.model_validate(profile)


__all__ = ["router"]
