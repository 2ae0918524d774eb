"""Dashboard summary: KPI cards and the revenue history chart."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_controller
from app.schemas import DashboardSchema, KPISchema, MonthlyRevenueSchema
from app.services.analytics import monthly_revenue
from eventdesk.controller import DashboardController

router = APIRouter()


@router.get("", response_model=DashboardSchema)
async def get_dashboard(
    request: Request,
    controller: DashboardController = Depends(get_controller),
) -> DashboardSchema:
    months = request.app.state.settings.revenue_history_months
    history = monthly_revenue(controller.state.transactions, months=months)
    return DashboardSchema(
        kpis=KPISchema.model_validate(controller.kpis()),
        monthly_goal=float(controller.monthly_goal),
        revenue_history=[MonthlyRevenueSchema.model_validate(item) for item in history],
    )


@router.get("/kpis", response_model=KPISchema)
async def get_kpis(controller: DashboardController = Depends(get_controller)) -> KPISchema:
    return KPISchema.model_validate(controller.kpis())


__all__ = ["router"]
