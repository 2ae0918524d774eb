"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .directory import clients_router, services_router, suppliers_router
from .events import router as events_router
from .profile import router as profile_router
from .proposals import router as proposals_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(proposals_router, prefix="/proposals", tags=["proposals"])
api_router.include_router(events_router, prefix="/events", tags=["events"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
api_router.include_router(clients_router, prefix="/clients", tags=["directory"])
api_router.include_router(suppliers_router, prefix="/suppliers", tags=["directory"])
api_router.include_router(services_router, prefix="/services", tags=["directory"])
api_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])

__all__ = ["api_router"]
