"""Endpoints for clients, suppliers and service packages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_controller
from app.schemas import (
    ClientCreateRequest,
    ClientSchema,
    ServicePackageCreateRequest,
    ServicePackageSchema,
    SupplierCreateRequest,
    SupplierSchema,
)
from eventdesk.controller import DashboardController

clients_router = APIRouter()
suppliers_router = APIRouter()
services_router = APIRouter()


@clients_router.get("", response_model=list[ClientSchema])
async def list_clients(controller: DashboardController = Depends(get_controller)) -> list[ClientSchema]:
    return [ClientSchema.model_validate(c) for c in controller.state.clients]


@clients_router.post("", response_model=ClientSchema, status_code=status.HTTP_201_CREATED)
async def add_client(
    payload: ClientCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> ClientSchema:
    client = await controller.add_client(payload.name, payload.phone, payload.email)
    return ClientSchema.model_validate(client)


@suppliers_router.get("", response_model=list[SupplierSchema])
async def list_suppliers(controller: DashboardController = Depends(get_controller)) -> list[SupplierSchema]:
    return [SupplierSchema.model_validate(s) for s in controller.state.suppliers]


@suppliers_router.post("", response_model=SupplierSchema, status_code=status.HTTP_201_CREATED)
async def add_supplier(
    payload: SupplierCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> SupplierSchema:
    supplier = await controller.add_supplier(payload.name, payload.category, payload.phone)
    return SupplierSchema.model_validate(supplier)


@suppliers_router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(supplier_id: str, controller: DashboardController = Depends(get_controller)) -> Response:
    await controller.delete_supplier(supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@services_router.get("", response_model=list[ServicePackageSchema])
async def list_services(controller: DashboardController = Depends(get_controller)) -> list[ServicePackageSchema]:
    return [ServicePackageSchema.model_validate(s) for s in controller.state.services]


@services_router.post("", response_model=ServicePackageSchema, status_code=status.HTTP_201_CREATED)
async def add_service(
    payload: ServicePackageCreateRequest,
    controller: DashboardController = Depends(get_controller),
) -> ServicePackageSchema:
    package = await controller.add_service(payload.name, payload.price, payload.description)
    return ServicePackageSchema.model_validate(package)


@services_router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(service_id: str, controller: DashboardController = Depends(get_controller)) -> Response:
    await controller.delete_service(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["clients_router", "services_router", "suppliers_router"]
