"""
Service API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/services")


@router.get("", response_model=list[schemas.Service])
async def list_services() -> list[schemas.Service]:
    return await service.list_services()


@router.post("/orders")
async def reorder_services(
    request: schemas.ReorderRequest,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.reorder_services(request.services)


@router.get("/{service_id}", response_model=schemas.Service)
async def get_service(service_id: int) -> schemas.Service:
    return await service.get_service(service_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service(
    request: schemas.ServiceFields,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.create_service(request)


@router.put("/{service_id}")
async def update_service(
    service_id: int,
    request: schemas.ServiceFields,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_service(service_id, request)


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_service(service_id)
