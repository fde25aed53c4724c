"""
Service (offering) business logic.
"""

from __future__ import annotations

import logging

from core.errors import NotFoundError, ValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_services() -> list[schemas.Service]:
    return [schemas.Service.model_validate(row) for row in await repository.list_services()]


async def get_service(service_id: int) -> schemas.Service:
    row = await repository.get_service(service_id)
    if row is None:
        raise NotFoundError("Service not found.")
    return schemas.Service.model_validate(row)


async def create_service(fields: schemas.ServiceFields) -> dict:
    # No explicit position: append after the current last service.
    order_number = fields.order_number
    if order_number is None:
        order_number = await repository.next_order_number()

    service_id = await repository.insert_service(fields, order_number=order_number)
    logger.info("service_created id=%s order_number=%s", service_id, order_number)
    return {"id": service_id, "order_number": order_number, "message": "Service created successfully"}


async def update_service(service_id: int, fields: schemas.ServiceFields) -> dict:
    current = await repository.get_service(service_id)
    if current is None:
        raise NotFoundError("Service not found.")

    order_number = fields.order_number if fields.order_number is not None else current["order_number"]
    if not await repository.update_service(service_id, fields, order_number=order_number):
        raise NotFoundError("Service not found.")
    return {"message": "Service updated successfully"}


async def delete_service(service_id: int) -> dict:
    if not await repository.delete_service(service_id):
        raise NotFoundError("Service not found.")
    logger.info("service_deleted id=%s", service_id)
    return {"message": "Service deleted successfully"}


async def reorder_services(entries: list[schemas.ServiceOrder]) -> dict:
    if not entries:
        raise ValidationError("Invalid service order data.")

    updated = await repository.update_orders(entries)
    logger.info("services_reordered count=%s", updated)
    return {"message": "Service orders updated successfully", "updated": updated}
