"""
Service persistence.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from core import db
from core.errors import NotFoundError

from .schemas import ServiceFields, ServiceOrder

_COLUMNS = "id, title, description, icon, order_number, created_at, updated_at"


async def list_services() -> list[dict[str, Any]]:
    return await db.fetch_all(f"SELECT {_COLUMNS} FROM services ORDER BY order_number, id")


async def get_service(service_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(f"SELECT {_COLUMNS} FROM services WHERE id = $1", service_id)


async def next_order_number() -> int:
    row = await db.fetch_one("SELECT MAX(order_number) AS max_order FROM services")
    current = (row or {}).get("max_order")
    return int(current or 0) + 1


async def insert_service(fields: ServiceFields, *, order_number: int) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO services (title, description, icon, order_number, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $5)
        RETURNING id
        """,
        fields.title,
        fields.description,
        fields.icon,
        order_number,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert service.")
    return int(row["id"])


async def update_service(service_id: int, fields: ServiceFields, *, order_number: int | None) -> bool:
    result = await db.execute(
        """
        UPDATE services
        SET title = $2,
            description = $3,
            icon = $4,
            order_number = $5,
            updated_at = $6
        WHERE id = $1
        """,
        service_id,
        fields.title,
        fields.description,
        fields.icon,
        order_number,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def delete_service(service_id: int) -> bool:
    result = await db.execute("DELETE FROM services WHERE id = $1", service_id)
    return result.rows_affected > 0


async def update_orders(entries: list[ServiceOrder]) -> int:
    """
    Apply all order numbers in one transaction; all or nothing.

    An id that matches no row raises inside the transaction, so none of the
    other updates are kept either.
    """
    now = datetime.now(timezone.utc)

    async def _apply(tx: Any) -> int:
        for entry in entries:
            result = await tx.execute(
                """
                UPDATE services
                SET order_number = $2,
                    updated_at = $3
                WHERE id = $1
                """,
                entry.id,
                entry.order_number,
                now,
            )
            if result.rows_affected == 0:
                raise NotFoundError(f"Service not found: {entry.id}")
        return len(entries)

    return await db.with_transaction(_apply)
