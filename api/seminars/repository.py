"""
Seminar persistence.

Upcoming/past split: a seminar qualifies by date OR by its status text, so a
future seminar marked "Past" shows up in both lists.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from core import db

from .schemas import STATUS_PAST, STATUS_UPCOMING, SeminarFields

_COLUMNS = """
    id, title, description, image_path, event_date, status,
    seats_available, location, created_at, updated_at
"""


async def list_seminars() -> list[dict[str, Any]]:
    return await db.fetch_all(f"SELECT {_COLUMNS} FROM seminars ORDER BY event_date DESC, id DESC")


async def list_upcoming(today: date) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM seminars
        WHERE event_date >= $1 OR status = $2
        ORDER BY event_date ASC, id ASC
        """,
        today,
        STATUS_UPCOMING,
    )


async def list_past(today: date) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM seminars
        WHERE event_date < $1 OR status = $2
        ORDER BY event_date DESC, id DESC
        """,
        today,
        STATUS_PAST,
    )


async def get_seminar(seminar_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(f"SELECT {_COLUMNS} FROM seminars WHERE id = $1", seminar_id)


async def insert_seminar(fields: SeminarFields, *, image_path: str | None) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO seminars
          (title, description, image_path, event_date, status, seats_available, location, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $8)
        RETURNING id
        """,
        fields.title,
        fields.description,
        image_path,
        fields.event_date,
        fields.status,
        fields.seats_available,
        fields.location,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert seminar.")
    return int(row["id"])


async def update_seminar(seminar_id: int, fields: SeminarFields, *, image_path: str | None) -> bool:
    result = await db.execute(
        """
        UPDATE seminars
        SET title = $2,
            description = $3,
            image_path = $4,
            event_date = $5,
            status = $6,
            seats_available = $7,
            location = $8,
            updated_at = $9
        WHERE id = $1
        """,
        seminar_id,
        fields.title,
        fields.description,
        image_path,
        fields.event_date,
        fields.status,
        fields.seats_available,
        fields.location,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def delete_seminar(seminar_id: int) -> bool:
    result = await db.execute("DELETE FROM seminars WHERE id = $1", seminar_id)
    return result.rows_affected > 0
