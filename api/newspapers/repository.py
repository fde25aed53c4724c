"""
Newspaper persistence.

Year filters are expressed as date ranges so the same SQL runs on both
store backends.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from core import db

from .schemas import NewspaperFields

_COLUMNS = "id, title, description, pdf_file_path, issue_date, cover_image_path, created_at, updated_at"


async def list_newspapers(*, year: int | None = None) -> list[dict[str, Any]]:
    if year is None:
        return await db.fetch_all(f"SELECT {_COLUMNS} FROM newspapers ORDER BY issue_date DESC, id DESC")
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM newspapers
        WHERE issue_date >= $1
          AND issue_date < $2
        ORDER BY issue_date DESC, id DESC
        """,
        date(year, 1, 1),
        date(year + 1, 1, 1),
    )


async def get_latest() -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_COLUMNS} FROM newspapers ORDER BY issue_date DESC, id DESC LIMIT 1"
    )


async def list_issue_dates() -> list[date]:
    rows = await db.fetch_all("SELECT DISTINCT issue_date FROM newspapers")
    return [row["issue_date"] for row in rows]


async def get_newspaper(newspaper_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(f"SELECT {_COLUMNS} FROM newspapers WHERE id = $1", newspaper_id)


async def insert_newspaper(
    fields: NewspaperFields,
    *,
    pdf_file_path: str,
    cover_image_path: str | None,
) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO newspapers
          (title, description, pdf_file_path, issue_date, cover_image_path, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $6)
        RETURNING id
        """,
        fields.title,
        fields.description,
        pdf_file_path,
        fields.issue_date,
        cover_image_path,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert newspaper.")
    return int(row["id"])


async def update_newspaper(
    newspaper_id: int,
    fields: NewspaperFields,
    *,
    pdf_file_path: str,
    cover_image_path: str | None,
) -> bool:
    result = await db.execute(
        """
        UPDATE newspapers
        SET title = $2,
            description = $3,
            pdf_file_path = $4,
            issue_date = $5,
            cover_image_path = $6,
            updated_at = $7
        WHERE id = $1
        """,
        newspaper_id,
        fields.title,
        fields.description,
        pdf_file_path,
        fields.issue_date,
        cover_image_path,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def delete_newspaper(newspaper_id: int) -> bool:
    result = await db.execute("DELETE FROM newspapers WHERE id = $1", newspaper_id)
    return result.rows_affected > 0
