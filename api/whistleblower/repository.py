"""
Whistleblower report persistence.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from core import db

_SUMMARY_COLUMNS = (
    "id, name, email, message, is_anonymous, reference_number, status, created_at, updated_at"
)


async def reference_exists(reference_number: str) -> bool:
    row = await db.fetch_one(
        "SELECT id FROM whistleblower_reports WHERE reference_number = $1",
        reference_number,
    )
    return row is not None


async def insert_report(
    *,
    name: str | None,
    email: str | None,
    message: str,
    is_anonymous: bool,
    reference_number: str,
    status: str,
) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO whistleblower_reports
          (name, email, message, is_anonymous, reference_number, status, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $7)
        RETURNING id
        """,
        name,
        email,
        message,
        is_anonymous,
        reference_number,
        status,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert whistleblower report.")
    return int(row["id"])


async def get_status_by_reference(reference_number: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT reference_number, status, created_at, updated_at, is_anonymous
        FROM whistleblower_reports
        WHERE reference_number = $1
        """,
        reference_number,
    )


async def list_reports() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"SELECT {_SUMMARY_COLUMNS} FROM whistleblower_reports ORDER BY created_at DESC, id DESC"
    )


async def get_report(report_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_SUMMARY_COLUMNS}, admin_notes FROM whistleblower_reports WHERE id = $1",
        report_id,
    )


async def update_status(report_id: int, status: str) -> bool:
    result = await db.execute(
        "UPDATE whistleblower_reports SET status = $2, updated_at = $3 WHERE id = $1",
        report_id,
        status,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def get_admin_notes(report_id: int) -> tuple[bool, str | None]:
    row = await db.fetch_one("SELECT admin_notes FROM whistleblower_reports WHERE id = $1", report_id)
    if row is None:
        return False, None
    return True, row["admin_notes"]


async def prepend_admin_note(report_id: int, entry: str) -> bool:
    # Single statement so concurrent notes never overwrite each other.
    result = await db.execute(
        """
        UPDATE whistleblower_reports
        SET admin_notes = $2 || COALESCE(admin_notes, ''), updated_at = $3
        WHERE id = $1
        """,
        report_id,
        entry,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def count_by_status() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT status, COUNT(*) AS count
        FROM whistleblower_reports
        GROUP BY status
        ORDER BY status
        """
    )


async def list_created_since(cutoff: datetime) -> list[datetime]:
    rows = await db.fetch_all(
        "SELECT created_at FROM whistleblower_reports WHERE created_at >= $1",
        cutoff,
    )
    return [row["created_at"] for row in rows]


async def count_anonymity() -> dict[str, int]:
    row = await db.fetch_one(
        """
        SELECT
          COALESCE(SUM(CASE WHEN is_anonymous THEN 1 ELSE 0 END), 0) AS anonymous,
          COALESCE(SUM(CASE WHEN is_anonymous THEN 0 ELSE 1 END), 0) AS identified
        FROM whistleblower_reports
        """
    )
    row = row or {}
    return {"anonymous": int(row.get("anonymous") or 0), "identified": int(row.get("identified") or 0)}
