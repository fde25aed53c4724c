"""
Read-only aggregates for the admin dashboard.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core import db

# Table names are interpolated into SQL; only these are accepted.
COUNTED_TABLES = ("publications", "services", "seminars", "newspapers", "whistleblower_reports")


def _checked(table: str) -> str:
    if table not in COUNTED_TABLES:
        raise ValueError(f"Unknown table: {table}")
    return table


async def count_rows(table: str) -> int:
    row = await db.fetch_one(f"SELECT COUNT(*) AS total FROM {_checked(table)}")
    return int((row or {}).get("total") or 0)


async def count_created_between(table: str, start: datetime, end: datetime) -> int:
    row = await db.fetch_one(
        f"SELECT COUNT(*) AS total FROM {_checked(table)} WHERE created_at >= $1 AND created_at < $2",
        start,
        end,
    )
    return int((row or {}).get("total") or 0)


async def recent_publications(limit: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        "SELECT id, title, created_at FROM publications ORDER BY created_at DESC, id DESC LIMIT $1",
        limit,
    )


async def recent_seminars(limit: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        "SELECT id, title, created_at FROM seminars ORDER BY created_at DESC, id DESC LIMIT $1",
        limit,
    )


async def recent_reports(limit: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        "SELECT id, created_at FROM whistleblower_reports ORDER BY created_at DESC, id DESC LIMIT $1",
        limit,
    )
