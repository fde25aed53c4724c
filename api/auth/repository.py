"""
Auth persistence helpers.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, username: str, email: str, password_hash: str, role: str) -> dict:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO users (username, email, password_hash, role, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $5)
        RETURNING id, username, email, role
        """,
        username,
        normalize_email(email),
        password_hash,
        role,
        now,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, email, password_hash, role, created_at, updated_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, email, password_hash, role, created_at, updated_at
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def get_user_role(user_id: int) -> str | None:
    row = await db.fetch_one("SELECT role FROM users WHERE id = $1", user_id)
    return str(row["role"]) if row is not None else None


async def update_password_hash(user_id: int, password_hash: str) -> bool:
    result = await db.execute(
        """
        UPDATE users
        SET password_hash = $2,
            updated_at = $3
        WHERE id = $1
        """,
        user_id,
        password_hash,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def count_users() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM users")
    return int((row or {}).get("n", 0))
