"""
Publication persistence.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from core import db

from .schemas import PublicationFields

_SELECT_PUBLICATION = """
    SELECT
      p.id,
      p.title,
      p.content,
      p.summary,
      p.category_id,
      c.name AS category,
      p.pdf_file_path,
      p.file_size,
      p.published_date,
      p.created_at,
      p.updated_at
    FROM publications p
    LEFT JOIN categories c ON c.id = p.category_id
"""


async def list_publications(*, category: str | None = None) -> list[dict[str, Any]]:
    if category:
        return await db.fetch_all(
            _SELECT_PUBLICATION
            + """
            WHERE c.name = $1
            ORDER BY p.published_date DESC, p.id DESC
            """,
            category,
        )
    return await db.fetch_all(_SELECT_PUBLICATION + " ORDER BY p.published_date DESC, p.id DESC")


async def get_publication(publication_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(_SELECT_PUBLICATION + " WHERE p.id = $1", publication_id)


async def insert_publication(
    fields: PublicationFields,
    *,
    pdf_file_path: str | None,
    file_size: int | None,
) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        """
        INSERT INTO publications
          (title, content, summary, category_id, pdf_file_path, file_size, published_date, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $8)
        RETURNING id
        """,
        fields.title,
        fields.content,
        fields.summary,
        fields.category_id,
        pdf_file_path,
        file_size,
        fields.published_date,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert publication.")
    return int(row["id"])


async def update_publication(
    publication_id: int,
    fields: PublicationFields,
    *,
    pdf_file_path: str | None,
    file_size: int | None,
) -> bool:
    result = await db.execute(
        """
        UPDATE publications
        SET title = $2,
            content = $3,
            summary = $4,
            category_id = $5,
            pdf_file_path = $6,
            file_size = $7,
            published_date = $8,
            updated_at = $9
        WHERE id = $1
        """,
        publication_id,
        fields.title,
        fields.content,
        fields.summary,
        fields.category_id,
        pdf_file_path,
        file_size,
        fields.published_date,
        datetime.now(timezone.utc),
    )
    return result.rows_affected > 0


async def delete_publication(publication_id: int) -> bool:
    result = await db.execute("DELETE FROM publications WHERE id = $1", publication_id)
    return result.rows_affected > 0


async def list_categories() -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT id, name FROM categories ORDER BY name")


async def category_exists(category_id: int) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM categories WHERE id = $1", category_id)
    return row is not None


async def insert_category(name: str) -> int:
    now = datetime.now(timezone.utc)
    row = await db.fetch_one(
        "INSERT INTO categories (name, created_at, updated_at) VALUES ($1, $2, $2) RETURNING id",
        name,
        now,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert category.")
    return int(row["id"])
