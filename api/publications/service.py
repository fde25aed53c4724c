"""
Publication business logic.

Files are written before the row and removed again if the row write fails;
a replaced PDF is only deleted once the row points at the new one.
"""

from __future__ import annotations

import logging

from fastapi import UploadFile

from core import files
from core.errors import NotFoundError, ValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_publication(row: dict) -> schemas.Publication:
    return schemas.Publication.model_validate(row)


async def list_publications(category: str | None = None) -> list[schemas.Publication]:
    category = (category or "").strip() or None
    rows = await repository.list_publications(category=category)
    return [_to_publication(row) for row in rows]


async def list_categories() -> list[schemas.Category]:
    return [schemas.Category.model_validate(row) for row in await repository.list_categories()]


async def get_publication(publication_id: int) -> schemas.Publication:
    row = await repository.get_publication(publication_id)
    if row is None:
        raise NotFoundError("Publication not found.")
    return _to_publication(row)


async def _ensure_category(category_id: int | None) -> None:
    if category_id is not None and not await repository.category_exists(category_id):
        raise ValidationError(f"Category {category_id} does not exist.")


async def create_publication(
    fields: schemas.PublicationFields,
    pdf_file: UploadFile | None = None,
) -> dict:
    await _ensure_category(fields.category_id)

    stored = await files.save_upload(pdf_file, policy=files.PDF) if files.has_upload(pdf_file) else None
    try:
        publication_id = await repository.insert_publication(
            fields,
            pdf_file_path=stored.path if stored else None,
            file_size=stored.size if stored else None,
        )
    except Exception:
        await files.discard([stored])
        raise

    logger.info("publication_created id=%s pdf=%s", publication_id, stored.path if stored else None)
    return {
        "id": publication_id,
        "message": "Publication created successfully",
        "pdf_file_path": stored.path if stored else None,
    }


async def update_publication(
    publication_id: int,
    fields: schemas.PublicationFields,
    pdf_file: UploadFile | None = None,
) -> dict:
    current = await repository.get_publication(publication_id)
    if current is None:
        raise NotFoundError("Publication not found.")
    await _ensure_category(fields.category_id)

    stored = await files.save_upload(pdf_file, policy=files.PDF) if files.has_upload(pdf_file) else None
    try:
        updated = await repository.update_publication(
            publication_id,
            fields,
            pdf_file_path=stored.path if stored else current["pdf_file_path"],
            file_size=stored.size if stored else current["file_size"],
        )
    except Exception:
        await files.discard([stored])
        raise

    if not updated:
        await files.discard([stored])
        raise NotFoundError("Publication not found.")

    if stored is not None and current["pdf_file_path"]:
        await files.delete(current["pdf_file_path"])

    logger.info("publication_updated id=%s new_pdf=%s", publication_id, stored is not None)
    return {
        "message": "Publication updated successfully",
        "pdf_file_path": stored.path if stored else current["pdf_file_path"],
    }


async def delete_publication(publication_id: int) -> dict:
    current = await repository.get_publication(publication_id)
    if current is None:
        raise NotFoundError("Publication not found.")

    if not await repository.delete_publication(publication_id):
        raise NotFoundError("Publication not found.")

    await files.delete(current["pdf_file_path"])
    logger.info("publication_deleted id=%s", publication_id)
    return {"message": "Publication deleted successfully"}
