"""
Newspaper business logic.

An issue always has a PDF and may have a cover image. Both files are written
before the row; every file written in a failed request is removed again, and
replaced files are only removed after the row points at their successors.
"""

from __future__ import annotations

import logging

from fastapi import UploadFile

from core import files
from core.errors import NotFoundError, ValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)

PDF_POLICY = files.UploadPolicy("newspaper pdf", 30 * files.MB, frozenset({files.PDF_TYPE}))
COVER_POLICY = files.IMAGE


def parse_year(raw: str | None) -> int | None:
    value = (raw or "").strip()
    if not value or value.lower() == "all":
        return None
    if not value.isdigit() or not 1000 <= int(value) <= 9999:
        raise ValidationError("Year must be a four digit number or 'All'.")
    return int(value)


async def list_newspapers(year: str | None = None) -> list[schemas.Newspaper]:
    rows = await repository.list_newspapers(year=parse_year(year))
    return [schemas.Newspaper.model_validate(row) for row in rows]


async def get_latest() -> schemas.Newspaper:
    row = await repository.get_latest()
    if row is None:
        raise NotFoundError("No newspapers found.")
    return schemas.Newspaper.model_validate(row)


async def list_years() -> list[int]:
    return sorted({issue_date.year for issue_date in await repository.list_issue_dates()}, reverse=True)


async def get_newspaper(newspaper_id: int) -> schemas.Newspaper:
    row = await repository.get_newspaper(newspaper_id)
    if row is None:
        raise NotFoundError("Newspaper not found.")
    return schemas.Newspaper.model_validate(row)


async def _store_files(
    pdf_file: UploadFile | None,
    cover_image: UploadFile | None,
) -> tuple[files.StoredFile | None, files.StoredFile | None]:
    pdf = await files.save_upload(pdf_file, policy=PDF_POLICY) if files.has_upload(pdf_file) else None
    try:
        cover = await files.save_upload(cover_image, policy=COVER_POLICY) if files.has_upload(cover_image) else None
    except Exception:
        await files.discard([pdf])
        raise
    return pdf, cover


async def create_newspaper(
    fields: schemas.NewspaperFields,
    pdf_file: UploadFile | None,
    cover_image: UploadFile | None = None,
) -> dict:
    if not files.has_upload(pdf_file):
        raise ValidationError("PDF file is required.")

    pdf, cover = await _store_files(pdf_file, cover_image)
    try:
        newspaper_id = await repository.insert_newspaper(
            fields,
            pdf_file_path=pdf.path,
            cover_image_path=cover.path if cover else None,
        )
    except Exception:
        await files.discard([pdf, cover])
        raise

    logger.info("newspaper_created id=%s pdf=%s cover=%s", newspaper_id, pdf.path, cover.path if cover else None)
    return {
        "id": newspaper_id,
        "message": "Newspaper created successfully",
        "pdf_file_path": pdf.path,
        "cover_image_path": cover.path if cover else None,
    }


async def update_newspaper(
    newspaper_id: int,
    fields: schemas.NewspaperFields,
    pdf_file: UploadFile | None = None,
    cover_image: UploadFile | None = None,
) -> dict:
    current = await repository.get_newspaper(newspaper_id)
    if current is None:
        raise NotFoundError("Newspaper not found.")

    pdf, cover = await _store_files(pdf_file, cover_image)
    pdf_path = pdf.path if pdf else current["pdf_file_path"]
    cover_path = cover.path if cover else current["cover_image_path"]
    try:
        updated = await repository.update_newspaper(
            newspaper_id,
            fields,
            pdf_file_path=pdf_path,
            cover_image_path=cover_path,
        )
    except Exception:
        await files.discard([pdf, cover])
        raise

    if not updated:
        await files.discard([pdf, cover])
        raise NotFoundError("Newspaper not found.")

    replaced = []
    if pdf is not None:
        replaced.append(current["pdf_file_path"])
    if cover is not None:
        replaced.append(current["cover_image_path"])
    await files.delete_many(replaced)

    return {
        "message": "Newspaper updated successfully",
        "pdf_file_path": pdf_path,
        "cover_image_path": cover_path,
    }


async def delete_newspaper(newspaper_id: int) -> dict:
    current = await repository.get_newspaper(newspaper_id)
    if current is None:
        raise NotFoundError("Newspaper not found.")

    if not await repository.delete_newspaper(newspaper_id):
        raise NotFoundError("Newspaper not found.")

    await files.delete_many([current["pdf_file_path"], current["cover_image_path"]])
    logger.info("newspaper_deleted id=%s", newspaper_id)
    return {"message": "Newspaper deleted successfully"}
