"""
Seminar business logic.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import UploadFile

from core import files
from core.errors import NotFoundError

from . import repository, schemas

logger = logging.getLogger(__name__)


def _today() -> date:
    return date.today()


def _to_seminars(rows: list[dict]) -> list[schemas.Seminar]:
    return [schemas.Seminar.model_validate(row) for row in rows]


async def list_seminars() -> list[schemas.Seminar]:
    return _to_seminars(await repository.list_seminars())


async def list_upcoming() -> list[schemas.Seminar]:
    return _to_seminars(await repository.list_upcoming(_today()))


async def list_past() -> list[schemas.Seminar]:
    return _to_seminars(await repository.list_past(_today()))


async def get_seminar(seminar_id: int) -> schemas.Seminar:
    row = await repository.get_seminar(seminar_id)
    if row is None:
        raise NotFoundError("Seminar not found.")
    return schemas.Seminar.model_validate(row)


async def create_seminar(fields: schemas.SeminarFields, image: UploadFile | None = None) -> dict:
    stored = await files.save_upload(image, policy=files.IMAGE) if files.has_upload(image) else None
    try:
        seminar_id = await repository.insert_seminar(fields, image_path=stored.path if stored else None)
    except Exception:
        await files.discard([stored])
        raise

    logger.info("seminar_created id=%s image=%s", seminar_id, stored.path if stored else None)
    return {
        "id": seminar_id,
        "message": "Seminar created successfully",
        "image_path": stored.path if stored else None,
    }


async def update_seminar(
    seminar_id: int,
    fields: schemas.SeminarFields,
    image: UploadFile | None = None,
) -> dict:
    current = await repository.get_seminar(seminar_id)
    if current is None:
        raise NotFoundError("Seminar not found.")

    stored = await files.save_upload(image, policy=files.IMAGE) if files.has_upload(image) else None
    image_path = stored.path if stored else current["image_path"]
    try:
        updated = await repository.update_seminar(seminar_id, fields, image_path=image_path)
    except Exception:
        await files.discard([stored])
        raise

    if not updated:
        await files.discard([stored])
        raise NotFoundError("Seminar not found.")

    if stored is not None and current["image_path"]:
        await files.delete(current["image_path"])

    return {"message": "Seminar updated successfully", "image_path": image_path}


async def delete_seminar(seminar_id: int) -> dict:
    current = await repository.get_seminar(seminar_id)
    if current is None:
        raise NotFoundError("Seminar not found.")

    if not await repository.delete_seminar(seminar_id):
        raise NotFoundError("Seminar not found.")

    await files.delete(current["image_path"])
    logger.info("seminar_deleted id=%s", seminar_id)
    return {"message": "Seminar deleted successfully"}
