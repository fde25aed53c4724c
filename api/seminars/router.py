"""
Seminar API endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/seminars")


def _seminar_form(
    title: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(default=None),
    event_date: date = Form(...),
    status: str = Form(default=schemas.STATUS_UPCOMING, min_length=1, max_length=20),
    seats_available: int | None = Form(default=None, ge=0),
    location: str | None = Form(default=None, max_length=255),
) -> schemas.SeminarFields:
    return schemas.SeminarFields(
        title=title,
        description=description,
        event_date=event_date,
        status=status,
        seats_available=seats_available,
        location=location,
    )


@router.get("", response_model=list[schemas.Seminar])
async def list_seminars() -> list[schemas.Seminar]:
    return await service.list_seminars()


@router.get("/upcoming", response_model=list[schemas.Seminar])
async def list_upcoming() -> list[schemas.Seminar]:
    return await service.list_upcoming()


@router.get("/past", response_model=list[schemas.Seminar])
async def list_past() -> list[schemas.Seminar]:
    return await service.list_past()


@router.get("/{seminar_id}", response_model=schemas.Seminar)
async def get_seminar(seminar_id: int) -> schemas.Seminar:
    return await service.get_seminar(seminar_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_seminar(
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.SeminarFields = Depends(_seminar_form),
    image: UploadFile | None = File(default=None),
) -> dict:
    return await service.create_seminar(fields, image)


@router.put("/{seminar_id}")
async def update_seminar(
    seminar_id: int,
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.SeminarFields = Depends(_seminar_form),
    image: UploadFile | None = File(default=None),
) -> dict:
    return await service.update_seminar(seminar_id, fields, image)


@router.delete("/{seminar_id}")
async def delete_seminar(
    seminar_id: int,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_seminar(seminar_id)
