"""
Newspaper API endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/newspapers")


def _newspaper_form(
    title: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(default=None),
    issue_date: date = Form(...),
) -> schemas.NewspaperFields:
    return schemas.NewspaperFields(title=title, description=description, issue_date=issue_date)


@router.get("", response_model=list[schemas.Newspaper])
async def list_newspapers(year: str | None = Query(default=None, max_length=10)) -> list[schemas.Newspaper]:
    return await service.list_newspapers(year)


@router.get("/latest", response_model=schemas.Newspaper)
async def get_latest() -> schemas.Newspaper:
    return await service.get_latest()


@router.get("/years")
async def list_years() -> list[int]:
    return await service.list_years()


@router.get("/{newspaper_id}", response_model=schemas.Newspaper)
async def get_newspaper(newspaper_id: int) -> schemas.Newspaper:
    return await service.get_newspaper(newspaper_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_newspaper(
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.NewspaperFields = Depends(_newspaper_form),
    pdf_file: UploadFile | None = File(default=None),
    cover_image: UploadFile | None = File(default=None),
) -> dict:
    return await service.create_newspaper(fields, pdf_file, cover_image)


@router.put("/{newspaper_id}")
async def update_newspaper(
    newspaper_id: int,
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.NewspaperFields = Depends(_newspaper_form),
    pdf_file: UploadFile | None = File(default=None),
    cover_image: UploadFile | None = File(default=None),
) -> dict:
    return await service.update_newspaper(newspaper_id, fields, pdf_file, cover_image)


@router.delete("/{newspaper_id}")
async def delete_newspaper(
    newspaper_id: int,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_newspaper(newspaper_id)
