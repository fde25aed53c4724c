"""
Publication API endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/publications")


def _publication_form(
    title: str = Form(..., min_length=1, max_length=255),
    content: str | None = Form(default=None),
    summary: str | None = Form(default=None, max_length=500),
    category_id: int | None = Form(default=None, ge=1),
    published_date: date = Form(...),
) -> schemas.PublicationFields:
    return schemas.PublicationFields(
        title=title,
        content=content,
        summary=summary,
        category_id=category_id,
        published_date=published_date,
    )


@router.get("", response_model=list[schemas.Publication])
async def list_publications(
    category: str | None = Query(default=None, max_length=100),
) -> list[schemas.Publication]:
    return await service.list_publications(category)


@router.get("/categories", response_model=list[schemas.Category])
async def list_categories() -> list[schemas.Category]:
    return await service.list_categories()


@router.get("/{publication_id}", response_model=schemas.Publication)
async def get_publication(publication_id: int) -> schemas.Publication:
    return await service.get_publication(publication_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_publication(
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.PublicationFields = Depends(_publication_form),
    pdf_file: UploadFile | None = File(default=None),
) -> dict:
    return await service.create_publication(fields, pdf_file)


@router.put("/{publication_id}")
async def update_publication(
    publication_id: int,
    _: object = Depends(auth_dependencies.require_admin),
    fields: schemas.PublicationFields = Depends(_publication_form),
    pdf_file: UploadFile | None = File(default=None),
) -> dict:
    return await service.update_publication(publication_id, fields, pdf_file)


@router.delete("/{publication_id}")
async def delete_publication(
    publication_id: int,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_publication(publication_id)
