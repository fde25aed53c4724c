"""
Upload API endpoints (admin only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/uploads", dependencies=[Depends(auth_dependencies.require_admin)])


@router.post("/file")
async def upload_file(file: UploadFile | None = File(default=None)) -> dict:
    return await service.upload_single(file)


@router.post("/files")
async def upload_files(files: list[UploadFile] | None = File(default=None)) -> dict:
    return await service.upload_multiple(files)


@router.delete("/file/{filename}")
async def delete_file(filename: str) -> dict:
    return await service.delete_by_filename(filename)


@router.post("/get-upload-url", response_model=schemas.UploadUrlResponse)
async def get_upload_url(request: schemas.UploadUrlRequest) -> schemas.UploadUrlResponse:
    return service.generate_upload_destination(request)


@router.post("/direct/{folder}/{filename}")
async def direct_upload(
    folder: str,
    filename: str,
    file: UploadFile | None = File(default=None),
) -> dict:
    return await service.direct_upload(folder, filename, file)
