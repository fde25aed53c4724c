"""
Generic admin uploads: single/batch upload, delete by name, and the
two-step direct upload (reserve a destination, then post the file to it).
"""

from __future__ import annotations

import logging
import secrets

from fastapi import UploadFile

from core import files
from core.errors import NotFoundError, ValidationError

from . import schemas

logger = logging.getLogger(__name__)

MAX_BATCH_FILES = 10
DEFAULT_DIRECT_FOLDER = "images"


async def upload_single(file: UploadFile | None) -> dict:
    if not files.has_upload(file):
        raise ValidationError("No file uploaded.")
    stored = await files.save_upload(file, policy=files.ANY)
    return {"message": "File uploaded successfully", "file": stored.to_public()}


async def upload_multiple(uploads: list[UploadFile] | None) -> dict:
    uploads = [f for f in (uploads or []) if files.has_upload(f)]
    if not uploads:
        raise ValidationError("No files uploaded.")
    if len(uploads) > MAX_BATCH_FILES:
        raise ValidationError(f"At most {MAX_BATCH_FILES} files can be uploaded at once.")

    stored: list[files.StoredFile] = []
    try:
        for upload in uploads:
            stored.append(await files.save_upload(upload, policy=files.ANY))
    except Exception:
        await files.discard(stored)
        raise

    return {"message": "Files uploaded successfully", "files": [item.to_public() for item in stored]}


async def delete_by_filename(filename: str) -> dict:
    if not files.is_safe_filename(filename):
        raise ValidationError("Invalid filename.")

    for folder in files.UPLOAD_FOLDERS:
        path = files.public_path(folder, filename)
        if files.exists(path):
            if not await files.delete(path):
                raise NotFoundError("File not found.")
            return {"message": "File deleted successfully"}

    raise NotFoundError("File not found.")


def direct_folder_for(file_type: str | None) -> str:
    mimetype = files.normalize_mimetype(file_type)
    if mimetype == files.PDF_TYPE:
        return "pdfs"
    if mimetype in files.OFFICE_TYPES:
        return "documents"
    return DEFAULT_DIRECT_FOLDER


def generate_upload_destination(request: schemas.UploadUrlRequest) -> schemas.UploadUrlResponse:
    """
    Reserve a name for a later direct upload. Nothing is written here.
    """
    filename = f"{secrets.token_hex(16)}{files.file_extension(request.original_name or '')}"
    folder = direct_folder_for(request.file_type)
    return schemas.UploadUrlResponse(
        upload_url=f"/api/uploads/direct/{folder}/{filename}",
        filename=filename,
        file_path=files.public_path(folder, filename),
    )


async def direct_upload(folder: str, filename: str, file: UploadFile | None) -> dict:
    if folder not in files.UPLOAD_FOLDERS:
        raise ValidationError("Invalid upload folder.")
    if not files.is_safe_filename(filename):
        raise ValidationError("Invalid filename.")
    if not files.has_upload(file):
        raise ValidationError("No file uploaded.")

    stored = await files.save_upload(file, policy=files.ANY, folder=folder, filename=filename)
    logger.info("direct_upload_stored path=%s", stored.path)
    return {"message": "File uploaded successfully", "file": stored.to_public()}
