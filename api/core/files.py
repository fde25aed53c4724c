"""
Local file store for uploaded documents and images.

Files live under UPLOAD_ROOT/<folder>/<filename> and are referenced from the
database (and served) as "/uploads/<folder>/<filename>".

Rules:
- validate the declared MIME type and size before anything touches disk
- route the file to a folder by MIME type
- generate unpredictable, collision-resistant filenames
- deletion is best-effort: failures are logged, never raised
"""

from __future__ import annotations

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from .errors import ValidationError

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"
UPLOAD_FOLDERS = ("pdfs", "images", "newspapers", "documents", "temp")

PDF_TYPE = "application/pdf"
IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"})
OFFICE_TYPES = frozenset(
    {
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
)
TEXT_TYPES = frozenset({"text/plain", "text/csv"})

MB = 1024 * 1024


@dataclass(frozen=True)
class UploadPolicy:
    """
    Allow-list + size ceiling applied to one upload field.

    `allow_any_image` accepts every image/* type (the dedicated image fields);
    otherwise only `allowed_types` pass.
    """

    name: str
    max_bytes: int
    allowed_types: frozenset[str]
    allow_any_image: bool = False

    def allows(self, mimetype: str) -> bool:
        if self.allow_any_image and mimetype.startswith("image/"):
            return True
        return mimetype in self.allowed_types


PDF = UploadPolicy("pdf", 20 * MB, frozenset({PDF_TYPE}))
IMAGE = UploadPolicy("image", 5 * MB, frozenset(), allow_any_image=True)
ANY = UploadPolicy("any", 30 * MB, frozenset({PDF_TYPE}) | IMAGE_TYPES | OFFICE_TYPES | TEXT_TYPES)


@dataclass(frozen=True)
class StoredFile:
    path: str
    filename: str
    original_name: str
    mimetype: str
    size: int

    def to_public(self) -> dict:
        return {
            "originalName": self.original_name,
            "filename": self.filename,
            "mimetype": self.mimetype,
            "size": self.size,
            "path": self.path,
        }


def upload_root() -> Path:
    return Path(os.environ.get("UPLOAD_ROOT", "./uploads").strip() or "./uploads")


def ensure_upload_dirs() -> None:
    root = upload_root()
    for folder in UPLOAD_FOLDERS:
        (root / folder).mkdir(parents=True, exist_ok=True)


def normalize_mimetype(mimetype: str | None) -> str:
    # "text/plain; charset=utf-8" -> "text/plain"
    return (mimetype or "").split(";", 1)[0].strip().lower()


def folder_for_mimetype(mimetype: str, requested: str | None = None) -> str:
    mimetype = normalize_mimetype(mimetype)
    if mimetype == PDF_TYPE:
        return "pdfs"
    if mimetype.startswith("image/"):
        return "images"
    if mimetype in OFFICE_TYPES:
        return "documents"
    if requested in UPLOAD_FOLDERS:
        return requested
    return "temp"


_NON_SLUG = re.compile(r"[^a-z0-9]+")
_NON_EXT = re.compile(r"[^A-Za-z0-9]")


def _split_name(original_name: str) -> tuple[str, str]:
    # Browsers may send full client paths; only the last component matters.
    base = PurePosixPath((original_name or "").replace("\\", "/")).name
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem:
        return base, ""
    return stem, "." + _NON_EXT.sub("", ext)


def slugify(name: str) -> str:
    slug = _NON_SLUG.sub("-", (name or "").lower()).strip("-")
    return slug or "file"


def file_extension(original_name: str) -> str:
    ext = _split_name(original_name)[1]
    return "" if ext == "." else ext


def generate_filename(original_name: str) -> str:
    """
    <slug>-<epoch millis>-<16 hex chars><ext>
    """
    stem, _ = _split_name(original_name)
    timestamp = int(time.time() * 1000)
    return f"{slugify(stem)}-{timestamp}-{secrets.token_hex(8)}{file_extension(original_name)}"


def is_safe_filename(filename: str) -> bool:
    if not filename or filename in {".", ".."}:
        return False
    return not any(bad in filename for bad in ("..", "/", "\\", "\x00"))


def public_path(folder: str, filename: str) -> str:
    return f"{URL_PREFIX}/{folder}/{filename}"


def resolve_public_path(path: str) -> Path | None:
    """
    Map "/uploads/<folder>/<name>" to a location under the upload root.

    Returns None for anything that does not stay inside the root.
    """
    raw = (path or "").replace("\\", "/").strip()
    prefix = URL_PREFIX.lstrip("/") + "/"
    raw = raw.lstrip("./")
    if raw.startswith(prefix):
        raw = raw[len(prefix):]
    parts = [p for p in raw.split("/") if p]
    if len(parts) != 2 or parts[0] not in UPLOAD_FOLDERS or not is_safe_filename(parts[1]):
        return None
    return upload_root() / parts[0] / parts[1]


def validate_upload(mimetype: str, size: int, policy: UploadPolicy) -> None:
    if not policy.allows(mimetype):
        raise ValidationError(f"File type '{mimetype or 'unknown'}' is not allowed for {policy.name} uploads.")
    if size > policy.max_bytes:
        raise ValidationError(f"File too large. Max is {policy.max_bytes} bytes.")
    if size == 0:
        raise ValidationError("Uploaded file is empty.")


def _write_file(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    # "xb": never overwrite an existing upload.
    with target.open("xb") as fh:
        fh.write(data)


async def store(
    data: bytes,
    mimetype: str | None,
    original_name: str,
    *,
    policy: UploadPolicy,
    folder: str | None = None,
    filename: str | None = None,
) -> StoredFile:
    """
    Validate and persist one file.

    `folder` + `filename` are used for direct uploads, where the client was
    handed the destination beforehand; otherwise both are derived here.
    """
    mimetype = normalize_mimetype(mimetype)
    validate_upload(mimetype, len(data), policy)

    if filename is not None:
        if not is_safe_filename(filename):
            raise ValidationError("Invalid filename.")
        if folder not in UPLOAD_FOLDERS:
            raise ValidationError("Invalid upload folder.")
        target_folder = folder
        target_name = filename
    else:
        target_folder = folder_for_mimetype(mimetype, folder)
        target_name = generate_filename(original_name)

    target = upload_root() / target_folder / target_name
    try:
        await run_in_threadpool(_write_file, target, data)
    except FileExistsError as exc:
        raise ValidationError("A file with this name already exists.") from exc

    logger.info("file_stored path=%s size=%s mimetype=%s", target, len(data), mimetype)
    return StoredFile(
        path=public_path(target_folder, target_name),
        filename=target_name,
        original_name=original_name or target_name,
        mimetype=mimetype,
        size=len(data),
    )


def has_upload(file: UploadFile | None) -> bool:
    # HTML forms send an empty part with no filename when nothing was picked.
    return file is not None and bool(file.filename)


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise ValidationError(f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


async def save_upload(
    file: UploadFile,
    *,
    policy: UploadPolicy,
    folder: str | None = None,
    filename: str | None = None,
) -> StoredFile:
    mimetype = normalize_mimetype(file.content_type)
    # Reject by type before reading the body.
    if not policy.allows(mimetype):
        raise ValidationError(f"File type '{mimetype or 'unknown'}' is not allowed for {policy.name} uploads.")
    data = await read_upload_bytes(file, policy.max_bytes)
    return await store(
        data,
        mimetype,
        file.filename or "",
        policy=policy,
        folder=folder,
        filename=filename,
    )


def _unlink(target: Path) -> None:
    target.unlink()


async def delete(path: str | None) -> bool:
    """
    Best-effort removal of a stored file. Returns True if a file was removed.
    """
    if not path:
        return False
    target = resolve_public_path(path)
    if target is None:
        logger.warning("file_delete_skipped reason=unsafe_path path=%s", path)
        return False
    try:
        await run_in_threadpool(_unlink, target)
    except FileNotFoundError:
        logger.warning("file_delete_skipped reason=missing path=%s", path)
        return False
    except OSError:
        logger.exception("file_delete_failed path=%s", path)
        return False
    logger.info("file_deleted path=%s", path)
    return True


async def delete_many(paths: list[str | None]) -> None:
    for path in paths:
        await delete(path)


async def discard(stored: list[StoredFile | None]) -> None:
    """
    Compensating delete for files written earlier in a request that failed later.
    """
    await delete_many([item.path for item in stored if item is not None])


def exists(path: str) -> bool:
    target = resolve_public_path(path)
    return target is not None and target.is_file()
