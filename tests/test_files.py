"""
File store unit tests.
"""

import re

import pytest

from core import files
from core.errors import ValidationError


def test_generate_filename_shape():
    name = files.generate_filename("Annual Report 2024.PDF")
    assert re.fullmatch(r"annual-report-2024-\d{13}-[0-9a-f]{16}\.PDF", name)


def test_generate_filename_strips_client_path():
    name = files.generate_filename("C:\\Users\\me\\..\\secret.pdf")
    assert name.startswith("secret-")
    assert files.is_safe_filename(name)


def test_generate_filename_without_extension():
    assert re.fullmatch(r"file-\d{13}-[0-9a-f]{16}", files.generate_filename(""))


@pytest.mark.parametrize(
    "mimetype, folder",
    [
        ("application/pdf", "pdfs"),
        ("image/jpeg", "images"),
        ("application/msword", "documents"),
        ("text/plain", "temp"),
    ],
)
def test_folder_for_mimetype(mimetype, folder):
    assert files.folder_for_mimetype(mimetype) == folder


def test_normalize_mimetype():
    assert files.normalize_mimetype("Text/Plain; charset=utf-8") == "text/plain"
    assert files.normalize_mimetype(None) == ""


@pytest.mark.parametrize("name", ["", ".", "..", "a..b", "a/b", "a\\b", "a\x00b"])
def test_unsafe_filenames(name):
    assert not files.is_safe_filename(name)


@pytest.mark.parametrize(
    "path",
    ["/uploads/../main.py", "/uploads/etc/passwd", "/uploads/pdfs/../../x", "/uploads/pdfs", "", "/elsewhere/x.pdf"],
)
def test_resolve_public_path_rejects_escapes(path):
    assert files.resolve_public_path(path) is None


def test_resolve_public_path():
    assert files.resolve_public_path("/uploads/pdfs/a.pdf") == files.upload_root() / "pdfs" / "a.pdf"


def test_policies():
    assert files.IMAGE.allows("image/tiff")
    assert not files.IMAGE.allows("application/pdf")
    assert files.PDF.allows("application/pdf")
    assert not files.PDF.allows("image/png")
    assert files.ANY.allows("text/csv")
    assert not files.ANY.allows("application/x-msdownload")


def test_validate_upload_size_and_empty():
    with pytest.raises(ValidationError):
        files.validate_upload("application/pdf", files.PDF.max_bytes + 1, files.PDF)
    with pytest.raises(ValidationError):
        files.validate_upload("application/pdf", 0, files.PDF)
    files.validate_upload("application/pdf", 10, files.PDF)


@pytest.mark.anyio
async def test_store_and_delete_round_trip():
    stored = await files.store(b"%PDF-1.4", "application/pdf", "doc.pdf", policy=files.PDF)
    assert stored.path.startswith("/uploads/pdfs/doc-")
    assert files.exists(stored.path)

    assert await files.delete(stored.path) is True
    assert not files.exists(stored.path)
    # Missing files are not an error.
    assert await files.delete(stored.path) is False


@pytest.mark.anyio
async def test_delete_ignores_unsafe_and_empty_paths():
    assert await files.delete(None) is False
    assert await files.delete("/uploads/../../etc/passwd") is False


@pytest.mark.anyio
async def test_store_rejects_oversized_image():
    with pytest.raises(ValidationError):
        await files.store(b"x" * (files.IMAGE.max_bytes + 1), "image/png", "big.png", policy=files.IMAGE)
