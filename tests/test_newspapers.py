"""
Newspaper endpoint tests.
"""

import pytest

from conftest import pdf_upload, png_upload
from core import files
from core.errors import ValidationError
from newspapers import service


def _create(client, headers, title="Weekly", issue_date="2024-05-01", pdf=True, cover=False):
    upload = {}
    if pdf:
        upload["pdf_file"] = pdf_upload(name="issue.pdf")
    if cover:
        upload["cover_image"] = png_upload()
    return client.post(
        "/api/newspapers",
        headers=headers,
        data={"title": title, "issue_date": issue_date},
        files=upload or None,
    )


def test_create_requires_pdf_before_any_write(client, admin_headers):
    before = {folder: set((files.upload_root() / folder).iterdir()) for folder in files.UPLOAD_FOLDERS}
    res = _create(client, admin_headers, pdf=False)
    assert res.status_code == 400
    assert res.json()["message"] == "PDF file is required."
    after = {folder: set((files.upload_root() / folder).iterdir()) for folder in files.UPLOAD_FOLDERS}
    assert after == before
    assert client.get("/api/newspapers").json() == []


def test_create_with_pdf_and_cover(client, admin_headers):
    res = _create(client, admin_headers, cover=True)
    assert res.status_code == 201
    body = res.json()
    assert files.exists(body["pdf_file_path"])
    assert files.exists(body["cover_image_path"])

    newspaper = client.get(f"/api/newspapers/{body['id']}").json()
    assert newspaper["pdf_file_path"] == body["pdf_file_path"]
    assert newspaper["cover_image_path"] == body["cover_image_path"]


def test_year_filter_and_years(client, admin_headers):
    _create(client, admin_headers, title="2023 issue", issue_date="2023-11-01")
    _create(client, admin_headers, title="2024 early", issue_date="2024-01-15")
    _create(client, admin_headers, title="2024 late", issue_date="2024-12-31")

    titles = [row["title"] for row in client.get("/api/newspapers", params={"year": "2024"}).json()]
    assert titles == ["2024 late", "2024 early"]

    everything = client.get("/api/newspapers", params={"year": "All"}).json()
    assert len(everything) == 3

    assert client.get("/api/newspapers/years").json() == [2024, 2023]


def test_bad_year_is_400(client):
    res = client.get("/api/newspapers", params={"year": "twenty"})
    assert res.status_code == 400


def test_latest(client, admin_headers):
    assert client.get("/api/newspapers/latest").status_code == 404

    _create(client, admin_headers, title="Older", issue_date="2024-01-01")
    _create(client, admin_headers, title="Newest", issue_date="2024-06-01")
    res = client.get("/api/newspapers/latest")
    assert res.status_code == 200
    assert res.json()["title"] == "Newest"


def test_update_cover_only_keeps_pdf(client, admin_headers):
    created = _create(client, admin_headers, cover=True).json()
    res = client.put(
        f"/api/newspapers/{created['id']}",
        headers=admin_headers,
        data={"title": "Weekly", "issue_date": "2024-05-01"},
        files={"cover_image": png_upload(name="fresh.png")},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["pdf_file_path"] == created["pdf_file_path"]
    assert body["cover_image_path"] != created["cover_image_path"]
    assert files.exists(created["pdf_file_path"])
    assert not files.exists(created["cover_image_path"])


def test_delete_removes_both_files(client, admin_headers):
    created = _create(client, admin_headers, cover=True).json()
    assert client.delete(f"/api/newspapers/{created['id']}", headers=admin_headers).status_code == 200
    assert not files.exists(created["pdf_file_path"])
    assert not files.exists(created["cover_image_path"])


def test_bad_cover_discards_stored_pdf(client, admin_headers):
    before = set((files.upload_root() / "pdfs").iterdir())
    res = client.post(
        "/api/newspapers",
        headers=admin_headers,
        data={"title": "Weekly", "issue_date": "2024-05-01"},
        files={"pdf_file": pdf_upload(), "cover_image": ("cover.txt", b"text", "text/plain")},
    )
    assert res.status_code == 400
    assert set((files.upload_root() / "pdfs").iterdir()) == before


@pytest.mark.parametrize("raw, expected", [(None, None), ("", None), ("All", None), ("all", None), ("2024", 2024)])
def test_parse_year(raw, expected):
    assert service.parse_year(raw) == expected


@pytest.mark.parametrize("raw", ["24", "20245", "abcd"])
def test_parse_year_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        service.parse_year(raw)
