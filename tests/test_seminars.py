"""
Seminar endpoint tests.
"""

from datetime import date

from conftest import png_upload
from core import files
from seminars import service


def _create(client, headers, title, event_date, status="Upcoming", image=None):
    return client.post(
        "/api/seminars",
        headers=headers,
        data={"title": title, "event_date": event_date, "status": status, "location": "Abuja"},
        files={"image": image} if image else None,
    )


def test_upcoming_and_past_use_date_or_status(client, admin_headers, monkeypatch):
    monkeypatch.setattr(service, "_today", lambda: date(2025, 6, 1))

    _create(client, admin_headers, "Future", "2025-07-01", status="Upcoming")
    _create(client, admin_headers, "Old but flagged upcoming", "2025-01-01", status="Upcoming")
    _create(client, admin_headers, "Future but flagged past", "2025-09-01", status="Past")
    _create(client, admin_headers, "Old", "2024-12-01", status="Past")

    upcoming = [row["title"] for row in client.get("/api/seminars/upcoming").json()]
    assert upcoming == ["Old but flagged upcoming", "Future", "Future but flagged past"]

    past = [row["title"] for row in client.get("/api/seminars/past").json()]
    assert past == ["Future but flagged past", "Old but flagged upcoming", "Old"]


def test_list_is_newest_event_first(client, admin_headers):
    _create(client, admin_headers, "Earlier", "2024-01-10")
    _create(client, admin_headers, "Later", "2024-05-10")
    titles = [row["title"] for row in client.get("/api/seminars").json()]
    assert titles == ["Later", "Earlier"]


def test_create_with_image(client, admin_headers):
    res = _create(client, admin_headers, "With image", "2025-01-01", image=png_upload())
    assert res.status_code == 201
    path = res.json()["image_path"]
    assert path.startswith("/uploads/images/cover-")
    assert files.exists(path)

    seminar = client.get(f"/api/seminars/{res.json()['id']}").json()
    assert seminar["image_path"] == path
    assert seminar["location"] == "Abuja"


def test_create_rejects_pdf_as_image(client, admin_headers):
    res = _create(
        client,
        admin_headers,
        "Bad image",
        "2025-01-01",
        image=("doc.pdf", b"%PDF-1.4", "application/pdf"),
    )
    assert res.status_code == 400


def test_create_without_event_date_is_400(client, admin_headers):
    res = client.post("/api/seminars", headers=admin_headers, data={"title": "No date"})
    assert res.status_code == 400


def test_update_replaces_image(client, admin_headers):
    created = _create(client, admin_headers, "Swap", "2025-01-01", image=png_upload()).json()
    res = client.put(
        f"/api/seminars/{created['id']}",
        headers=admin_headers,
        data={"title": "Swapped", "event_date": "2025-02-01", "status": "Past"},
        files={"image": png_upload(name="new.png")},
    )
    assert res.status_code == 200
    assert res.json()["image_path"] != created["image_path"]
    assert not files.exists(created["image_path"])
    assert files.exists(res.json()["image_path"])

    seminar = client.get(f"/api/seminars/{created['id']}").json()
    assert seminar["status"] == "Past"
    assert seminar["event_date"] == "2025-02-01"


def test_delete_removes_image(client, admin_headers):
    created = _create(client, admin_headers, "Gone", "2025-01-01", image=png_upload()).json()
    assert client.delete(f"/api/seminars/{created['id']}", headers=admin_headers).status_code == 200
    assert not files.exists(created["image_path"])
    assert client.get(f"/api/seminars/{created['id']}").status_code == 404


def test_update_missing_is_404(client, admin_headers):
    res = client.put(
        "/api/seminars/999",
        headers=admin_headers,
        data={"title": "Nope", "event_date": "2025-01-01"},
    )
    assert res.status_code == 404
