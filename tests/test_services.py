"""
Service endpoint tests: ordering, append-at-end, and the atomic reorder.
"""

import pytest

from core import db
from core.errors import NotFoundError
from services import repository
from services.schemas import ServiceFields, ServiceOrder


def _create(client, headers, **body):
    body.setdefault("title", "Governance Consulting")
    return client.post("/api/services", headers=headers, json=body)


def _orders(client):
    return [(row["title"], row["order_number"]) for row in client.get("/api/services").json()]


def test_create_without_order_number_appends_at_end(client, admin_headers):
    assert _create(client, admin_headers, title="First", order_number=3).status_code == 201
    assert _create(client, admin_headers, title="Second", order_number=7).status_code == 201

    res = _create(client, admin_headers, title="Third")
    assert res.status_code == 201
    assert res.json()["order_number"] == 8

    assert _orders(client)[-1] == ("Third", 8)


def test_first_service_gets_order_one(client, admin_headers):
    res = _create(client, admin_headers, title="Only")
    assert res.json()["order_number"] == 1


def test_list_is_sorted_by_order_number(client, admin_headers):
    _create(client, admin_headers, title="B", order_number=2)
    _create(client, admin_headers, title="A", order_number=1)
    _create(client, admin_headers, title="C", order_number=3)
    assert [title for title, _ in _orders(client)] == ["A", "B", "C"]


def test_update_keeps_order_number_when_omitted(client, admin_headers):
    service_id = _create(client, admin_headers, title="Keep", order_number=5).json()["id"]
    res = client.put(
        f"/api/services/{service_id}",
        headers=admin_headers,
        json={"title": "Kept", "description": "changed"},
    )
    assert res.status_code == 200
    service = client.get(f"/api/services/{service_id}").json()
    assert service["title"] == "Kept"
    assert service["description"] == "changed"
    assert service["order_number"] == 5


def test_create_without_title_is_400(client, admin_headers):
    res = client.post("/api/services", headers=admin_headers, json={"description": "x"})
    assert res.status_code == 400


def test_delete_and_missing(client, admin_headers):
    service_id = _create(client, admin_headers).json()["id"]
    assert client.delete(f"/api/services/{service_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/services/{service_id}").status_code == 404
    assert client.delete(f"/api/services/{service_id}", headers=admin_headers).status_code == 404


def test_reorder_applies_all_entries(client, admin_headers):
    a = _create(client, admin_headers, title="A", order_number=1).json()["id"]
    b = _create(client, admin_headers, title="B", order_number=2).json()["id"]

    res = client.post(
        "/api/services/orders",
        headers=admin_headers,
        json={"services": [{"id": a, "order_number": 2}, {"id": b, "order_number": 1}]},
    )
    assert res.status_code == 200
    assert res.json()["updated"] == 2
    assert _orders(client) == [("B", 1), ("A", 2)]


def test_reorder_empty_list_is_400(client, admin_headers):
    res = client.post("/api/services/orders", headers=admin_headers, json={"services": []})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid service order data."


def test_reorder_malformed_entry_is_400(client, admin_headers):
    res = client.post(
        "/api/services/orders",
        headers=admin_headers,
        json={"services": [{"id": "abc", "order_number": 1}]},
    )
    assert res.status_code == 400


def test_reorder_unknown_id_changes_nothing(client, admin_headers):
    a = _create(client, admin_headers, title="A", order_number=1).json()["id"]
    res = client.post(
        "/api/services/orders",
        headers=admin_headers,
        json={"services": [{"id": a, "order_number": 9}, {"id": 9999, "order_number": 1}]},
    )
    assert res.status_code == 404
    assert _orders(client) == [("A", 1)]


def test_reorder_requires_admin(client, editor_headers):
    res = client.post("/api/services/orders", headers=editor_headers, json={"services": []})
    assert res.status_code == 403


@pytest.mark.anyio
async def test_reorder_rolls_back_when_second_statement_fails(database, monkeypatch):
    rows = [
        await repository.insert_service(ServiceFields(title=title), order_number=order)
        for title, order in (("A", 1), ("B", 2), ("C", 3))
    ]

    original_execute = db._SqliteExecutor.execute
    calls = {"n": 0}

    async def _flaky_execute(self, sql, *args):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("connection reset")
        return await original_execute(self, sql, *args)

    monkeypatch.setattr(db._SqliteExecutor, "execute", _flaky_execute)

    entries = [ServiceOrder(id=rows[0], order_number=30), ServiceOrder(id=rows[1], order_number=20)]
    with pytest.raises(RuntimeError):
        await repository.update_orders(entries)

    monkeypatch.setattr(db._SqliteExecutor, "execute", original_execute)
    stored = await db.fetch_all("SELECT id, order_number FROM services ORDER BY id")
    assert [row["order_number"] for row in stored] == [1, 2, 3]


@pytest.mark.anyio
async def test_update_orders_raises_not_found_inside_transaction(database):
    with pytest.raises(NotFoundError):
        await repository.update_orders([ServiceOrder(id=12345, order_number=1)])
