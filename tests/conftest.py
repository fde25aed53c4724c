"""
Shared pytest fixtures.

Provides:
    - database: fresh SQLite file per test, schema created, users + categories seeded
    - client: TestClient running the app lifespan against that database
    - admin_headers / editor_headers: bearer headers for the seeded users
    - anyio_backend: pins async tests to asyncio
"""

import asyncio
import os
import tempfile

# Must be set before the app module is imported: the static mount reads it once.
os.environ["UPLOAD_ROOT"] = tempfile.mkdtemp(prefix="integriting-uploads-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "test"
os.environ["DB_AUTO_CREATE_SCHEMA"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

import main
from auth import repository as auth_repository
from auth import security
from core import db, files, schema
from publications import repository as publications_repository

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass-123"
EDITOR_EMAIL = "editor@example.com"
EDITOR_PASSWORD = "editor-pass-123"


async def _prepare(url: str) -> dict:
    await db.init_store(url)
    await schema.create_schema()
    admin = await auth_repository.create_user(
        username="admin",
        email=ADMIN_EMAIL,
        password_hash=security.hash_password(ADMIN_PASSWORD),
        role="admin",
    )
    editor = await auth_repository.create_user(
        username="editor",
        email=EDITOR_EMAIL,
        password_hash=security.hash_password(EDITOR_PASSWORD),
        role="editor",
    )
    governance = await publications_repository.insert_category("Governance")
    policy = await publications_repository.insert_category("Policy")
    return {
        "admin_id": int(admin["id"]),
        "editor_id": int(editor["id"]),
        "categories": {"Governance": governance, "Policy": policy},
    }


@pytest.fixture()
def database(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setattr(db, "_store", None)
    files.ensure_upload_dirs()
    return asyncio.run(_prepare(url))


@pytest.fixture()
def client(database):
    with TestClient(main.app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(database):
    token = security.build_access_token(user_id=database["admin_id"], role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def editor_headers(database):
    token = security.build_access_token(user_id=database["editor_id"], role="editor")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def anyio_backend():
    return "asyncio"


def pdf_upload(name="report.pdf", body=b"%PDF-1.4 test document"):
    return (name, body, "application/pdf")


def png_upload(name="cover.png", body=b"\x89PNG\r\n\x1a\nfake image"):
    return (name, body, "image/png")
