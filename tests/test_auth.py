"""
Auth tests: login, token claims, current user, password change, role guard.
"""

import asyncio
import threading

import jwt
import pytest

from auth import dependencies, schemas, security, service
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, EDITOR_EMAIL, EDITOR_PASSWORD
from core import db
from core.errors import ForbiddenError, UnauthorizedError


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_with_stored_role(client):
    res = _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["email"] == ADMIN_EMAIL
    assert body["user"]["role"] == "admin"
    assert "password_hash" not in body["user"]

    payload = jwt.decode(body["token"], "test-secret", algorithms=["HS256"])
    assert payload["role"] == "admin"
    assert payload["sub"] == str(body["user"]["id"])


def test_login_email_is_case_insensitive(client):
    res = _login(client, ADMIN_EMAIL.upper(), ADMIN_PASSWORD)
    assert res.status_code == 200


def test_login_wrong_password_is_401(client):
    res = _login(client, ADMIN_EMAIL, "not-the-password")
    assert res.status_code == 401
    assert res.json() == {"message": "Invalid email or password.", "code": "UNAUTHORIZED"}


def test_login_unknown_email_is_401(client):
    res = _login(client, "nobody@example.com", "whatever")
    assert res.status_code == 401


def test_login_missing_fields_is_400(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


def test_me_requires_token(client):
    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "No token provided."


def test_me_rejects_malformed_header(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


def test_me_rejects_expired_token(client, database):
    token = jwt.encode(
        {"sub": str(database["admin_id"]), "role": "admin", "type": "access", "iat": 1, "exp": 2},
        "test-secret",
        algorithm="HS256",
    )
    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["message"] == "Access token has expired."


def test_me_returns_current_user(client, editor_headers):
    res = client.get("/api/auth/me", headers=editor_headers)
    assert res.status_code == 200
    assert res.json()["email"] == EDITOR_EMAIL
    assert res.json()["role"] == "editor"


def test_change_password(client, editor_headers):
    res = client.put(
        "/api/auth/password",
        headers=editor_headers,
        json={"currentPassword": EDITOR_PASSWORD, "newPassword": "brand-new-pass"},
    )
    assert res.status_code == 200
    assert res.json() == {"message": "Password updated successfully"}

    assert _login(client, EDITOR_EMAIL, EDITOR_PASSWORD).status_code == 401
    assert _login(client, EDITOR_EMAIL, "brand-new-pass").status_code == 200


def test_change_password_wrong_current_is_401(client, editor_headers):
    res = client.put(
        "/api/auth/password",
        headers=editor_headers,
        json={"currentPassword": "wrong", "newPassword": "brand-new-pass"},
    )
    assert res.status_code == 401


def test_change_password_too_short_is_400(client, editor_headers):
    res = client.put(
        "/api/auth/password",
        headers=editor_headers,
        json={"currentPassword": EDITOR_PASSWORD, "newPassword": "short"},
    )
    assert res.status_code == 400


def test_editor_cannot_use_admin_route(client, editor_headers):
    res = client.post("/api/services", headers=editor_headers, json={"title": "Audit"})
    assert res.status_code == 403
    assert res.json()["code"] == "FORBIDDEN"


def test_admin_route_without_token_is_401(client):
    res = client.post("/api/services", json={"title": "Audit"})
    assert res.status_code == 401


def test_hash_and_verify_password():
    hashed = security.hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert security.verify_password("s3cret-pass", hashed)
    assert not security.verify_password("other", hashed)
    assert not security.verify_password("s3cret-pass", "not-a-bcrypt-hash")


def test_refresh_style_token_is_rejected():
    token = jwt.encode({"sub": "1", "role": "admin", "type": "refresh"}, "test-secret", algorithm="HS256")
    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


@pytest.mark.anyio
async def test_guard_uses_stored_role_when_token_role_is_stale(database):
    await db.execute("UPDATE users SET role = 'admin' WHERE id = $1", database["editor_id"])
    claims = security.TokenClaims(user_id=database["editor_id"], role="editor")

    result = await dependencies.authorize(claims, ("admin",))
    assert result.role == "admin"


@pytest.mark.anyio
async def test_guard_forbids_when_stored_role_also_lacks_access(database):
    claims = security.TokenClaims(user_id=database["editor_id"], role="editor")
    with pytest.raises(ForbiddenError):
        await dependencies.authorize(claims, ("admin",))


@pytest.mark.anyio
async def test_guard_rejects_deleted_user(database):
    claims = security.TokenClaims(user_id=9999, role="editor")
    with pytest.raises(UnauthorizedError):
        await dependencies.authorize(claims, ("admin",))


def test_guard_allows_matching_role_without_lookup():
    claims = security.TokenClaims(user_id=1, role="admin")
    assert asyncio.run(dependencies.authorize(claims, ("admin",))) == claims


@pytest.mark.anyio
async def test_bcrypt_runs_off_the_event_loop(database, monkeypatch):
    loop_thread = threading.get_ident()
    seen = []
    real_verify = security.verify_password
    real_hash = security.hash_password

    def _verify(*args):
        seen.append(threading.get_ident())
        return real_verify(*args)

    def _hash(*args):
        seen.append(threading.get_ident())
        return real_hash(*args)

    monkeypatch.setattr(security, "verify_password", _verify)
    monkeypatch.setattr(security, "hash_password", _hash)

    await service.login(schemas.LoginRequest(email=EDITOR_EMAIL, password=EDITOR_PASSWORD))
    await service.change_password(
        database["editor_id"],
        schemas.ChangePasswordRequest(current_password=EDITOR_PASSWORD, new_password="another-pass-1"),
    )

    assert len(seen) == 3
    assert loop_thread not in seen
