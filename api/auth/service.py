"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool

from core.errors import NotFoundError, UnauthorizedError

from . import repository, schemas, security

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        email=str(user_row["email"]),
        role=str(user_row["role"]),
    )


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise UnauthorizedError("Invalid email or password.")

    # bcrypt is CPU bound; keep it off the event loop.
    is_valid = await run_in_threadpool(
        security.verify_password, payload.password, str(user_row.get("password_hash") or "")
    )
    if not is_valid:
        logger.info("login_failed user_id=%s", user_row["id"])
        raise UnauthorizedError("Invalid email or password.")

    token = security.build_access_token(user_id=int(user_row["id"]), role=str(user_row["role"]))
    logger.info("login_ok user_id=%s role=%s", user_row["id"], user_row["role"])
    return schemas.LoginResponse(token=token, user=_to_user_response(user_row))


def verify(access_token: str) -> security.TokenClaims:
    try:
        payload = security.decode_access_token(access_token)
        return security.claims_from_payload(payload)
    except security.AuthSecurityError as exc:
        raise UnauthorizedError(str(exc)) from exc


async def me(user_id: int) -> schemas.UserResponse:
    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise NotFoundError("User not found.")
    return _to_user_response(user_row)


async def change_password(user_id: int, payload: schemas.ChangePasswordRequest) -> dict:
    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise NotFoundError("User not found.")

    current_hash = str(user_row.get("password_hash") or "")
    if not await run_in_threadpool(security.verify_password, payload.current_password, current_hash):
        raise UnauthorizedError("Current password is incorrect.")

    password_hash = await run_in_threadpool(security.hash_password, payload.new_password)
    if not await repository.update_password_hash(user_id, password_hash):
        raise NotFoundError("User not found.")

    logger.info("password_changed user_id=%s", user_id)
    return {"message": "Password updated successfully"}
