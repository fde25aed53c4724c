"""
Auth security helpers.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core.settings import env_int


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: str


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return os.environ.get("JWT_SECRET", "dev-change-this-secret").strip() or "dev-change-this-secret"


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "HS256").strip() or "HS256"


def access_token_expire_hours() -> int:
    return env_int("ACCESS_TOKEN_EXPIRE_HOURS", 8)


def now_epoch_s() -> int:
    return int(time.time())


def bcrypt_rounds() -> int:
    return env_int("BCRYPT_ROUNDS", 12)


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=bcrypt_rounds())).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: int, role: str) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (access_token_expire_hours() * 3600)

    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload


def claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthSecurityError("Invalid access token subject.")
    role = str(payload.get("role") or "").strip()
    return TokenClaims(user_id=int(subject), role=role)
