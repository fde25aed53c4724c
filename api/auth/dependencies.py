"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Depends, Header

from core.errors import ForbiddenError, UnauthorizedError

from . import repository, service
from .security import TokenClaims


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise UnauthorizedError("No token provided.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise UnauthorizedError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise UnauthorizedError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_claims(access_token: str = Depends(get_bearer_token)) -> TokenClaims:
    return service.verify(access_token)


async def authorize(claims: TokenClaims, allowed_roles: tuple[str, ...]) -> TokenClaims:
    """
    Allow when the token's role is allowed; otherwise consult the stored role,
    which may have been raised since the token was issued.
    """
    if claims.role in allowed_roles:
        return claims

    stored_role = await repository.get_user_role(claims.user_id)
    if stored_role is None:
        raise UnauthorizedError("User not found.")
    if stored_role in allowed_roles:
        return TokenClaims(user_id=claims.user_id, role=stored_role)

    label = " or ".join(role.capitalize() for role in allowed_roles)
    raise ForbiddenError(f"Access denied. {label} role required.")


def require_role(*allowed_roles: str) -> Callable[..., Awaitable[TokenClaims]]:
    async def _dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        return await authorize(claims, allowed_roles)

    return _dependency


require_admin = require_role(service.ROLE_ADMIN)
require_editor_or_admin = require_role(service.ROLE_EDITOR, service.ROLE_ADMIN)
