"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, schemas, service
from .security import TokenClaims

router = APIRouter(prefix="/api/auth")


@router.post("/login", response_model=schemas.LoginResponse)
async def login(request: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(request)


@router.get("/me", response_model=schemas.UserResponse)
async def me(claims: TokenClaims = Depends(dependencies.get_current_claims)) -> schemas.UserResponse:
    return await service.me(claims.user_id)


@router.put("/password")
async def change_password(
    request: schemas.ChangePasswordRequest,
    claims: TokenClaims = Depends(dependencies.get_current_claims),
) -> dict:
    return await service.change_password(claims.user_id, request)
