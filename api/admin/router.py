"""
Admin dashboard endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(prefix="/api/admin")


@router.get("/dashboard/stats")
async def dashboard_stats(
    _: object = Depends(auth_dependencies.require_editor_or_admin),
) -> dict:
    return await service.dashboard_stats()
