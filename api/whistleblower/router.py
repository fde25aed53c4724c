"""
Whistleblower API endpoints.

Submission and status tracking are public; case handling is admin-only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/whistleblower")


@router.post("/report", status_code=status.HTTP_201_CREATED, response_model=schemas.SubmitReportResponse)
async def submit_report(request: schemas.SubmitReportRequest) -> schemas.SubmitReportResponse:
    return await service.submit_report(request)


@router.get("/status/{reference_number}", response_model=schemas.ReportStatusView)
async def track_report(
    reference_number: str = Path(..., min_length=1, max_length=32),
) -> schemas.ReportStatusView:
    return await service.track_by_reference(reference_number)


@router.get("/reports", response_model=list[schemas.ReportSummary])
async def list_reports(
    _: object = Depends(auth_dependencies.require_admin),
) -> list[schemas.ReportSummary]:
    return await service.list_reports()


@router.get("/reports/{report_id}", response_model=schemas.ReportDetail)
async def get_report(
    report_id: int,
    _: object = Depends(auth_dependencies.require_admin),
) -> schemas.ReportDetail:
    return await service.get_report(report_id)


@router.put("/reports/{report_id}/status")
async def update_status(
    report_id: int,
    request: schemas.UpdateStatusRequest,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_status(report_id, request.status)


@router.post("/reports/{report_id}/notes")
async def add_note(
    report_id: int,
    request: schemas.AddNoteRequest,
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.add_note(report_id, request.note)


@router.get("/statistics", response_model=schemas.ReportStatistics)
async def statistics(
    _: object = Depends(auth_dependencies.require_admin),
) -> schemas.ReportStatistics:
    return await service.statistics()
