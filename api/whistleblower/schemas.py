"""
Pydantic schemas for whistleblower endpoints.

Public responses use camelCase keys; admin views mirror the table columns.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_RESOLVED = "Resolved"
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_RESOLVED)


class SubmitReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=320)
    message: str = Field(default="", max_length=20000)
    is_anonymous: bool = Field(default=False, alias="isAnonymous")


class SubmitReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Report submitted successfully"
    reference_number: str = Field(..., alias="referenceNumber")
    is_anonymous: bool = Field(..., alias="isAnonymous")


class ReportStatusView(BaseModel):
    """
    What the public tracking page may see. No id, message or submitter data.
    """

    model_config = ConfigDict(populate_by_name=True)

    reference_number: str = Field(..., alias="referenceNumber")
    status: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    is_anonymous: bool = Field(..., alias="isAnonymous")


class UpdateStatusRequest(BaseModel):
    status: str = Field(default="", max_length=20)


class AddNoteRequest(BaseModel):
    note: str = Field(default="", max_length=5000)


class ReportSummary(BaseModel):
    id: int
    name: str | None = None
    email: str | None = None
    message: str
    is_anonymous: bool
    reference_number: str
    status: str
    created_at: datetime
    updated_at: datetime


class ReportDetail(ReportSummary):
    admin_notes: str | None = None


class StatusCount(BaseModel):
    status: str
    count: int


class MonthlyCount(BaseModel):
    month: str
    count: int


class AnonymousData(BaseModel):
    anonymous: int = 0
    identified: int = 0


class ReportStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_counts: list[StatusCount] = Field(..., alias="statusCounts")
    monthly_counts: list[MonthlyCount] = Field(..., alias="monthlyCounts")
    anonymous_data: AnonymousData = Field(..., alias="anonymousData")
