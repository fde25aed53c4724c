"""
Whistleblower intake and case handling.

Submitters only ever get a reference number back; the public status lookup
by that reference exposes status and timestamps, nothing else. Identity
fields of anonymous reports are never stored.
"""

from __future__ import annotations

import logging
import secrets
from collections import Counter
from datetime import datetime, timezone

from core.errors import NotFoundError, ValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)

MAX_REFERENCE_ATTEMPTS = 5
STATISTICS_MONTHS = 6


def generate_reference_number() -> str:
    # 4 random bytes -> 8 uppercase hex chars
    return secrets.token_hex(4).upper()


async def _unused_reference_number() -> str:
    for _ in range(MAX_REFERENCE_ATTEMPTS):
        reference = generate_reference_number()
        if not await repository.reference_exists(reference):
            return reference
        logger.warning("whistleblower_reference_collision reference=%s", reference)
    raise RuntimeError("Could not allocate a unique reference number.")


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


async def submit_report(request: schemas.SubmitReportRequest) -> schemas.SubmitReportResponse:
    message = (request.message or "").strip()
    if not message:
        raise ValidationError("Report message is required.")

    if request.is_anonymous:
        name, email = None, None
    else:
        name, email = _clean(request.name), _clean(request.email)

    reference = await _unused_reference_number()
    report_id = await repository.insert_report(
        name=name,
        email=email,
        message=message,
        is_anonymous=request.is_anonymous,
        reference_number=reference,
        status=schemas.STATUS_PENDING,
    )
    # Never log identity fields or the message body.
    logger.info("whistleblower_report_submitted id=%s anonymous=%s", report_id, request.is_anonymous)
    return schemas.SubmitReportResponse(reference_number=reference, is_anonymous=request.is_anonymous)


async def track_by_reference(reference_number: str) -> schemas.ReportStatusView:
    row = await repository.get_status_by_reference(reference_number.strip().upper())
    if row is None:
        raise NotFoundError("Report not found.")
    return schemas.ReportStatusView.model_validate(row)


async def list_reports() -> list[schemas.ReportSummary]:
    return [schemas.ReportSummary.model_validate(row) for row in await repository.list_reports()]


async def get_report(report_id: int) -> schemas.ReportDetail:
    row = await repository.get_report(report_id)
    if row is None:
        raise NotFoundError("Report not found.")
    return schemas.ReportDetail.model_validate(row)


async def update_status(report_id: int, status: str) -> dict:
    status = (status or "").strip()
    if status not in schemas.STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(schemas.STATUSES)}.")

    if not await repository.update_status(report_id, status):
        raise NotFoundError("Report not found.")

    logger.info("whistleblower_status_updated id=%s status=%s", report_id, status)
    return {"message": "Report status updated successfully", "status": status}


def format_note(note: str, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"[{now.isoformat(timespec='seconds')}] {note}\n\n"


async def add_note(report_id: int, note: str) -> dict:
    note = (note or "").strip()
    if not note:
        raise ValidationError("Note is required.")

    # Newest entry first.
    if not await repository.prepend_admin_note(report_id, format_note(note)):
        raise NotFoundError("Report not found.")
    _, admin_notes = await repository.get_admin_notes(report_id)

    logger.info("whistleblower_note_added id=%s", report_id)
    return {"message": "Note added successfully", "admin_notes": admin_notes}


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def statistics_months(now: datetime, months: int = STATISTICS_MONTHS) -> list[str]:
    """
    The current month and the `months - 1` before it as "YYYY-MM", oldest first.
    """
    keys = []
    year, month = now.year, now.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def statistics(now: datetime | None = None) -> schemas.ReportStatistics:
    now = now or datetime.now(timezone.utc)
    months = statistics_months(now)
    first_year, first_month = (int(part) for part in months[0].split("-"))
    cutoff = _month_start(first_year, first_month)

    status_rows = await repository.count_by_status()
    created = await repository.list_created_since(cutoff)
    per_month = Counter(_as_utc(value).strftime("%Y-%m") for value in created)

    return schemas.ReportStatistics(
        status_counts=[schemas.StatusCount(status=r["status"], count=int(r["count"])) for r in status_rows],
        monthly_counts=[
            schemas.MonthlyCount(month=key, count=per_month[key]) for key in months if per_month.get(key)
        ],
        anonymous_data=schemas.AnonymousData(**await repository.count_anonymity()),
    )
