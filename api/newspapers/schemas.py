"""
Pydantic schemas for newspaper endpoints.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class NewspaperFields(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    issue_date: date


class Newspaper(BaseModel):
    id: int
    title: str
    description: str | None = None
    pdf_file_path: str
    issue_date: date
    cover_image_path: str | None = None
    created_at: datetime
    updated_at: datetime
