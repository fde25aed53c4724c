"""
Pydantic schemas for publication endpoints.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class PublicationFields(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str | None = None
    summary: str | None = Field(default=None, max_length=500)
    category_id: int | None = Field(default=None, ge=1)
    published_date: date


class Category(BaseModel):
    id: int
    name: str


class Publication(BaseModel):
    id: int
    title: str
    content: str | None = None
    summary: str | None = None
    category_id: int | None = None
    category: str | None = None
    pdf_file_path: str | None = None
    file_size: int | None = None
    published_date: date
    created_at: datetime
    updated_at: datetime
