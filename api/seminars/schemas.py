"""
Pydantic schemas for seminar endpoints.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

STATUS_UPCOMING = "Upcoming"
STATUS_PAST = "Past"


class SeminarFields(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    event_date: date
    # Free text; "Upcoming" and "Past" are the values the listings look at.
    status: str = Field(default=STATUS_UPCOMING, min_length=1, max_length=20)
    seats_available: int | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)


class Seminar(BaseModel):
    id: int
    title: str
    description: str | None = None
    image_path: str | None = None
    event_date: date
    status: str
    seats_available: int | None = None
    location: str | None = None
    created_at: datetime
    updated_at: datetime
