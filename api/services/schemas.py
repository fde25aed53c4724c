"""
Pydantic schemas for service endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ServiceFields(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    order_number: int | None = Field(default=None, ge=0)


class ServiceOrder(BaseModel):
    id: int = Field(..., ge=1)
    order_number: int = Field(..., ge=0)


class ReorderRequest(BaseModel):
    # Emptiness is checked in the service so it maps to the same 400 message.
    services: list[ServiceOrder]


class Service(BaseModel):
    id: int
    title: str
    description: str | None = None
    icon: str | None = None
    order_number: int | None = None
    created_at: datetime
    updated_at: datetime
