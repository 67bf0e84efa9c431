# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


class CreateAbsenceRequest(BaseModel):
    """Request body for recording a leave of absence [start_date, end_date)."""

    employee_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=500)


class AbsenceResponse(BaseModel):
    """Response schema for a leave of absence."""

    id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None
    created_at: datetime


class AbsenceListResponse(BaseModel):
    """List of leaves of absence."""

    items: list[AbsenceResponse]
    total: int
