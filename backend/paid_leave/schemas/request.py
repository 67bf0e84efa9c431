# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, Field

from paid_leave.models.enums import LeaveRequestStatus


class CreateLeaveRequest(BaseModel):
    """Request body for recording one day of leave."""

    employee_id: uuid.UUID
    date: datetime.date
    reason: str | None = Field(default=None, max_length=500)


class LeaveRequestResponse(BaseModel):
    """Response schema for a day of leave."""

    id: uuid.UUID
    employee_id: uuid.UUID
    date: datetime.date
    status: LeaveRequestStatus
    reason: str | None
    created_at: datetime.datetime


class LeaveRequestListResponse(BaseModel):
    """List of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
