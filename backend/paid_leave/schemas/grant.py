# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel

from paid_leave.schemas.request import LeaveRequestResponse


class GrantResponse(BaseModel):
    """A leave grant annotated with its expiration state."""

    id: uuid.UUID
    employee_id: uuid.UUID
    grant_date: date
    days_granted: int
    expiration_date: date
    is_expired: bool
    days_until_expiration: int
    is_expiring_soon: bool


class GrantListResponse(BaseModel):
    """List of annotated grants."""

    items: list[GrantResponse]
    total: int


class LeaveStatusResponse(BaseModel):
    """Aggregate balance over non-expired grants."""

    reference_date: date
    total_granted: int
    total_used: int
    remaining: int


class DetailedLeaveStatusResponse(LeaveStatusResponse):
    """Balance together with the grants and leave behind it."""

    grants: list[GrantResponse]
    leave_requests: list[LeaveRequestResponse]
    expiring_grants: list[GrantResponse]


class GrantRunResponse(BaseModel):
    """Response from the grant and reset endpoints."""

    employee_id: uuid.UUID
    reference_date: date
    granted_count: int
