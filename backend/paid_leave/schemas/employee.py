# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from paid_leave.schemas.grant import GrantResponse
from paid_leave.schemas.request import LeaveRequestResponse


class CreateEmployeeRequest(BaseModel):
    """Request body for creating an employee."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    hire_date: date


class UpdateEmployeeRequest(BaseModel):
    """Request body for updating an employee. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=1, max_length=255)
    hire_date: date | None = None


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    name: str
    email: str
    hire_date: date
    created_at: datetime


class EmployeeWithStatusResponse(EmployeeResponse):
    """Employee with their current leave balance."""

    total_granted: int
    total_used: int
    remaining: int


class EmployeeListResponse(BaseModel):
    """List of employees with balances."""

    items: list[EmployeeWithStatusResponse]
    total: int


class EmployeeDetailResponse(EmployeeWithStatusResponse):
    """Employee with every grant, approved leave, and grants about to lapse."""

    grants: list[GrantResponse]
    leave_requests: list[LeaveRequestResponse]
    expiring_grants: list[GrantResponse]
