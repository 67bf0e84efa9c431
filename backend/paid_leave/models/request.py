# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from paid_leave.models.base import TimestampMixin, UUIDBase
from paid_leave.models.enums import LeaveRequestStatus


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """One day of leave taken by an employee."""

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_request_employee_status", "employee_id", "status"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    date: datetime.date
    status: str = Field(
        default=LeaveRequestStatus.APPROVED, max_length=50, sa_column_kwargs={"server_default": "APPROVED"}
    )
    reason: str | None = Field(default=None, max_length=500)
