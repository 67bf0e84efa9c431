# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from paid_leave.models.base import TimestampMixin, UUIDBase


class LeaveOfAbsence(UUIDBase, TimestampMixin, table=True):
    """An unpaid interval [start_date, end_date) excluded from tenure."""

    __tablename__ = "leave_of_absence"
    __table_args__ = (
        sa.Index("ix_absence_employee_start", "employee_id", "start_date"),
        sa.CheckConstraint("start_date < end_date", name="ck_absence_range"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    start_date: datetime.date
    end_date: datetime.date
    reason: str | None = Field(default=None, max_length=500)
