# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from paid_leave.models.base import TimestampMixin, UUIDBase


class LeaveGrant(UUIDBase, TimestampMixin, table=True):
    """Days of paid leave awarded on a tenure milestone.

    Rows are derived data: they are inserted by the accrual scheduler, never
    edited, and deleted wholesale when an employee's grants are regenerated.
    """

    __tablename__ = "leave_grant"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "grant_date", name="uq_grant_employee_date"),
        sa.CheckConstraint("days_granted >= 10", name="ck_grant_min_days"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    grant_date: datetime.date
    days_granted: int = Field(ge=10)
    expiration_date: datetime.date
