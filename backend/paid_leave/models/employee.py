# ruff: noqa: TC003
from __future__ import annotations

import datetime

from sqlmodel import Field

from paid_leave.models.base import TimestampMixin, UUIDBase


class Employee(UUIDBase, TimestampMixin, table=True):
    """An employee whose hire date starts the tenure clock."""

    __tablename__ = "employee"

    name: str = Field(max_length=255)
    email: str = Field(max_length=255, index=True)
    hire_date: datetime.date
