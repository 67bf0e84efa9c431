from sqlmodel import SQLModel

from paid_leave.models.absence import LeaveOfAbsence
from paid_leave.models.audit import AuditLog
from paid_leave.models.base import TimestampMixin, UUIDBase
from paid_leave.models.employee import Employee
from paid_leave.models.enums import AuditAction, AuditEntityType, LeaveRequestStatus
from paid_leave.models.grant import LeaveGrant
from paid_leave.models.request import LeaveRequest

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Employee",
    "LeaveGrant",
    "LeaveOfAbsence",
    "LeaveRequest",
    "LeaveRequestStatus",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
