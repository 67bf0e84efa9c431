from __future__ import annotations

import enum


class LeaveRequestStatus(enum.StrEnum):
    """State of a recorded day of leave. Intake auto-approves."""

    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    EMPLOYEE = "EMPLOYEE"
    LEAVE_OF_ABSENCE = "LEAVE_OF_ABSENCE"
    LEAVE_GRANT = "LEAVE_GRANT"
    LEAVE_REQUEST = "LEAVE_REQUEST"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    REGENERATE = "REGENERATE"
