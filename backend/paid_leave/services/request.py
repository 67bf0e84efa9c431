from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from paid_leave.exceptions import NotFoundError
from paid_leave.models.enums import AuditAction, AuditEntityType, LeaveRequestStatus
from paid_leave.models.request import LeaveRequest
from paid_leave.schemas.request import LeaveRequestListResponse, LeaveRequestResponse
from paid_leave.services.audit import model_to_audit_dict, write_audit_log
from paid_leave.services.employee import get_employee_or_404

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from paid_leave.schemas.request import CreateLeaveRequest


def build_leave_request_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        date=request.date,
        status=LeaveRequestStatus(request.status),
        reason=request.reason,
        created_at=request.created_at,
    )


async def create_leave_request(session: AsyncSession, payload: CreateLeaveRequest) -> LeaveRequestResponse:
    """Record one day of leave. Intake is auto-approved."""
    await get_employee_or_404(session, payload.employee_id)

    request = LeaveRequest(
        employee_id=payload.employee_id,
        date=payload.date,
        status=LeaveRequestStatus.APPROVED.value,
        reason=payload.reason,
    )
    session.add(request)
    await session.flush()

    await write_audit_log(
        session,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=request.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    await session.refresh(request)
    return build_leave_request_response(request)


async def list_leave_requests(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
) -> LeaveRequestListResponse:
    """List leave requests, newest date first, optionally for one employee."""
    query = select(LeaveRequest).order_by(col(LeaveRequest.date).desc())
    if employee_id is not None:
        query = query.where(col(LeaveRequest.employee_id) == employee_id)
    result = await session.execute(query)
    requests = list(result.scalars().all())
    return LeaveRequestListResponse(
        items=[build_leave_request_response(r) for r in requests],
        total=len(requests),
    )


async def delete_leave_request(session: AsyncSession, request_id: uuid.UUID) -> None:
    """Delete a leave request."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Leave request not found")

    await write_audit_log(
        session,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=request.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(request),
    )

    await session.delete(request)
    await session.commit()
