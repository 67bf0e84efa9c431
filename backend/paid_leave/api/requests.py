# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from paid_leave.db import SessionDep
from paid_leave.schemas.request import CreateLeaveRequest, LeaveRequestListResponse, LeaveRequestResponse
from paid_leave.services import request as request_service

requests_router = APIRouter(
    prefix="/leave-requests",
    tags=["leave-requests"],
)


@requests_router.post(
    "",
    response_model=LeaveRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_leave_request(
    payload: CreateLeaveRequest,
    session: SessionDep,
) -> LeaveRequestResponse:
    """Record one day of leave (auto-approved)."""
    return await request_service.create_leave_request(session, payload)


@requests_router.get(
    "",
    response_model=LeaveRequestListResponse,
)
async def list_leave_requests(
    session: SessionDep,
    employee_id: uuid.UUID | None = Query(default=None),
) -> LeaveRequestListResponse:
    """List leave requests, newest first."""
    return await request_service.list_leave_requests(session, employee_id)


@requests_router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
) -> None:
    """Delete a leave request."""
    await request_service.delete_leave_request(session, request_id)
