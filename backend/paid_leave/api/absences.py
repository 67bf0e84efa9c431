# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from paid_leave.db import SessionDep
from paid_leave.schemas.absence import AbsenceListResponse, AbsenceResponse, CreateAbsenceRequest
from paid_leave.services import absence as absence_service

absences_router = APIRouter(
    prefix="/leave-of-absences",
    tags=["leave-of-absences"],
)


@absences_router.post(
    "",
    response_model=AbsenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_absence(
    payload: CreateAbsenceRequest,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> AbsenceResponse:
    """Record a leave of absence and regenerate the employee's grants."""
    return await absence_service.add_leave_of_absence(session, payload, reference_date)


@absences_router.get(
    "",
    response_model=AbsenceListResponse,
)
async def list_absences(
    session: SessionDep,
    employee_id: uuid.UUID | None = Query(default=None),
) -> AbsenceListResponse:
    """List leaves of absence, optionally for one employee."""
    return await absence_service.list_leaves_of_absence(session, employee_id)


@absences_router.delete(
    "/{absence_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_absence(
    absence_id: uuid.UUID,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> None:
    """Delete a leave of absence and regenerate the employee's grants."""
    await absence_service.remove_leave_of_absence(session, absence_id, reference_date)
