"""Leaves of absence: validation, mutation, and the grant regeneration they trigger."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from paid_leave.exceptions import InvalidRangeError, NotFoundError, OverlapError
from paid_leave.models.absence import LeaveOfAbsence
from paid_leave.models.enums import AuditAction, AuditEntityType
from paid_leave.schemas.absence import AbsenceListResponse, AbsenceResponse
from paid_leave.services.accrual import reset_and_recalculate_grants
from paid_leave.services.audit import model_to_audit_dict, write_audit_log
from paid_leave.services.employee import get_employee_or_404

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from paid_leave.schemas.absence import CreateAbsenceRequest
    from paid_leave.services.tenure import AbsenceInterval

logger = logging.getLogger(__name__)


def _overlaps(start_date: date, end_date: date, other: AbsenceInterval) -> bool:
    """Half-open intersection test; intervals that only touch do not overlap."""
    return other.start_date < end_date and start_date < other.end_date


def validate_absence_range(
    start_date: date,
    end_date: date,
    existing: Iterable[AbsenceInterval],
) -> None:
    """Reject an empty or inverted range, or one that overlaps an existing absence."""
    if start_date >= end_date:
        raise InvalidRangeError
    for other in existing:
        if _overlaps(start_date, end_date, other):
            raise OverlapError(
                f"Leave of absence overlaps existing period {other.start_date.isoformat()}"
                f" to {other.end_date.isoformat()}"
            )


def build_absence_response(absence: LeaveOfAbsence) -> AbsenceResponse:
    """Map an absence model to its response schema."""
    return AbsenceResponse(
        id=absence.id,
        employee_id=absence.employee_id,
        start_date=absence.start_date,
        end_date=absence.end_date,
        reason=absence.reason,
        created_at=absence.created_at,
    )


async def add_leave_of_absence(
    session: AsyncSession,
    payload: CreateAbsenceRequest,
    reference_date: date | None = None,
) -> AbsenceResponse:
    """Record a leave of absence and regenerate the employee's grants.

    Flow:
    1. Lock the employee row
    2. Validate the range against the employee's existing absences
    3. Insert the absence
    4. Regenerate grants (delete all, re-run the schedule)
    5. Commit once, so a failure leaves absences and grants untouched
    """
    if reference_date is None:
        reference_date = date.today()

    # 1. Lock the employee.
    await get_employee_or_404(session, payload.employee_id, for_update=True)

    # 2. Validate.
    existing_result = await session.execute(
        select(LeaveOfAbsence).where(col(LeaveOfAbsence.employee_id) == payload.employee_id)
    )
    validate_absence_range(payload.start_date, payload.end_date, existing_result.scalars().all())

    # 3. Insert.
    absence = LeaveOfAbsence(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    session.add(absence)
    await session.flush()

    await write_audit_log(
        session,
        entity_type=AuditEntityType.LEAVE_OF_ABSENCE,
        entity_id=absence.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(absence),
    )

    # 4. Regenerate.
    await reset_and_recalculate_grants(session, payload.employee_id, reference_date, commit=False)

    # 5. Commit.
    await session.commit()
    await session.refresh(absence)
    logger.info(
        "Added leave of absence %s to %s for employee=%s",
        absence.start_date,
        absence.end_date,
        absence.employee_id,
    )
    return build_absence_response(absence)


async def _get_absence_or_404(session: AsyncSession, absence_id: uuid.UUID) -> LeaveOfAbsence:
    result = await session.execute(
        select(LeaveOfAbsence)
        .where(col(LeaveOfAbsence.id) == absence_id)
        .execution_options(populate_existing=True)
    )
    absence = result.scalar_one_or_none()
    if absence is None:
        raise NotFoundError("Leave of absence not found")
    return absence


async def remove_leave_of_absence(
    session: AsyncSession,
    absence_id: uuid.UUID,
    reference_date: date | None = None,
) -> None:
    """Delete a leave of absence and regenerate the employee's grants."""
    if reference_date is None:
        reference_date = date.today()

    absence = await _get_absence_or_404(session, absence_id)
    employee_id = absence.employee_id

    await get_employee_or_404(session, employee_id, for_update=True)
    # Re-read under the lock: a concurrent delete may have won the race.
    absence = await _get_absence_or_404(session, absence_id)

    await write_audit_log(
        session,
        entity_type=AuditEntityType.LEAVE_OF_ABSENCE,
        entity_id=absence.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(absence),
    )

    await session.delete(absence)
    await session.flush()

    await reset_and_recalculate_grants(session, employee_id, reference_date, commit=False)
    await session.commit()
    logger.info("Removed leave of absence %s for employee=%s", absence_id, employee_id)


async def list_leaves_of_absence(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
) -> AbsenceListResponse:
    """List leaves of absence, latest start first, optionally for one employee."""
    query = select(LeaveOfAbsence).order_by(col(LeaveOfAbsence.start_date).desc())
    if employee_id is not None:
        query = query.where(col(LeaveOfAbsence.employee_id) == employee_id)
    result = await session.execute(query)
    absences = list(result.scalars().all())
    return AbsenceListResponse(
        items=[build_absence_response(a) for a in absences],
        total=len(absences),
    )
