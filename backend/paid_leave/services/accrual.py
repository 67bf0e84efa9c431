"""Accrual engine: tenure milestones, pending grants, and grant persistence."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Protocol

from dateutil.relativedelta import relativedelta
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from paid_leave.models.absence import LeaveOfAbsence
from paid_leave.models.employee import Employee
from paid_leave.models.enums import AuditAction, AuditEntityType
from paid_leave.models.grant import LeaveGrant
from paid_leave.services.audit import write_audit_log
from paid_leave.services.employee import get_employee_or_404
from paid_leave.services.expiration import expiration_date_for
from paid_leave.services.tenure import adjusted_tenure_months

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

FIRST_GRANT_MONTHS = 6
FIRST_GRANT_DAYS = 10
MONTHS_BETWEEN_GRANTS = 12
DAYS_ADDED_PER_GRANT = 1


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Milestone:
    """A tenure threshold and the days it grants."""

    index: int
    months_required: int
    days_granted: int


@dataclass(frozen=True)
class NewGrant:
    """A grant that is due but not yet recorded."""

    grant_date: date
    days_granted: int
    expiration_date: date


@dataclass
class GrantRunResult:
    """Summary of a scheduled grant run across all employees."""

    reference_date: date
    processed: int = 0
    granted: int = 0
    errors: int = 0


class DatedGrant(Protocol):
    grant_date: date


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def iter_milestones() -> Iterator[Milestone]:
    """Yield the grant schedule in order, without end.

    Milestone 0 is 6 months -> 10 days; milestone k is 6 + 12k months ->
    10 + k days. There is no cap on the yearly increment.
    """
    index = 0
    while True:
        yield Milestone(
            index=index,
            months_required=FIRST_GRANT_MONTHS + MONTHS_BETWEEN_GRANTS * index,
            days_granted=FIRST_GRANT_DAYS + DAYS_ADDED_PER_GRANT * index,
        )
        index += 1


def milestone_date(hire_date: date, milestone: Milestone) -> date:
    """Calendar date a milestone falls on: hire date plus whole calendar months."""
    return hire_date + relativedelta(months=milestone.months_required)


def pending_grants(
    hire_date: date,
    reference_date: date,
    tenure_months: int,
    existing_grants: Iterable[DatedGrant],
) -> list[NewGrant]:
    """Return grants the employee is entitled to but does not yet hold.

    Adjusted tenure gates eligibility while the calendar date decides whether
    the grant has arrived; both must pass. The grant date itself is always
    hire date + required months, unshifted by absences. Milestones already
    present in existing_grants (matched by exact grant date) are skipped, so
    repeated calls never duplicate a grant.
    """
    granted_dates = {g.grant_date for g in existing_grants}
    due: list[NewGrant] = []

    for milestone in iter_milestones():
        if tenure_months < milestone.months_required:
            break
        grant_date = milestone_date(hire_date, milestone)
        if grant_date > reference_date:
            break
        if grant_date in granted_dates:
            continue
        due.append(
            NewGrant(
                grant_date=grant_date,
                days_granted=milestone.days_granted,
                expiration_date=expiration_date_for(grant_date),
            )
        )

    return due


# ---------------------------------------------------------------------------
# DB-backed helpers
# ---------------------------------------------------------------------------


async def _list_absences(session: AsyncSession, employee_id: uuid.UUID) -> list[LeaveOfAbsence]:
    result = await session.execute(
        select(LeaveOfAbsence)
        .where(col(LeaveOfAbsence.employee_id) == employee_id)
        .order_by(col(LeaveOfAbsence.start_date))
    )
    return list(result.scalars().all())


async def _list_grants(session: AsyncSession, employee_id: uuid.UUID) -> list[LeaveGrant]:
    result = await session.execute(
        select(LeaveGrant).where(col(LeaveGrant.employee_id) == employee_id).order_by(col(LeaveGrant.grant_date))
    )
    return list(result.scalars().all())


async def _insert_grants(session: AsyncSession, employee_id: uuid.UUID, grants: list[NewGrant]) -> int:
    """Insert new grants, each inside a savepoint.

    A unique-constraint hit on (employee_id, grant_date) means a concurrent
    run already recorded that milestone; it is skipped rather than failing
    the outer transaction.
    """
    inserted = 0
    for new_grant in grants:
        row = LeaveGrant(
            employee_id=employee_id,
            grant_date=new_grant.grant_date,
            days_granted=new_grant.days_granted,
            expiration_date=new_grant.expiration_date,
        )
        try:
            async with session.begin_nested():
                session.add(row)
                await session.flush()
        except IntegrityError:
            logger.info("Grant for employee=%s on %s already recorded", employee_id, new_grant.grant_date)
            continue
        inserted += 1
    return inserted


async def _grant_due_leave(
    session: AsyncSession,
    employee: Employee,
    reference_date: date,
    existing_grants: list[LeaveGrant],
) -> int:
    absences = await _list_absences(session, employee.id)
    tenure_months = adjusted_tenure_months(employee.hire_date, reference_date, absences)
    due = pending_grants(employee.hire_date, reference_date, tenure_months, existing_grants)
    if not due:
        return 0
    return await _insert_grants(session, employee.id, due)


# ---------------------------------------------------------------------------
# Service operations
# ---------------------------------------------------------------------------


async def calculate_and_grant_leave(
    session: AsyncSession,
    employee_id: uuid.UUID,
    reference_date: date | None = None,
) -> int:
    """Record every grant that has come due for an employee.

    Idempotent: a second call with no intervening change creates nothing.
    Returns the number of grants created.
    """
    if reference_date is None:
        reference_date = date.today()

    employee = await get_employee_or_404(session, employee_id, for_update=True)
    existing = await _list_grants(session, employee.id)
    created = await _grant_due_leave(session, employee, reference_date, existing)

    await session.commit()
    if created:
        logger.info("Granted %d new leave grant(s) to employee=%s as of %s", created, employee_id, reference_date)
    return created


async def reset_and_recalculate_grants(
    session: AsyncSession,
    employee_id: uuid.UUID,
    reference_date: date | None = None,
    *,
    commit: bool = True,
) -> int:
    """Discard all of an employee's grants and regenerate them from scratch.

    The delete and the re-insert happen in one transaction with the employee
    row locked, so no reader sees a partially rebuilt grant set. Pass
    ``commit=False`` to fold the regeneration into a caller's transaction.
    Returns the number of grants after the reset.
    """
    if reference_date is None:
        reference_date = date.today()

    employee = await get_employee_or_404(session, employee_id, for_update=True)

    count_result = await session.execute(
        select(func.count()).select_from(LeaveGrant).where(col(LeaveGrant.employee_id) == employee_id)
    )
    before_count = count_result.scalar_one()

    await session.execute(delete(LeaveGrant).where(col(LeaveGrant.employee_id) == employee_id))
    await session.flush()

    created = await _grant_due_leave(session, employee, reference_date, [])

    await write_audit_log(
        session,
        entity_type=AuditEntityType.LEAVE_GRANT,
        entity_id=employee_id,
        action=AuditAction.REGENERATE,
        before_json={"grant_count": before_count},
        after_json={"grant_count": created, "reference_date": reference_date.isoformat()},
    )

    if commit:
        await session.commit()
    logger.info(
        "Regenerated grants for employee=%s as of %s: %d -> %d",
        employee_id,
        reference_date,
        before_count,
        created,
    )
    return created


async def run_scheduled_grants(
    session: AsyncSession,
    reference_date: date | None = None,
) -> GrantRunResult:
    """Grant due leave to every employee.

    Each employee is committed on its own; a failure is logged, rolled back
    and counted without stopping the run.
    """
    if reference_date is None:
        reference_date = date.today()

    result = GrantRunResult(reference_date=reference_date)

    ids_result = await session.execute(select(Employee.id).order_by(col(Employee.created_at)))
    employee_ids = list(ids_result.scalars().all())

    for employee_id in employee_ids:
        result.processed += 1
        try:
            result.granted += await calculate_and_grant_leave(session, employee_id, reference_date)
        except Exception:
            logger.exception("Error granting leave for employee=%s", employee_id)
            await session.rollback()
            result.errors += 1

    return result
