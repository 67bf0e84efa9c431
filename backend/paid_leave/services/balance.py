from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from paid_leave.models.enums import LeaveRequestStatus
from paid_leave.models.grant import LeaveGrant
from paid_leave.models.request import LeaveRequest
from paid_leave.schemas.grant import DetailedLeaveStatusResponse, GrantResponse, LeaveStatusResponse
from paid_leave.services.employee import get_employee_or_404
from paid_leave.services.expiration import EXPIRING_SOON_DAYS, classify, is_expiring_within
from paid_leave.services.request import build_leave_request_response

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class LeaveBalance:
    """Granted, used and remaining days."""

    total_granted: int
    total_used: int
    remaining: int


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def aggregate(grants: Iterable[GrantResponse], approved_request_count: int) -> LeaveBalance:
    """Net active grants against approved leave.

    Expired grants contribute nothing. Each approved request uses one day,
    not tied to any particular grant. The remainder is not clamped and may
    go negative.
    """
    total_granted = sum(g.days_granted for g in grants if not g.is_expired)
    return LeaveBalance(
        total_granted=total_granted,
        total_used=approved_request_count,
        remaining=total_granted - approved_request_count,
    )


def build_grant_response(grant: LeaveGrant, reference_date: date) -> GrantResponse:
    """Map a grant model to its response schema, classified as of reference_date."""
    status = classify(grant, reference_date)
    return GrantResponse(
        id=grant.id,
        employee_id=grant.employee_id,
        grant_date=grant.grant_date,
        days_granted=grant.days_granted,
        expiration_date=grant.expiration_date,
        is_expired=status.is_expired,
        days_until_expiration=status.days_until_expiration,
        is_expiring_soon=status.is_expiring_soon,
    )


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def _list_classified_grants(
    session: AsyncSession,
    employee_id: uuid.UUID,
    reference_date: date,
) -> list[GrantResponse]:
    result = await session.execute(
        select(LeaveGrant).where(col(LeaveGrant.employee_id) == employee_id).order_by(col(LeaveGrant.grant_date))
    )
    return [build_grant_response(g, reference_date) for g in result.scalars().all()]


async def count_approved_requests(session: AsyncSession, employee_id: uuid.UUID) -> int:
    """Number of approved leave requests, i.e. days used."""
    result = await session.execute(
        select(func.count())
        .select_from(LeaveRequest)
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status) == LeaveRequestStatus.APPROVED.value,
        )
    )
    return int(result.scalar_one())


async def get_employee_leave_status(
    session: AsyncSession,
    employee_id: uuid.UUID,
    reference_date: date | None = None,
) -> LeaveStatusResponse:
    """Balance for an employee using only grants still active on reference_date."""
    if reference_date is None:
        reference_date = date.today()

    await get_employee_or_404(session, employee_id)
    grants = await _list_classified_grants(session, employee_id, reference_date)
    used = await count_approved_requests(session, employee_id)
    balance = aggregate(grants, used)

    return LeaveStatusResponse(
        reference_date=reference_date,
        total_granted=balance.total_granted,
        total_used=balance.total_used,
        remaining=balance.remaining,
    )


async def get_detailed_leave_status(
    session: AsyncSession,
    employee_id: uuid.UUID,
    reference_date: date | None = None,
) -> DetailedLeaveStatusResponse:
    """Balance plus every annotated grant (oldest first) and approved leave (newest first)."""
    if reference_date is None:
        reference_date = date.today()

    await get_employee_or_404(session, employee_id)
    grants = await _list_classified_grants(session, employee_id, reference_date)

    requests_result = await session.execute(
        select(LeaveRequest)
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status) == LeaveRequestStatus.APPROVED.value,
        )
        .order_by(col(LeaveRequest.date).desc())
    )
    leave_requests = list(requests_result.scalars().all())
    balance = aggregate(grants, len(leave_requests))

    return DetailedLeaveStatusResponse(
        reference_date=reference_date,
        total_granted=balance.total_granted,
        total_used=balance.total_used,
        remaining=balance.remaining,
        grants=grants,
        leave_requests=[build_leave_request_response(r) for r in leave_requests],
        expiring_grants=[g for g in grants if g.is_expiring_soon],
    )


async def get_expiring_leaves(
    session: AsyncSession,
    employee_id: uuid.UUID,
    within_days: int = EXPIRING_SOON_DAYS,
    reference_date: date | None = None,
) -> list[GrantResponse]:
    """Active grants that lapse within the next within_days days."""
    if reference_date is None:
        reference_date = date.today()

    await get_employee_or_404(session, employee_id)
    result = await session.execute(
        select(LeaveGrant)
        .where(col(LeaveGrant.employee_id) == employee_id)
        .order_by(col(LeaveGrant.expiration_date))
    )
    return [
        build_grant_response(g, reference_date)
        for g in result.scalars().all()
        if is_expiring_within(g, reference_date, within_days)
    ]
