# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from paid_leave.db import SessionDep
from paid_leave.schemas.employee import (
    CreateEmployeeRequest,
    EmployeeDetailResponse,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeWithStatusResponse,
    UpdateEmployeeRequest,
)
from paid_leave.schemas.grant import GrantListResponse, GrantRunResponse, LeaveStatusResponse
from paid_leave.services import accrual as accrual_service
from paid_leave.services import balance as balance_service
from paid_leave.services import employee as employee_service
from paid_leave.services.expiration import EXPIRING_SOON_DAYS

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


@employees_router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    payload: CreateEmployeeRequest,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> EmployeeResponse:
    """Create an employee and grant any leave already due (e.g. a past hire date)."""
    employee = await employee_service.create_employee(session, payload)
    await accrual_service.calculate_and_grant_leave(session, employee.id, reference_date)
    return employee_service.build_employee_response(employee)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> EmployeeListResponse:
    """List all employees with their current balance."""
    employees = await employee_service.list_employees(session)
    items: list[EmployeeWithStatusResponse] = []
    for employee in employees:
        leave_status = await balance_service.get_employee_leave_status(session, employee.id, reference_date)
        items.append(
            EmployeeWithStatusResponse(
                **employee_service.build_employee_response(employee).model_dump(),
                total_granted=leave_status.total_granted,
                total_used=leave_status.total_used,
                remaining=leave_status.remaining,
            )
        )
    return EmployeeListResponse(items=items, total=len(items))


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeDetailResponse,
)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> EmployeeDetailResponse:
    """Get an employee with every grant, approved leave, and balance."""
    employee = await employee_service.get_employee_or_404(session, employee_id)
    detail = await balance_service.get_detailed_leave_status(session, employee_id, reference_date)
    return EmployeeDetailResponse(
        **employee_service.build_employee_response(employee).model_dump(),
        total_granted=detail.total_granted,
        total_used=detail.total_used,
        remaining=detail.remaining,
        grants=detail.grants,
        leave_requests=detail.leave_requests,
        expiring_grants=detail.expiring_grants,
    )


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def update_employee(
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> EmployeeResponse:
    """Update an employee. The hire date is locked once leave has been granted."""
    employee = await employee_service.update_employee(session, employee_id, payload)
    await accrual_service.calculate_and_grant_leave(session, employee.id, reference_date)
    return employee_service.build_employee_response(employee)


@employees_router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
) -> None:
    """Delete an employee and all of their leave records."""
    await employee_service.delete_employee(session, employee_id)


@employees_router.post(
    "/{employee_id}/grants",
    response_model=GrantRunResponse,
)
async def grant_leave(
    employee_id: uuid.UUID,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> GrantRunResponse:
    """Record every grant that has come due. Safe to call repeatedly."""
    resolved = reference_date or date.today()
    created = await accrual_service.calculate_and_grant_leave(session, employee_id, resolved)
    return GrantRunResponse(employee_id=employee_id, reference_date=resolved, granted_count=created)


@employees_router.post(
    "/{employee_id}/grants/reset",
    response_model=GrantRunResponse,
)
async def reset_grants(
    employee_id: uuid.UUID,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> GrantRunResponse:
    """Discard and regenerate all grants. Returns the grant count after the reset."""
    resolved = reference_date or date.today()
    count = await accrual_service.reset_and_recalculate_grants(session, employee_id, resolved)
    return GrantRunResponse(employee_id=employee_id, reference_date=resolved, granted_count=count)


@employees_router.get(
    "/{employee_id}/leave-status",
    response_model=LeaveStatusResponse,
)
async def get_leave_status(
    employee_id: uuid.UUID,
    session: SessionDep,
    reference_date: date | None = Query(default=None),
) -> LeaveStatusResponse:
    """Granted, used and remaining days over non-expired grants."""
    return await balance_service.get_employee_leave_status(session, employee_id, reference_date)


@employees_router.get(
    "/{employee_id}/expiring-leaves",
    response_model=GrantListResponse,
)
async def get_expiring_leaves(
    employee_id: uuid.UUID,
    session: SessionDep,
    within_days: int = Query(default=EXPIRING_SOON_DAYS, ge=0, le=3660),
    reference_date: date | None = Query(default=None),
) -> GrantListResponse:
    """Active grants lapsing within the next within_days days."""
    grants = await balance_service.get_expiring_leaves(session, employee_id, within_days, reference_date)
    return GrantListResponse(items=grants, total=len(grants))
