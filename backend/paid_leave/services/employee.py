from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, exists, select
from sqlmodel import col

from paid_leave.exceptions import HireDateLockedError, NotFoundError
from paid_leave.models.absence import LeaveOfAbsence
from paid_leave.models.employee import Employee
from paid_leave.models.enums import AuditAction, AuditEntityType
from paid_leave.models.grant import LeaveGrant
from paid_leave.models.request import LeaveRequest
from paid_leave.schemas.employee import EmployeeResponse
from paid_leave.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from paid_leave.schemas.employee import CreateEmployeeRequest, UpdateEmployeeRequest


def build_employee_response(employee: Employee) -> EmployeeResponse:
    """Map an employee model to its response schema."""
    return EmployeeResponse(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        hire_date=employee.hire_date,
        created_at=employee.created_at,
    )


async def get_employee_or_404(
    session: AsyncSession,
    employee_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Employee:
    """Fetch an employee, optionally locking the row. Raises 404 if not found.

    Locking the employee row serialises grant writes for that employee.
    """
    query = select(Employee).where(col(Employee.id) == employee_id)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def create_employee(session: AsyncSession, payload: CreateEmployeeRequest) -> Employee:
    """Create an employee. Granting due leave is left to the caller."""
    employee = Employee(name=payload.name, email=payload.email, hire_date=payload.hire_date)
    session.add(employee)
    await session.flush()

    await write_audit_log(
        session,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    return employee


async def list_employees(session: AsyncSession) -> list[Employee]:
    """List all employees, most recently created first."""
    result = await session.execute(select(Employee).order_by(col(Employee.created_at).desc()))
    return list(result.scalars().all())


async def update_employee(
    session: AsyncSession,
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
) -> Employee:
    """Update display fields and, while no grant exists yet, the hire date."""
    employee = await get_employee_or_404(session, employee_id, for_update=True)
    before = model_to_audit_dict(employee)

    if payload.hire_date is not None and payload.hire_date != employee.hire_date:
        has_grants = await session.execute(select(exists().where(col(LeaveGrant.employee_id) == employee_id)))
        if has_grants.scalar():
            raise HireDateLockedError
        employee.hire_date = payload.hire_date
    if payload.name is not None:
        employee.name = payload.name
    if payload.email is not None:
        employee.email = payload.email

    session.add(employee)
    await session.flush()

    await write_audit_log(
        session,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    return employee


async def delete_employee(session: AsyncSession, employee_id: uuid.UUID) -> None:
    """Delete an employee together with every record it owns."""
    employee = await get_employee_or_404(session, employee_id, for_update=True)

    await write_audit_log(
        session,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(employee),
    )

    for model in (LeaveRequest, LeaveGrant, LeaveOfAbsence):
        await session.execute(delete(model).where(col(model.employee_id) == employee_id))
    await session.delete(employee)
    await session.commit()
