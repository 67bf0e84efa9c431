"""Tests for grant creation, regeneration, and the scheduled run."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel import col

from paid_leave.exceptions import NotFoundError
from paid_leave.models.grant import LeaveGrant
from paid_leave.services import accrual
from paid_leave.services.accrual import (
    NewGrant,
    _insert_grants,
    calculate_and_grant_leave,
    reset_and_recalculate_grants,
    run_scheduled_grants,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from paid_leave.models.employee import Employee

REFERENCE = date(2025, 11, 1)


async def _grant_dates(session: AsyncSession, employee_id: uuid.UUID) -> list[date]:
    result = await session.execute(
        select(LeaveGrant.grant_date)
        .where(col(LeaveGrant.employee_id) == employee_id)
        .order_by(col(LeaveGrant.grant_date))
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


async def test_calculate_is_idempotent(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    taro = await make_employee(date(2023, 1, 1))
    assert await calculate_and_grant_leave(db_session, taro.id, REFERENCE) == 3
    assert await calculate_and_grant_leave(db_session, taro.id, REFERENCE) == 0
    assert await _grant_dates(db_session, taro.id) == [date(2023, 7, 1), date(2024, 7, 1), date(2025, 7, 1)]


async def test_calculate_catches_up_as_time_passes(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    jiro = await make_employee(date(2025, 1, 1))
    assert await calculate_and_grant_leave(db_session, jiro.id, date(2025, 5, 1)) == 0
    assert await calculate_and_grant_leave(db_session, jiro.id, REFERENCE) == 1
    assert await calculate_and_grant_leave(db_session, jiro.id, date(2026, 7, 10)) == 1
    assert await _grant_dates(db_session, jiro.id) == [date(2025, 7, 1), date(2026, 7, 1)]


async def test_calculate_unknown_employee(db_session: AsyncSession) -> None:
    with pytest.raises(NotFoundError):
        await calculate_and_grant_leave(db_session, uuid.uuid4(), REFERENCE)


async def test_duplicate_grant_date_skipped(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    taro = await make_employee(date(2023, 1, 1))
    db_session.add(
        LeaveGrant(
            employee_id=taro.id,
            grant_date=date(2023, 7, 1),
            days_granted=10,
            expiration_date=date(2025, 7, 1),
        )
    )
    await db_session.commit()

    inserted = await _insert_grants(
        db_session,
        taro.id,
        [
            NewGrant(grant_date=date(2023, 7, 1), days_granted=10, expiration_date=date(2025, 7, 1)),
            NewGrant(grant_date=date(2024, 7, 1), days_granted=11, expiration_date=date(2026, 7, 1)),
        ],
    )
    await db_session.commit()

    assert inserted == 1
    assert await _grant_dates(db_session, taro.id) == [date(2023, 7, 1), date(2024, 7, 1)]


async def test_reset_rebuilds_grants(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    taro = await make_employee(date(2023, 1, 1))
    await calculate_and_grant_leave(db_session, taro.id, REFERENCE)
    old_ids = set((await db_session.execute(select(LeaveGrant.id))).scalars().all())

    assert await reset_and_recalculate_grants(db_session, taro.id, REFERENCE) == 3

    new_ids = set((await db_session.execute(select(LeaveGrant.id))).scalars().all())
    assert len(new_ids) == 3
    assert old_ids.isdisjoint(new_ids)


async def test_reset_as_of_earlier_date_drops_later_grants(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    taro = await make_employee(date(2023, 1, 1))
    await calculate_and_grant_leave(db_session, taro.id, REFERENCE)

    assert await reset_and_recalculate_grants(db_session, taro.id, date(2024, 1, 1)) == 1
    assert await _grant_dates(db_session, taro.id) == [date(2023, 7, 1)]


async def test_failed_reset_keeps_original_grants(
    engine: AsyncEngine,
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    taro = await make_employee(date(2023, 1, 1))
    await calculate_and_grant_leave(db_session, taro.id, REFERENCE)
    original_ids = set((await db_session.execute(select(LeaveGrant.id))).scalars().all())

    async def _failing_insert(*args: object, **kwargs: object) -> int:
        raise RuntimeError("insert failed")

    monkeypatch.setattr(accrual, "_insert_grants", _failing_insert)

    with pytest.raises(RuntimeError, match="insert failed"):
        await reset_and_recalculate_grants(db_session, taro.id, REFERENCE)
    await db_session.rollback()

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as other_session:
        result = await other_session.execute(
            select(LeaveGrant.id).where(col(LeaveGrant.employee_id) == taro.id)
        )
        assert set(result.scalars().all()) == original_ids
    assert len(original_ids) == 3


async def test_scheduled_run(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    await make_employee(date(2023, 1, 1), name="Taro Yamada", email="taro@example.com")
    await make_employee(date(2025, 1, 1), name="Jiro Tanaka", email="jiro@example.com")

    result = await run_scheduled_grants(db_session, REFERENCE)
    assert result.reference_date == REFERENCE
    assert result.processed == 2
    assert result.granted == 4
    assert result.errors == 0

    rerun = await run_scheduled_grants(db_session, REFERENCE)
    assert rerun.processed == 2
    assert rerun.granted == 0


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


async def _create_taro(client: AsyncClient, reference_date: str) -> str:
    response = await client.post(
        "/employees",
        json={"name": "Taro Yamada", "email": "taro@example.com", "hire_date": "2023-01-01"},
        params={"reference_date": reference_date},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def test_grant_endpoint(async_client: AsyncClient) -> None:
    taro_id = await _create_taro(async_client, "2024-01-01")

    response = await async_client.post(f"/employees/{taro_id}/grants", params={"reference_date": "2025-11-01"})
    assert response.status_code == 200
    assert response.json() == {"employee_id": taro_id, "reference_date": "2025-11-01", "granted_count": 2}

    response = await async_client.post(f"/employees/{taro_id}/grants", params={"reference_date": "2025-11-01"})
    assert response.json()["granted_count"] == 0


async def test_reset_endpoint(async_client: AsyncClient) -> None:
    taro_id = await _create_taro(async_client, "2025-11-01")

    response = await async_client.post(f"/employees/{taro_id}/grants/reset", params={"reference_date": "2025-11-01"})
    assert response.status_code == 200
    assert response.json()["granted_count"] == 3


async def test_grant_endpoint_unknown_employee(async_client: AsyncClient) -> None:
    response = await async_client.post(f"/employees/{uuid.uuid4()}/grants")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"
