"""Shared fixtures: in-memory SQLite engine, session, and HTTP client.

Uses SQLite + aiosqlite so tests run without PostgreSQL.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from paid_leave.db import get_session
from paid_leave.main import app
from paid_leave.models import Employee, SQLModel

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh in-memory database with all tables for each test."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN until the first DML statement, which breaks
    # SAVEPOINT; take over transaction control so begin_nested() works.
    @event.listens_for(_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(_engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a session on the per-test database."""
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_employee(db_session: AsyncSession) -> Callable[..., Awaitable[Employee]]:
    """Factory that inserts an employee directly, without granting leave."""

    async def _make(
        hire_date: date,
        name: str = "Test Employee",
        email: str = "test@example.com",
    ) -> Employee:
        employee = Employee(name=name, email=email, hire_date=hire_date)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make
