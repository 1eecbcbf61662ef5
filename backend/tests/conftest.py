from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from holiday_scope.db import get_session
from holiday_scope.main import app
from holiday_scope.models import SQLModel
from holiday_scope.services.company import InMemoryCompanyLocationService, set_company_location_service
from holiday_scope.services.employee import InMemoryEmployeeService, set_employee_service
from holiday_scope.services.leave_policy import InMemoryLeavePolicyService, set_leave_policy_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh database for each test.

    Defaults to a private in-memory SQLite database; set TEST_DATABASE_URL
    to run against a real server.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        _engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    else:
        _engine = create_async_engine(TEST_DATABASE_URL)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session on the per-test database."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
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


@pytest.fixture(autouse=True)
def employees() -> Iterator[InMemoryEmployeeService]:
    svc = InMemoryEmployeeService()
    set_employee_service(svc)
    yield svc
    set_employee_service(InMemoryEmployeeService())


@pytest.fixture(autouse=True)
def company_locations() -> Iterator[InMemoryCompanyLocationService]:
    svc = InMemoryCompanyLocationService()
    set_company_location_service(svc)
    yield svc
    set_company_location_service(InMemoryCompanyLocationService())


@pytest.fixture(autouse=True)
def leave_policies() -> Iterator[InMemoryLeavePolicyService]:
    svc = InMemoryLeavePolicyService()
    set_leave_policy_service(svc)
    yield svc
    set_leave_policy_service(InMemoryLeavePolicyService())
