"""Tests for the one-time holiday location updates."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from holiday_scope.config import get_settings
from holiday_scope.models import SQLModel
from holiday_scope.services.company import CompanyLocation
from holiday_scope.services.employee import EmployeeInfo
from holiday_scope.services.migration import (
    HOLIDAY_LOCATIONS_OPTION,
    WORK_LOCATIONS_OPTION,
    fix_employee_work_locations,
    get_option,
    run_holiday_location_updates,
    set_option,
)
from holiday_scope.services.work_location import InMemoryWorkLocationStore, SqlWorkLocationStore

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from holiday_scope.services.company import InMemoryCompanyLocationService
    from holiday_scope.services.employee import InMemoryEmployeeService

AUTH_HEADERS = {"X-User-Id": "1", "X-Role": "admin"}
EMPLOYEE_HEADERS = {"X-User-Id": "2", "X-Role": "employee"}


def _employee(employee_id: int) -> EmployeeInfo:
    return EmployeeInfo(
        id=employee_id,
        first_name="Jane",
        last_name="Doe",
        email=f"jane{employee_id}@example.com",
    )


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


async def test_set_and_get_option(db_session: AsyncSession) -> None:
    assert await get_option(db_session, "some_flag") is None

    await set_option(db_session, "some_flag", "1")
    await set_option(db_session, "some_flag", "2")

    assert await get_option(db_session, "some_flag") == "2"


# ---------------------------------------------------------------------------
# Work location fix
# ---------------------------------------------------------------------------


async def test_fix_assigns_first_office_to_unset_employees(
    db_session: AsyncSession,
    employees: InMemoryEmployeeService,
    company_locations: InMemoryCompanyLocationService,
) -> None:
    company_locations.seed(CompanyLocation(id=4, name="Head Office", country="US"))
    company_locations.seed(CompanyLocation(id=9, name="Branch", country="US"))
    for employee_id in (1, 2, 3):
        employees.seed(_employee(employee_id))
    store = InMemoryWorkLocationStore()
    store.seed(1, "9")
    store.seed(2, "0")

    assert await fix_employee_work_locations(db_session, store) == 2
    assert store.values == {1: "9", 2: "4", 3: "4"}
    assert await get_option(db_session, WORK_LOCATIONS_OPTION) is not None


async def test_fix_deferred_without_company_locations(
    db_session: AsyncSession,
    employees: InMemoryEmployeeService,
) -> None:
    employees.seed(_employee(1))
    store = InMemoryWorkLocationStore()

    assert await fix_employee_work_locations(db_session, store) is None
    assert store.values == {}
    assert await get_option(db_session, WORK_LOCATIONS_OPTION) is None


# ---------------------------------------------------------------------------
# run_holiday_location_updates
# ---------------------------------------------------------------------------


async def test_updates_run_once(
    db_session: AsyncSession,
    employees: InMemoryEmployeeService,
    company_locations: InMemoryCompanyLocationService,
) -> None:
    company_locations.seed(CompanyLocation(id=4, name="Head Office", country="US"))
    employees.seed(_employee(1))
    employees.seed(_employee(2))

    first = await run_holiday_location_updates(db_session)
    assert first.tables_created is True
    assert first.work_locations_fixed is True
    assert first.employees_updated == 2
    assert await get_option(db_session, HOLIDAY_LOCATIONS_OPTION) == get_settings().holiday_locations_version
    assert await SqlWorkLocationStore(db_session).get(1) == "4"

    second = await run_holiday_location_updates(db_session)
    assert second.tables_created is False
    assert second.work_locations_fixed is False
    assert second.employees_updated == 0


async def test_work_location_fix_retried_once_offices_exist(
    db_session: AsyncSession,
    employees: InMemoryEmployeeService,
    company_locations: InMemoryCompanyLocationService,
) -> None:
    employees.seed(_employee(1))

    first = await run_holiday_location_updates(db_session)
    assert first.tables_created is True
    assert first.work_locations_fixed is False

    company_locations.seed(CompanyLocation(id=4, name="Head Office", country="US"))
    second = await run_holiday_location_updates(db_session)
    assert second.tables_created is False
    assert second.work_locations_fixed is True
    assert second.employees_updated == 1


async def test_migration_endpoint(async_client: AsyncClient) -> None:
    resp = await async_client.post("/admin/migrations/holiday-locations", headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"tables_created": True, "work_locations_fixed": False, "employees_updated": 0}


async def test_migration_endpoint_requires_admin(async_client: AsyncClient) -> None:
    resp = await async_client.post("/admin/migrations/holiday-locations", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Alembic revision
# ---------------------------------------------------------------------------

REVISION_PATH = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "0001_holiday_locations.py"
SCOPE_TABLES = {"hr_holiday", "hr_holiday_locations", "hr_holiday_companies", "hr_employee_work_location", "app_option"}


def _run_revision_upgrade(connection: sa.Connection) -> None:
    spec = importlib.util.spec_from_file_location("revision_0001", REVISION_PATH)
    assert spec is not None
    assert spec.loader is not None
    revision = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(revision)
    with Operations.context(MigrationContext.configure(connection)):
        revision.upgrade()


def test_revision_keeps_existing_holiday_table() -> None:
    engine = sa.create_engine("sqlite://")
    host = sa.MetaData()
    sa.Table(
        "hr_holiday",
        host,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("start", sa.Date(), nullable=False),
        sa.Column("end", sa.Date(), nullable=False),
    )
    with engine.begin() as connection:
        host.create_all(connection)
        connection.execute(
            sa.text("INSERT INTO hr_holiday (title, start, \"end\") VALUES ('Kept', '2025-01-01', '2025-01-01')")
        )
        _run_revision_upgrade(connection)

    inspector = sa.inspect(engine)
    assert SCOPE_TABLES.issubset(set(inspector.get_table_names()))
    assert "ix_holiday_date_range" in {index["name"] for index in inspector.get_indexes("hr_holiday")}
    with engine.connect() as connection:
        assert connection.execute(sa.text("SELECT title FROM hr_holiday")).scalar_one() == "Kept"
    engine.dispose()


def test_revision_after_runtime_updates_is_a_no_op() -> None:
    engine = sa.create_engine("sqlite://")
    with engine.begin() as connection:
        SQLModel.metadata.create_all(connection)
        _run_revision_upgrade(connection)

    assert SCOPE_TABLES.issubset(set(sa.inspect(engine).get_table_names()))
    engine.dispose()
