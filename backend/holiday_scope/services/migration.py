"""One-time schema and data updates for location-scoped holidays.

Each step is gated by a persisted option so it runs at most once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import SQLModel, col

from holiday_scope.config import get_settings
from holiday_scope.models.holiday import HOLIDAY_DATE_RANGE_INDEX, Holiday, HolidayCompany, HolidayLocation
from holiday_scope.models.option import AppOption
from holiday_scope.services.company import first_company_location_id
from holiday_scope.services.employee import get_employee_service
from holiday_scope.services.work_location import SqlWorkLocationStore, parse_location_id

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import Session

    from holiday_scope.services.work_location import WorkLocationStore

logger = logging.getLogger(__name__)

HOLIDAY_LOCATIONS_OPTION = "holiday_locations_version"
WORK_LOCATIONS_OPTION = "work_locations_fixed"


@dataclass
class HolidayLocationUpdateResult:
    """Summary of a migration run."""

    tables_created: bool = False
    work_locations_fixed: bool = False
    employees_updated: int = 0


async def get_option(session: AsyncSession, name: str) -> str | None:
    result = await session.execute(select(col(AppOption.value)).where(col(AppOption.name) == name))
    return result.scalar_one_or_none()


async def set_option(session: AsyncSession, name: str, value: str) -> None:
    option = await session.get(AppOption, name)
    if option is None:
        session.add(AppOption(name=name, value=value))
    else:
        option.value = value
    await session.commit()


def _create_option_table(sync_session: Session) -> None:
    SQLModel.metadata.create_all(
        sync_session.connection(),
        tables=[AppOption.__table__],  # ty: ignore[unresolved-attribute]
        checkfirst=True,
    )


def _create_scope_tables(sync_session: Session) -> None:
    connection = sync_session.connection()
    SQLModel.metadata.create_all(
        connection,
        tables=[
            Holiday.__table__,  # ty: ignore[unresolved-attribute]
            HolidayLocation.__table__,  # ty: ignore[unresolved-attribute]
            HolidayCompany.__table__,  # ty: ignore[unresolved-attribute]
        ],
        checkfirst=True,
    )
    # The holiday table may predate the range index.
    for index in Holiday.__table__.indexes:  # ty: ignore[unresolved-attribute]
        if index.name == HOLIDAY_DATE_RANGE_INDEX:
            index.create(connection, checkfirst=True)


async def create_holiday_location_tables(session: AsyncSession) -> None:
    """Create the scope tables and the holiday range index if absent, then record the version."""
    await session.run_sync(_create_scope_tables)
    await session.commit()
    await set_option(session, HOLIDAY_LOCATIONS_OPTION, get_settings().holiday_locations_version)
    logger.info("Holiday location tables are in place")


async def fix_employee_work_locations(session: AsyncSession, store: WorkLocationStore | None = None) -> int | None:
    """Assign the first company location to every employee without a work location.

    Returns the number of employees updated, or None when there is no
    company location to assign; the step is then left pending.
    """
    default_id = await first_company_location_id()
    if default_id is None:
        logger.info("No company locations configured; work location fix deferred")
        return None

    store = store or SqlWorkLocationStore(session)
    updated = 0
    for employee in await get_employee_service().list_employees():
        if parse_location_id(await store.get(employee.id)) is None:
            await store.set(employee.id, default_id)
            updated += 1

    if updated > 0:
        logger.info("Fixed work location for %d employees", updated)

    await set_option(session, WORK_LOCATIONS_OPTION, get_settings().holiday_locations_version)
    return updated


async def run_holiday_location_updates(session: AsyncSession) -> HolidayLocationUpdateResult:
    """Run every pending holiday-location update."""
    result = HolidayLocationUpdateResult()

    await session.run_sync(_create_option_table)
    await session.commit()

    if await get_option(session, HOLIDAY_LOCATIONS_OPTION) is None:
        await create_holiday_location_tables(session)
        result.tables_created = True

    if await get_option(session, WORK_LOCATIONS_OPTION) is None:
        updated = await fix_employee_work_locations(session)
        if updated is not None:
            result.work_locations_fixed = True
            result.employees_updated = updated

    return result
