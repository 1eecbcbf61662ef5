"""Employee work-location resolution.

Historical data stores "no location" as NULL, ``""`` or ``"0"``. Raw values are
parsed once by :func:`parse_location_id`; past that boundary a location is
either :class:`Resolved` or :data:`UNRESOLVED`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from holiday_scope.models.employee import EmployeeWorkLocation
from holiday_scope.services.applicability import EmployeeLocation
from holiday_scope.services.company import first_company_location_id, get_company_location_service
from holiday_scope.services.employee import get_employee_service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    """The employee works at company location ``location_id``."""

    location_id: int


@dataclass(frozen=True)
class Unresolved:
    """No work location could be determined for the employee."""


UNRESOLVED = Unresolved()

WorkLocation = Resolved | Unresolved


def parse_location_id(raw: object) -> int | None:
    """Parse a stored location value, treating None, blanks, zero and junk as unset."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = str(raw).strip()
    if not text.isdigit():
        return None
    value = int(text)
    return value if value > 0 else None


@runtime_checkable
class WorkLocationStore(Protocol):
    """Storage for the per-employee work-location attribute."""

    async def get(self, employee_id: int) -> str | None:
        """Raw stored value, or None when nothing was ever stored."""
        ...

    async def set(self, employee_id: int, location_id: int) -> None:
        """Store ``location_id`` as the employee's work location."""
        ...


class SqlWorkLocationStore:
    """Work-location store backed by ``hr_employee_work_location``. Writes commit immediately."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, employee_id: int) -> str | None:
        row = await self._session.get(EmployeeWorkLocation, employee_id)
        return row.value if row is not None else None

    async def set(self, employee_id: int, location_id: int) -> None:
        row = await self._session.get(EmployeeWorkLocation, employee_id)
        if row is None:
            row = EmployeeWorkLocation(employee_id=employee_id, value=str(location_id))
            self._session.add(row)
        else:
            row.value = str(location_id)
        await self._session.commit()


class InMemoryWorkLocationStore:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self.values: dict[int, str | None] = {}

    def seed(self, employee_id: int, raw: str | None) -> None:
        """Seed a raw stored value, including legacy sentinels such as ``"0"``."""
        self.values[employee_id] = raw

    async def get(self, employee_id: int) -> str | None:
        return self.values.get(employee_id)

    async def set(self, employee_id: int, location_id: int) -> None:
        self.values[employee_id] = str(location_id)


async def resolve_work_location(store: WorkLocationStore, employee_id: int) -> WorkLocation:
    """Resolve an employee's company location, healing the stored value.

    Falls back from the stored attribute to the employee record, then to the
    first company location. Whatever the fallback finds is written back so
    the next call is answered from the stored attribute.
    """
    stored = parse_location_id(await store.get(employee_id))
    if stored is not None:
        return Resolved(stored)

    employee = await get_employee_service().get_employee(employee_id)
    if employee is not None:
        from_record = parse_location_id(employee.work_location)
        if from_record is not None:
            await store.set(employee_id, from_record)
            logger.info("Restored work location %s for employee %s from employee record", from_record, employee_id)
            return Resolved(from_record)

    default_id = await first_company_location_id()
    if default_id is None:
        return UNRESOLVED

    await store.set(employee_id, default_id)
    logger.info("Assigned default work location %s to employee %s", default_id, employee_id)
    return Resolved(default_id)


async def resolve_employee_location(store: WorkLocationStore, employee_id: int) -> EmployeeLocation | None:
    """Country, state and office of an employee, or None when unknown."""
    work_location = await resolve_work_location(store, employee_id)
    if not isinstance(work_location, Resolved):
        return None

    location = await get_company_location_service().get_location(work_location.location_id)
    if location is None:
        return None

    return EmployeeLocation(
        country=location.country.upper() if location.country else None,
        state=location.state or None,
        company_id=work_location.location_id,
    )


async def ensure_work_location(store: WorkLocationStore, employee_id: int) -> WorkLocation:
    """Give a newly created or updated employee a work location if it has none."""
    stored = parse_location_id(await store.get(employee_id))
    if stored is not None:
        return Resolved(stored)

    default_id = await first_company_location_id()
    if default_id is None:
        return UNRESOLVED

    await store.set(employee_id, default_id)
    return Resolved(default_id)


async def count_missing_work_locations(store: WorkLocationStore) -> int:
    """Count active employees whose stored work location is unset."""
    count = 0
    for employee in await get_employee_service().list_employees():
        if employee.status != "active":
            continue
        if parse_location_id(await store.get(employee.id)) is None:
            count += 1
    return count
