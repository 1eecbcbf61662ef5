from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import pycountry
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import DBAPIError
from sqlmodel import col

from holiday_scope.models.holiday import Holiday, HolidayCompany, HolidayLocation
from holiday_scope.services.applicability import scope_matches

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from holiday_scope.services.applicability import DateWindow, EmployeeLocation

logger = logging.getLogger(__name__)


def _clean_state(state: str | None) -> str | None:
    """A blank state means the whole country."""
    if state is None:
        return None
    state = state.strip()
    return state or None


def _clean_country(country: str | None) -> str | None:
    """Upper-cased ISO 3166-1 alpha-2 code, or None when it is not one."""
    if country is None:
        return None
    code = country.strip().upper()
    if len(code) != 2 or pycountry.countries.get(alpha_2=code) is None:
        return None
    return code


@runtime_checkable
class HolidayScopeStore(Protocol):
    """Storage for the location and company scopes attached to holidays.

    Mutations are applied one by one; a replace is not atomic.
    """

    async def add_location(self, holiday_id: int, country: str, state: str | None = None) -> int | None:
        """Attach a location scope. Returns the new row id, or None on failure."""
        ...

    async def add_company(self, holiday_id: int, company_id: int) -> int | None:
        """Attach a company scope. Returns the new row id, or None on failure."""
        ...

    async def remove_all_locations(self, holiday_id: int) -> int:
        """Delete every location scope of a holiday. Returns the number removed."""
        ...

    async def remove_all_companies(self, holiday_id: int) -> int:
        """Delete every company scope of a holiday. Returns the number removed."""
        ...

    async def list_locations(self, holiday_id: int) -> list[HolidayLocation]:
        """Location scopes of a holiday, in insertion order."""
        ...

    async def list_companies(self, holiday_id: int) -> list[int]:
        """Company location ids a holiday is scoped to, in insertion order."""
        ...

    async def find_applicable_holidays(self, where: EmployeeLocation, window: DateWindow) -> list[Holiday]:
        """Holidays intersecting ``window`` whose scopes match ``where``."""
        ...


class SqlHolidayScopeStore:
    """Scope store backed by the ``hr_holiday_locations``/``hr_holiday_companies`` tables.

    Every mutation commits on its own.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _holiday_exists(self, holiday_id: int) -> bool:
        result = await self._session.execute(select(col(Holiday.id)).where(col(Holiday.id) == holiday_id))
        return result.scalar_one_or_none() is not None

    async def _insert(self, row: HolidayLocation | HolidayCompany) -> int | None:
        kind, holiday_id = type(row).__name__, row.holiday_id
        self._session.add(row)
        try:
            await self._session.flush()
        except DBAPIError as exc:
            await self._session.rollback()
            logger.warning("Rejected %s for holiday %s: %s", kind, holiday_id, exc.orig)
            return None
        row_id = row.id
        await self._session.commit()
        return row_id

    async def _company_scoped(self, holiday_id: int, company_id: int) -> bool:
        existing = await self._session.execute(
            select(col(HolidayCompany.id)).where(
                col(HolidayCompany.holiday_id) == holiday_id,
                col(HolidayCompany.company_id) == company_id,
            )
        )
        return existing.scalar_one_or_none() is not None

    async def add_location(self, holiday_id: int, country: str, state: str | None = None) -> int | None:
        code = _clean_country(country)
        if code is None:
            logger.warning("Rejected location scope with unknown country %r for holiday %s", country, holiday_id)
            return None
        if not await self._holiday_exists(holiday_id):
            logger.warning("Rejected location scope for unknown holiday %s", holiday_id)
            return None

        return await self._insert(HolidayLocation(holiday_id=holiday_id, country=code, state=_clean_state(state)))

    async def add_company(self, holiday_id: int, company_id: int) -> int | None:
        if not await self._holiday_exists(holiday_id):
            logger.warning("Rejected company scope for unknown holiday %s", holiday_id)
            return None

        if await self._company_scoped(holiday_id, company_id):
            logger.warning("Holiday %s is already scoped to company location %s", holiday_id, company_id)
            return None

        return await self._insert(HolidayCompany(holiday_id=holiday_id, company_id=company_id))

    async def remove_all_locations(self, holiday_id: int) -> int:
        result = await self._session.execute(
            delete(HolidayLocation).where(col(HolidayLocation.holiday_id) == holiday_id)
        )
        await self._session.commit()
        return result.rowcount or 0  # ty: ignore[unresolved-attribute]

    async def remove_all_companies(self, holiday_id: int) -> int:
        result = await self._session.execute(
            delete(HolidayCompany).where(col(HolidayCompany.holiday_id) == holiday_id)
        )
        await self._session.commit()
        return result.rowcount or 0  # ty: ignore[unresolved-attribute]

    async def list_locations(self, holiday_id: int) -> list[HolidayLocation]:
        result = await self._session.execute(
            select(HolidayLocation)
            .where(col(HolidayLocation.holiday_id) == holiday_id)
            .order_by(col(HolidayLocation.id))
        )
        return list(result.scalars().all())

    async def list_companies(self, holiday_id: int) -> list[int]:
        result = await self._session.execute(
            select(col(HolidayCompany.company_id))
            .where(col(HolidayCompany.holiday_id) == holiday_id)
            .order_by(col(HolidayCompany.id))
        )
        return list(result.scalars().all())

    async def find_applicable_holidays(self, where: EmployeeLocation, window: DateWindow) -> list[Holiday]:
        has_location = select(col(HolidayLocation.id)).where(col(HolidayLocation.holiday_id) == col(Holiday.id))
        has_company = select(col(HolidayCompany.id)).where(col(HolidayCompany.holiday_id) == col(Holiday.id))
        company_match = has_company.where(col(HolidayCompany.company_id) == where.company_id)

        conditions = [
            and_(~has_location.exists(), ~has_company.exists()),
            company_match.exists(),
        ]
        if where.country is not None:
            state_condition = col(HolidayLocation.state).is_(None)
            if where.state is not None:
                state_condition = or_(state_condition, col(HolidayLocation.state) == where.state)
            location_match = has_location.where(col(HolidayLocation.country) == where.country, state_condition)
            conditions.append(location_match.exists())

        result = await self._session.execute(
            select(Holiday)
            .where(
                col(Holiday.start) <= window.end,
                col(Holiday.end) >= window.start,
                or_(*conditions),
            )
            .order_by(col(Holiday.start), col(Holiday.id))
        )
        return list(result.scalars().all())


class InMemoryHolidayScopeStore:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._holidays: dict[int, Holiday] = {}
        self._locations: list[HolidayLocation] = []
        self._companies: list[HolidayCompany] = []
        self._next_id = 1

    def _allocate_id(self) -> int:
        row_id = self._next_id
        self._next_id += 1
        return row_id

    def seed(self, holiday: Holiday) -> Holiday:
        """Seed a holiday, assigning an id when it has none."""
        if holiday.id is None:
            holiday.id = self._allocate_id()
        self._holidays[holiday.id] = holiday
        return holiday

    async def add_location(self, holiday_id: int, country: str, state: str | None = None) -> int | None:
        code = _clean_country(country)
        if code is None or holiday_id not in self._holidays:
            return None
        row = HolidayLocation(id=self._allocate_id(), holiday_id=holiday_id, country=code, state=_clean_state(state))
        self._locations.append(row)
        return row.id

    async def add_company(self, holiday_id: int, company_id: int) -> int | None:
        if holiday_id not in self._holidays:
            return None
        if any(c.holiday_id == holiday_id and c.company_id == company_id for c in self._companies):
            return None
        row = HolidayCompany(id=self._allocate_id(), holiday_id=holiday_id, company_id=company_id)
        self._companies.append(row)
        return row.id

    async def remove_all_locations(self, holiday_id: int) -> int:
        before = len(self._locations)
        self._locations = [row for row in self._locations if row.holiday_id != holiday_id]
        return before - len(self._locations)

    async def remove_all_companies(self, holiday_id: int) -> int:
        before = len(self._companies)
        self._companies = [row for row in self._companies if row.holiday_id != holiday_id]
        return before - len(self._companies)

    async def list_locations(self, holiday_id: int) -> list[HolidayLocation]:
        return [row for row in self._locations if row.holiday_id == holiday_id]

    async def list_companies(self, holiday_id: int) -> list[int]:
        return [row.company_id for row in self._companies if row.holiday_id == holiday_id]

    async def find_applicable_holidays(self, where: EmployeeLocation, window: DateWindow) -> list[Holiday]:
        matched = []
        for holiday in self._holidays.values():
            if not window.overlaps(holiday.start, holiday.end):
                continue
            locations = await self.list_locations(holiday.id)  # ty: ignore[invalid-argument-type]
            companies = await self.list_companies(holiday.id)  # ty: ignore[invalid-argument-type]
            if scope_matches(locations, companies, where):
                matched.append(holiday)
        return sorted(matched, key=lambda h: (h.start, h.id))
