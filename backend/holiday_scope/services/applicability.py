# ruff: noqa: TC003
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from holiday_scope.models.holiday import Holiday, HolidayLocation
    from holiday_scope.services.scope_store import HolidayScopeStore
    from holiday_scope.services.work_location import WorkLocationStore

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            msg = f"window end {self.end} is before start {self.start}"
            raise ValueError(msg)

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += _ONE_DAY

    def overlaps(self, start: date, end: date) -> bool:
        return start <= self.end and end >= self.start

    def clip(self, start: date, end: date) -> DateWindow | None:
        """Intersect ``[start, end]`` with this window, or None if disjoint."""
        if not self.overlaps(start, end):
            return None
        return DateWindow(max(start, self.start), min(end, self.end))


@dataclass(frozen=True)
class EmployeeLocation:
    """Where an employee works, as far as holiday applicability is concerned."""

    country: str | None
    state: str | None
    company_id: int


def scope_matches(
    locations: Sequence[HolidayLocation],
    company_ids: Iterable[int],
    where: EmployeeLocation,
) -> bool:
    """Decide whether a holiday with the given scopes applies at ``where``.

    No scopes at all means global. Otherwise any single matching scope is
    enough: a country row with no state, a country+state row equal to the
    employee's, or a company row for the employee's office.
    """
    company_ids = list(company_ids)
    if not locations and not company_ids:
        return True

    for scope in locations:
        if scope.country is None or scope.country != where.country:
            continue
        if scope.state is None or scope.state == where.state:
            return True

    return where.company_id in company_ids


async def resolve_holidays(
    store: HolidayScopeStore,
    where: EmployeeLocation | None,
    window: DateWindow,
) -> list[Holiday]:
    """Return the holidays intersecting ``window`` that apply at ``where``.

    Each holiday appears once, ordered by start date. An unknown location
    yields no holidays.
    """
    if where is None:
        return []

    holidays = await store.find_applicable_holidays(where, window)
    unique = {holiday.id: holiday for holiday in holidays}
    return sorted(unique.values(), key=lambda h: (h.start, h.id or 0))


def expand_to_dates(holidays: Iterable[Holiday], window: DateWindow) -> set[date]:
    """Expand holiday ranges, clipped to ``window``, into individual dates."""
    dates: set[date] = set()
    for holiday in holidays:
        clipped = window.clip(holiday.start, holiday.end)
        if clipped is not None:
            dates.update(clipped.days())
    return dates


async def get_employee_holiday_dates(
    scopes: HolidayScopeStore,
    work_locations: WorkLocationStore,
    employee_id: int,
    start: date,
    end: date,
) -> list[date]:
    """Sorted holiday dates applicable to an employee between start and end."""
    from holiday_scope.services.work_location import resolve_employee_location

    window = DateWindow(start, end)
    where = await resolve_employee_location(work_locations, employee_id)
    holidays = await resolve_holidays(scopes, where, window)
    return sorted(expand_to_dates(holidays, window))


async def count_employee_holidays(
    scopes: HolidayScopeStore,
    work_locations: WorkLocationStore,
    employee_id: int,
    start: date,
    end: date,
) -> int:
    """Number of distinct holiday dates for an employee between start and end."""
    return len(await get_employee_holiday_dates(scopes, work_locations, employee_id, start, end))
