"""Tests for holiday-aware working-day counting and leave request validation."""

from __future__ import annotations

from datetime import date

import pytest

from holiday_scope.models.enums import LeaveErrorCode, Weekday
from holiday_scope.models.holiday import Holiday
from holiday_scope.schemas.leave import LeaveValidationError, LeaveValidationOk, ValidateLeaveRequest
from holiday_scope.services.applicability import DateWindow, EmployeeLocation
from holiday_scope.services.company import CompanyLocation, InMemoryCompanyLocationService
from holiday_scope.services.leave import (
    HolidayAwareLeaveDuration,
    LeaveDurationProvider,
    calculate_leave_days_with_holidays,
    count_working_days,
    validate_leave_request,
    validate_leave_request_with_holidays,
    weekday_name,
    working_days,
)
from holiday_scope.services.leave_policy import InMemoryLeavePolicyService, LeaveBalance, LeavePolicyInfo
from holiday_scope.services.scope_store import InMemoryHolidayScopeStore
from holiday_scope.services.work_location import InMemoryWorkLocationStore

EMPLOYEE_ID = 7
POLICY_ID = 3
OFFICE_NY = 10
OFFICE_TORONTO = 20

# 2025-12-22 is a Monday.
CHRISTMAS_WEEK = DateWindow(date(2025, 12, 22), date(2025, 12, 28))


@pytest.fixture
def scopes() -> InMemoryHolidayScopeStore:
    store = InMemoryHolidayScopeStore()
    store.seed(Holiday(title="Christmas", start=date(2025, 12, 25), end=date(2025, 12, 25)))
    return store


@pytest.fixture
def work_locations(company_locations: InMemoryCompanyLocationService) -> InMemoryWorkLocationStore:
    company_locations.seed(CompanyLocation(id=OFFICE_NY, name="New York", country="US", state="NY"))
    company_locations.seed(CompanyLocation(id=OFFICE_TORONTO, name="Toronto", country="CA", state="ON"))
    store = InMemoryWorkLocationStore()
    store.seed(EMPLOYEE_ID, str(OFFICE_NY))
    return store


@pytest.fixture
def policy(leave_policies: InMemoryLeavePolicyService) -> LeavePolicyInfo:
    info = LeavePolicyInfo(id=POLICY_ID, name="Annual Leave")
    leave_policies.seed(info)
    leave_policies.seed_balance(EMPLOYEE_ID, POLICY_ID, LeaveBalance(entitlement=20, scheduled=5))
    return info


# ---------------------------------------------------------------------------
# count_working_days / working_days
# ---------------------------------------------------------------------------


def test_weekday_names_follow_calendar() -> None:
    assert weekday_name(date(2025, 12, 22)) == Weekday.MON
    assert weekday_name(date(2025, 12, 27)) == Weekday.SAT
    assert weekday_name(date(2025, 12, 28)) == Weekday.SUN


def test_christmas_week_day_by_day() -> None:
    # date, weekday, excluded?
    table = [
        (date(2025, 12, 22), Weekday.MON, False),
        (date(2025, 12, 23), Weekday.TUE, False),
        (date(2025, 12, 24), Weekday.WED, False),
        (date(2025, 12, 25), Weekday.THU, True),  # holiday
        (date(2025, 12, 26), Weekday.FRI, False),
        (date(2025, 12, 27), Weekday.SAT, True),  # weekend
        (date(2025, 12, 28), Weekday.SUN, True),  # weekend
    ]
    assert [weekday_name(d) for d, _, _ in table] == [w for _, w, _ in table]
    expected = sum(1 for _, _, excluded in table if not excluded)

    result = count_working_days(CHRISTMAS_WEEK, {date(2025, 12, 25)}, {Weekday.SAT, Weekday.SUN})

    assert expected == 4
    assert result == expected


def test_default_weekend_is_saturday_and_sunday() -> None:
    assert count_working_days(CHRISTMAS_WEEK, set()) == 5


def test_custom_weekend() -> None:
    assert count_working_days(CHRISTMAS_WEEK, set(), {Weekday.FRI, Weekday.SAT}) == 5
    assert count_working_days(CHRISTMAS_WEEK, set(), []) == 7


async def test_working_days_for_location(scopes: InMemoryHolidayScopeStore) -> None:
    where = EmployeeLocation(country="US", state="NY", company_id=OFFICE_NY)
    assert await working_days(scopes, where, CHRISTMAS_WEEK) == 4


async def test_working_days_unknown_location_counts_no_holidays(scopes: InMemoryHolidayScopeStore) -> None:
    assert await working_days(scopes, None, CHRISTMAS_WEEK) == 5


# ---------------------------------------------------------------------------
# calculate_leave_days_with_holidays
# ---------------------------------------------------------------------------


async def test_location_holiday_only_excluded_where_it_applies(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    boxing_day = scopes.seed(Holiday(title="Boxing Day", start=date(2025, 12, 26), end=date(2025, 12, 26)))
    await scopes.add_location(boxing_day.id, "CA")  # ty: ignore[invalid-argument-type]
    work_locations.seed(99, str(OFFICE_TORONTO))

    ny_days = await calculate_leave_days_with_holidays(
        scopes, work_locations, EMPLOYEE_ID, CHRISTMAS_WEEK.start, CHRISTMAS_WEEK.end
    )
    toronto_days = await calculate_leave_days_with_holidays(
        scopes, work_locations, 99, CHRISTMAS_WEEK.start, CHRISTMAS_WEEK.end
    )

    assert ny_days == 4
    assert toronto_days == 3


async def test_policy_weekends_override_default(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    policy = LeavePolicyInfo(id=1, name="Gulf", weekends=[Weekday.FRI, Weekday.SAT])

    days = await calculate_leave_days_with_holidays(
        scopes, work_locations, EMPLOYEE_ID, CHRISTMAS_WEEK.start, CHRISTMAS_WEEK.end, policy
    )

    # Mon, Tue, Wed, Sun; Thursday is Christmas.
    assert days == 4


async def test_inverted_range_covers_no_days(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    assert await calculate_leave_days_with_holidays(
        scopes, work_locations, EMPLOYEE_ID, date(2025, 12, 24), date(2025, 12, 22)
    ) == 0


# ---------------------------------------------------------------------------
# validate_leave_request
# ---------------------------------------------------------------------------


async def _validate(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
    employee_id: int = EMPLOYEE_ID,
    start: date | None = CHRISTMAS_WEEK.start,
    end: date | None = CHRISTMAS_WEEK.end,
    policy_id: int = POLICY_ID,
) -> LeaveValidationOk | LeaveValidationError:
    return await validate_leave_request(scopes, work_locations, employee_id, start, end, policy_id)


@pytest.mark.usefixtures("policy")
async def test_valid_request_returns_working_days(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    result = await _validate(scopes, work_locations)

    assert isinstance(result, LeaveValidationOk)
    assert result.working_days == 4


@pytest.mark.usefixtures("policy")
@pytest.mark.parametrize("employee_id", [0, -1])
async def test_invalid_employee(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
    employee_id: int,
) -> None:
    result = await _validate(scopes, work_locations, employee_id=employee_id)

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INVALID_EMPLOYEE


@pytest.mark.usefixtures("policy")
async def test_missing_dates(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    result = await _validate(scopes, work_locations, end=None)

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INVALID_DATES


async def test_end_before_start_wins_over_later_checks(
    scopes: InMemoryHolidayScopeStore,
) -> None:
    # No work location, no policy: the date range is still reported first.
    result = await _validate(
        scopes,
        InMemoryWorkLocationStore(),
        start=date(2025, 12, 28),
        end=date(2025, 12, 22),
        policy_id=999,
    )

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INVALID_DATE_RANGE
    assert result.message == "End date must be after start date"


@pytest.mark.usefixtures("policy")
async def test_no_work_location(scopes: InMemoryHolidayScopeStore) -> None:
    # No company locations exist, so nothing can be resolved.
    result = await _validate(scopes, InMemoryWorkLocationStore())

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.NO_WORK_LOCATION


async def test_invalid_policy(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    result = await _validate(scopes, work_locations, policy_id=999)

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INVALID_POLICY


@pytest.mark.usefixtures("policy")
async def test_window_of_only_holidays_and_weekends(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    scopes.seed(Holiday(title="Boxing Day", start=date(2025, 12, 26), end=date(2025, 12, 26)))

    result = await _validate(scopes, work_locations, start=date(2025, 12, 25), end=date(2025, 12, 28))

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.NO_WORKING_DAYS


async def test_insufficient_balance_reports_requested_and_available(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
    leave_policies: InMemoryLeavePolicyService,
) -> None:
    leave_policies.seed(LeavePolicyInfo(id=POLICY_ID, name="Annual Leave"))
    leave_policies.seed_balance(EMPLOYEE_ID, POLICY_ID, LeaveBalance(entitlement=5, scheduled=2.5))

    result = await _validate(scopes, work_locations)

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INSUFFICIENT_BALANCE
    assert result.requested == 4
    assert result.available == 2.5
    assert result.message == "Insufficient leave balance. Requested: 4 days, Available: 2.5 days"


async def test_missing_balance_means_nothing_available(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
    leave_policies: InMemoryLeavePolicyService,
) -> None:
    leave_policies.seed(LeavePolicyInfo(id=POLICY_ID, name="Annual Leave"))

    result = await _validate(scopes, work_locations)

    assert isinstance(result, LeaveValidationError)
    assert result.code == LeaveErrorCode.INSUFFICIENT_BALANCE
    assert result.available == 0


@pytest.mark.usefixtures("policy")
async def test_validate_from_payload(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    payload = ValidateLeaveRequest(
        employee_id=EMPLOYEE_ID,
        start_date=date(2025, 12, 22),
        end_date=date(2025, 12, 23),
        policy_id=POLICY_ID,
    )

    result = await validate_leave_request_with_holidays(scopes, work_locations, payload)

    assert result == LeaveValidationOk(working_days=2)


# ---------------------------------------------------------------------------
# HolidayAwareLeaveDuration
# ---------------------------------------------------------------------------


async def test_duration_provider(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
    policy: LeavePolicyInfo,
) -> None:
    provider = HolidayAwareLeaveDuration(scopes, work_locations)
    assert isinstance(provider, LeaveDurationProvider)

    assert await provider.duration(EMPLOYEE_ID, CHRISTMAS_WEEK.start, CHRISTMAS_WEEK.end, policy.id) == 4
    assert await provider.duration(EMPLOYEE_ID, CHRISTMAS_WEEK.start, CHRISTMAS_WEEK.end, 999) == 4


async def test_duration_provider_keeps_fallback_without_dates(
    scopes: InMemoryHolidayScopeStore,
    work_locations: InMemoryWorkLocationStore,
) -> None:
    provider = HolidayAwareLeaveDuration(scopes, work_locations)

    assert await provider.duration(EMPLOYEE_ID, None, CHRISTMAS_WEEK.end, fallback=3) == 3
