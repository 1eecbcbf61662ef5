# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from holiday_scope.config import get_settings
from holiday_scope.models.enums import LeaveErrorCode, Weekday
from holiday_scope.schemas.leave import LeaveValidationError, LeaveValidationOk, LeaveValidationResult
from holiday_scope.services.applicability import DateWindow, expand_to_dates, resolve_holidays
from holiday_scope.services.leave_policy import get_leave_policy_service
from holiday_scope.services.work_location import Resolved, resolve_employee_location, resolve_work_location

if TYPE_CHECKING:
    from collections.abc import Iterable

    from holiday_scope.schemas.leave import ValidateLeaveRequest
    from holiday_scope.services.applicability import EmployeeLocation
    from holiday_scope.services.leave_policy import LeavePolicyInfo
    from holiday_scope.services.scope_store import HolidayScopeStore
    from holiday_scope.services.work_location import WorkLocationStore

_WEEKDAYS = tuple(Weekday)


def weekday_name(day: date) -> Weekday:
    """Three-letter weekday name of ``day``, independent of locale."""
    return _WEEKDAYS[day.weekday()]


def default_weekend_days() -> frozenset[Weekday]:
    return frozenset(get_settings().default_weekend_days)


def policy_weekend_days(policy: LeavePolicyInfo | None) -> frozenset[Weekday]:
    """Weekend days configured on a policy, or the default when it sets none."""
    if policy is None or policy.weekends is None:
        return default_weekend_days()
    return frozenset(policy.weekends)


def count_working_days(
    window: DateWindow,
    holiday_dates: Iterable[date],
    weekend_days: Iterable[Weekday] | None = None,
) -> int:
    """Count dates in ``window`` that are neither weekend days nor holidays."""
    weekend = default_weekend_days() if weekend_days is None else frozenset(weekend_days)
    holidays = set(holiday_dates)
    return sum(1 for day in window.days() if weekday_name(day) not in weekend and day not in holidays)


async def working_days(
    scopes: HolidayScopeStore,
    where: EmployeeLocation | None,
    window: DateWindow,
    weekend_days: Iterable[Weekday] | None = None,
) -> int:
    """Working days in ``window`` for an employee located at ``where``."""
    holidays = await resolve_holidays(scopes, where, window)
    return count_working_days(window, expand_to_dates(holidays, window), weekend_days)


async def calculate_leave_days_with_holidays(
    scopes: HolidayScopeStore,
    work_locations: WorkLocationStore,
    employee_id: int,
    start: date,
    end: date,
    policy: LeavePolicyInfo | None = None,
) -> int:
    """Working days an employee would take off between start and end, inclusive.

    Weekends come from the policy (Sat/Sun by default) and holidays are the
    ones applicable at the employee's work location. An inverted range
    covers no days.
    """
    if end < start:
        return 0

    where = await resolve_employee_location(work_locations, employee_id)
    return await working_days(scopes, where, DateWindow(start, end), policy_weekend_days(policy))


def _format_days(value: float) -> str:
    return f"{value:g}"


async def validate_leave_request(
    scopes: HolidayScopeStore,
    work_locations: WorkLocationStore,
    employee_id: int,
    start: date | None,
    end: date | None,
    policy_id: int,
) -> LeaveValidationResult:
    """Validate a leave request against holidays, weekends and the employee's balance.

    Checks run in order and stop at the first failure. On success the result
    carries the number of working days to record as the request's duration.
    """
    if employee_id <= 0:
        return LeaveValidationError(code=LeaveErrorCode.INVALID_EMPLOYEE, message="Invalid employee ID")

    if start is None or end is None:
        return LeaveValidationError(
            code=LeaveErrorCode.INVALID_DATES,
            message="Start and end dates are required",
        )
    if end < start:
        return LeaveValidationError(
            code=LeaveErrorCode.INVALID_DATE_RANGE,
            message="End date must be after start date",
        )

    if not isinstance(await resolve_work_location(work_locations, employee_id), Resolved):
        return LeaveValidationError(
            code=LeaveErrorCode.NO_WORK_LOCATION,
            message="Employee work location is not set. Please update employee details.",
        )

    policy_service = get_leave_policy_service()
    policy = await policy_service.get_policy(policy_id) if policy_id > 0 else None
    if policy is None:
        return LeaveValidationError(code=LeaveErrorCode.INVALID_POLICY, message="Invalid leave policy")

    leave_days = await calculate_leave_days_with_holidays(scopes, work_locations, employee_id, start, end, policy)
    if leave_days <= 0:
        return LeaveValidationError(
            code=LeaveErrorCode.NO_WORKING_DAYS,
            message="No working days found in the selected date range (all days are holidays or weekends)",
        )

    balance = await policy_service.get_balance(employee_id, policy_id)
    available = balance.available if balance is not None else 0
    if leave_days > available:
        return LeaveValidationError(
            code=LeaveErrorCode.INSUFFICIENT_BALANCE,
            message=(
                f"Insufficient leave balance. Requested: {leave_days} days, "
                f"Available: {_format_days(available)} days"
            ),
            requested=leave_days,
            available=available,
        )

    return LeaveValidationOk(working_days=leave_days)


async def validate_leave_request_with_holidays(
    scopes: HolidayScopeStore,
    work_locations: WorkLocationStore,
    payload: ValidateLeaveRequest,
) -> LeaveValidationResult:
    """Validate a submitted leave request payload."""
    return await validate_leave_request(
        scopes,
        work_locations,
        payload.employee_id,
        payload.start_date,
        payload.end_date,
        payload.policy_id,
    )


@runtime_checkable
class LeaveDurationProvider(Protocol):
    """Capability the leave-request workflow calls to size a request."""

    async def duration(
        self,
        employee_id: int,
        start: date | None,
        end: date | None,
        policy_id: int | None = None,
        *,
        fallback: int = 0,
    ) -> int:
        """Duration in days; ``fallback`` is returned when the dates are incomplete."""
        ...


class HolidayAwareLeaveDuration:
    """Sizes leave requests in working days, skipping location-applicable holidays."""

    def __init__(self, scopes: HolidayScopeStore, work_locations: WorkLocationStore) -> None:
        self._scopes = scopes
        self._work_locations = work_locations

    async def duration(
        self,
        employee_id: int,
        start: date | None,
        end: date | None,
        policy_id: int | None = None,
        *,
        fallback: int = 0,
    ) -> int:
        if start is None or end is None:
            return fallback

        policy = None
        if policy_id is not None:
            policy = await get_leave_policy_service().get_policy(policy_id)

        return await calculate_leave_days_with_holidays(
            self._scopes, self._work_locations, employee_id, start, end, policy
        )
