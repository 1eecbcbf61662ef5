from __future__ import annotations

import enum


class Applicability(enum.StrEnum):
    """Which employees a holiday applies to."""

    GLOBAL = "global"
    LOCATION = "location"
    COMPANY = "company"


class Weekday(enum.StrEnum):
    """Three-letter weekday names, in ``date.weekday()`` order."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"


class LeaveErrorCode(enum.StrEnum):
    """Reason a leave request failed validation."""

    INVALID_EMPLOYEE = "invalid_employee"
    INVALID_DATES = "invalid_dates"
    INVALID_DATE_RANGE = "invalid_date_range"
    NO_WORK_LOCATION = "no_work_location"
    INVALID_POLICY = "invalid_policy"
    NO_WORKING_DAYS = "no_working_days"
    INSUFFICIENT_BALANCE = "insufficient_balance"
