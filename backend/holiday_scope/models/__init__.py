from sqlmodel import SQLModel

from holiday_scope.models.base import IntIdBase, TimestampMixin, UpdatedAtMixin
from holiday_scope.models.employee import EmployeeWorkLocation
from holiday_scope.models.enums import Applicability, LeaveErrorCode, Weekday
from holiday_scope.models.holiday import Holiday, HolidayCompany, HolidayLocation
from holiday_scope.models.option import AppOption

__all__ = [
    "AppOption",
    "Applicability",
    "EmployeeWorkLocation",
    "Holiday",
    "HolidayCompany",
    "HolidayLocation",
    "IntIdBase",
    "LeaveErrorCode",
    "SQLModel",
    "TimestampMixin",
    "UpdatedAtMixin",
    "Weekday",
]
