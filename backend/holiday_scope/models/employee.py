from __future__ import annotations

from sqlmodel import Field

from holiday_scope.models.base import UpdatedAtMixin


class EmployeeWorkLocation(UpdatedAtMixin, table=True):
    """Stored work-location attribute of an employee.

    ``value`` is kept as raw text: rows written by older releases may hold
    ``"0"`` or ``""`` instead of NULL, and readers must treat those as unset.
    """

    __tablename__ = "hr_employee_work_location"

    employee_id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    value: str | None = Field(default=None, max_length=32)
