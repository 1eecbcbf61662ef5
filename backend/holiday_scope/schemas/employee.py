# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class WorkLocationResponse(BaseModel):
    """Resolved work location of an employee."""

    employee_id: int
    resolved: bool
    location_id: int | None = None


class MissingWorkLocationResponse(BaseModel):
    """Number of active employees without a stored work location."""

    count: int


class EmployeeHolidaysResponse(BaseModel):
    """Holiday dates that apply to an employee within a window."""

    employee_id: int
    start: date
    end: date
    dates: list[date]
    count: int
