# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from holiday_scope.models.enums import LeaveErrorCode


class LeaveDurationRequest(BaseModel):
    """Request body for computing a leave request's duration."""

    employee_id: int = Field(gt=0)
    start_date: date
    end_date: date
    policy_id: int | None = None


class LeaveDurationResponse(BaseModel):
    """Working days a leave request covers after weekends and holidays."""

    employee_id: int
    start_date: date
    end_date: date
    working_days: int


class ValidateLeaveRequest(BaseModel):
    """Request body for validating a leave request.

    Fields are deliberately loose: bad values are reported as validation
    results rather than rejected by the schema.
    """

    employee_id: int = 0
    start_date: date | None = None
    end_date: date | None = None
    policy_id: int = 0


class LeaveValidationOk(BaseModel):
    """Successful validation; ``working_days`` is the duration to record."""

    ok: Literal[True] = True
    working_days: int


class LeaveValidationError(BaseModel):
    """Failed validation, displayable to the requester."""

    ok: Literal[False] = False
    code: LeaveErrorCode
    message: str
    requested: int | None = None
    available: float | None = None


LeaveValidationResult = LeaveValidationOk | LeaveValidationError
