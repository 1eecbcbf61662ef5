# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from holiday_scope.api.deps import AuthDep, LeaveDurationDep, ScopeStoreDep, WorkLocationStoreDep
from holiday_scope.schemas.leave import (
    LeaveDurationRequest,
    LeaveDurationResponse,
    LeaveValidationError,
    LeaveValidationOk,
    ValidateLeaveRequest,
)
from holiday_scope.services.leave import validate_leave_request_with_holidays

leave_router = APIRouter(
    prefix="/leave",
    tags=["leave"],
)


@leave_router.post("/duration", response_model=LeaveDurationResponse)
async def leave_duration(
    payload: LeaveDurationRequest,
    provider: LeaveDurationDep,
    auth: AuthDep,
) -> LeaveDurationResponse:
    """Working days a leave request would consume."""
    days = await provider.duration(payload.employee_id, payload.start_date, payload.end_date, payload.policy_id)
    return LeaveDurationResponse(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        working_days=days,
    )


@leave_router.post("/validate", response_model=LeaveValidationOk | LeaveValidationError)
async def validate_leave(
    payload: ValidateLeaveRequest,
    scopes: ScopeStoreDep,
    work_locations: WorkLocationStoreDep,
    auth: AuthDep,
) -> LeaveValidationOk | LeaveValidationError:
    """Validate a leave request; failures come back as ``ok: false`` results."""
    return await validate_leave_request_with_holidays(scopes, work_locations, payload)
