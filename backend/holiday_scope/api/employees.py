# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, status

from holiday_scope.api.deps import AuthDep, ScopeStoreDep, WorkLocationStoreDep
from holiday_scope.exceptions import AppError
from holiday_scope.schemas.employee import (
    EmployeeHolidaysResponse,
    MissingWorkLocationResponse,
    WorkLocationResponse,
)
from holiday_scope.services.applicability import get_employee_holiday_dates
from holiday_scope.services.work_location import (
    Resolved,
    WorkLocation,
    count_missing_work_locations,
    ensure_work_location,
    resolve_work_location,
)

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


def _work_location_response(employee_id: int, work_location: WorkLocation) -> WorkLocationResponse:
    if isinstance(work_location, Resolved):
        return WorkLocationResponse(employee_id=employee_id, resolved=True, location_id=work_location.location_id)
    return WorkLocationResponse(employee_id=employee_id, resolved=False)


@employees_router.get("/work-location/missing", response_model=MissingWorkLocationResponse)
async def missing_work_locations(
    work_locations: WorkLocationStoreDep,
    auth: AuthDep,
) -> MissingWorkLocationResponse:
    """Count active employees that have no work location assigned."""
    return MissingWorkLocationResponse(count=await count_missing_work_locations(work_locations))


@employees_router.get("/{employee_id}/work-location", response_model=WorkLocationResponse)
async def get_work_location(
    employee_id: int,
    work_locations: WorkLocationStoreDep,
    auth: AuthDep,
) -> WorkLocationResponse:
    """Resolve an employee's work location, filling in a default when missing."""
    return _work_location_response(employee_id, await resolve_work_location(work_locations, employee_id))


@employees_router.post("/{employee_id}/work-location/ensure", response_model=WorkLocationResponse)
async def ensure_employee_work_location(
    employee_id: int,
    work_locations: WorkLocationStoreDep,
    auth: AuthDep,
) -> WorkLocationResponse:
    """Called after an employee is created or updated."""
    return _work_location_response(employee_id, await ensure_work_location(work_locations, employee_id))


@employees_router.get("/{employee_id}/holidays", response_model=EmployeeHolidaysResponse)
async def get_employee_holidays(
    employee_id: int,
    scopes: ScopeStoreDep,
    work_locations: WorkLocationStoreDep,
    auth: AuthDep,
    start: date = Query(),
    end: date = Query(),
) -> EmployeeHolidaysResponse:
    """Holiday dates applicable to an employee within a window."""
    if end < start:
        raise AppError("end must be on or after start", status_code=status.HTTP_400_BAD_REQUEST)

    dates = await get_employee_holiday_dates(scopes, work_locations, employee_id, start, end)
    return EmployeeHolidaysResponse(employee_id=employee_id, start=start, end=end, dates=dates, count=len(dates))
