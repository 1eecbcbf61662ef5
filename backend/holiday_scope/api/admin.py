# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from holiday_scope.api.deps import AdminDep
from holiday_scope.db import SessionDep
from holiday_scope.schemas.migration import MigrationResponse
from holiday_scope.services.migration import run_holiday_location_updates

admin_router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@admin_router.post("/migrations/holiday-locations", response_model=MigrationResponse)
async def run_migrations(
    session: SessionDep,
    auth: AdminDep,
) -> MigrationResponse:
    """Run pending holiday-location updates (admin only)."""
    result = await run_holiday_location_updates(session)
    return MigrationResponse(
        tables_created=result.tables_created,
        work_locations_fixed=result.work_locations_fixed,
        employees_updated=result.employees_updated,
    )
