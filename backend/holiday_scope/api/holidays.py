# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from holiday_scope.api.deps import AdminDep, AuthDep, ScopeEditorDep
from holiday_scope.db import SessionDep
from holiday_scope.schemas.holiday import (
    ApplicabilityResponse,
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    StateListResponse,
    UpdateApplicabilityRequest,
)
from holiday_scope.services import holiday as holiday_service

holidays_router = APIRouter(
    prefix="/holidays",
    tags=["holidays"],
)


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    editor: ScopeEditorDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a holiday with its applicability (admin only)."""
    return await holiday_service.create_holiday(session, editor, payload)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    editor: ScopeEditorDep,
    auth: AuthDep,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    """List holidays with an optional window or year filter."""
    return await holiday_service.list_holidays(session, editor, start, end, year, offset, limit)


@holidays_router.get(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def get_holiday(
    holiday_id: int,
    session: SessionDep,
    editor: ScopeEditorDep,
    auth: AuthDep,
) -> HolidayResponse:
    """Get a single holiday."""
    return await holiday_service.get_holiday_response(session, editor, holiday_id)


@holidays_router.get(
    "/{holiday_id}/scope",
    response_model=ApplicabilityResponse,
)
async def get_holiday_scope(
    holiday_id: int,
    session: SessionDep,
    editor: ScopeEditorDep,
    auth: AuthDep,
) -> ApplicabilityResponse:
    """Get the applicability of a holiday."""
    await holiday_service.get_holiday(session, holiday_id)
    return await editor.get_applicability(holiday_id)


@holidays_router.put(
    "/{holiday_id}/scope",
    response_model=ApplicabilityResponse,
)
async def update_holiday_scope(
    holiday_id: int,
    payload: UpdateApplicabilityRequest,
    session: SessionDep,
    editor: ScopeEditorDep,
    auth: AdminDep,
) -> ApplicabilityResponse:
    """Replace the applicability of a holiday (admin only)."""
    await holiday_service.get_holiday(session, holiday_id)
    await editor.save_applicability(holiday_id, payload.scope)
    return await editor.get_applicability(holiday_id)


countries_router = APIRouter(
    prefix="/countries",
    tags=["holidays"],
)


@countries_router.get(
    "/{country}/states",
    response_model=StateListResponse,
)
async def list_states(
    country: str,
    auth: AuthDep,
) -> StateListResponse:
    """List the states of a country, for the location picker."""
    return holiday_service.list_states(country)
