from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import pycountry
from sqlalchemy import extract, func, select
from sqlmodel import col

from holiday_scope.exceptions import AppError
from holiday_scope.models.enums import Applicability
from holiday_scope.models.holiday import Holiday
from holiday_scope.schemas.holiday import (
    ApplicabilityResponse,
    CompanyApplicability,
    HolidayListResponse,
    HolidayResponse,
    LocationApplicability,
    StateListResponse,
    StateResponse,
)
from holiday_scope.services.company import get_company_location_service

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from holiday_scope.schemas.holiday import CreateHolidayRequest, HolidayApplicability
    from holiday_scope.services.scope_store import HolidayScopeStore

logger = logging.getLogger(__name__)

ALL_LOCATIONS_LABEL = "All Locations"


def country_name(code: str) -> str:
    """English name of an ISO 3166-1 alpha-2 country, or the code itself."""
    country = pycountry.countries.get(alpha_2=code)
    return country.name if country is not None else code


def list_states(country: str) -> StateListResponse:
    """States/provinces of a country, sorted by name."""
    code = country.strip().upper()
    if not code or pycountry.countries.get(alpha_2=code) is None:
        raise AppError("Invalid country", status_code=404, code="invalid_country")

    subdivisions = pycountry.subdivisions.get(country_code=code) or []
    states = [
        StateResponse(code=subdivision.code.split("-", 1)[-1], name=subdivision.name)
        for subdivision in subdivisions
    ]
    states.sort(key=lambda s: s.name)
    return StateListResponse(country=code, states=states)


# ---------------------------------------------------------------------------
# Applicability editing
# ---------------------------------------------------------------------------


@runtime_checkable
class HolidayScopeEditor(Protocol):
    """Capability the holiday admin screens call to edit and display applicability."""

    async def save_applicability(self, holiday_id: int, payload: HolidayApplicability) -> None:
        """Replace a holiday's scopes with ``payload``."""
        ...

    async def get_applicability(self, holiday_id: int) -> ApplicabilityResponse:
        """Current applicability of a holiday."""
        ...

    async def describe_scope(self, holiday_id: int) -> str:
        """Short "Applies To" label for list views."""
        ...


class HolidayScopeService:
    """Edits and describes holiday scopes through a :class:`HolidayScopeStore`."""

    def __init__(self, store: HolidayScopeStore) -> None:
        self._store = store

    async def save_applicability(self, holiday_id: int, payload: HolidayApplicability) -> None:
        """Replace every scope of the holiday with the submitted applicability.

        Existing location and company scopes are removed first; global
        inserts nothing, location inserts at most one row and company one
        row per selected office.
        """
        await self._store.remove_all_locations(holiday_id)
        await self._store.remove_all_companies(holiday_id)

        if isinstance(payload, LocationApplicability):
            if payload.country:
                await self._store.add_location(holiday_id, payload.country, payload.state)
        elif isinstance(payload, CompanyApplicability):
            for company_id in dict.fromkeys(payload.company_ids):
                if company_id > 0:
                    await self._store.add_company(holiday_id, company_id)

    async def get_applicability(self, holiday_id: int) -> ApplicabilityResponse:
        locations = await self._store.list_locations(holiday_id)
        company_ids = await self._store.list_companies(holiday_id)

        applicability = Applicability.GLOBAL
        country = state = None
        if locations:
            applicability = Applicability.LOCATION
            country, state = locations[0].country, locations[0].state
        elif company_ids:
            applicability = Applicability.COMPANY

        return ApplicabilityResponse(
            holiday_id=holiday_id,
            applicability=applicability,
            country=country,
            state=state,
            company_ids=company_ids,
            applies_to=await self.describe_scope(holiday_id),
        )

    async def describe_scope(self, holiday_id: int) -> str:
        locations = await self._store.list_locations(holiday_id)
        if locations:
            location = locations[0]
            name = country_name(location.country) if location.country else ""
            if location.state:
                return f"{name} - {location.state}"
            return name

        company_ids = await self._store.list_companies(holiday_id)
        if company_ids:
            offices = await get_company_location_service().list_locations()
            names = [office.name for office in offices if office.id in company_ids]
            if len(names) > 2:
                return f"{names[0]} +{len(names) - 1} more"
            return ", ".join(names)

        return ALL_LOCATIONS_LABEL


# ---------------------------------------------------------------------------
# Holiday records
# ---------------------------------------------------------------------------


async def _build_holiday_response(holiday: Holiday, editor: HolidayScopeEditor) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,  # ty: ignore[invalid-argument-type]
        title=holiday.title,
        start=holiday.start,
        end=holiday.end,
        description=holiday.description,
        applies_to=await editor.describe_scope(holiday.id),  # ty: ignore[invalid-argument-type]
    )


async def create_holiday(
    session: AsyncSession,
    editor: HolidayScopeEditor,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Create a holiday and attach its applicability."""
    holiday = Holiday(
        title=payload.title,
        start=payload.start,
        end=payload.end,
        description=payload.description,
    )
    session.add(holiday)
    await session.commit()
    await session.refresh(holiday)

    await editor.save_applicability(holiday.id, payload.scope)  # ty: ignore[invalid-argument-type]
    # A rejected scope insert rolls the session back and expires the holiday.
    await session.refresh(holiday)
    logger.info("Created holiday %s (%s) applying to %s", holiday.id, holiday.title, payload.scope.applicability)
    return await _build_holiday_response(holiday, editor)


async def list_holidays(
    session: AsyncSession,
    editor: HolidayScopeEditor,
    start: date | None = None,
    end: date | None = None,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List holidays, optionally restricted to those touching a window or a year."""
    base_filter = []
    if start is not None:
        base_filter.append(col(Holiday.end) >= start)
    if end is not None:
        base_filter.append(col(Holiday.start) <= end)
    if year is not None:
        base_filter.append(extract("year", col(Holiday.start)) == year)

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Holiday)
        .where(*base_filter)
        .order_by(col(Holiday.start), col(Holiday.id))
        .offset(offset)
        .limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(
        items=[await _build_holiday_response(h, editor) for h in holidays],
        total=total,
    )


async def get_holiday(session: AsyncSession, holiday_id: int) -> Holiday:
    """Get a single holiday or raise 404."""
    result = await session.execute(select(Holiday).where(col(Holiday.id) == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise AppError("Holiday not found", status_code=404)
    return holiday


async def get_holiday_response(
    session: AsyncSession,
    editor: HolidayScopeEditor,
    holiday_id: int,
) -> HolidayResponse:
    """Get a single holiday with its scope label."""
    return await _build_holiday_response(await get_holiday(session, holiday_id), editor)
