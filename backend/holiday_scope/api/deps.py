# ruff: noqa: B008, TC001
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, status

from holiday_scope.db import SessionDep
from holiday_scope.exceptions import AppError
from holiday_scope.schemas.auth import AuthContext
from holiday_scope.services.holiday import HolidayScopeService
from holiday_scope.services.leave import HolidayAwareLeaveDuration
from holiday_scope.services.scope_store import SqlHolidayScopeStore
from holiday_scope.services.work_location import SqlWorkLocationStore


async def get_auth_context(
    x_user_id: int = Header(),
    x_role: str = Header(default="employee"),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if auth.role != "admin":
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]


def get_scope_store(session: SessionDep) -> SqlHolidayScopeStore:
    """Scope store bound to the request session."""
    return SqlHolidayScopeStore(session)


ScopeStoreDep = Annotated[SqlHolidayScopeStore, Depends(get_scope_store)]


def get_work_location_store(session: SessionDep) -> SqlWorkLocationStore:
    """Work-location store bound to the request session."""
    return SqlWorkLocationStore(session)


WorkLocationStoreDep = Annotated[SqlWorkLocationStore, Depends(get_work_location_store)]


def get_scope_editor(store: ScopeStoreDep) -> HolidayScopeService:
    """Holiday scope editor over the request's scope store."""
    return HolidayScopeService(store)


ScopeEditorDep = Annotated[HolidayScopeService, Depends(get_scope_editor)]


def get_leave_duration(scopes: ScopeStoreDep, work_locations: WorkLocationStoreDep) -> HolidayAwareLeaveDuration:
    """Holiday-aware leave duration provider for the request."""
    return HolidayAwareLeaveDuration(scopes, work_locations)


LeaveDurationDep = Annotated[HolidayAwareLeaveDuration, Depends(get_leave_duration)]
