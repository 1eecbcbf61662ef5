from fastapi import APIRouter

from holiday_scope.api.admin import admin_router
from holiday_scope.api.employees import employees_router
from holiday_scope.api.holidays import countries_router, holidays_router
from holiday_scope.api.leave import leave_router

api_router = APIRouter()
api_router.include_router(holidays_router)
api_router.include_router(countries_router)
api_router.include_router(employees_router)
api_router.include_router(leave_router)
api_router.include_router(admin_router)
