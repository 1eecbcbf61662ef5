from __future__ import annotations

from pydantic import BaseModel


class MigrationResponse(BaseModel):
    """Outcome of running the holiday-location updates."""

    tables_created: bool
    work_locations_fixed: bool
    employees_updated: int
