from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class CompanyLocation(BaseModel):
    """A company office, as configured in the host system."""

    id: int
    name: str
    country: str | None = None  # ISO 3166-1 alpha-2
    state: str | None = None


@runtime_checkable
class CompanyLocationService(Protocol):
    """Interface for the host's company locations."""

    async def get_location(self, location_id: int) -> CompanyLocation | None:
        """Fetch a company location. Returns None if not found."""
        ...

    async def list_locations(self) -> list[CompanyLocation]:
        """List company locations in creation order."""
        ...


class InMemoryCompanyLocationService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._locations: dict[int, CompanyLocation] = {}

    def seed(self, location: CompanyLocation) -> None:
        """Seed a location for testing. Seeding order is listing order."""
        self._locations[location.id] = location

    async def get_location(self, location_id: int) -> CompanyLocation | None:
        """Fetch a company location. Returns None if not found."""
        return self._locations.get(location_id)

    async def list_locations(self) -> list[CompanyLocation]:
        """List company locations in creation order."""
        return list(self._locations.values())


_company_location_service: CompanyLocationService = InMemoryCompanyLocationService()


def get_company_location_service() -> CompanyLocationService:
    """FastAPI dependency for the Company Location Service."""
    return _company_location_service


def set_company_location_service(service: CompanyLocationService) -> None:
    """Override the service (for testing or production wiring)."""
    global _company_location_service
    _company_location_service = service


async def first_company_location_id() -> int | None:
    """Return the id of the first company location, or None when none exist."""
    locations = await get_company_location_service().list_locations()
    if not locations:
        return None
    return locations[0].id
