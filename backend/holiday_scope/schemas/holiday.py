# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator, model_validator

from holiday_scope.models.enums import Applicability

# ---------------------------------------------------------------------------
# Applicability payloads (discriminated union)
# ---------------------------------------------------------------------------


class GlobalApplicability(BaseModel):
    """The holiday applies to every employee."""

    applicability: Literal["global"] = "global"


class LocationApplicability(BaseModel):
    """The holiday applies to one country, or to one state of that country.

    A blank country stores nothing, which leaves the holiday global.
    """

    applicability: Literal["location"] = "location"
    country: str | None = Field(default=None, max_length=2)
    state: str | None = Field(default=None, max_length=100)

    @field_validator("country", "state", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("country")
    @classmethod
    def _upper_country(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None


class CompanyApplicability(BaseModel):
    """The holiday applies to employees of the selected company locations."""

    applicability: Literal["company"] = "company"
    company_ids: list[int] = Field(default_factory=list)


def _applicability_discriminator(v: Any) -> str:
    """Missing applicability means global."""
    if isinstance(v, dict):
        return str(v.get("applicability") or Applicability.GLOBAL.value)
    return str(getattr(v, "applicability", Applicability.GLOBAL.value))


HolidayApplicability = Annotated[
    Annotated[GlobalApplicability, Tag("global")]
    | Annotated[LocationApplicability, Tag("location")]
    | Annotated[CompanyApplicability, Tag("company")],
    Discriminator(_applicability_discriminator),
]

# ---------------------------------------------------------------------------
# API request / response schemas
# ---------------------------------------------------------------------------


class CreateHolidayRequest(BaseModel):
    """Request body for creating a holiday together with its applicability."""

    title: str = Field(min_length=1, max_length=200)
    start: date
    end: date
    description: str | None = None
    scope: HolidayApplicability = Field(default_factory=GlobalApplicability)

    @model_validator(mode="after")
    def _validate_range(self) -> Self:
        if self.end < self.start:
            msg = "end must be on or after start"
            raise ValueError(msg)
        return self


class HolidayResponse(BaseModel):
    """Response schema for a holiday."""

    id: int
    title: str
    start: date
    end: date
    description: str | None = None
    applies_to: str


class HolidayListResponse(BaseModel):
    """Paginated list of holidays."""

    items: list[HolidayResponse]
    total: int


class ApplicabilityResponse(BaseModel):
    """Current applicability of a holiday, as shown in the edit form."""

    holiday_id: int
    applicability: Applicability
    country: str | None = None
    state: str | None = None
    company_ids: list[int] = Field(default_factory=list)
    applies_to: str


class StateResponse(BaseModel):
    """A state or province of a country."""

    code: str
    name: str


class StateListResponse(BaseModel):
    """States available for a country."""

    country: str
    states: list[StateResponse]


class UpdateApplicabilityRequest(BaseModel):
    """Request body for replacing a holiday's applicability."""

    scope: HolidayApplicability = Field(default_factory=GlobalApplicability)
