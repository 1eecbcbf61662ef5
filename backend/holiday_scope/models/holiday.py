# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from holiday_scope.models.base import IntIdBase, TimestampMixin

HOLIDAY_DATE_RANGE_INDEX = "ix_holiday_date_range"


class Holiday(IntIdBase, TimestampMixin, table=True):
    """A named, inclusive date range during which employees are excused from work."""

    __tablename__ = "hr_holiday"
    __table_args__ = (sa.Index(HOLIDAY_DATE_RANGE_INDEX, "start", "end"),)

    title: str = Field(max_length=200)
    start: date
    end: date
    description: str | None = None


class HolidayLocation(IntIdBase, TimestampMixin, table=True):
    """Restricts a holiday to a country, or to one state of that country."""

    __tablename__ = "hr_holiday_locations"
    __table_args__ = (sa.Index("ix_holiday_locations_country_state", "country", "state"),)

    holiday_id: int = Field(
        sa_column=sa.Column(
            sa.Integer, sa.ForeignKey("hr_holiday.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    country: str | None = Field(default=None, max_length=2)
    state: str | None = Field(default=None, max_length=100)


class HolidayCompany(IntIdBase, TimestampMixin, table=True):
    """Restricts a holiday to employees of one company location."""

    __tablename__ = "hr_holiday_companies"
    __table_args__ = (sa.UniqueConstraint("holiday_id", "company_id", name="uq_holiday_company"),)

    holiday_id: int = Field(
        sa_column=sa.Column(
            sa.Integer, sa.ForeignKey("hr_holiday.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    company_id: int = Field(index=True)
