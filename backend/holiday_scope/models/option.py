from __future__ import annotations

from sqlmodel import Field

from holiday_scope.models.base import UpdatedAtMixin


class AppOption(UpdatedAtMixin, table=True):
    """Persisted name/value flag, used to gate one-time migrations."""

    __tablename__ = "app_option"

    name: str = Field(primary_key=True, max_length=191)
    value: str = Field(max_length=255)
