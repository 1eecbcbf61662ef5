from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from holiday_scope.models.enums import Weekday


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    ``DEFAULT_WEEKEND_DAYS`` is a JSON list of three-letter day names and
    applies to leave policies that do not configure their own weekend.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Holiday Scope"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://holiday_scope:holiday_scope@db:5432/holiday_scope"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    default_weekend_days: list[Weekday] = [Weekday.SAT, Weekday.SUN]
    # Stored in the option flags once the one-time updates have run.
    holiday_locations_version: str = "1.0.0"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
