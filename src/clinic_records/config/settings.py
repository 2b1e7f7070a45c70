"""
Configuration management for clinic-records.

Settings are read from the environment (and an optional .env file) through
pydantic-settings. Field names map to upper-case environment variables,
e.g. ``database_url`` is read from ``DATABASE_URL``.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClinicSettings(BaseSettings):
    """Application settings for the clinic data-access layer."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Core Application Settings
    app_name: str = Field(default="clinic-records")
    environment: str = Field(default="development")

    # Database Configuration
    database_url: str = Field(default="postgresql://postgres@localhost:5432/clinic")
    db_pool_min_size: int = Field(default=2, ge=0)
    db_pool_max_size: int = Field(default=10, gt=0)
    db_command_timeout: float = Field(default=60.0, gt=0)

    # Pagination Configuration
    default_page_size: int = Field(default=10, gt=0)
    max_page_size: int = Field(default=1000, gt=0)

    # Logging Configuration
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")
    enable_sql_logging: bool = Field(default=False)

    @field_validator("database_url")
    @classmethod
    def strip_driver_suffix(cls, value: str) -> str:
        """asyncpg expects a plain postgresql:// DSN."""
        return value.replace("+asyncpg", "")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("simple", "detailed", "json"):
            raise ValueError(f"Unsupported log format: {value}")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def clamp_page_size(self, page_size: Optional[int]) -> int:
        """Return a usable page size: the default for 0/None, capped at max_page_size."""
        if not page_size:
            return self.default_page_size
        return min(page_size, self.max_page_size)

    def pool_config(self) -> dict:
        """Keyword arguments for asyncpg.create_pool."""
        return {
            "min_size": self.db_pool_min_size,
            "max_size": self.db_pool_max_size,
            "command_timeout": self.db_command_timeout,
        }


@lru_cache()
def get_settings() -> ClinicSettings:
    """Get cached settings instance."""
    return ClinicSettings()
