# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
registrar engine. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.enrollment.max_semester)
    8
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PASSWORD = "registrar_password"


class DatabaseSettings(BaseSettings):
    """Database configuration for the academic records store.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        url_override: Full connection URL, used verbatim when set.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "registrar"
    password: SecretStr = SecretStr(DEFAULT_DB_PASSWORD)
    host: str = "localhost"
    port: int = 5432
    database: str = "registrar"
    url_override: str | None = Field(
        default=None,
        validation_alias="DB_URL",
    )
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class EnrollmentSettings(BaseSettings):
    """Enrollment lifecycle configuration.

    Attributes:
        max_semester: Final semester a student can be promoted to.
        reset_credit_hours_on_promotion: Whether semester promotion
            resets the reserved credit-hour balance to zero.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENROLLMENT_",
        extra="ignore",
    )

    max_semester: int = Field(default=8, gt=0)
    reset_credit_hours_on_promotion: bool = True


class GradingSettings(BaseSettings):
    """Grade scoring configuration.

    Attributes:
        cgpa_decimal_places: Rounding applied to the cumulative GPA.
        default_component_max: Maximum used for an assignment or quiz
            entry whose own maximum is missing or zero.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRADING_",
        extra="ignore",
    )

    cgpa_decimal_places: int = Field(default=2, ge=0)
    default_component_max: float = Field(default=100.0, gt=0)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        enrollment: Enrollment lifecycle settings.
        grading: Grade scoring settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    enrollment: EnrollmentSettings = Field(default_factory=EnrollmentSettings)
    grading: GradingSettings = Field(default_factory=GradingSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if (
                self.database.url_override is None
                and self.database.password.get_secret_value() == DEFAULT_DB_PASSWORD
            ):
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DB_PASSWORD or DB_URL environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
