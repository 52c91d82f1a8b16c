"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for local development.

All settings can be overridden via environment variables or a `.env`
file in the working directory.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        APP_NAME: Application name.
        APP_VERSION: Application version.
        ENVIRONMENT: Deployment environment (development, testing, production).
        DEBUG: Debug mode flag. Enables SQL echo and the OpenAPI docs.
        API_PREFIX: Path prefix for all API routes.
        DATABASE_URL: SQLAlchemy database URL.
        LOG_LEVEL: Logging level.
        LOG_FORMAT: "json" for machine-readable logs, "console" for humans.
    """

    # Application metadata
    APP_NAME: str = Field(default="Incident Tracker API")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    API_PREFIX: str = Field(default="/api")

    # Database configuration
    DATABASE_URL: str = Field(default="sqlite:///./incidents.db")
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_POOL_TIMEOUT: int = Field(default=30, ge=1)
    DB_POOL_RECYCLE: int = Field(default=1800)

    # CORS configuration
    CORS_ORIGINS: str = Field(default="http://localhost:5173,http://localhost:3000")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = Field(default=20, ge=1)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "testing", "production"}
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of {sorted(allowed)}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(allowed)}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"json", "console"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Cached settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings, loading them on first use.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(
            "Settings loaded: app_name=%s, environment=%s",
            _settings.APP_NAME,
            _settings.ENVIRONMENT,
        )
    return _settings
