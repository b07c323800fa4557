"""
Application configuration management with environment variables.

This module provides centralized configuration management using Pydantic
BaseSettings for type-safe environment variable handling with validation
and default values.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    SALESFLOW_ prefix (e.g., SALESFLOW_DATABASE_URL, SALESFLOW_SECRET_KEY).
    """

    model_config = SettingsConfigDict(
        env_prefix="SALESFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="Store database URL, in-memory SQLite unless overridden",
    )

    # Security Configuration
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Secret key for JWT token signing",
        min_length=32,
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    jwt_access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        description="JWT access token expiration time in minutes",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application logging level",
    )

    # Environment Configuration
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )

    # API Configuration
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version 1 route prefix",
    )

    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # Application Configuration
    app_name: str = Field(
        default="SalesFlow API",
        description="Application name",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Application version",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    seed_demo_data: bool = Field(
        default=True,
        description="Seed demo users, customers, products and vehicles on startup",
    )

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """
        Validate secret key requirements.

        Raises:
            ValueError: If the default secret key is used in production
        """
        if self.environment == "production" and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError(
                "Default secret key cannot be used in production environment. "
                "Set SALESFLOW_SECRET_KEY environment variable."
            )
        return self

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        Raises:
            ValueError: If database URL is neither SQLite nor PostgreSQL
        """
        if not v.startswith(("sqlite", "postgresql")):
            raise ValueError(
                "Database URL must start with 'sqlite' or 'postgresql'"
            )
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v) -> list[str]:
        """Parse CORS origins from a comma separated string or a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_in_memory(self) -> bool:
        """Check if the store lives only in process memory."""
        return self.database_url.startswith("sqlite") and (
            ":memory:" in self.database_url or self.database_url.rstrip("/") in (
                "sqlite:",
                "sqlite+pysqlite:",
            )
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
