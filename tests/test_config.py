"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from salesflow.core.config import DEFAULT_SECRET_KEY, Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("SALESFLOW_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+pysqlite:///:memory:"
        assert settings.is_in_memory
        assert settings.api_v1_prefix == "/api/v1"
        assert settings.jwt_algorithm == "HS256"

    def test_environment_variables(self, monkeypatch) -> None:
        monkeypatch.setenv("SALESFLOW_ENVIRONMENT", "staging")
        monkeypatch.setenv("SALESFLOW_JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "15")
        monkeypatch.setenv("SALESFLOW_CORS_ORIGINS", "https://a.example.com, https://b.example.com")

        settings = Settings(_env_file=None)

        assert settings.environment == "staging"
        assert settings.jwt_access_token_expire_minutes == 15
        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_default_secret_rejected_in_production(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production", secret_key=DEFAULT_SECRET_KEY)

    def test_production_with_own_secret(self) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            secret_key="a-production-secret-that-is-long-enough",
        )
        assert settings.is_production

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key="short")

    def test_unsupported_database_url(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="mysql://localhost/sales")
