#!/usr/bin/env python3
"""
Pytest tests for Settings
Covers defaults, environment overrides and the production guard
"""

import pytest
from pydantic import ValidationError

from topbanana.core.config import Settings

ENV_NAMES = [
    "ENVIRONMENT",
    "DATABASE_URL",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
    "DB_POOL_RECYCLE",
    "LOG_LEVEL",
    "PORT",
]


class TestSettings:
    """Test configuration parsing"""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ENV_NAMES:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        """Test the values used when nothing is configured"""
        settings = Settings(_env_file=None)

        assert settings.ENVIRONMENT == "development"
        assert settings.DATABASE_URL == "sqlite:///./topbanana.sqlite"
        assert settings.DB_POOL_SIZE == 10
        assert settings.DB_MAX_OVERFLOW == 0
        assert settings.DB_POOL_RECYCLE == 300
        assert settings.PORT == 8080
        assert settings.MIGRATIONS_PATH == "alembic"

    def test_environment_overrides(self, monkeypatch):
        """Test that environment variables replace defaults"""
        monkeypatch.setenv("DATABASE_URL", "sqlite:////tmp/other.sqlite")
        monkeypatch.setenv("DB_POOL_SIZE", "4")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL == "sqlite:////tmp/other.sqlite"
        assert settings.DB_POOL_SIZE == 4
        assert settings.LOG_LEVEL == "DEBUG"

    def test_invalid_integer(self, monkeypatch):
        """Test that a malformed number is rejected"""
        monkeypatch.setenv("DB_POOL_SIZE", "ten")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_production_requires_database_url(self, monkeypatch):
        """Test that production refuses the implicit local database"""
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(ValidationError, match="DATABASE_URL must be set in production"):
            Settings(_env_file=None)

    def test_production_with_database_url(self, monkeypatch):
        """Test that production starts once the URL is given"""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DATABASE_URL", "sqlite:////var/lib/topbanana/db.sqlite")

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL == "sqlite:////var/lib/topbanana/db.sqlite"
