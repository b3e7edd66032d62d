"""Unit tests for configuration, tracing and error types."""

from fastapi import FastAPI

from locallibrary.core.config import Settings, get_settings
from locallibrary.core.errors import NotFoundError
from locallibrary.core.tracing import get_tracer, setup_tracing, shutdown_tracing


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.is_development
        assert settings.otel_enabled is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://library@db/library")
        settings = Settings(_env_file=None)
        assert not settings.is_development
        assert settings.database_url == "postgresql+asyncpg://library@db/library"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestTracing:
    """Tests for the tracing setup."""

    def test_disabled_by_default(self):
        assert setup_tracing(FastAPI()) is False
        shutdown_tracing()

    def test_get_tracer(self):
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("test-span") as span:
            assert span is not None


class TestNotFoundError:
    """Tests for the not-found condition."""

    def test_carries_status(self):
        error = NotFoundError("Genre not found")
        assert error.status_code == 404
        assert error.detail == "Genre not found"
        assert str(error) == "Genre not found"
