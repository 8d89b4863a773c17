"""Tests for backend.settings.Settings defaults and validation."""

import pytest
from pydantic import ValidationError

from backend.settings import DEFAULT_ALLOWED_ORIGINS, Settings


pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDefaults:
    def test_generation_defaults(self, monkeypatch):
        for var in ("DEFAULT_MODEL", "GENERATION_MAX_TOKENS", "GENERATION_TEMPERATURE", "JOB_TTL_SECONDS"):
            monkeypatch.delenv(var, raising=False)

        settings = _settings()

        assert settings.default_model == "claude-sonnet-4-5-20250929"
        assert settings.generation_max_tokens == 1200
        assert settings.generation_temperature == 0.4
        assert settings.job_ttl_seconds == 1800

    def test_cors_fallback(self, monkeypatch):
        monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
        settings = _settings()
        assert settings.allowed_origins_list == DEFAULT_ALLOWED_ORIGINS

    def test_explicit_origins_win(self):
        settings = _settings(allowed_origins="https://a.example, https://b.example")
        assert settings.allowed_origins_list == ["https://a.example", "https://b.example"]

    def test_json_origins(self):
        settings = _settings(allowed_origins='["https://a.example"]')
        assert settings.allowed_origins == ["https://a.example"]


class TestValidation:
    def test_environment_is_normalized(self):
        settings = _settings(environment="PRODUCTION")
        assert settings.environment == "production"
        assert settings.is_production is True
        assert settings.is_development is False

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            _settings(environment="qa")

    def test_log_level_uppercased(self):
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            _settings(log_level="chatty")

    @pytest.mark.parametrize("field,value", [
        ("generation_max_tokens", 0),
        ("generation_temperature", 1.5),
        ("job_ttl_seconds", 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            _settings(**{field: value})

    def test_env_vars_are_read(self, monkeypatch):
        monkeypatch.setenv("JOB_TTL_SECONDS", "60")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")

        settings = _settings()

        assert settings.job_ttl_seconds == 60
        assert settings.anthropic_api_key == "sk-ant-env"
