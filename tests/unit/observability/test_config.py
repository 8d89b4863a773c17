"""
Unit tests for backend/observability/config.py

Provider installation is patched out so the process-global OTel providers
stay untouched.
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI

from backend.observability import config
from backend.settings import Settings


pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    return Settings(environment="test", _env_file=None, **overrides)


@pytest.fixture(autouse=True)
def _reset_state():
    config._providers_installed = False
    yield
    config._providers_installed = False


class TestBuildResource:
    def test_service_attributes(self):
        resource = config.build_resource(_settings(otel_service_name="wg-test"))

        assert resource.attributes["service.name"] == "wg-test"
        assert resource.attributes["service.version"] == config.SERVICE_VERSION_VALUE
        assert resource.attributes["deployment.environment"] == "test"
        assert resource.attributes["generation.model"] == "claude-sonnet-4-5-20250929"
        assert "service.instance.id" not in resource.attributes

    def test_git_commit_becomes_instance_id(self):
        resource = config.build_resource(_settings(render_git_commit="abc123"))
        assert resource.attributes["service.instance.id"] == "abc123"


class TestConfigureObservability:
    def test_disabled_is_noop(self):
        with patch.object(config, "_install_providers") as install:
            assert config.configure_observability(_settings(otel_enabled=False)) is False
        install.assert_not_called()

    def test_providers_installed_once_and_app_instrumented(self):
        app_a, app_b = FastAPI(), FastAPI()
        settings = _settings(otel_enabled=True)

        with patch.object(config, "_install_providers") as install, patch.object(
            config.FastAPIInstrumentor, "instrument_app"
        ) as instrument_app:
            assert config.configure_observability(settings, app_a) is True
            assert config.configure_observability(settings, app_b) is True

        install.assert_called_once_with(settings)
        assert [c.args[0] for c in instrument_app.call_args_list] == [app_a, app_b]
        assert instrument_app.call_args.kwargs["excluded_urls"] == config.EXCLUDED_URLS

    def test_shutdown_without_install_is_noop(self):
        with patch.object(config.trace, "get_tracer_provider") as get_provider:
            config.shutdown_observability()
        get_provider.assert_not_called()

    def test_otlp_url(self):
        assert config._otlp_url("http://collector:4318/", "traces") == "http://collector:4318/v1/traces"
