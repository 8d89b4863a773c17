"""Shared pytest fixtures for the workout generator tests."""

import pytest
from fastapi.testclient import TestClient

from api.deps import get_ai_client, get_settings, get_supabase_client
from backend.main import create_app
from backend.services.job_store import JobStore
from backend.services.workout_generator import SingleWorkoutGenerator
from backend.services.workout_pipeline_service import SequentialWorkoutPipeline
from backend.settings import Settings
from tests.fixtures.generation import FakeAIClient, make_profile, workout_json


@pytest.fixture(autouse=True)
def _clear_cached_providers():
    """Process-wide caches must not leak configuration between tests."""
    get_ai_client.cache_clear()
    get_supabase_client.cache_clear()
    yield
    get_ai_client.cache_clear()
    get_supabase_client.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        anthropic_api_key="sk-ant-test",
        _env_file=None,
    )


@pytest.fixture
def profile():
    return make_profile()


@pytest.fixture
def valid_response() -> str:
    return workout_json()


@pytest.fixture
def job_store() -> JobStore:
    return JobStore(ttl_seconds=1800)


def build_pipeline(ai_client: FakeAIClient) -> SequentialWorkoutPipeline:
    return SequentialWorkoutPipeline(SingleWorkoutGenerator(ai_client))


@pytest.fixture
def make_client(test_settings):
    """Build a TestClient whose generation pipeline talks to a FakeAIClient.

    Usage:
        client, app = make_client(FakeAIClient([...]))
        with client: ...
    """
    apps = []

    def _make(ai_client: FakeAIClient, settings: Settings = None):
        settings = settings or test_settings
        app = create_app(settings=settings)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_ai_client] = lambda: ai_client
        apps.append(app)
        return TestClient(app), app

    yield _make

    for app in apps:
        app.dependency_overrides.clear()
