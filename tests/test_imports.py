"""Verify all modules can be imported without errors."""


def test_service_modules_import():
    """Import core service modules to catch bad import paths."""
    import backend.services.ai_client
    import backend.services.job_orchestrator
    import backend.services.job_poller
    import backend.services.job_store
    import backend.services.prompt_builder
    import backend.services.workout_generator
    import backend.services.workout_pipeline_service
    import backend.services.workout_response_parser
    import backend.services.workout_shape_evaluator


def test_api_modules_import():
    """Import router and dependency modules."""
    import api.deps
    import api.routers.generation
    import api.routers.health
    import api.routers.library
    import api.schemas


def test_persistence_modules_import():
    import application.ports.workout_library_repository
    import infrastructure.db.workout_library_repository


def test_app_starts():
    """Verify FastAPI app can be instantiated."""
    from backend.main import app
    assert app is not None
    assert hasattr(app, 'routes')


def test_app_exposes_generation_routes():
    from backend.main import app
    paths = {route.path for route in app.routes}
    assert "/generate-workouts/start" in paths
    assert "/generate-workouts/status" in paths
    assert "/health" in paths
