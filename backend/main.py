"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
import signal
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.settings import Settings, get_settings
from backend.observability import configure_observability, shutdown_observability
from backend.services.errors import InvalidRequestError
from backend.services.job_store import JobStore

logger = logging.getLogger(__name__)

SERVICE_NAME = "workout-generator-api"


# ---------------------------------------------------------------------------
# Application Factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    # Create FastAPI app
    app = FastAPI(
        title="Climbing Workout Generator API",
        description="Background AI generation of climbing workouts, with job status polling",
        version="1.0.0",
    )

    # Store settings and the process-wide job store on app state
    app.state.settings = settings
    app.state.job_store = JobStore(ttl_seconds=settings.job_ttl_seconds)
    app.state.job_orchestrator = None

    # Tracing, metrics and request instrumentation
    configure_observability(settings, app)

    # Configure middleware
    _configure_cors(app, settings)

    # Error responses
    _register_exception_handlers(app)

    # Include API routers
    _include_routers(app)

    # Register lifecycle hooks
    _register_shutdown(app, settings)

    return app


def _configure_logging(settings: Settings) -> None:
    """Configure root logging once; later calls are no-ops (basicConfig semantics)."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            release=settings.render_git_commit,
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
        )
        logger.info(
            "Sentry initialized for %s (release=%s)",
            SERVICE_NAME,
            settings.render_git_commit or "unknown",
        )


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    origins = settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Map request errors to 400 with an ``{error, details}`` body."""

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": details},
        )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import health_router, generation_router, library_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Generation router (/generate-workouts/*)
    app.include_router(generation_router)

    # Library router (/api/profile, /api/workouts, /api/schedule)
    app.include_router(library_router)


def _register_shutdown(app: FastAPI, settings: Settings) -> None:
    """Register graceful shutdown handler."""

    @app.on_event("shutdown")
    async def shutdown_event():
        orchestrator = app.state.job_orchestrator
        if orchestrator is not None and orchestrator.running_jobs:
            logger.info(
                "Shutting down with %d running generation job(s), "
                "waiting up to %.1fs...",
                orchestrator.running_jobs,
                settings.shutdown_grace_seconds,
            )
            finished = await orchestrator.wait_for_jobs(timeout=settings.shutdown_grace_seconds)
            if not finished:
                logger.warning(
                    "Shutdown proceeding with %d generation job(s) still running",
                    orchestrator.running_jobs,
                )

        shutdown_observability()

        logger.info("%s shutdown complete", SERVICE_NAME)

    # Handle SIGTERM for graceful shutdown on the hosting platform
    def _handle_sigterm(signum, frame):
        logger.info("Received SIGTERM, initiating graceful shutdown")
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, _handle_sigterm)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
