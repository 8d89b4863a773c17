"""
FastAPI Dependency Providers for the Workout Generator API.

This module provides FastAPI dependency injection functions. Routers depend on
these rather than constructing services themselves, so tests can swap any
piece via ``app.dependency_overrides``.

Architecture:
- Settings, Supabase client and AI client are cached per-process (lru_cache)
- The JobStore lives on ``app.state`` (created in create_app) so every
  request in the process sees the same jobs
- The JobOrchestrator is created on first use and kept on ``app.state``
- Generation services and repositories are instantiated per-request
"""

from functools import lru_cache
from typing import Any, Optional

from fastapi import Body, Depends, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from supabase import Client, create_client

from backend.settings import Settings, get_settings as _get_settings
from backend.services.ai_client import AIClient
from application.models import GenerateWorkoutsRequest
from backend.services.job_orchestrator import JobOrchestrator, validate_generation_request
from backend.services.job_store import JobStore
from backend.services.workout_generator import SingleWorkoutGenerator
from backend.services.workout_pipeline_service import SequentialWorkoutPipeline
from infrastructure.db.workout_library_repository import SupabaseWorkoutLibraryRepository


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns None if credentials are not configured.
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Caller identity
# =============================================================================


def get_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """
    Get the caller's user ID from the X-User-Id header.

    Authentication happens upstream; this service only scopes data by user.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


# =============================================================================
# Repository Providers
# =============================================================================


def get_workout_library_repository(
    client: Client = Depends(get_supabase_client_required),
) -> SupabaseWorkoutLibraryRepository:
    """Get workout library repository instance."""
    return SupabaseWorkoutLibraryRepository(client)


# =============================================================================
# Generation Providers
# =============================================================================


@lru_cache
def get_ai_client() -> AIClient:
    """
    Get cached AI client instance.

    Raises:
        HTTPException: 503 if ANTHROPIC_API_KEY is not configured
    """
    settings = _get_settings()
    if not settings.anthropic_api_key:
        raise HTTPException(
            status_code=503,
            detail="AI service not available. ANTHROPIC_API_KEY not configured.",
        )
    return AIClient(
        api_key=settings.anthropic_api_key,
        helicone_api_key=settings.helicone_api_key,
        helicone_enabled=settings.helicone_enabled,
        default_model=settings.default_model,
        timeout=float(settings.generation_timeout_seconds),
    )


def get_workout_generator(
    ai_client: AIClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
) -> SingleWorkoutGenerator:
    """Get single-workout generator configured from settings."""
    return SingleWorkoutGenerator(
        ai_client,
        model=settings.default_model,
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
    )


def get_workout_pipeline(
    generator: SingleWorkoutGenerator = Depends(get_workout_generator),
) -> SequentialWorkoutPipeline:
    """Get sequential workout pipeline."""
    return SequentialWorkoutPipeline(generator)


def get_job_store(request: Request) -> JobStore:
    """Get the process-wide job store created by create_app."""
    store = getattr(request.app.state, "job_store", None)
    if store is None:
        store = JobStore(ttl_seconds=_get_settings().job_ttl_seconds)
        request.app.state.job_store = store
    return store


def get_optional_job_orchestrator(request: Request) -> Optional[JobOrchestrator]:
    """Get the orchestrator if one has been created, without creating it."""
    return getattr(request.app.state, "job_orchestrator", None)


def get_generation_request(body: Any = Body(None)) -> GenerateWorkoutsRequest:
    """
    Validate the start body before any provider dependency runs.

    FastAPI collects body errors and keeps resolving the remaining
    dependencies, so a missing AI key would otherwise turn a bad request
    into a 503. Both schema errors and missing required fields raise here.
    """
    try:
        request = GenerateWorkoutsRequest.model_validate(body)
    except ValidationError as e:
        errors = [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
        raise RequestValidationError(errors, body=body) from e
    validate_generation_request(request)
    return request


def get_job_orchestrator(
    request: Request,
    store: JobStore = Depends(get_job_store),
    pipeline: SequentialWorkoutPipeline = Depends(get_workout_pipeline),
) -> JobOrchestrator:
    """
    Get the process-wide job orchestrator.

    Created on first use so that an unconfigured AI key only fails the
    start endpoint, not application startup.
    """
    orchestrator = get_optional_job_orchestrator(request)
    if orchestrator is None:
        orchestrator = JobOrchestrator(store, pipeline)
        request.app.state.job_orchestrator = orchestrator
    return orchestrator


__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Identity
    "get_user_id",
    # Repositories
    "get_workout_library_repository",
    # Generation
    "get_ai_client",
    "get_workout_generator",
    "get_workout_pipeline",
    "get_job_store",
    "get_generation_request",
    "get_optional_job_orchestrator",
    "get_job_orchestrator",
]
