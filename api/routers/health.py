"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_job_store, get_optional_job_orchestrator, get_settings
from backend.services.job_orchestrator import JobOrchestrator
from backend.services.job_store import JobStore
from backend.settings import Settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "workout-generator-api"

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
async def health_ready(
    settings: Settings = Depends(get_settings),
    store: JobStore = Depends(get_job_store),
    orchestrator: Optional[JobOrchestrator] = Depends(get_optional_job_orchestrator),
):
    """
    Readiness probe.

    Generation needs a model API key; without one the service cannot do its
    job and reports 503. Supabase is optional (library endpoints only).
    Readiness reports whether it is configured without contacting it.
    """
    checks = {
        "anthropic": "ok" if settings.anthropic_api_key else "not_configured",
        "supabase": "ok" if settings.supabase_url and settings.supabase_key else "not_configured",
    }
    jobs = {
        "tracked": len(store),
        "running": orchestrator.running_jobs if orchestrator is not None else 0,
    }

    if not settings.anthropic_api_key:
        logger.warning("Readiness check failed: ANTHROPIC_API_KEY not configured")
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": SERVICE_NAME,
                "checks": checks,
                "jobs": jobs,
            },
        )

    return {"status": "ready", "service": SERVICE_NAME, "checks": checks, "jobs": jobs}
