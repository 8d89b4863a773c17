"""Workout generation job endpoints.

POST /generate-workouts/start : start a background generation job
GET  /generate-workouts/status: poll a job's status by id

Generation takes longer than a client (or proxy) should hold a request open,
so start returns a job id immediately and the client polls status until the
job is ``done`` or ``error``. Both endpoints sweep expired jobs first.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.deps import get_generation_request, get_job_orchestrator, get_job_store, get_settings
from application.models import GenerateWorkoutsRequest, JobRecord, JobStatus
from backend.services.errors import InvalidRequestError
from backend.services.job_orchestrator import JobOrchestrator
from backend.services.job_store import JobStore
from backend.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate-workouts", tags=["Generation"])


def job_snapshot(job: JobRecord, include_stack: bool) -> Dict[str, Any]:
    """Build the status payload for a job. Only terminal fields for the matching status."""
    wire = job.to_wire()
    payload: Dict[str, Any] = {
        "jobId": wire["jobId"],
        "status": wire["status"],
        "progress": wire["progress"],
        "createdAt": wire["createdAt"],
        "updatedAt": wire["updatedAt"],
    }
    if job.status is JobStatus.done and job.workouts is not None:
        payload["workouts"] = wire["workouts"]
    if job.status is JobStatus.error:
        payload["error"] = job.error
        if include_stack and job.error_stack:
            payload["errorStack"] = job.error_stack
    return payload


@router.post("/start")
async def start_generation(
    body: GenerateWorkoutsRequest = Depends(get_generation_request),
    store: JobStore = Depends(get_job_store),
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
):
    """Start generating one workout per focus area. Returns the job id immediately.

    The body dependency is declared first so request errors win over an
    unconfigured model key.
    """
    store.sweep_expired()

    try:
        job_id = orchestrator.start(body)
    except InvalidRequestError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:
        logger.exception("Failed to start workout generation")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to start workout generation", "details": str(e)},
        )

    return {"jobId": job_id, "message": "Workout generation started"}


@router.get("/status")
async def get_generation_status(
    job_id: Optional[str] = Query(None, alias="jobId"),
    store: JobStore = Depends(get_job_store),
    settings: Settings = Depends(get_settings),
):
    """Return the current snapshot of a generation job."""
    store.sweep_expired()

    if not job_id:
        return JSONResponse(status_code=400, content={"error": "Missing jobId query parameter"})

    job = store.get(job_id)
    if job is None:
        return JSONResponse(status_code=404, content={"error": "Job not found", "jobId": job_id})

    return job_snapshot(job, include_stack=not settings.is_production)
