"""Start generation jobs in the background and record their progress.

start() returns as soon as the job is registered; the pipeline runs in a
detached asyncio task on the running loop. Every pipeline event is written
back to the JobStore, so pollers see progress within one event of it
happening. A job always ends in exactly one terminal status.
"""

import asyncio
import logging
import traceback
import uuid
from typing import Callable, Optional, Set

from application.models import GenerateWorkoutsRequest, JobStatus
from backend.observability import GenerationMetrics
from backend.services.errors import InvalidJobTransitionError, InvalidRequestError
from backend.services.job_store import JobStore
from backend.services.workout_pipeline_service import SequentialWorkoutPipeline

logger = logging.getLogger(__name__)

DONE_PROGRESS = "All workouts ready!"
ERROR_PROGRESS = "Error occurred"


def validate_generation_request(request: GenerateWorkoutsRequest) -> None:
    """Raise InvalidRequestError unless the request names a profile and at least one focus area."""
    if request.profile is None or not request.focus_areas:
        raise InvalidRequestError("Missing required fields: profile and focusAreas")


def _new_job_id() -> str:
    return str(uuid.uuid4())


class JobOrchestrator:
    """Owns the lifecycle of generation jobs: create, run in background, finish."""

    def __init__(
        self,
        store: JobStore,
        pipeline: SequentialWorkoutPipeline,
        id_factory: Callable[[], str] = _new_job_id,
    ) -> None:
        self._store = store
        self._pipeline = pipeline
        self._id_factory = id_factory
        # Strong references so the loop does not garbage-collect running jobs.
        self._tasks: Set[asyncio.Task] = set()

    @property
    def running_jobs(self) -> int:
        return len(self._tasks)

    def start(self, request: GenerateWorkoutsRequest) -> str:
        """Register a job and schedule its pipeline. Must be called on a running loop.

        Raises:
            InvalidRequestError: profile missing or focus_areas empty.
        """
        validate_generation_request(request)

        loop = asyncio.get_running_loop()
        job_id = self._id_factory()
        self._store.create(job_id)

        logger.info(
            "[Job %s] Starting generation for %d workout(s): %s",
            job_id,
            len(request.focus_areas),
            ", ".join(f.value for f in request.focus_areas),
        )
        GenerationMetrics.jobs_started_total().add(1)

        task = loop.create_task(self._run(job_id, request), name=f"generation-job-{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job_id

    async def _run(self, job_id: str, request: GenerateWorkoutsRequest) -> None:
        try:
            async for event in self._pipeline.run(request):
                if event.event == "progress":
                    logger.info("[Job %s] %s", job_id, event.message)
                    self._store.update(job_id, progress=event.message)
                elif event.event == "done":
                    logger.info("[Job %s] Completed with %d workout(s)", job_id, len(event.workouts))
                    self._finish(
                        job_id,
                        status=JobStatus.done,
                        workouts=list(event.workouts),
                        progress=DONE_PROGRESS,
                    )
                elif event.event == "failed":
                    logger.error("[Job %s] %s", job_id, event.message)
                    self._finish(
                        job_id,
                        status=JobStatus.error,
                        error=event.message,
                        error_stack=event.detail,
                        progress=ERROR_PROGRESS,
                    )
        except asyncio.CancelledError:
            logger.warning("[Job %s] Cancelled", job_id)
            self._finish(
                job_id,
                status=JobStatus.error,
                error="Workout generation was cancelled",
                progress=ERROR_PROGRESS,
            )
            raise
        except Exception as e:
            # Task boundary: nothing may escape a detached job unrecorded.
            logger.exception("[Job %s] Unexpected failure", job_id)
            self._finish(
                job_id,
                status=JobStatus.error,
                error=str(e) or type(e).__name__,
                error_stack="".join(traceback.format_exception(type(e), e, e.__traceback__)),
                progress=ERROR_PROGRESS,
            )

    def _finish(self, job_id: str, **fields) -> None:
        try:
            record = self._store.update(job_id, **fields)
        except InvalidJobTransitionError:
            logger.warning("[Job %s] Already finished; ignoring %s", job_id, fields.get("status"))
            return
        if record is None:
            logger.warning("[Job %s] Finished after eviction; result dropped", job_id)
            return
        GenerationMetrics.jobs_finished_total().add(1, {"status": record.status.value})

    async def wait_for_jobs(self, timeout: Optional[float] = None) -> bool:
        """Wait for all running jobs. Returns False if the timeout elapsed first."""
        if not self._tasks:
            return True
        done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning("%d generation job(s) still running after %.1fs", len(pending), timeout or 0)
        return not pending
