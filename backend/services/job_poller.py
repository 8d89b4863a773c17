"""Client for the generation job endpoints: start a job, poll until it finishes.

Used by the CLI and by other services that want the generated workouts
without holding a request open for the whole generation.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from application.models import GenerateWorkoutsRequest, JobStatus
from backend.services.errors import JobNotFoundError, WorkoutGenerationError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_ATTEMPTS = 180


class PollingTimeoutError(TimeoutError):
    """The job did not reach a terminal status within max_attempts polls."""

    def __init__(self, job_id: str, attempts: int, last_progress: Optional[str] = None) -> None:
        super().__init__(
            f"Workout generation timed out after {attempts} status checks. Please try again."
        )
        self.job_id = job_id
        self.attempts = attempts
        self.last_progress = last_progress


class JobFailedError(WorkoutGenerationError):
    """The job finished with status ``error``."""

    kind = "job_failed"

    def __init__(self, job_id: str, message: str, error_stack: Optional[str] = None) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.error_stack = error_stack


class JobServiceError(WorkoutGenerationError):
    """The generation service answered with an unexpected status or payload."""

    kind = "service"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JobStatusPoller:
    """Start generation jobs over HTTP and poll their status at a fixed interval."""

    def __init__(
        self,
        base_url: str,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._base_url = base_url.rstrip("/")
        self._interval = interval
        self._max_attempts = max_attempts
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._sleep = sleep
        self._on_progress = on_progress

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "JobStatusPoller":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self, request: GenerateWorkoutsRequest) -> str:
        """POST the request and return the new job id."""
        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        response = await self._request("POST", "/generate-workouts/start", json=body)
        if response.status_code != 200:
            raise JobServiceError(_error_message(response, "Failed to start workout generation"),
                                  status_code=response.status_code)
        job_id = _json_object(response, "Start response").get("jobId")
        if not job_id:
            raise JobServiceError("Start response did not include a jobId", status_code=response.status_code)
        logger.info("Started generation job %s", job_id)
        return job_id

    async def fetch(self, job_id: str) -> Dict[str, Any]:
        """Return one status snapshot. Raises JobNotFoundError on 404."""
        response = await self._request("GET", "/generate-workouts/status", params={"jobId": job_id})
        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        if response.status_code != 200:
            raise JobServiceError(_error_message(response, "Failed to check job status"),
                                  status_code=response.status_code)
        return _json_object(response, "Status response")

    async def wait(self, job_id: str) -> Dict[str, Any]:
        """Poll until the job is done and return its final snapshot.

        Raises:
            JobFailedError: the job finished with status ``error``.
            JobNotFoundError: the job is unknown or has expired.
            PollingTimeoutError: still running after ``max_attempts`` polls.
        """
        last_progress: Optional[str] = None
        for attempt in range(1, self._max_attempts + 1):
            snapshot = await self.fetch(job_id)
            status = snapshot.get("status")

            progress = snapshot.get("progress")
            if progress and progress != last_progress:
                last_progress = progress
                logger.debug("Job %s: %s", job_id, progress)
                if self._on_progress is not None:
                    self._on_progress(progress)

            if status == JobStatus.done.value:
                return snapshot
            if status == JobStatus.error.value:
                raise JobFailedError(
                    job_id,
                    snapshot.get("error") or "Workout generation failed",
                    error_stack=snapshot.get("errorStack"),
                )

            if attempt < self._max_attempts:
                await self._sleep(self._interval)

        raise PollingTimeoutError(job_id, self._max_attempts, last_progress)

    async def generate(self, request: GenerateWorkoutsRequest) -> List[Dict[str, Any]]:
        """Start a job, wait for it and return the generated workouts."""
        job_id = await self.start(request)
        snapshot = await self.wait(job_id)
        return snapshot.get("workouts") or []

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, f"{self._base_url}{path}", **kwargs)
        except httpx.TimeoutException:
            raise JobServiceError("The generation service is taking too long to respond.")
        except httpx.RequestError:
            raise JobServiceError("Unable to connect to the generation service.")


def _json_object(response: httpx.Response, what: str) -> Dict[str, Any]:
    """Decode a 200 body that must be a JSON object, else JobServiceError."""
    try:
        payload = response.json()
    except ValueError as e:
        raise JobServiceError(f"{what} was not valid JSON", status_code=response.status_code) from e
    if not isinstance(payload, dict):
        raise JobServiceError(f"{what} was not a JSON object", status_code=response.status_code)
    return payload

def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"{fallback} ({response.status_code})"
    if isinstance(payload, dict) and payload.get("error"):
        details = payload.get("details")
        return f"{payload['error']}: {details}" if details else str(payload["error"])
    return f"{fallback} ({response.status_code})"
