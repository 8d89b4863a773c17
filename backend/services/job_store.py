"""In-memory generation job store with TTL sweep.

Holds one JobRecord per job id for the lifetime of the process. Records are
immutable snapshots; update() swaps in a merged copy. Expired records are
removed by sweep_expired(), which the job endpoints call on every request.
Single-process only: state is lost on restart and not shared between workers.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from application.models import JobRecord, JobStatus
from backend.services.errors import InvalidJobTransitionError, JobAlreadyExistsError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60
INITIAL_PROGRESS = "Initializing workout generation..."

_UPDATABLE_FIELDS = {"status", "progress", "workouts", "error", "error_stack"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """Thread-safe in-memory store for generation jobs with TTL eviction."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl.total_seconds()

    def create(self, job_id: str) -> JobRecord:
        """Insert a new running job. Raises JobAlreadyExistsError on a duplicate id."""
        now = self._clock()
        record = JobRecord(
            job_id=job_id,
            status=JobStatus.running,
            created_at=now,
            updated_at=now,
            progress=INITIAL_PROGRESS,
        )
        with self._lock:
            if job_id in self._jobs:
                raise JobAlreadyExistsError(f"Job already exists: {job_id}")
            self._jobs[job_id] = record
        return record

    def update(self, job_id: str, **fields: Any) -> Optional[JobRecord]:
        """Merge fields into an existing job and refresh updated_at.

        Returns the merged record, or None if the job is unknown (e.g. evicted).

        Raises:
            ValueError: a field name that is not updatable.
            InvalidJobTransitionError: the job is terminal and the update
                would change its status.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {sorted(unknown)}")

        with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                return None

            new_status = fields.get("status")
            if new_status is not None:
                new_status = JobStatus(new_status)
                fields["status"] = new_status
                if current.status.is_terminal and new_status != current.status:
                    raise InvalidJobTransitionError(
                        f"Job {job_id} is {current.status.value}; cannot move to {new_status.value}"
                    )

            merged = current.model_copy(update={**fields, "updated_at": self._clock()})
            self._jobs[job_id] = merged
            return merged

    def get(self, job_id: str) -> Optional[JobRecord]:
        """Return the current snapshot for a job, or None if unknown."""
        with self._lock:
            return self._jobs.get(job_id)

    def sweep_expired(self) -> int:
        """Remove jobs whose last update is older than the TTL. Returns the count removed."""
        now = self._clock()
        with self._lock:
            expired = [
                job_id for job_id, job in self._jobs.items()
                if now - job.updated_at > self._ttl
            ]
            for job_id in expired:
                del self._jobs[job_id]

        for job_id in expired:
            logger.info("Cleaning up old job: %s", job_id)
        if expired:
            logger.info("Cleaned up %d old job(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._jobs
