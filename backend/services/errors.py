"""Error taxonomy for workout generation.

Every failure inside the generation core is one of these classes. Response
contract errors carry a ``kind`` tag so callers and logs can classify them
without string matching.
"""

from typing import Optional


class WorkoutGenerationError(Exception):
    """Base class for all generation errors."""

    kind = "generation_error"


class InvalidRequestError(WorkoutGenerationError):
    """Request is missing a profile or focus areas. Surfaced as 400."""

    kind = "invalid_request"


class ProviderError(WorkoutGenerationError):
    """The model provider call could not complete (network, auth, quota, bad payload)."""

    kind = "provider"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Response contract errors (model output did not match the required shape)
# ---------------------------------------------------------------------------


class ResponseContractError(WorkoutGenerationError):
    kind = "response_contract"


class TruncatedResponseError(ResponseContractError):
    kind = "truncated"


class MalformedResponseError(ResponseContractError):
    """Response text is not valid JSON. Keeps the head of the text for diagnostics."""

    kind = "malformed"

    def __init__(self, message: str, excerpt: str = "") -> None:
        super().__init__(message)
        self.excerpt = excerpt


class EmptyResponseError(ResponseContractError):
    kind = "empty"


class InvalidWorkoutError(ResponseContractError):
    kind = "invalid_workout"


# ---------------------------------------------------------------------------
# Job errors
# ---------------------------------------------------------------------------


class JobNotFoundError(WorkoutGenerationError):
    """Unknown or expired job id. Surfaced as 404."""

    kind = "not_found"

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class JobAlreadyExistsError(WorkoutGenerationError):
    kind = "job_exists"


class InvalidJobTransitionError(WorkoutGenerationError):
    """Attempt to move a job out of a terminal status."""

    kind = "invalid_transition"
