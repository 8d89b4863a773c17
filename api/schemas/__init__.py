"""Request schemas for API routers."""

from api.schemas.library import (
    SaveWorkoutsRequest,
    ScheduleWorkoutRequest,
    UpdateScheduledWorkoutRequest,
)

__all__ = [
    "SaveWorkoutsRequest",
    "ScheduleWorkoutRequest",
    "UpdateScheduledWorkoutRequest",
]
