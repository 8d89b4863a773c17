"""Request schemas for the workout library and calendar endpoints."""

from datetime import date
from typing import List, Optional

from pydantic import Field, model_validator

from application.models import Workout
from application.models.training import CamelModel


class SaveWorkoutsRequest(CamelModel):
    """Body for saving generated workouts to the library."""
    workouts: List[Workout] = Field(..., min_length=1, max_length=50)


class ScheduleWorkoutRequest(CamelModel):
    """Body for putting a saved workout on the calendar."""
    workout_id: str = Field(..., min_length=1, max_length=64)
    scheduled_date: date
    notes: Optional[str] = Field(default=None, max_length=1000)


class UpdateScheduledWorkoutRequest(CamelModel):
    """Reschedule and/or toggle completion. At least one field is required."""
    scheduled_date: Optional[date] = None
    completed: Optional[bool] = None

    @model_validator(mode="after")
    def _require_change(self) -> "UpdateScheduledWorkoutRequest":
        if self.scheduled_date is None and self.completed is None:
            raise ValueError("Provide scheduledDate and/or completed")
        return self
