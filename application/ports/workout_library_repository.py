"""Port interface for a climber's saved profile, workouts and training calendar."""

from datetime import date
from typing import List, Optional, Protocol, Sequence

from application.models import ScheduledWorkout, UserProfile, Workout


class WorkoutLibraryRepository(Protocol):
    """Repository protocol for per-user training data. Every call is scoped to user_id."""

    # Profile

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Return the user's profile, or None if they have not created one."""
        ...

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Create or replace the user's profile."""
        ...

    # Workouts

    def list_workouts(self, user_id: str) -> List[Workout]:
        """List saved workouts, newest first."""
        ...

    def save_workouts(self, user_id: str, workouts: Sequence[Workout]) -> List[Workout]:
        """Persist generated workouts. Returns them with storage-assigned ids."""
        ...

    def delete_workout(self, user_id: str, workout_id: str) -> bool:
        """Delete a saved workout. Returns False if it did not exist."""
        ...

    # Calendar

    def list_scheduled(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[ScheduledWorkout]:
        """List scheduled workouts in date order, optionally within [start, end]."""
        ...

    def schedule_workout(
        self,
        user_id: str,
        workout_id: str,
        scheduled_date: date,
        notes: Optional[str] = None,
    ) -> Optional[ScheduledWorkout]:
        """None when workout_id is not one of the user's saved workouts."""
        ...

    def reschedule(
        self, user_id: str, scheduled_id: str, new_date: date
    ) -> Optional[ScheduledWorkout]:
        ...

    def set_completed(
        self, user_id: str, scheduled_id: str, completed: bool
    ) -> Optional[ScheduledWorkout]:
        """Mark a scheduled workout (in)complete. Sets or clears completed_at."""
        ...

    def delete_scheduled(self, user_id: str, scheduled_id: str) -> bool:
        ...
