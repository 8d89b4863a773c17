"""Supabase implementation of WorkoutLibraryRepository.

Tables: ``profiles`` (one row per user_id), ``workouts`` and
``scheduled_workouts`` (``workout_id`` references ``workouts.id``). Nested
profile and exercise data is stored as JSON in its camelCase wire form.
"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from supabase import Client

from application.models import ScheduledWorkout, UserProfile, Workout

_SCHEDULED_SELECT = "*, workouts(*)"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _profile_to_row(user_id: str, profile: UserProfile) -> Dict[str, Any]:
    wire = profile.to_wire()
    return {
        "user_id": user_id,
        "name": wire["name"],
        "experience_years": wire["experienceYears"],
        "climbing_levels": wire["climbingLevels"],
        "goals": wire["goals"],
        "available_equipment": wire["availableEquipment"],
        "weekly_availability": wire["weeklyAvailability"],
        "limitations": wire["limitations"],
    }


def _row_to_profile(row: Dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(row["id"]) if row.get("id") is not None else None,
        name=row["name"],
        experience_years=row["experience_years"],
        climbing_levels=row.get("climbing_levels") or [],
        goals=row.get("goals") or [],
        available_equipment=row.get("available_equipment") or [],
        weekly_availability=row["weekly_availability"],
        limitations=row.get("limitations") or [],
    )


def _workout_to_row(user_id: str, workout: Workout) -> Dict[str, Any]:
    wire = workout.to_wire()
    return {
        "user_id": user_id,
        "title": wire["title"],
        "focus": wire["focus"],
        "estimated_duration": wire["estimatedDuration"],
        "difficulty": wire["difficulty"],
        "exercises": wire["exercises"],
        "warmup": wire["warmup"],
        "cooldown": wire["cooldown"],
        "notes": wire["notes"],
    }


def _row_to_workout(row: Dict[str, Any]) -> Workout:
    return Workout(
        id=str(row["id"]),
        title=row["title"],
        focus=row["focus"],
        estimated_duration=row["estimated_duration"],
        difficulty=row["difficulty"],
        exercises=row.get("exercises") or [],
        warmup=row.get("warmup") or [],
        cooldown=row.get("cooldown") or [],
        notes=row.get("notes") or "",
        created_at=row["created_at"],
    )


def _row_to_scheduled(row: Dict[str, Any]) -> ScheduledWorkout:
    return ScheduledWorkout(
        id=str(row["id"]),
        workout=_row_to_workout(row["workouts"]),
        scheduled_date=row["scheduled_date"],
        completed=bool(row.get("completed")),
        completed_at=row.get("completed_at"),
        notes=row.get("notes"),
    )


class SupabaseWorkoutLibraryRepository:
    """Supabase-backed profile, workout library and calendar repository."""

    PROFILES_TABLE = "profiles"
    WORKOUTS_TABLE = "workouts"
    SCHEDULED_TABLE = "scheduled_workouts"

    def __init__(self, client: Client, clock: Callable[[], datetime] = _utcnow) -> None:
        self._client = client
        self._clock = clock

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        result = (
            self._client.table(self.PROFILES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return _row_to_profile(result.data[0]) if result.data else None

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        result = (
            self._client.table(self.PROFILES_TABLE)
            .upsert(_profile_to_row(user_id, profile), on_conflict="user_id")
            .execute()
        )
        return _row_to_profile(result.data[0])

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def list_workouts(self, user_id: str) -> List[Workout]:
        result = (
            self._client.table(self.WORKOUTS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_row_to_workout(row) for row in result.data or []]

    def save_workouts(self, user_id: str, workouts: Sequence[Workout]) -> List[Workout]:
        if not workouts:
            return []
        result = (
            self._client.table(self.WORKOUTS_TABLE)
            .insert([_workout_to_row(user_id, w) for w in workouts])
            .execute()
        )
        return [_row_to_workout(row) for row in result.data or []]

    def delete_workout(self, user_id: str, workout_id: str) -> bool:
        result = (
            self._client.table(self.WORKOUTS_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("id", workout_id)
            .execute()
        )
        return bool(result.data)

    # ------------------------------------------------------------------
    # Scheduled workouts
    # ------------------------------------------------------------------

    def list_scheduled(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[ScheduledWorkout]:
        query = (
            self._client.table(self.SCHEDULED_TABLE)
            .select(_SCHEDULED_SELECT)
            .eq("user_id", user_id)
        )
        if start is not None:
            query = query.gte("scheduled_date", start.isoformat())
        if end is not None:
            query = query.lte("scheduled_date", end.isoformat())
        result = query.order("scheduled_date").execute()
        return [_row_to_scheduled(row) for row in result.data or []]

    def get_scheduled(self, user_id: str, scheduled_id: str) -> Optional[ScheduledWorkout]:
        result = (
            self._client.table(self.SCHEDULED_TABLE)
            .select(_SCHEDULED_SELECT)
            .eq("user_id", user_id)
            .eq("id", scheduled_id)
            .limit(1)
            .execute()
        )
        return _row_to_scheduled(result.data[0]) if result.data else None

    def schedule_workout(
        self,
        user_id: str,
        workout_id: str,
        scheduled_date: date,
        notes: Optional[str] = None,
    ) -> Optional[ScheduledWorkout]:
        """Schedule one of the user's saved workouts. None if the workout is not theirs.

        The service role key bypasses row level security, so ownership is
        checked here before the insert.
        """
        owned = (
            self._client.table(self.WORKOUTS_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("id", workout_id)
            .limit(1)
            .execute()
        )
        if not owned.data:
            return None

        result = (
            self._client.table(self.SCHEDULED_TABLE)
            .insert({
                "user_id": user_id,
                "workout_id": workout_id,
                "scheduled_date": scheduled_date.isoformat(),
                "notes": notes,
            })
            .execute()
        )
        scheduled = self.get_scheduled(user_id, str(result.data[0]["id"]))
        if scheduled is None:
            raise LookupError(f"Scheduled workout {result.data[0]['id']} vanished after insert")
        return scheduled

    def reschedule(
        self, user_id: str, scheduled_id: str, new_date: date
    ) -> Optional[ScheduledWorkout]:
        return self._update_scheduled(
            user_id, scheduled_id, {"scheduled_date": new_date.isoformat()}
        )

    def set_completed(
        self, user_id: str, scheduled_id: str, completed: bool
    ) -> Optional[ScheduledWorkout]:
        completed_at = self._clock().isoformat() if completed else None
        return self._update_scheduled(
            user_id, scheduled_id, {"completed": completed, "completed_at": completed_at}
        )

    def delete_scheduled(self, user_id: str, scheduled_id: str) -> bool:
        result = (
            self._client.table(self.SCHEDULED_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("id", scheduled_id)
            .execute()
        )
        return bool(result.data)

    def _update_scheduled(
        self, user_id: str, scheduled_id: str, changes: Dict[str, Any]
    ) -> Optional[ScheduledWorkout]:
        result = (
            self._client.table(self.SCHEDULED_TABLE)
            .update(changes)
            .eq("user_id", user_id)
            .eq("id", scheduled_id)
            .execute()
        )
        if not result.data:
            return None
        return self.get_scheduled(user_id, scheduled_id)
