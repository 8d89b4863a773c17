"""Profile, workout library and training calendar endpoints.

GET    /api/profile                : the caller's climber profile
PUT    /api/profile                : create or replace it
GET    /api/workouts               : saved workouts, newest first
POST   /api/workouts               : save generated workouts
DELETE /api/workouts/{workout_id}  : remove a saved workout
GET    /api/schedule?start=&end=   : scheduled workouts in date order
POST   /api/schedule               : schedule a saved workout
PATCH  /api/schedule/{scheduled_id}: reschedule and/or toggle completion
DELETE /api/schedule/{scheduled_id}: unschedule

All endpoints are scoped to the X-User-Id header and return 503 when
Supabase is not configured.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_user_id, get_workout_library_repository
from api.schemas import SaveWorkoutsRequest, ScheduleWorkoutRequest, UpdateScheduledWorkoutRequest
from application.models import UserProfile
from application.ports.workout_library_repository import WorkoutLibraryRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Library"])


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------


@router.get("/profile")
def get_profile(
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    profile = repo.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile.to_wire()


@router.put("/profile")
def put_profile(
    body: UserProfile,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    saved = repo.save_profile(user_id, body)
    logger.info("Saved profile for user %s", user_id)
    return saved.to_wire()


# -----------------------------------------------------------------------------
# Workouts
# -----------------------------------------------------------------------------


@router.get("/workouts")
def list_workouts(
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    return {"workouts": [w.to_wire() for w in repo.list_workouts(user_id)]}


@router.post("/workouts", status_code=201)
def save_workouts(
    body: SaveWorkoutsRequest,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    """Save generated workouts (typically a finished job's ``workouts``) to the library."""
    saved = repo.save_workouts(user_id, body.workouts)
    logger.info("Saved %d workout(s) for user %s", len(saved), user_id)
    return {"workouts": [w.to_wire() for w in saved]}


@router.delete("/workouts/{workout_id}")
def delete_workout(
    workout_id: str,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    if not repo.delete_workout(user_id, workout_id):
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"deleted": True, "id": workout_id}


# -----------------------------------------------------------------------------
# Schedule
# -----------------------------------------------------------------------------


@router.get("/schedule")
def list_schedule(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    if start is not None and end is not None and start > end:
        raise HTTPException(status_code=400, detail="start must be on or before end")
    scheduled = repo.list_scheduled(user_id, start=start, end=end)
    return {"scheduledWorkouts": [s.to_wire() for s in scheduled]}


@router.post("/schedule", status_code=201)
def schedule_workout(
    body: ScheduleWorkoutRequest,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    scheduled = repo.schedule_workout(user_id, body.workout_id, body.scheduled_date, body.notes)
    if scheduled is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return scheduled.to_wire()


@router.patch("/schedule/{scheduled_id}")
def update_scheduled_workout(
    scheduled_id: str,
    body: UpdateScheduledWorkoutRequest,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    """Move a scheduled workout to another date and/or mark it (in)complete."""
    updated = None
    if body.scheduled_date is not None:
        updated = repo.reschedule(user_id, scheduled_id, body.scheduled_date)
        if updated is None:
            raise HTTPException(status_code=404, detail="Scheduled workout not found")
    if body.completed is not None:
        updated = repo.set_completed(user_id, scheduled_id, body.completed)
        if updated is None:
            raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return updated.to_wire()


@router.delete("/schedule/{scheduled_id}")
def delete_scheduled_workout(
    scheduled_id: str,
    user_id: str = Depends(get_user_id),
    repo: WorkoutLibraryRepository = Depends(get_workout_library_repository),
):
    if not repo.delete_scheduled(user_id, scheduled_id):
        raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return {"deleted": True, "id": scheduled_id}
