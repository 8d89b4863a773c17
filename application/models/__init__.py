"""Application domain models for workout generation."""

from .training import (
    ClimbingDiscipline,
    ClimbingLevel,
    Difficulty,
    Equipment,
    Exercise,
    GenerateWorkoutsRequest,
    JobRecord,
    JobStatus,
    Limitation,
    LimitationType,
    ScheduledWorkout,
    TrainingFocus,
    TrainingGoal,
    UserProfile,
    WeeklyAvailability,
    Workout,
)

__all__ = [
    "ClimbingDiscipline",
    "ClimbingLevel",
    "Difficulty",
    "Equipment",
    "Exercise",
    "GenerateWorkoutsRequest",
    "JobRecord",
    "JobStatus",
    "Limitation",
    "LimitationType",
    "ScheduledWorkout",
    "TrainingFocus",
    "TrainingGoal",
    "UserProfile",
    "WeeklyAvailability",
    "Workout",
]
