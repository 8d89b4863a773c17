"""Domain models for climber profiles, generated workouts and generation jobs.

Wire format is camelCase (what the web client sends and reads); Python code
uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ClimbingDiscipline(str, Enum):
    bouldering = "bouldering"
    sport = "sport"
    trad = "trad"
    mixed = "mixed"


class Equipment(str, Enum):
    hangboard = "hangboard"
    campus_board = "campus_board"
    systems_wall = "systems_wall"
    resistance_bands = "resistance_bands"
    weights = "weights"
    pull_up_bar = "pull_up_bar"
    rings = "rings"
    none = "none"


class TrainingGoal(str, Enum):
    increase_grade = "increase_grade"
    build_endurance = "build_endurance"
    prevent_injury = "prevent_injury"
    improve_technique = "improve_technique"
    competition_prep = "competition_prep"
    general_fitness = "general_fitness"


class TrainingFocus(str, Enum):
    finger_strength = "finger_strength"
    power = "power"
    endurance = "endurance"
    technique = "technique"
    flexibility = "flexibility"
    core_strength = "core_strength"
    antagonist_training = "antagonist_training"

    @property
    def label(self) -> str:
        """Human-readable form, e.g. ``finger_strength`` -> ``Finger Strength``."""
        return " ".join(word.capitalize() for word in self.value.split("_"))


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class LimitationType(str, Enum):
    injury = "injury"
    time = "time"
    other = "other"


class JobStatus(str, Enum):
    running = "running"
    done = "done"
    error = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.running


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ClimbingLevel(CamelModel):
    discipline: ClimbingDiscipline
    grade: str = Field(..., min_length=1, max_length=20)  # "V4", "5.11a", ...


class WeeklyAvailability(CamelModel):
    days_per_week: int = Field(..., ge=1, le=7)
    minutes_per_session: int = Field(..., ge=10, le=480)


class Limitation(CamelModel):
    type: LimitationType
    description: str = Field(default="", max_length=500)


class UserProfile(CamelModel):
    """Climber profile. Passed by value into generation; never mutated there."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    experience_years: float = Field(..., ge=0, le=80)
    climbing_levels: List[ClimbingLevel] = Field(default_factory=list)
    goals: List[TrainingGoal] = Field(default_factory=list)
    available_equipment: List[Equipment] = Field(default_factory=list)
    weekly_availability: WeeklyAvailability
    limitations: List[Limitation] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


class Exercise(CamelModel):
    name: str = Field(..., min_length=1)
    sets: Optional[int] = Field(default=None, gt=0)
    reps: Optional[int] = Field(default=None, gt=0)
    duration: Optional[str] = None
    rest: Optional[str] = None
    instructions: str = ""
    notes: Optional[str] = None


class Workout(CamelModel):
    """A single generated workout. Created once by the response parser."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    # Model output is kept verbatim here; see DESIGN.md on focus validation.
    focus: List[str] = Field(..., min_length=1)
    estimated_duration: int = Field(..., gt=0)
    difficulty: Difficulty
    warmup: List[Exercise] = Field(default_factory=list)
    exercises: List[Exercise] = Field(default_factory=list)
    cooldown: List[Exercise] = Field(default_factory=list)
    notes: str = ""
    created_at: datetime


class ScheduledWorkout(CamelModel):
    """A workout placed on the training calendar."""

    id: str
    workout: Workout
    scheduled_date: date
    completed: bool = False
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Generation requests and jobs
# ---------------------------------------------------------------------------


class GenerateWorkoutsRequest(CamelModel):
    """Body of ``POST /generate-workouts/start``.

    ``profile`` and ``focus_areas`` are optional at the schema level so that a
    missing profile or an empty focus list surfaces as an InvalidRequestError
    from the orchestrator rather than a generic validation failure.
    """

    profile: Optional[UserProfile] = None
    focus_areas: List[TrainingFocus] = Field(default_factory=list)
    preferred_days: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class JobRecord(CamelModel):
    """Snapshot of one generation job. Immutable; the store swaps in copies."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    status: JobStatus = JobStatus.running
    created_at: datetime
    updated_at: datetime
    progress: Optional[str] = None
    workouts: Optional[List[Workout]] = None
    error: Optional[str] = None
    error_stack: Optional[str] = None
