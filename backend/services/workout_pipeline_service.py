"""Sequential workout generation pipeline that yields progress events.

Focus areas are generated one at a time, in request order, never in parallel.
Each model call therefore has its own small output budget. The first failure
aborts the whole batch; partial results are never emitted.

Event sequence for n focus areas:
    progress(1/n) ... progress(k/n) -> done(workouts)   # all succeeded
    progress(1/n) ... progress(k/n) -> failed(error)    # call k failed
"""

import logging
import traceback
from dataclasses import dataclass, field
from typing import AsyncGenerator, List, Optional

from application.models import GenerateWorkoutsRequest, TrainingFocus, Workout
from backend.services.errors import InvalidRequestError
from backend.services.workout_generator import SingleWorkoutGenerator

logger = logging.getLogger(__name__)


@dataclass
class PipelineEvent:
    """A single observation from the generation pipeline."""

    event: str  # "progress", "done", "failed"
    message: str = ""
    index: Optional[int] = None  # 0-based focus index for progress events
    total: Optional[int] = None
    focus: Optional[TrainingFocus] = None
    workouts: List[Workout] = field(default_factory=list)
    detail: Optional[str] = None  # formatted traceback for failed events

    @property
    def is_terminal(self) -> bool:
        return self.event in ("done", "failed")


def progress_message(index: int, total: int, focus: TrainingFocus) -> str:
    return f"Creating workout {index + 1}/{total}: {focus.label}..."


def failure_message(focus: TrainingFocus, error: BaseException) -> str:
    cause = str(error) or type(error).__name__
    return f"Failed to generate workout for {focus.label} ({focus.value}): {cause}"


class SequentialWorkoutPipeline:
    """Runs SingleWorkoutGenerator once per requested focus area."""

    def __init__(self, generator: SingleWorkoutGenerator) -> None:
        self._generator = generator

    async def run(self, request: GenerateWorkoutsRequest) -> AsyncGenerator[PipelineEvent, None]:
        """Generate all workouts for a request, yielding progress then one terminal event."""
        if request.profile is None or not request.focus_areas:
            raise InvalidRequestError("Missing required fields: profile and focusAreas")

        focus_areas = list(request.focus_areas)
        total = len(focus_areas)
        workouts: List[Workout] = []

        for index, focus in enumerate(focus_areas):
            yield PipelineEvent(
                "progress",
                message=progress_message(index, total, focus),
                index=index,
                total=total,
                focus=focus,
            )

            try:
                workout = await self._generator.generate_one(
                    request.profile,
                    focus,
                    request.preferred_days,
                    request.notes,
                )
            except Exception as e:
                logger.warning("Failed to generate workout %d/%d (%s): %s", index + 1, total, focus.value, e)
                yield PipelineEvent(
                    "failed",
                    message=failure_message(focus, e),
                    index=index,
                    total=total,
                    focus=focus,
                    detail="".join(traceback.format_exception(type(e), e, e.__traceback__)),
                )
                return

            workouts.append(workout)
            logger.info("Generated workout %d/%d: %s", index + 1, total, workout.title)

        yield PipelineEvent("done", message="All workouts ready!", total=total, workouts=workouts)
