"""Generate exactly one workout for one focus area.

Composes prompt building, one model call and response parsing. This is the
unit of retryable work; errors from the client and parser propagate unchanged.
"""

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from application.models import TrainingFocus, UserProfile, Workout
from backend.observability import GenerationMetrics, add_span_attributes, traced
from backend.services.prompt_builder import build_single_workout_prompt
from backend.services.workout_response_parser import parse_workout_response
from backend.services.workout_shape_evaluator import WorkoutShapeEvaluator

if TYPE_CHECKING:
    from backend.services.ai_client import AIClient

logger = logging.getLogger(__name__)

# Small per-call budget and low temperature keep each response complete.
DEFAULT_MAX_TOKENS = 1200
DEFAULT_TEMPERATURE = 0.4


class SingleWorkoutGenerator:
    """Prompt -> model -> parser for a single focus area."""

    def __init__(
        self,
        ai_client: "AIClient",
        model: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        shape_evaluator: Optional[WorkoutShapeEvaluator] = None,
    ) -> None:
        self._ai = ai_client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._evaluator = shape_evaluator or WorkoutShapeEvaluator()

    @traced(name="workout_generator.generate_one")
    async def generate_one(
        self,
        profile: UserProfile,
        focus: TrainingFocus,
        preferred_days: Sequence[str],
        notes: Optional[str] = None,
    ) -> Workout:
        add_span_attributes({"workout.focus": focus.value})
        prompt = build_single_workout_prompt(profile, focus, preferred_days, notes)
        minutes = profile.weekly_availability.minutes_per_session

        try:
            text = await self._ai.generate(
                prompt,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                model=self._model,
            )
            workout = parse_workout_response(text, focus, max_duration=minutes)
        except Exception as e:
            GenerationMetrics.workouts_generated_total().add(
                1, {"focus": focus.value, "outcome": getattr(e, "kind", "unexpected")}
            )
            raise

        GenerationMetrics.workouts_generated_total().add(1, {"focus": focus.value, "outcome": "ok"})
        self._log_shape(workout, minutes)
        return workout

    def _log_shape(self, workout: Workout, minutes_per_session: int) -> None:
        # Non-blocking: a shape problem never fails the generation.
        try:
            report = self._evaluator.evaluate(workout, minutes_per_session=minutes_per_session)
        except Exception:
            logger.warning("Shape evaluation failed for workout %s (non-blocking)", workout.id)
            return
        if report.issues:
            logger.info(
                "Workout shape: overall=%.2f counts=%.2f lengths=%.2f volume=%.2f variety=%.2f issues=%s",
                report.overall, report.counts, report.lengths,
                report.volume_sanity, report.variety, report.issues,
            )
