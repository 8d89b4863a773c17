"""Check a generated workout against the output limits the prompt asked for.

Scores item counts, text lengths, duration, volume sanity and duplicate
exercises. Runs sync, logs issues, does not block the generation pipeline.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from application.models import Exercise, TrainingFocus, Workout
from backend.services.prompt_builder import OUTPUT_LIMITS, OutputLimits

logger = logging.getLogger(__name__)

SANE_REP_MAX = 100
SANE_SET_MAX = 20


@dataclass
class ShapeReport:
    """Composite shape score for a generated workout."""

    counts: float = 0.0  # 0-1: sections within their item ranges
    lengths: float = 0.0  # 0-1: text fields within their char limits
    volume_sanity: float = 0.0  # 0-1: sets and reps in sane ranges
    variety: float = 0.0  # 0-1: unique main exercises / total
    duration_ok: bool = True
    issues: List[str] = field(default_factory=list)

    @property
    def overall(self) -> float:
        """Weighted average: counts(35%) + lengths(25%) + volume(20%) + variety(20%)."""
        return (
            self.counts * 0.35
            + self.lengths * 0.25
            + self.volume_sanity * 0.20
            + self.variety * 0.20
        )


class WorkoutShapeEvaluator:
    """Score a Workout against OutputLimits."""

    def __init__(self, limits: OutputLimits = OUTPUT_LIMITS) -> None:
        self._limits = limits

    def evaluate(self, workout: Workout, minutes_per_session: Optional[int] = None) -> ShapeReport:
        limits = self._limits
        report = ShapeReport()

        # Section counts
        sections = [
            ("warmup", workout.warmup, limits.warmup_min, limits.warmup_max),
            ("exercises", workout.exercises, limits.exercises_min, limits.exercises_max),
            ("cooldown", workout.cooldown, limits.cooldown_min, limits.cooldown_max),
        ]
        in_range = 0
        for name, items, low, high in sections:
            n = len(items)
            if low <= n <= high:
                in_range += 1
            else:
                report.issues.append(f"{name} has {n} items (expected {low}-{high})")
        report.counts = in_range / len(sections)

        # Text lengths
        checks = 0
        ok = 0
        for ex in [*workout.warmup, *workout.exercises, *workout.cooldown]:
            checks += 1
            if len(ex.instructions) <= limits.instructions_max_chars:
                ok += 1
            else:
                report.issues.append(
                    f"'{ex.name}' instructions are {len(ex.instructions)} chars "
                    f"(max {limits.instructions_max_chars})"
                )
            if ex.notes is not None:
                checks += 1
                if len(ex.notes) <= limits.exercise_notes_max_chars:
                    ok += 1
                else:
                    report.issues.append(
                        f"'{ex.name}' notes are {len(ex.notes)} chars "
                        f"(max {limits.exercise_notes_max_chars})"
                    )
        checks += 1
        if len(workout.notes) <= limits.workout_notes_max_chars:
            ok += 1
        else:
            report.issues.append(
                f"workout notes are {len(workout.notes)} chars (max {limits.workout_notes_max_chars})"
            )
        report.lengths = ok / checks

        # Volume sanity (main exercises only)
        main = workout.exercises
        if main:
            report.volume_sanity = sum(1 for ex in main if self._volume_ok(ex, report)) / len(main)
            names = [ex.name.lower().strip() for ex in main]
            unique = len(set(names))
            report.variety = unique / len(names)
            if unique < len(names):
                report.issues.append(f"{len(names) - unique} duplicate exercise(s)")
        else:
            report.issues.append("No main exercises in workout")

        # Focus tags outside the known set are kept but flagged
        known = {f.value for f in TrainingFocus}
        unknown = [tag for tag in workout.focus if tag not in known]
        if unknown:
            report.issues.append(f"unknown focus value(s): {', '.join(unknown)}")

        # Duration
        if minutes_per_session is not None and workout.estimated_duration > minutes_per_session:
            report.duration_ok = False
            report.issues.append(
                f"estimated duration {workout.estimated_duration} min exceeds "
                f"session length {minutes_per_session} min"
            )

        return report

    @staticmethod
    def _volume_ok(ex: Exercise, report: ShapeReport) -> bool:
        ok = True
        if ex.reps is not None and ex.reps > SANE_REP_MAX:
            report.issues.append(f"'{ex.name}' has {ex.reps} reps (expected 1-{SANE_REP_MAX})")
            ok = False
        if ex.sets is not None and ex.sets > SANE_SET_MAX:
            report.issues.append(f"'{ex.name}' has {ex.sets} sets (expected 1-{SANE_SET_MAX})")
            ok = False
        return ok
