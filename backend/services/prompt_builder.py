"""Prompt construction for single-workout generation.

One prompt covers exactly one focus area. Batching several focus areas into a
single call produced responses that ran past the output token ceiling, so the
pipeline calls the model once per focus area with these hard limits.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from application.models import TrainingFocus, UserProfile


@dataclass(frozen=True)
class OutputLimits:
    """Hard limits the model is told to respect. Shared with the shape evaluator."""

    warmup_min: int = 2
    warmup_max: int = 3
    exercises_min: int = 4
    exercises_max: int = 6
    cooldown_min: int = 1
    cooldown_max: int = 2
    instructions_max_chars: int = 160
    exercise_notes_max_chars: int = 80
    workout_notes_max_chars: int = 200


OUTPUT_LIMITS = OutputLimits()


def _profile_lines(profile: UserProfile, notes: Optional[str]) -> str:
    levels = ", ".join(f"{lvl.discipline.value}: {lvl.grade}" for lvl in profile.climbing_levels)
    goals = ", ".join(goal.value for goal in profile.goals)
    equipment = ", ".join(item.value for item in profile.available_equipment)
    limitations = "; ".join(
        f"{lim.type.value}: {lim.description}" for lim in profile.limitations
    )
    availability = profile.weekly_availability

    lines = [
        f"- Name: {profile.name}",
        f"- Experience: {profile.experience_years:g} years",
        f"- Climbing Levels: {levels or 'Not specified'}",
        f"- Goals: {goals or 'Not specified'}",
        f"- Available Equipment: {equipment or 'None'}",
        (
            f"- Weekly Availability: {availability.days_per_week} days/week, "
            f"{availability.minutes_per_session} minutes/session"
        ),
    ]
    if limitations:
        lines.append(f"- Limitations: {limitations}")
    if notes:
        lines.append(f"- Additional Notes: {notes.strip()}")
    return "\n".join(lines)


def build_single_workout_prompt(
    profile: UserProfile,
    focus: TrainingFocus,
    preferred_days: Sequence[str],
    notes: Optional[str] = None,
    limits: OutputLimits = OUTPUT_LIMITS,
) -> str:
    """Build the instruction string for one workout in one focus area.

    Pure and deterministic: the same inputs always yield the same prompt.
    """
    minutes = profile.weekly_availability.minutes_per_session
    days = ", ".join(preferred_days) if preferred_days else "Flexible"

    return f"""You are an expert climbing coach. Generate ONE personalized training workout for the following climber profile:

**Climber Profile:**
{_profile_lines(profile, notes)}

**Training Focus Area:** {focus.label} ({focus.value})
**Preferred Training Days:** {days}

Generate ONE specific, detailed workout focused on {focus.label}. The workout should:
1. Be appropriate for the climber's level and goals
2. Use only the available equipment (or bodyweight if no equipment)
3. Respect any limitations mentioned
4. Fit within the time constraints ({minutes} minutes)
5. Include specific exercises with sets, reps, duration, and rest periods
6. Be practical and safe

HARD OUTPUT LIMITS (must follow exactly):
- Return a JSON array with EXACTLY ONE workout object.
- warmup: {limits.warmup_min}-{limits.warmup_max} items maximum.
- exercises: {limits.exercises_min}-{limits.exercises_max} items maximum.
- cooldown: {limits.cooldown_min}-{limits.cooldown_max} items maximum.
- Each `instructions` string must be <= {limits.instructions_max_chars} characters.
- Exercise `notes` must be <= {limits.exercise_notes_max_chars} characters.
- Workout `notes` must be <= {limits.workout_notes_max_chars} characters.
- estimatedDuration must not exceed {minutes}.
- Do NOT include markdown, backticks, the word 'json', or commentary.
- Output must be valid JSON.

JSON Structure (return exactly this format):
[{{
  "title": "Descriptive workout title",
  "focus": ["{focus.value}"],
  "estimatedDuration": number (in minutes, max {minutes}),
  "difficulty": "beginner" | "intermediate" | "advanced",
  "warmup": [
    {{
      "name": "Exercise name",
      "duration": "time",
      "instructions": "Brief how-to (<= {limits.instructions_max_chars} chars)"
    }}
  ],
  "exercises": [
    {{
      "name": "Exercise name",
      "sets": number,
      "reps": number,
      "duration": "time (if applicable)",
      "rest": "rest period",
      "instructions": "Brief instructions (<= {limits.instructions_max_chars} chars)",
      "notes": "Important notes (<= {limits.exercise_notes_max_chars} chars, optional)"
    }}
  ],
  "cooldown": [
    {{
      "name": "Exercise name",
      "duration": "time",
      "instructions": "Brief how-to (<= {limits.instructions_max_chars} chars)"
    }}
  ],
  "notes": "Overall workout notes (<= {limits.workout_notes_max_chars} chars)"
}}]

Return ONLY the JSON array, nothing else."""
