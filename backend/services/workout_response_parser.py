"""Parse and validate one model response into a Workout.

Pure: no network or storage access. Every failure is raised as one of the
ResponseContractError subclasses in backend.services.errors.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from application.models import Difficulty, Exercise, TrainingFocus, Workout
from backend.services.errors import (
    EmptyResponseError,
    InvalidWorkoutError,
    MalformedResponseError,
    TruncatedResponseError,
)

logger = logging.getLogger(__name__)

# A complete single-workout JSON document is never shorter than this.
MIN_RESPONSE_CHARS = 100
DEFAULT_ESTIMATED_DURATION = 60
DEFAULT_DIFFICULTY = Difficulty.intermediate
EXCERPT_CHARS = 500

_KNOWN_FOCUS_VALUES = {f.value for f in TrainingFocus}


def strip_code_fences(text: str) -> str:
    """Remove an enclosing ``` / ```json fence if the model added one anyway."""
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1:]
        else:
            text = text[3:]
    if text.endswith("```"):
        text = text[: -len("```")]
    return text.strip()


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _parse_exercises(raw: Dict[str, Any], field: str) -> List[Exercise]:
    items = raw.get(field)
    if not isinstance(items, list):
        return []

    exercises: List[Exercise] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise InvalidWorkoutError(f"Item {position} in '{field}' is not an object")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidWorkoutError(f"Item {position} in '{field}' is missing a name")
        exercises.append(
            Exercise(
                name=name.strip(),
                sets=_positive_int(item.get("sets")),
                reps=_positive_int(item.get("reps")),
                duration=_optional_text(item.get("duration")),
                rest=_optional_text(item.get("rest")),
                instructions=_optional_text(item.get("instructions")) or "",
                notes=_optional_text(item.get("notes")),
            )
        )
    return exercises


def _parse_focus(raw: Dict[str, Any], requested: TrainingFocus) -> List[str]:
    focus = raw.get("focus")
    if isinstance(focus, str):
        focus = [focus]
    if not isinstance(focus, list):
        return [requested.value]
    values = [f.strip() for f in focus if isinstance(f, str) and f.strip()]
    if not values:
        return [requested.value]
    unknown = [v for v in values if v not in _KNOWN_FOCUS_VALUES]
    if unknown:
        logger.info("Model returned focus values outside the known set: %s", unknown)
    return values


def _parse_duration(raw: Dict[str, Any], max_duration: Optional[int]) -> int:
    duration = _positive_int(raw.get("estimatedDuration")) or DEFAULT_ESTIMATED_DURATION
    if max_duration is not None and duration > max_duration:
        logger.info("Capping estimatedDuration %d to session length %d", duration, max_duration)
        duration = max_duration
    return duration


def _parse_difficulty(raw: Dict[str, Any]) -> Difficulty:
    value = raw.get("difficulty")
    try:
        return Difficulty(value)
    except (ValueError, TypeError):
        return DEFAULT_DIFFICULTY


def parse_workout_response(
    response_text: str,
    focus: TrainingFocus,
    max_duration: Optional[int] = None,
) -> Workout:
    """Turn raw model text into a validated Workout.

    Args:
        response_text: Raw text returned by the model.
        focus: Focus area the prompt asked for; used when the model omits ``focus``.
        max_duration: Session length cap in minutes for ``estimatedDuration``.

    Raises:
        TruncatedResponseError: text is too short to be a complete workout.
        MalformedResponseError: text is not valid JSON.
        EmptyResponseError: the JSON array has no elements.
        InvalidWorkoutError: the element is not an object, lacks a title, or
            contains an exercise without a name.
    """
    text = (response_text or "").strip()
    if len(text) < MIN_RESPONSE_CHARS:
        raise TruncatedResponseError("AI response too short - may be truncated. Try again.")

    text = strip_code_fences(text)

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, integer digit limits and runaway nesting
        excerpt = response_text[:EXCERPT_CHARS]
        logger.warning(
            "Unparseable response for %s (first %d chars): %s",
            focus.value,
            EXCERPT_CHARS,
            excerpt,
        )
        raise MalformedResponseError(
            f"Incomplete AI response for {focus.value}. JSON parsing failed: {e}",
            excerpt=excerpt,
        ) from e

    if isinstance(parsed, list):
        if not parsed:
            raise EmptyResponseError("No workout generated. Please try again.")
        raw = parsed[0]
    else:
        raw = parsed

    if not isinstance(raw, dict):
        raise InvalidWorkoutError("Invalid workout format received from AI")

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise InvalidWorkoutError("Workout missing title - response may be incomplete")

    notes = raw.get("notes")

    return Workout(
        id=str(uuid.uuid4()),
        title=title,
        focus=_parse_focus(raw, focus),
        estimated_duration=_parse_duration(raw, max_duration),
        difficulty=_parse_difficulty(raw),
        warmup=_parse_exercises(raw, "warmup"),
        exercises=_parse_exercises(raw, "exercises"),
        cooldown=_parse_exercises(raw, "cooldown"),
        notes=notes if isinstance(notes, str) else "",
        created_at=datetime.now(timezone.utc),
    )
