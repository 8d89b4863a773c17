"""Tests for SequentialWorkoutPipeline async generator.

Covers:
  - one model call per focus area, in request order
  - progress events before each call
  - terminal done event carrying every workout, in order
  - first failure aborts the batch with no partial results
"""

import pytest

from application.models import GenerateWorkoutsRequest, TrainingFocus
from backend.services.errors import InvalidRequestError, ProviderError
from backend.services.workout_generator import SingleWorkoutGenerator
from backend.services.workout_pipeline_service import (
    PipelineEvent,
    SequentialWorkoutPipeline,
    failure_message,
    progress_message,
)
from tests.fixtures.generation import FakeAIClient, make_request, workout_json, workout_payload


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _collect_events(gen) -> list[PipelineEvent]:
    events = []
    async for event in gen:
        events.append(event)
    return events


def _pipeline(ai: FakeAIClient) -> SequentialWorkoutPipeline:
    return SequentialWorkoutPipeline(SingleWorkoutGenerator(ai))


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class TestMessages:
    def test_progress_message(self):
        assert progress_message(0, 3, TrainingFocus.finger_strength) == "Creating workout 1/3: Finger Strength..."

    def test_failure_message_names_label_and_value(self):
        message = failure_message(TrainingFocus.endurance, ValueError("boom"))
        assert message == "Failed to generate workout for Endurance (endurance): boom"

    def test_failure_message_falls_back_to_type(self):
        assert failure_message(TrainingFocus.power, RuntimeError()).endswith(": RuntimeError")


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

class TestSequentialWorkoutPipeline:
    @pytest.mark.asyncio
    async def test_single_focus_success(self, valid_response):
        ai = FakeAIClient([valid_response])
        events = await _collect_events(_pipeline(ai).run(make_request(["finger_strength"])))

        assert [e.event for e in events] == ["progress", "done"]
        assert events[0].message == "Creating workout 1/1: Finger Strength..."
        assert events[-1].message == "All workouts ready!"
        assert len(events[-1].workouts) == 1
        assert events[-1].is_terminal

    @pytest.mark.asyncio
    async def test_calls_once_per_focus_in_order(self):
        ai = FakeAIClient([
            workout_json(workout_payload(title="Hangboard")),
            workout_json(workout_payload(title="4x4s", focus=["endurance"])),
            workout_json(workout_payload(title="Footwork", focus=["technique"])),
        ])
        request = make_request(["finger_strength", "endurance", "technique"])

        events = await _collect_events(_pipeline(ai).run(request))

        assert len(ai.calls) == 3
        assert "Finger Strength (finger_strength)" in ai.calls[0]["prompt"]
        assert "Endurance (endurance)" in ai.calls[1]["prompt"]
        assert "Technique (technique)" in ai.calls[2]["prompt"]

        progress = [e for e in events if e.event == "progress"]
        assert [e.message for e in progress] == [
            "Creating workout 1/3: Finger Strength...",
            "Creating workout 2/3: Endurance...",
            "Creating workout 3/3: Technique...",
        ]
        assert [e.index for e in progress] == [0, 1, 2]
        assert [w.title for w in events[-1].workouts] == ["Hangboard", "4x4s", "Footwork"]

    @pytest.mark.asyncio
    async def test_failure_aborts_without_partial_results(self, valid_response):
        ai = FakeAIClient([valid_response, "truncated", valid_response])
        request = make_request(["finger_strength", "endurance", "technique"])

        events = await _collect_events(_pipeline(ai).run(request))

        assert [e.event for e in events] == ["progress", "progress", "failed"]
        assert len(ai.calls) == 2
        failed = events[-1]
        assert failed.workouts == []
        assert failed.focus is TrainingFocus.endurance
        assert failed.message.startswith("Failed to generate workout for Endurance (endurance): ")
        assert "may be truncated" in failed.message
        assert "TruncatedResponseError" in failed.detail

    @pytest.mark.asyncio
    async def test_provider_failure_on_first_call(self):
        ai = FakeAIClient([ProviderError("Could not reach the AI service.")])
        events = await _collect_events(_pipeline(ai).run(make_request(["power", "technique"])))

        assert [e.event for e in events] == ["progress", "failed"]
        assert events[-1].message == "Failed to generate workout for Power (power): Could not reach the AI service."

    @pytest.mark.asyncio
    async def test_missing_profile_rejected(self):
        ai = FakeAIClient([])
        request = GenerateWorkoutsRequest(profile=None, focus_areas=[TrainingFocus.power])

        with pytest.raises(InvalidRequestError):
            await _collect_events(_pipeline(ai).run(request))
        assert ai.calls == []

    @pytest.mark.asyncio
    async def test_empty_focus_rejected(self, profile):
        ai = FakeAIClient([])
        request = GenerateWorkoutsRequest(profile=profile, focus_areas=[])

        with pytest.raises(InvalidRequestError, match="Missing required fields: profile and focusAreas"):
            await _collect_events(_pipeline(ai).run(request))
