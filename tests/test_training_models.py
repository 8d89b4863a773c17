"""Tests for the camelCase domain models in application.models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from application.models import (
    GenerateWorkoutsRequest,
    JobRecord,
    JobStatus,
    TrainingFocus,
    UserProfile,
)
from tests.fixtures.generation import make_profile


pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestTrainingFocus:
    @pytest.mark.parametrize("focus,label", [
        (TrainingFocus.finger_strength, "Finger Strength"),
        (TrainingFocus.power, "Power"),
        (TrainingFocus.antagonist_training, "Antagonist Training"),
    ])
    def test_label(self, focus, label):
        assert focus.label == label


class TestJobStatus:
    def test_terminal_states(self):
        assert JobStatus.running.is_terminal is False
        assert JobStatus.done.is_terminal is True
        assert JobStatus.error.is_terminal is True


class TestUserProfile:
    def test_reads_camel_case(self):
        profile = make_profile()
        assert profile.experience_years == 4
        assert profile.weekly_availability.days_per_week == 3

    def test_accepts_snake_case_names(self):
        profile = UserProfile(
            name="Adam",
            experience_years=10,
            weekly_availability={"days_per_week": 5, "minutes_per_session": 120},
        )
        assert profile.to_wire()["weeklyAvailability"] == {"daysPerWeek": 5, "minutesPerSession": 120}

    def test_is_frozen(self):
        profile = make_profile()
        with pytest.raises(ValidationError):
            profile.name = "Someone else"

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"experienceYears": -1},
        {"weeklyAvailability": {"daysPerWeek": 0, "minutesPerSession": 60}},
        {"weeklyAvailability": {"daysPerWeek": 3, "minutesPerSession": 5}},
        {"goals": ["get_famous"]},
    ])
    def test_rejects_invalid(self, overrides):
        with pytest.raises(ValidationError):
            make_profile(**overrides)


class TestGenerateWorkoutsRequest:
    def test_profile_and_focus_optional_at_schema_level(self):
        request = GenerateWorkoutsRequest.model_validate({})
        assert request.profile is None
        assert request.focus_areas == []

    def test_unknown_focus_rejected(self):
        with pytest.raises(ValidationError):
            GenerateWorkoutsRequest.model_validate({"focusAreas": ["campusing"]})


class TestJobRecord:
    def test_wire_format(self):
        record = JobRecord(job_id="job-1", created_at=NOW, updated_at=NOW, progress="Initializing workout generation...")

        wire = record.to_wire()

        assert wire["jobId"] == "job-1"
        assert wire["status"] == "running"
        assert wire["errorStack"] is None
        assert wire["createdAt"].startswith("2026-03-01T12:00:00")
