"""Tests for scripts/generate_workouts.py exit codes and request assembly.

The script is loaded from its path; the poller is replaced with an AsyncMock
so no HTTP traffic happens.
"""

import importlib.util
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from application.models import TrainingFocus
from backend.services.errors import JobNotFoundError
from backend.services.job_poller import JobFailedError, JobStatusPoller, PollingTimeoutError
from tests.fixtures.generation import make_profile, workout_payload


pytestmark = pytest.mark.unit

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "generate_workouts.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("generate_workouts_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


script = _load_script()


@pytest.fixture
def profile_file(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(make_profile().to_wire()))
    return path


def _args(profile_file, *extra):
    return script.build_parser().parse_args(["--profile", str(profile_file), *extra])


def _poller(**generate_kwargs):
    poller = MagicMock(spec=JobStatusPoller)
    poller.generate = AsyncMock(**generate_kwargs)
    return poller


class TestBuildRequest:
    def test_focus_accepts_repeat_and_csv(self, profile_file):
        args = _args(profile_file, "--focus", "power,endurance", "--focus", "technique", "--days", "Mon,Thu")

        request = script.build_request(args)

        assert request.focus_areas == [TrainingFocus.power, TrainingFocus.endurance, TrainingFocus.technique]
        assert request.preferred_days == ["Mon", "Thu"]
        assert request.profile.name == "Alex Honnold"

    def test_unknown_focus(self, profile_file):
        with pytest.raises(ValueError, match="Unknown focus area"):
            script.build_request(_args(profile_file, "--focus", "campusing"))

    def test_missing_profile_file(self, tmp_path):
        args = _args(tmp_path / "nope.json", "--focus", "power")
        with pytest.raises(ValueError, match="Could not read profile"):
            script.build_request(args)


class TestRun:
    @pytest.mark.asyncio
    async def test_success_prints_workouts(self, profile_file, capsys):
        workouts = [workout_payload()]
        poller = _poller(return_value=workouts)

        code = await script.run(_args(profile_file, "--focus", "power"), poller=poller)

        assert code == script.EXIT_OK
        assert json.loads(capsys.readouterr().out) == workouts
        poller.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_writes_output_file(self, profile_file, tmp_path):
        output = tmp_path / "workouts.json"
        poller = _poller(return_value=[workout_payload()])

        code = await script.run(_args(profile_file, "--focus", "power", "-o", str(output)), poller=poller)

        assert code == script.EXIT_OK
        assert len(json.loads(output.read_text())) == 1

    @pytest.mark.asyncio
    async def test_timeout_exit_code(self, profile_file, capsys):
        poller = _poller(side_effect=PollingTimeoutError("job-1", attempts=180, last_progress="Generating power workout..."))

        code = await script.run(_args(profile_file, "--focus", "power"), poller=poller)

        assert code == script.EXIT_TIMEOUT
        assert "TIMEOUT" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_failed_job_exit_code(self, profile_file, capsys):
        poller = _poller(side_effect=JobFailedError("job-1", "Failed to generate power workout: bad JSON", "Traceback..."))

        code = await script.run(_args(profile_file, "--focus", "power", "-v"), poller=poller)

        err = capsys.readouterr().err
        assert code == script.EXIT_FAILED
        assert "Failed to generate power workout" in err
        assert "Traceback..." in err

    @pytest.mark.asyncio
    async def test_expired_job(self, profile_file, capsys):
        poller = _poller(side_effect=JobNotFoundError("job-1"))

        code = await script.run(_args(profile_file, "--focus", "power"), poller=poller)

        assert code == script.EXIT_FAILED
        assert "expired" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_bad_profile_never_polls(self, tmp_path):
        bad = tmp_path / "profile.json"
        bad.write_text("{not json")
        poller = _poller(return_value=[])

        code = await script.run(_args(bad, "--focus", "power"), poller=poller)

        assert code == script.EXIT_FAILED
        poller.generate.assert_not_called()
