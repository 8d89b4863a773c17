"""
Metrics definitions for workout generation.

Defines all metrics using OpenTelemetry Meter API. Without a configured
MeterProvider the instruments are no-ops.
"""

from typing import Optional

from opentelemetry import metrics

_METER_NAME = "workout-generator-api"


def _get_meter() -> metrics.Meter:
    """Get the metrics meter instance."""
    return metrics.get_meter(_METER_NAME)


class GenerationMetrics:
    """
    Centralized metrics for generation jobs and model calls.

    All metrics are lazily initialized on first access.
    """

    _jobs_started_total: Optional[metrics.Counter] = None
    _jobs_finished_total: Optional[metrics.Counter] = None
    _workouts_generated_total: Optional[metrics.Counter] = None
    _model_call_seconds: Optional[metrics.Histogram] = None
    _tokens_used_total: Optional[metrics.Counter] = None

    @classmethod
    def jobs_started_total(cls) -> metrics.Counter:
        """Counter for generation jobs accepted."""
        if cls._jobs_started_total is None:
            cls._jobs_started_total = _get_meter().create_counter(
                name="generation_jobs_started_total",
                description="Total number of workout generation jobs started",
                unit="1",
            )
        return cls._jobs_started_total

    @classmethod
    def jobs_finished_total(cls) -> metrics.Counter:
        """Counter for generation jobs reaching a terminal status (status=done|error)."""
        if cls._jobs_finished_total is None:
            cls._jobs_finished_total = _get_meter().create_counter(
                name="generation_jobs_finished_total",
                description="Total number of workout generation jobs finished",
                unit="1",
            )
        return cls._jobs_finished_total

    @classmethod
    def workouts_generated_total(cls) -> metrics.Counter:
        """Counter for single-workout generations by outcome and focus."""
        if cls._workouts_generated_total is None:
            cls._workouts_generated_total = _get_meter().create_counter(
                name="workouts_generated_total",
                description="Single workout generation attempts",
                unit="1",
            )
        return cls._workouts_generated_total

    @classmethod
    def model_call_seconds(cls) -> metrics.Histogram:
        """Histogram for model call duration."""
        if cls._model_call_seconds is None:
            cls._model_call_seconds = _get_meter().create_histogram(
                name="model_call_seconds",
                description="Duration of Anthropic generation calls",
                unit="s",
            )
        return cls._model_call_seconds

    @classmethod
    def tokens_used_total(cls) -> metrics.Counter:
        """Counter for total tokens used by type."""
        if cls._tokens_used_total is None:
            cls._tokens_used_total = _get_meter().create_counter(
                name="tokens_used_total",
                description="Total tokens used",
                unit="1",
            )
        return cls._tokens_used_total

    @classmethod
    def reset(cls) -> None:
        """Drop cached instruments so they rebind to the current MeterProvider."""
        cls._jobs_started_total = None
        cls._jobs_finished_total = None
        cls._workouts_generated_total = None
        cls._model_call_seconds = None
        cls._tokens_used_total = None
