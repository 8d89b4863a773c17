"""Shared test fixtures."""

from tests.fixtures.otel import CapturedSpan, SpanCapture
from tests.fixtures.generation import (
    FakeAIClient,
    make_profile,
    make_request,
    workout_json,
    workout_payload,
)

__all__ = [
    "CapturedSpan",
    "SpanCapture",
    "FakeAIClient",
    "make_profile",
    "make_request",
    "workout_json",
    "workout_payload",
]
