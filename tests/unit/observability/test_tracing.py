"""
Unit tests for backend/observability/tracing.py and metrics.py

Tests the @traced decorator, add_span_attributes and the lazily created
generation metrics.

Note: Due to OTel's global TracerProvider constraint, span capture may be
unavailable if another provider was installed first; those assertions skip.
"""

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.trace import SpanKind

from backend.observability import GenerationMetrics
from backend.observability.tracing import add_span_attributes, get_tracer, traced
from tests.fixtures.otel import SpanCapture


pytestmark = pytest.mark.unit

_CAPTURE = SpanCapture()


@pytest.fixture(scope="module", autouse=True)
def _install_provider():
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(_CAPTURE.exporter))
    trace.set_tracer_provider(provider)
    yield


@pytest.fixture
def span_capture() -> SpanCapture:
    _CAPTURE.clear()
    yield _CAPTURE
    _CAPTURE.clear()


def _spans_or_skip(capture: SpanCapture, name: str):
    spans = capture.get_spans_by_name(name)
    if not spans:
        pytest.skip("global TracerProvider was set elsewhere; span capture unavailable")
    return spans


class TestGetTracer:
    def test_returns_tracer_instance(self):
        tracer = get_tracer()
        assert hasattr(tracer, "start_as_current_span")

    def test_custom_name(self):
        assert get_tracer("custom-tracer") is not None


class TestTracedDecorator:
    def test_decorated_function_works(self):
        @traced
        def my_function():
            return "result"

        assert my_function() == "result"

    def test_preserves_function_name(self):
        @traced
        def my_named_function():
            pass

        assert my_named_function.__name__ == "my_named_function"

    def test_span_recorded_with_attributes(self, span_capture):
        @traced(name="client.call", kind=SpanKind.CLIENT, attributes={"service": "test"})
        def call_external():
            return "response"

        assert call_external() == "response"

        span = _spans_or_skip(span_capture, "client.call")[0]
        assert span.attributes["service"] == "test"
        assert span.status_code == "OK"

    def test_exception_is_reraised_and_recorded(self, span_capture):
        @traced(name="error.func")
        def failing():
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            failing()

        span = _spans_or_skip(span_capture, "error.func")[0]
        assert span.status_code == "ERROR"
        assert any(e["name"] == "exception" for e in span.events)

    @pytest.mark.asyncio
    async def test_async_function_traced(self, span_capture):
        @traced(name="async.func")
        async def async_function():
            add_span_attributes({"workout.focus": "power"})
            return "async_result"

        assert await async_function() == "async_result"

        span = _spans_or_skip(span_capture, "async.func")[0]
        assert span.attributes["workout.focus"] == "power"

    @pytest.mark.asyncio
    async def test_async_exception_is_reraised(self):
        @traced(name="async.error")
        async def async_failing():
            raise RuntimeError("async error")

        with pytest.raises(RuntimeError, match="async error"):
            await async_failing()


class TestAddSpanAttributes:
    def test_no_error_without_span(self):
        add_span_attributes({"key": "value"})


class TestGenerationMetrics:
    def test_instruments_are_cached(self):
        GenerationMetrics.reset()
        first = GenerationMetrics.jobs_started_total()
        assert GenerationMetrics.jobs_started_total() is first

    def test_instruments_accept_recordings(self):
        GenerationMetrics.jobs_finished_total().add(1, {"status": "done"})
        GenerationMetrics.workouts_generated_total().add(1, {"focus": "power", "outcome": "ok"})
        GenerationMetrics.model_call_seconds().record(1.5, {"model": "claude-test"})
        GenerationMetrics.tokens_used_total().add(100, {"type": "input", "model": "claude-test"})
