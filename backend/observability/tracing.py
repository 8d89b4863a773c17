"""
Tracing utilities for OpenTelemetry.

Provides the @traced decorator and get_tracer() helper.
"""

import functools
import inspect
from typing import Any, Callable, Optional, TypeVar, Union

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

# Type variable for generic function wrapping
F = TypeVar("F", bound=Callable[..., Any])

_DEFAULT_TRACER_NAME = "workout-generator-api"


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """Get an OpenTelemetry tracer instance (defaults to the service tracer)."""
    return trace.get_tracer(name or _DEFAULT_TRACER_NAME)


def traced(
    _func: Optional[Callable] = None,
    *,
    name: Optional[str] = None,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[dict] = None,
) -> Union[Callable[[F], F], F]:
    """
    Decorator to automatically create a span around a function.

    Works with both sync and async functions. Can be used with or without parentheses.

    Example:
        @traced
        def my_function():
            ...

        @traced(name="ai_client.generate", kind=SpanKind.CLIENT)
        async def call_model():
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or func.__name__

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with get_tracer().start_as_current_span(
                    span_name,
                    kind=kind,
                    attributes=attributes,
                ) as span:
                    try:
                        result = await func(*args, **kwargs)
                        span.set_status(Status(StatusCode.OK))
                        return result
                    except Exception as e:
                        span.set_status(Status(StatusCode.ERROR, str(e)))
                        span.record_exception(e)
                        raise

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with get_tracer().start_as_current_span(
                span_name,
                kind=kind,
                attributes=attributes,
            ) as span:
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return sync_wrapper  # type: ignore

    # Handle @traced without parentheses
    if _func is not None:
        return decorator(_func)

    return decorator


def add_span_attributes(attributes: dict) -> None:
    """Add attributes to the current span, if one is recording."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
