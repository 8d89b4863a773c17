"""
OpenTelemetry observability package for the workout generation service.

Usage:
    from backend.observability import (
        configure_observability,
        traced,
        GenerationMetrics,
    )

    # Initialize in application startup
    configure_observability(settings)

    # Use decorator for automatic tracing
    @traced
    async def my_function():
        ...

    # Record metrics
    GenerationMetrics.jobs_started_total().add(1)
"""

from backend.observability.config import configure_observability, shutdown_observability
from backend.observability.tracing import get_tracer, traced, add_span_attributes
from backend.observability.metrics import GenerationMetrics

__all__ = [
    # Configuration
    "configure_observability",
    "shutdown_observability",
    # Tracing
    "get_tracer",
    "traced",
    "add_span_attributes",
    # Metrics
    "GenerationMetrics",
]
