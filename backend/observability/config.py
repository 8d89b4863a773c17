"""
OpenTelemetry wiring for the workout generator.

Installs the global TracerProvider and MeterProvider once per process and
instruments the FastAPI app plus outbound HTTPX calls (the Anthropic SDK
and Supabase both go through HTTPX).
"""

import logging
from typing import TYPE_CHECKING, Optional

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

if TYPE_CHECKING:
    from backend.settings import Settings

logger = logging.getLogger(__name__)

SERVICE_VERSION_VALUE = "1.0.0"

# Health probes poll constantly; keep them out of traces.
EXCLUDED_URLS = "health,health/ready"

_providers_installed = False


def build_resource(settings: "Settings") -> Resource:
    """Resource attributes shared by every span and metric of this process."""
    attributes = {
        SERVICE_NAME: settings.otel_service_name,
        SERVICE_VERSION: SERVICE_VERSION_VALUE,
        "deployment.environment": settings.environment,
        "generation.model": settings.default_model,
    }
    if settings.render_git_commit:
        attributes["service.instance.id"] = settings.render_git_commit
    return Resource.create(attributes)


def _otlp_url(endpoint: str, signal: str) -> str:
    return f"{endpoint.rstrip('/')}/v1/{signal}"


def _install_providers(settings: "Settings") -> None:
    resource = build_resource(settings)
    endpoint = settings.otel_exporter_otlp_endpoint

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.otel_traces_sample_rate)),
    )
    if endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=_otlp_url(endpoint, "traces")))
        )
    else:
        tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    # Metrics only leave the process when a collector is configured.
    if endpoint:
        reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=_otlp_url(endpoint, "metrics")),
            export_interval_millis=settings.otel_metrics_export_interval_ms,
        )
        metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    HTTPXClientInstrumentor().instrument()


def configure_observability(settings: "Settings", app: Optional[FastAPI] = None) -> bool:
    """
    Enable tracing and metrics when ``settings.otel_enabled`` is set.

    Providers are installed on the first call only; every app passed in is
    instrumented. Returns True when telemetry is active.
    """
    global _providers_installed

    if not settings.otel_enabled:
        logger.debug("OpenTelemetry disabled")
        return False

    if not _providers_installed:
        _install_providers(settings)
        _providers_installed = True
        logger.info(
            "OpenTelemetry initialized: service=%s sample_rate=%.2f exporter=%s",
            settings.otel_service_name,
            settings.otel_traces_sample_rate,
            settings.otel_exporter_otlp_endpoint or "console",
        )

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)
    return True


def shutdown_observability() -> None:
    """Flush and stop the SDK providers installed by configure_observability()."""
    global _providers_installed

    if not _providers_installed:
        return

    for provider in (trace.get_tracer_provider(), metrics.get_meter_provider()):
        shutdown = getattr(provider, "shutdown", None)
        if shutdown is not None:
            try:
                shutdown()
            except Exception:
                logger.exception("Error shutting down %s", type(provider).__name__)

    _providers_installed = False
    logger.info("OpenTelemetry shutdown complete")
