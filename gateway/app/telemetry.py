"""Telemetry helpers for the FastAPI gateway."""
from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import Settings

logger = logging.getLogger(__name__)

_PROVIDER_INSTALLED = False


def _build_exporter_kwargs(settings: Settings) -> dict[str, object]:
    kwargs: dict[str, object] = {}
    if settings.telemetry_otlp_endpoint:
        kwargs["endpoint"] = settings.telemetry_otlp_endpoint
    if settings.telemetry_otlp_headers:
        kwargs["headers"] = settings.telemetry_otlp_headers
    return kwargs


def configure_telemetry(app: FastAPI, settings: Settings) -> bool:
    """Initialise OpenTelemetry tracing for inbound and upstream calls.

    Returns ``True`` when *app* was instrumented.  The tracer provider and the
    httpx instrumentation are process-wide and installed once; every app passed
    in gets its own FastAPI instrumentation.  The OpenTelemetry packages ship
    in the ``telemetry`` extra; without them tracing stays off.
    """

    global _PROVIDER_INSTALLED

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
    except ImportError:
        logger.warning("OpenTelemetry packages missing; install the 'telemetry' extra")
        return False

    if not _PROVIDER_INSTALLED:
        resource = Resource(attributes={
            "service.name": settings.telemetry_service_name,
            "deployment.environment": settings.environment,
        })
        tracer_provider = TracerProvider(
            resource=resource, sampler=TraceIdRatioBased(settings.telemetry_sample_ratio)
        )
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(**_build_exporter_kwargs(settings)))
        )
        trace.set_tracer_provider(tracer_provider)
        # Must run before the shared httpx client is created.
        HTTPXClientInstrumentor().instrument()
        _PROVIDER_INSTALLED = True

    FastAPIInstrumentor.instrument_app(app)
    return True


__all__ = ["configure_telemetry"]
