"""
OpenTelemetry Setup

Tracer provider configuration for the e-commerce backend. Pipeline spans
are always created through the global tracer API; they are only exported
when OTLP export is enabled.
"""

import os
import socket
from typing import Optional

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from ..constants import APP_VERSION
from .config import Settings

logger = structlog.get_logger()

_tracer_provider: Optional[TracerProvider] = None


def _create_resource(settings: Settings) -> Resource:
    return Resource.create(
        {
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": APP_VERSION,
            "deployment.environment": settings.ENVIRONMENT,
            "host.name": socket.gethostname(),
            "process.pid": os.getpid(),
        }
    )


def setup_telemetry(settings: Settings, app: Optional[FastAPI] = None) -> Optional[TracerProvider]:
    """
    Install the global tracer provider and instrument the FastAPI app.

    Args:
        settings: Application settings
        app: FastAPI application to instrument

    Returns:
        The installed tracer provider, or None when export is disabled
    """
    global _tracer_provider

    if not settings.OTEL_ENABLED:
        logger.info("OpenTelemetry export disabled")
        return None

    if _tracer_provider is not None:
        return _tracer_provider

    provider = TracerProvider(resource=_create_resource(settings))
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True),
            max_queue_size=2048,
            max_export_batch_size=512,
        )
    )
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)

    logger.info(
        "Distributed tracing initialized",
        endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
        service_name=settings.OTEL_SERVICE_NAME,
    )
    return provider


def shutdown_telemetry() -> None:
    """Flush pending spans and shut the tracer provider down."""
    global _tracer_provider

    if _tracer_provider is None:
        return
    try:
        _tracer_provider.shutdown()
        logger.info("OpenTelemetry shutdown completed")
    except Exception as e:
        logger.error("Error during OpenTelemetry shutdown", error=str(e))
    finally:
        _tracer_provider = None
