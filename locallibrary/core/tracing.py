"""OpenTelemetry tracing for the catalog.

Tracing is off unless ``OTEL_ENABLED`` is set. When on, page requests and
catalog database statements are exported over OTLP, and ``fetch_all`` adds a
span around each parallel fan-out.
"""

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.trace import Tracer

from locallibrary.core.config import Settings, get_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

_provider: TracerProvider | None = None


def _exporter(settings: Settings) -> SpanExporter:
    if settings.otel_exporter_otlp_protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    else:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    return OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)


def _instrument(app: "FastAPI") -> None:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

    from locallibrary.core.database import engine

    FastAPIInstrumentor.instrument_app(app)
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)


def setup_tracing(app: "FastAPI") -> bool:
    """Install a tracer provider and instrument the app and the catalog engine.

    Returns False, leaving the no-op provider in place, when tracing is
    switched off.
    """
    global _provider

    settings = get_settings()
    if not settings.otel_enabled:
        logger.info("Tracing disabled")
        return False

    _provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "deployment.environment": settings.environment,
            }
        )
    )
    _provider.add_span_processor(BatchSpanProcessor(_exporter(settings)))
    trace.set_tracer_provider(_provider)
    _instrument(app)

    logger.info(
        f"Tracing '{settings.otel_service_name}' to {settings.otel_exporter_otlp_endpoint} "
        f"over {settings.otel_exporter_otlp_protocol}"
    )
    return True


def shutdown_tracing() -> None:
    """Flush pending spans; a no-op when tracing never started."""
    global _provider

    if _provider is None:
        return
    _provider.shutdown()
    _provider = None


def get_tracer(name: str) -> Tracer:
    return trace.get_tracer(name)
