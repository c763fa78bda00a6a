"""
OpenTelemetry instrumentation for the API and the worker

Tracing is opt-in (ENABLE_TRACING). When enabled, spans are exported over
OTLP/HTTP and FastAPI, SQLAlchemy and aio-pika are auto-instrumented.
"""

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.aio_pika import AioPikaInstrumentor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from blueprint.core.config import config
from blueprint.core.logger import logger


def init_telemetry(service_name: str = None) -> bool:
    """
    Install a tracer provider exporting to the configured OTLP endpoint.

    Returns:
        True if tracing was initialized, False if disabled or failed
    """
    if not config.enable_tracing:
        logger.debug("Tracing disabled by configuration")
        return False

    try:
        resource = Resource.create({
            "service.name": service_name or config.service_name,
            "service.version": config.service_version,
            "deployment.environment": config.environment,
        })

        provider = TracerProvider(resource=resource)
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otel_exporter_otlp_endpoint))
        )
        trace.set_tracer_provider(provider)

        logger.info(
            "Tracing initialized",
            metadata={"endpoint": config.otel_exporter_otlp_endpoint}
        )
        return True
    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}", error=e)
        return False


def instrument_app(app):
    """
    Instrument FastAPI application with OpenTelemetry for automatic span creation.

    Args:
        app: FastAPI application instance
    """
    if not config.enable_tracing:
        return

    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented with OpenTelemetry")
    except Exception as e:
        logger.error(f"Failed to instrument application: {e}", error=e)


def instrument_engine(engine):
    """Instrument a SQLAlchemy async engine"""
    if not config.enable_tracing:
        return

    try:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        logger.info("SQLAlchemy instrumented with OpenTelemetry")
    except Exception as e:
        logger.error(f"Failed to instrument database engine: {e}", error=e)


def instrument_broker():
    """Instrument aio-pika publishing and consuming"""
    if not config.enable_tracing:
        return

    try:
        AioPikaInstrumentor().instrument()
        logger.info("aio-pika instrumented with OpenTelemetry")
    except Exception as e:
        logger.error(f"Failed to instrument message broker client: {e}", error=e)
