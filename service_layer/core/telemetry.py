"""OpenTelemetry tracing for the service layer.

Traces requests (FastAPI), cache round-trips (Redis) and queries
(SQLAlchemy). Enabled by settings.telemetry_enabled and set up by the
application lifespan; needs the "telemetry" extra installed.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from service_layer.core.config import Settings

logger = logging.getLogger(__name__)


class Telemetry:
    """Tracer provider plus the instrumentations of the service layer's stack.

    Instrumentation failures are logged and leave the application running
    untraced.
    """

    def __init__(self, tracer_provider: TracerProvider) -> None:
        self.tracer_provider = tracer_provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "Telemetry":
        """Build the tracer provider for settings.telemetry_exporter and install it globally."""
        resource = Resource(
            attributes={
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: settings.app_version,
                "deployment.environment": settings.telemetry_environment,
            }
        )
        provider = TracerProvider(
            resource=resource,
            sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
        )
        exporter = _exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        logger.info(
            "OpenTelemetry initialized: service=%s, exporter=%s",
            settings.app_name,
            settings.telemetry_exporter,
        )
        return cls(provider)

    def instrument_fastapi(self, app: FastAPI) -> None:
        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls="/health"
            )
            logger.info("FastAPI instrumentation enabled")
        except Exception:
            logger.exception("Failed to instrument FastAPI")

    def instrument_redis(self) -> None:
        """Trace Redis commands; call before the cache store connects."""
        try:
            RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
            logger.info("Redis instrumentation enabled")
        except Exception:
            logger.exception("Failed to instrument Redis")

    def instrument_sqlalchemy(self, engine: AsyncEngine) -> None:
        try:
            SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=self.tracer_provider
            )
            logger.info("SQLAlchemy instrumentation enabled")
        except Exception:
            logger.exception("Failed to instrument SQLAlchemy")

    def shutdown(self) -> None:
        """Flush pending spans and stop the provider."""
        self.tracer_provider.shutdown()
        logger.info("Telemetry shutdown complete")


def _exporter(settings: Settings) -> SpanExporter | None:
    if settings.telemetry_exporter == "otlp":
        endpoint = settings.telemetry_otlp_endpoint
        return OTLPSpanExporter(
            endpoint=endpoint, insecure=bool(endpoint and endpoint.startswith("http://"))
        )
    if settings.telemetry_exporter == "console":
        return ConsoleSpanExporter()
    return None


_telemetry: Telemetry | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> Telemetry | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: Telemetry | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
