import logging
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor  # type: ignore
from opentelemetry.instrumentation.redis import RedisInstrumentor  # type: ignore
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor  # type: ignore

logger = logging.getLogger(__name__)


def setup_opentelemetry(service_name: str, app: FastAPI, task_store_backend: str) -> None:
    logger.info("Setting up instrumentation...")

    trace_provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: service_name})
    )
    trace_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(trace_provider)

    FastAPIInstrumentor.instrument_app(app)  # type: ignore
    logger.info("FastAPI Instrumentation enabled.")

    # Spans for the calls made against the task collection
    if task_store_backend == "redis":
        RedisInstrumentor().instrument()
        logger.info("Redis Instrumentation enabled.")
    else:
        SQLAlchemyInstrumentor().instrument()
        logger.info("SQLAlchemy Instrumentation enabled.")
