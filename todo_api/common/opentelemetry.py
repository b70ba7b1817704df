import logging
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor  # type: ignore

logger = logging.getLogger(__name__)


def setup_opentelemetry(service_name: str, app: FastAPI) -> None:
    logger.info(f"Setting up tracing for {service_name}...")

    trace_provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: service_name})
    )
    trace_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(trace_provider)

    FastAPIInstrumentor.instrument_app(app, excluded_urls="healthcheck")  # type: ignore
    logger.info("FastAPI instrumentation enabled.")
