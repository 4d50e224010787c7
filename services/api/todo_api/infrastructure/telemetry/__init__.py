from opentelemetry import trace as otel_trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
import logging
import os
from todo_api.common.config import Config

logger = logging.getLogger('app')


def setup_opentelemetry(app, engine=None) -> bool:
    """Exports spans over OTLP gRPC. Without an endpoint spans stay no-op and only
    the trace-aware log formatter and the tracer decorators remain active."""
    if not Config.OTEL_GRPC_ENDPOINT:
        logger.info('[OTEL] OTEL_GRPC_ENDPOINT is not set -> tracing export disabled')
        return False

    resource = Resource.create({
        "service.name": Config.OTEL_SERVICE_NAME,
        "service.version": Config.APP_VERSION,
        "process.pid": os.getpid(),
        "service.instance.id": f"worker-{os.getpid()}",
        })

    span_exporter = OTLPSpanExporter(endpoint=Config.OTEL_GRPC_ENDPOINT, insecure=True)
    tracer = TracerProvider(resource=resource)
    tracer.add_span_processor(BatchSpanProcessor(span_exporter))
    otel_trace.set_tracer_provider(tracer)

    FastAPIInstrumentor.instrument_app(app, exclude_spans=['receive', 'send'])
    LoggingInstrumentor().instrument(set_logging_format=False)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine)
    logger.info(f'[OTEL] Exporting spans to {Config.OTEL_GRPC_ENDPOINT}')
    return True
