"""
OpenTelemetry tracing for the MaintMENA backend.

Django requests and outgoing HTTP calls are instrumented automatically. The
quote, contract and vendor services open their own spans through
``get_tracer`` and ``trace_function``. Spans go to Jaeger when the optional
``opentelemetry-exporter-jaeger`` package is installed.
"""

import logging
from functools import wraps
from typing import Dict, Optional

from django.conf import settings
from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

SERVICE = "maintmena-backend"

_tracers: Dict[str, trace.Tracer] = {}
_initialized = False


def _attach_jaeger(provider: TracerProvider, host: str, port: int) -> None:
    try:
        from opentelemetry.exporter.jaeger.thrift import JaegerExporter
    except ImportError:
        logger.warning("Jaeger exporter not installed, spans stay in-process")
        return

    provider.add_span_processor(BatchSpanProcessor(JaegerExporter(agent_host_name=host, agent_port=port)))
    logger.info(f"Exporting spans to Jaeger at {host}:{port}")


def setup_tracing(service_name: str = SERVICE, enable: Optional[bool] = None) -> bool:
    """
    Install the tracer provider and the Django/requests instrumentation.

    Reads ``OTEL_TRACING_ENABLED``, ``JAEGER_AGENT_HOST`` and
    ``JAEGER_AGENT_PORT`` from settings. Returns True when tracing is active;
    calling it again is a no-op.
    """
    global _initialized

    if _initialized:
        return True

    if enable is None:
        enable = getattr(settings, "OTEL_TRACING_ENABLED", True)
    if not enable:
        logger.info("Tracing disabled")
        return False

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    trace.set_tracer_provider(provider)
    _attach_jaeger(
        provider,
        getattr(settings, "JAEGER_AGENT_HOST", "localhost"),
        int(getattr(settings, "JAEGER_AGENT_PORT", 6831)),
    )

    DjangoInstrumentor().instrument()
    RequestsInstrumentor().instrument()

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for {service_name}")
    return True


def get_tracer(name: str = SERVICE) -> trace.Tracer:
    """Tracer for a module, cached per name."""
    if name not in _tracers:
        _tracers[name] = trace.get_tracer(name)
    return _tracers[name]


def add_span_attributes(span: trace.Span, **attributes) -> None:
    """Set ids and states on a span. ``None`` values are skipped."""
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(f"maintmena.{key}", str(value))


def trace_function(operation_name: Optional[str] = None):
    """
    Run the decorated function inside a span.

        @trace_function("vendor.discover")
        def discover(self, filters): ...
    """

    def decorator(func):
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"
        tracer = get_tracer(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            with tracer.start_as_current_span(span_name):
                return func(*args, **kwargs)

        return wrapper

    return decorator
