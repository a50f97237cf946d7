"""
Observability Infrastructure

OpenTelemetry tracing and Prometheus metrics for the MaintMENA backend.
"""

from .metrics import login_duration, login_failed, login_total, registration_total
from .tracing import get_tracer, setup_tracing

__all__ = [
    "setup_tracing",
    "get_tracer",
    "login_total",
    "login_failed",
    "login_duration",
    "registration_total",
]
