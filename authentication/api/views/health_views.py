"""
Liveness and readiness probes.

Readiness reports each dependency separately so an orchestrator (and a
human reading the JSON) can tell a database outage from a Redis one.
"""

import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

from infrastructure.container import container

logger = logging.getLogger(__name__)


def _database() -> bool:
    connection.ensure_connection()
    return True


def _cache() -> bool:
    cache.set("maintmena:health", "ok", timeout=5)
    return cache.get("maintmena:health") == "ok"


def _event_bus() -> bool:
    return container.event_bus().is_available()


READINESS_CHECKS = {
    "database": _database,
    "cache": _cache,
    "event_bus": _event_bus,
}


def run_checks() -> dict:
    results = {}
    for name, check in READINESS_CHECKS.items():
        try:
            results[name] = bool(check())
        except Exception as e:
            logger.error(f"Readiness check '{name}' failed: {e}")
            results[name] = False
    return results


def health_live(request):
    """The process is up and serving requests."""
    return JsonResponse({"status": "ok"})


def health_ready(request):
    """200 when every dependency answers, 503 otherwise."""
    checks = run_checks()
    ready = all(checks.values())
    return JsonResponse({"status": "ready" if ready else "not_ready", "checks": checks}, status=200 if ready else 503)
