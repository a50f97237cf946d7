import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        # Listeners only; delivery from Redis runs in the run_event_listener process
        try:
            from authentication.infra.events.listeners import register_authentication_listeners

            register_authentication_listeners()
        except Exception as e:
            logger.warning(f"Failed to register authentication listeners: {e}")

        try:
            from authentication.infra.observability.tracing import setup_tracing

            setup_tracing()
        except Exception as e:
            logger.warning(f"Failed to initialize OpenTelemetry tracing: {e}")
