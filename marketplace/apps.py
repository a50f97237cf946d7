import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class MarketplaceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "marketplace"

    def ready(self):
        # Listeners only; delivery from Redis runs in the run_event_listener process
        try:
            from infrastructure.events import get_event_bus
            from marketplace.infra.events.listeners import register_marketplace_listeners

            register_marketplace_listeners(get_event_bus())
        except Exception as e:
            logger.error(f"Failed to register marketplace listeners: {e}")
