import logging
from typing import Optional

from infrastructure.events import EventBus, get_event_bus

logger = logging.getLogger(__name__)


def register_authentication_listeners(event_bus: Optional[EventBus] = None):
    """
    Register all event listeners for authentication context.
    Called when Django app starts.
    """
    event_bus = event_bus or get_event_bus()
    event_bus.subscribe("user.registered", log_user_registration)
    event_bus.subscribe("profile.updated", log_profile_update)
    logger.info("Authentication event listeners registered")


def log_user_registration(event):
    """Log user registration event."""
    # event is the full envelope including 'payload'
    payload = event.get("payload", {})
    logger.info(f"[LISTENER] User registered: {payload.get('user_id')} as {payload.get('role')}")


def log_profile_update(event):
    payload = event.get("payload", {})
    logger.info(f"[LISTENER] Profile updated: {payload.get('user_id')} fields={payload.get('updated_fields')}")
