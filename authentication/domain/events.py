"""
Domain Events for Authentication.

Domain events represent important business occurrences that other parts of the system
might want to react to. They are sent as Django signals for in-process receivers and
published on the event bus for everything else.
"""

import logging
from typing import Optional

from django.dispatch import Signal

from infrastructure.container import container

logger = logging.getLogger(__name__)

# ===== Event Signals =====

user_registered = Signal()  # sender=user class, user=user, ip_address=str
user_login_successful = Signal()  # sender=user class, user=user, ip_address=str
user_login_failed = Signal()  # email=str, reason=str, ip_address=str
profile_updated = Signal()  # sender=user class, user=user, updated_fields=list
vendor_saved = Signal()  # sender=user class, buyer=user, vendor=user


def _publish(event_type: str, payload: dict) -> None:
    try:
        container.event_bus().publish(event_type, payload)
    except Exception as e:
        logger.error(f"Failed to publish {event_type} event: {e}")


class EventDispatcher:
    """
    Helper class for dispatching domain events.

    Centralizes event dispatching logic and provides logging.
    """

    @staticmethod
    def dispatch_user_registered(user, ip_address: Optional[str] = None):
        logger.info(f"[EVENT] User registered: {user.id} as {user.role}")
        user_registered.send(sender=user.__class__, user=user, ip_address=ip_address)
        _publish(
            "user.registered",
            {"user_id": str(user.id), "role": user.role, "language": user.language, "ip_address": ip_address},
        )

    @staticmethod
    def dispatch_user_login_successful(user, ip_address: Optional[str] = None):
        logger.info(f"[EVENT] Login successful: {user.id}")
        user_login_successful.send(sender=user.__class__, user=user, ip_address=ip_address)
        _publish("user.login_successful", {"user_id": str(user.id), "ip_address": ip_address})

    @staticmethod
    def dispatch_user_login_failed(email: str, reason: str, ip_address: Optional[str] = None):
        """Failed logins stay in-process; the email is not put on the bus."""
        logger.warning(f"[EVENT] Login failed ({reason}) from {ip_address or 'unknown'}")
        user_login_failed.send(sender=None, email=email, reason=reason, ip_address=ip_address)

    @staticmethod
    def dispatch_profile_updated(user, updated_fields: list):
        logger.info(f"[EVENT] Profile updated: {user.id} fields={updated_fields}")
        profile_updated.send(sender=user.__class__, user=user, updated_fields=updated_fields)
        _publish("profile.updated", {"user_id": str(user.id), "updated_fields": updated_fields})

    @staticmethod
    def dispatch_vendor_saved(buyer, vendor):
        vendor_saved.send(sender=buyer.__class__, buyer=buyer, vendor=vendor)
        _publish("vendor.saved", {"buyer_id": str(buyer.id), "vendor_id": str(vendor.id)})
