"""
Dependency Injection Container
================================

Simple service locator for the marketplace services and the event bus they
publish to. Services are created lazily and cached; services that depend on
each other share the cached instances.

Usage:
    from infrastructure.container import container

    result = container.quote_service().accept_quote(request.user, quote_id)
"""

import logging
from typing import Optional

from .events import EventBus, InMemoryEventBus, get_event_bus

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for domain services.

    Implements lazy initialization and caching of service instances.
    Singleton: every ``ServiceContainer()`` call returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._event_bus: Optional[EventBus] = None

        # Domain Services
        self._notification_service = None
        self._message_service = None
        self._contract_service = None
        self._request_service = None
        self._quote_service = None
        self._booking_service = None
        self._completion_service = None
        self._nudge_service = None
        self._review_service = None
        self._history_service = None
        self._vendor_service = None

    def event_bus(self) -> EventBus:
        """
        Get the event bus services publish to.

        Returns:
            The bus configured for tests, or the process-wide bus from settings
        """
        if self._event_bus is None:
            return get_event_bus()
        return self._event_bus

    def notification_service(self):
        if self._notification_service is None:
            from notifications.services import NotificationService

            self._notification_service = NotificationService()
            logger.debug("Created NotificationService")
        return self._notification_service

    def message_service(self):
        if self._message_service is None:
            from marketplace.messaging.domain.services.message_service import MessageService

            self._message_service = MessageService()
            logger.debug("Created MessageService")
        return self._message_service

    def contract_service(self):
        if self._contract_service is None:
            from marketplace.contracts.domain.services.contract_service import ContractService

            self._contract_service = ContractService(event_bus=self._event_bus)
            logger.debug("Created ContractService")
        return self._contract_service

    def request_service(self):
        if self._request_service is None:
            from marketplace.requests.domain.services.request_service import RequestService

            self._request_service = RequestService()
            logger.debug("Created RequestService")
        return self._request_service

    def quote_service(self):
        """Get QuoteService instance; accepting a quote creates a contract and posts a message."""
        if self._quote_service is None:
            from marketplace.requests.domain.services.quote_service import QuoteService

            self._quote_service = QuoteService(
                contract_service=self.contract_service(),
                message_service=self.message_service(),
                event_bus=self._event_bus,
            )
            logger.debug("Created QuoteService")
        return self._quote_service

    def booking_service(self):
        if self._booking_service is None:
            from marketplace.bookings.domain.services.booking_service import BookingService

            self._booking_service = BookingService(
                contract_service=self.contract_service(),
                message_service=self.message_service(),
                event_bus=self._event_bus,
            )
            logger.debug("Created BookingService")
        return self._booking_service

    def completion_service(self):
        if self._completion_service is None:
            from marketplace.jobs.domain.services.completion_service import CompletionService

            self._completion_service = CompletionService(event_bus=self._event_bus)
            logger.debug("Created CompletionService")
        return self._completion_service

    def nudge_service(self):
        if self._nudge_service is None:
            from marketplace.jobs.domain.services.nudge_service import NudgeService

            self._nudge_service = NudgeService(notification_service=self.notification_service())
            logger.debug("Created NudgeService")
        return self._nudge_service

    def review_service(self):
        if self._review_service is None:
            from marketplace.reviews.domain.services.review_service import ReviewService

            self._review_service = ReviewService(event_bus=self._event_bus)
            logger.debug("Created ReviewService")
        return self._review_service

    def history_service(self):
        if self._history_service is None:
            from marketplace.history.domain.services.history_service import HistoryService

            self._history_service = HistoryService()
            logger.debug("Created HistoryService")
        return self._history_service

    def vendor_service(self):
        if self._vendor_service is None:
            from authentication.domain.services.vendor_service import VendorService

            self._vendor_service = VendorService()
            logger.debug("Created VendorService")
        return self._vendor_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._clear()
        logger.info("Service container reset")

    def configure_for_testing(self, register_listeners: bool = True) -> InMemoryEventBus:
        """
        Wire every service to a fresh in-memory event bus.

        Args:
            register_listeners: subscribe the notification listeners to the new bus

        Returns:
            The bus, so tests can assert on ``published`` events
        """
        self._clear()
        self._event_bus = InMemoryEventBus()
        if register_listeners:
            from marketplace.infra.events.listeners import register_marketplace_listeners

            register_marketplace_listeners(self._event_bus)
        logger.info("Service container configured for testing")
        return self._event_bus


# Global singleton instance
container = ServiceContainer()
