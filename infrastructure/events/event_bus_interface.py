import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from django.utils import timezone

logger = logging.getLogger(__name__)


def envelope(event_type: str, payload: dict) -> dict:
    """What every handler receives, whichever bus delivered it."""
    return {"event_type": event_type, "occurred_at": timezone.now().isoformat(), "payload": payload}


class EventBus(ABC):
    """Abstract event bus interface."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    @abstractmethod
    def publish(self, event_type: str, payload: dict):
        """Publish event to bus. Never raises into the calling service."""

    def subscribe(self, event_type: str, handler: Callable):
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.info(f"Registered handler for event: {event_type}")

    def _dispatch(self, message: dict):
        event_type = message["event_type"]
        for handler in self._subscribers.get(event_type, []):
            try:
                handler(message)
            except Exception as e:
                logger.error(f"Handler error for {event_type}: {e}", exc_info=True)

    def is_available(self) -> bool:
        return True
