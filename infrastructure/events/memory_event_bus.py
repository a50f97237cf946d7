import logging
from collections import deque
from typing import List

from .event_bus_interface import EventBus, envelope


logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1000


class InMemoryEventBus(EventBus):
    """
    Synchronous in-process event bus.

    Handlers run inside ``publish`` with the same envelope the Redis bus
    delivers, so listeners behave identically under tests and single-process
    development. The last ``history_size`` envelopes are kept in ``published``
    for assertions.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        super().__init__()
        self.published = deque(maxlen=history_size)

    def publish(self, event_type: str, payload: dict):
        message = envelope(event_type, payload)
        self.published.append(message)
        logger.info(f"Published event: {event_type}")
        self._dispatch(message)

    def event_types(self) -> List[str]:
        return [message["event_type"] for message in self.published]

    def clear(self):
        self.published.clear()
