import json
import logging
from typing import Optional

import redis
from django.conf import settings

from .event_bus_interface import EventBus, envelope


logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_PREFIX = "maintmena.events"


def _infrastructure_setting(name: str, default):
    return getattr(settings, "INFRASTRUCTURE", {}).get(name, default)


class RedisEventBus(EventBus):
    """
    Redis pub/sub event bus, one channel per event type
    (``<prefix>.<event_type>``). Events published while Redis is unreachable
    are logged and dropped.
    """

    def __init__(self, redis_url: str = None, channel_prefix: str = None):
        super().__init__()
        self.redis_url = redis_url or getattr(settings, "REDIS_URL", None) or "redis://localhost:6379/0"
        self.channel_prefix = channel_prefix or _infrastructure_setting("EVENT_CHANNEL_PREFIX", DEFAULT_CHANNEL_PREFIX)

        try:
            self.redis_client = redis.from_url(self.redis_url)
        except Exception as e:
            logger.error(f"Failed to connect to Redis at {self.redis_url}: {e}")
            self.redis_client = None

    def channel(self, event_type: str) -> str:
        return f"{self.channel_prefix}.{event_type}"

    def publish(self, event_type: str, payload: dict):
        if not self.redis_client:
            logger.warning(f"Redis client not available. Event {event_type} dropped.")
            return

        try:
            self.redis_client.publish(self.channel(event_type), json.dumps(envelope(event_type, payload), default=str))
            logger.info(f"Published event: {event_type}")
        except Exception as e:
            logger.error(f"Failed to publish event {event_type}: {e}")

    def channels(self):
        return [self.channel(event_type) for event_type in self._subscribers]

    def listen(self):
        """
        Deliver events to the subscribed handlers until the connection drops.

        Blocks the calling thread. Run it in exactly one process (see the
        ``run_event_listener`` command): every listening process receives
        every event.
        """
        if not self.redis_client or not self._subscribers:
            logger.warning("EventBus has no Redis client or no subscribers; nothing to listen for")
            return

        channels = self.channels()
        pubsub = self.redis_client.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(*channels)
        logger.info(f"EventBus listening on: {channels}")
        try:
            for message in pubsub.listen():
                self._handle_message(message)
        finally:
            pubsub.close()

    def _handle_message(self, message):
        try:
            data = json.loads(message["data"])
        except (TypeError, ValueError) as e:
            logger.error(f"Dropping undecodable event on {message.get('channel')}: {e}")
            return
        self._dispatch(data)

    def is_available(self) -> bool:
        if not self.redis_client:
            return False
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError:
            return False


_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """
    Process-wide event bus.

    ``INFRASTRUCTURE["EVENT_BUS_BACKEND"]`` selects ``redis`` (default) or
    ``memory``.
    """
    global _event_bus_instance
    if _event_bus_instance is None:
        if _infrastructure_setting("EVENT_BUS_BACKEND", "redis") == "memory":
            from .memory_event_bus import InMemoryEventBus

            _event_bus_instance = InMemoryEventBus()
        else:
            _event_bus_instance = RedisEventBus()
        logger.debug(f"Created event bus: {type(_event_bus_instance).__name__}")
    return _event_bus_instance


def reset_event_bus():
    global _event_bus_instance
    _event_bus_instance = None
