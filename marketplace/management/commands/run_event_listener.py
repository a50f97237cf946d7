import logging

from django.core.management.base import BaseCommand

from infrastructure.events import get_event_bus
from infrastructure.events.redis_event_bus import RedisEventBus


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delivers Redis bus events to the registered listeners. Run exactly one of these per deployment."

    def handle(self, *args, **options):
        event_bus = get_event_bus()
        if not isinstance(event_bus, RedisEventBus):
            self.stdout.write(
                self.style.WARNING(f"{type(event_bus).__name__} delivers events in-process; nothing to run.")
            )
            return

        self.stdout.write(f"Listening on {len(event_bus.channels())} channels...")
        try:
            event_bus.listen()
        except KeyboardInterrupt:
            self.stdout.write("Stopped.")
