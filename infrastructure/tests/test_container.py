"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

import json
from io import StringIO
from unittest.mock import Mock, patch

import redis
from django.core.management import call_command
from django.test import TestCase, override_settings

from infrastructure.container import ServiceContainer, container
from infrastructure.events import InMemoryEventBus, RedisEventBus, get_event_bus, reset_event_bus


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        container.reset()

    def tearDown(self):
        container.reset()

    def test_container_is_singleton(self):
        container1 = ServiceContainer()
        container2 = ServiceContainer()

        self.assertIs(container1, container2)
        self.assertIs(container1, container)

    def test_services_are_cached(self):
        quote_service = container.quote_service()

        self.assertIs(quote_service, container.quote_service())
        self.assertIs(container.booking_service(), container.booking_service())

    def test_services_share_dependencies(self):
        quote_service = container.quote_service()
        booking_service = container.booking_service()

        self.assertIs(quote_service.contract_service, container.contract_service())
        self.assertIs(booking_service.contract_service, quote_service.contract_service)
        self.assertIs(booking_service.message_service, container.message_service())

    def test_nudge_service_uses_shared_notification_service(self):
        self.assertIs(container.nudge_service().notification_service, container.notification_service())

    def test_reset_clears_cached_services(self):
        first = container.review_service()
        container.reset()

        self.assertIsNot(first, container.review_service())

    def test_configure_for_testing_wires_memory_bus(self):
        bus = container.configure_for_testing()

        self.assertIsInstance(bus, InMemoryEventBus)
        self.assertIs(container.event_bus(), bus)
        self.assertIs(container.quote_service().event_bus, bus)
        self.assertIs(container.completion_service().event_bus, bus)

    def test_configure_for_testing_registers_listeners(self):
        bus = container.configure_for_testing()
        self.assertIn("quote.submitted", bus._subscribers)
        self.assertIn("job.completed", bus._subscribers)

        quiet_bus = container.configure_for_testing(register_listeners=False)
        self.assertEqual(quiet_bus._subscribers, {})


class EventBusFactoryTest(TestCase):
    def tearDown(self):
        reset_event_bus()

    @override_settings(INFRASTRUCTURE={"EVENT_BUS_BACKEND": "memory"})
    def test_memory_backend(self):
        reset_event_bus()
        bus = get_event_bus()

        self.assertIsInstance(bus, InMemoryEventBus)
        self.assertIs(bus, get_event_bus())

    @override_settings(INFRASTRUCTURE={"EVENT_BUS_BACKEND": "redis"})
    def test_redis_backend(self):
        reset_event_bus()

        self.assertIsInstance(get_event_bus(), RedisEventBus)

    def test_memory_bus_records_and_dispatches(self):
        bus = InMemoryEventBus()
        received = []
        bus.subscribe("quote.submitted", received.append)

        bus.publish("quote.submitted", {"quote_id": "q-1"})

        self.assertEqual(bus.event_types(), ["quote.submitted"])
        self.assertEqual(received[0]["payload"], {"quote_id": "q-1"})
        self.assertIn("occurred_at", received[0])

    def test_memory_bus_history_is_bounded(self):
        bus = InMemoryEventBus(history_size=2)

        for rating in (3, 4, 5):
            bus.publish("review.created", {"rating": rating})

        self.assertEqual([message["payload"]["rating"] for message in bus.published], [4, 5])

    def test_memory_bus_isolates_failing_handler(self):
        bus = InMemoryEventBus()
        received = []

        def broken(message):
            raise RuntimeError("boom")

        bus.subscribe("review.created", broken)
        bus.subscribe("review.created", received.append)
        bus.publish("review.created", {"rating": 5})

        self.assertEqual(len(received), 1)


class RedisEventBusTest(TestCase):
    def setUp(self):
        self.client = Mock()
        with patch("infrastructure.events.redis_event_bus.redis.from_url", return_value=self.client):
            self.bus = RedisEventBus(redis_url="redis://cache:6379/1", channel_prefix="test.events")

    def test_publish_uses_per_event_channel(self):
        self.bus.publish("contract.executed", {"contract_id": "c-1"})

        channel, body = self.client.publish.call_args[0]
        self.assertEqual(channel, "test.events.contract.executed")
        self.assertEqual(json.loads(body)["payload"], {"contract_id": "c-1"})

    def test_publish_swallows_redis_errors(self):
        self.client.publish.side_effect = ConnectionError("gone")

        self.bus.publish("contract.executed", {"contract_id": "c-1"})

    def test_incoming_message_reaches_handlers(self):
        received = []
        self.bus.subscribe("booking.accepted", received.append)
        body = json.dumps({"event_type": "booking.accepted", "occurred_at": "2026-10-01T09:00:00", "payload": {}})

        self.bus._handle_message({"channel": b"test.events.booking.accepted", "data": body})
        self.bus._handle_message({"channel": b"test.events.booking.accepted", "data": b"not json"})

        self.assertEqual(len(received), 1)

    def test_unavailable_when_ping_fails(self):
        self.client.ping.side_effect = redis.ConnectionError("refused")

        self.assertFalse(self.bus.is_available())

    def test_listen_delivers_subscribed_channels(self):
        received = []
        self.bus.subscribe("quote.submitted", received.append)
        body = json.dumps({"event_type": "quote.submitted", "occurred_at": "2026-10-01T09:00:00", "payload": {}})
        pubsub = self.client.pubsub.return_value
        pubsub.listen.return_value = iter([{"channel": b"test.events.quote.submitted", "data": body}])

        self.bus.listen()

        pubsub.subscribe.assert_called_once_with("test.events.quote.submitted")
        pubsub.close.assert_called_once()
        self.assertEqual(len(received), 1)

    def test_listen_without_subscribers_returns(self):
        self.bus.listen()

        self.client.pubsub.assert_not_called()


COMMAND_BUS = "marketplace.management.commands.run_event_listener.get_event_bus"


class RunEventListenerCommandTest(TestCase):
    def test_memory_bus_has_nothing_to_run(self):
        out = StringIO()
        with patch(COMMAND_BUS, return_value=InMemoryEventBus()):
            call_command("run_event_listener", stdout=out)

        self.assertIn("nothing to run", out.getvalue())

    def test_redis_bus_listens_in_foreground(self):
        with patch("infrastructure.events.redis_event_bus.redis.from_url", return_value=Mock()):
            bus = RedisEventBus(channel_prefix="test.events")
        bus.subscribe("job.completed", Mock())

        with patch(COMMAND_BUS, return_value=bus), patch.object(bus, "listen") as listen:
            call_command("run_event_listener", stdout=StringIO())

        listen.assert_called_once_with()
