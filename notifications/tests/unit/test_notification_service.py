from datetime import timedelta
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from infrastructure.events import InMemoryEventBus
from infrastructure.events.event_bus_interface import envelope
from marketplace.infra.events.listeners import register_marketplace_listeners
from marketplace.tests.factories import UserFactory
from notifications.models import Notification
from notifications.services import NotificationService

User = get_user_model()


@pytest.mark.unit
@pytest.mark.django_db
class TestNotificationService:
    def setup_method(self):
        self.service = NotificationService(dedup_minutes=5)

    def test_notify_creates_notification(self):
        user = UserFactory()

        result = self.service.notify(
            user.id, "Quote Received", "You got a quote", notification_type="quote_submitted", content_id="r-1"
        )

        assert result.ok
        assert result.value.user == user
        assert result.value.content_id == "r-1"

    def test_duplicate_within_window_is_skipped(self):
        user = UserFactory()
        self.service.notify(user.id, "Hi", "Hello", notification_type="system", content_id="x")

        result = self.service.notify(user.id, "Hi", "Hello", notification_type="system", content_id="x")

        assert result.ok
        assert result.value is None
        assert Notification.objects.filter(user=user).count() == 1

    def test_same_type_other_content_is_sent(self):
        user = UserFactory()
        self.service.notify(user.id, "Hi", "Hello", content_id="x")

        result = self.service.notify(user.id, "Hi", "Hello", content_id="y")

        assert result.value is not None

    def test_old_duplicate_does_not_block(self):
        user = UserFactory()
        first = self.service.notify(user.id, "Hi", "Hello", content_id="x").value
        Notification.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(minutes=10))

        result = self.service.notify(user.id, "Hi", "Hello", content_id="x")

        assert result.value is not None

    def test_notify_many_counts_only_created(self):
        user = UserFactory()
        item = {"user_id": user.id, "title": "Hi", "message": "Hello", "content_id": "x"}

        assert self.service.notify_many([item, item, dict(item, content_id="z")]) == 2

    def test_dedup_check_runs_under_user_row_lock(self):
        user = UserFactory()

        with patch.object(User.objects, "select_for_update", wraps=User.objects.select_for_update) as lock:
            self.service.notify(user.id, "Hi", "Hello", content_id="x")

        lock.assert_called_once_with()

    def test_redelivered_event_notifies_once(self):
        buyer = UserFactory()
        bus = InMemoryEventBus()
        register_marketplace_listeners(bus)
        message = envelope(
            "quote.submitted",
            {"quote_id": "q-1", "request_id": "r-1", "buyer_id": str(buyer.id), "seller_id": "s-1", "price": "450.00"},
        )

        bus._dispatch(message)
        bus._dispatch(message)

        assert Notification.objects.filter(user=buyer, notification_type="quote_submitted").count() == 1
