"""
NotificationService - in-app notifications.

Every notification goes through ``notify`` so the de-duplication rule holds
for listeners, the nudge job and direct callers alike: the same user, type and
content id are notified at most once per window (5 minutes by default). The
check and the insert run under a lock on the user's row.
"""

import logging
from datetime import timedelta
from typing import Dict, Iterable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from marketplace.infra.observability.metrics import notifications_deduplicated_total, notifications_sent_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

from .models import Notification


User = get_user_model()
logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    def __init__(self, dedup_minutes: Optional[int] = None):
        super().__init__()
        if dedup_minutes is None:
            dedup_minutes = getattr(settings, "MAINTMENA", {}).get("NOTIFICATION_DEDUP_MINUTES", 5)
        self.dedup_window = timedelta(minutes=dedup_minutes)

    def _is_duplicate(self, user_id, notification_type: str, content_id: Optional[str]) -> bool:
        since = timezone.now() - self.dedup_window
        return Notification.objects.filter(
            user_id=user_id,
            notification_type=notification_type,
            content_id=content_id,
            created_at__gte=since,
        ).exists()

    @BaseService.log_performance
    def notify(
        self,
        user_id,
        title: str,
        message: str,
        notification_type: str = "system",
        content_id=None,
        title_ar: str = "",
        message_ar: str = "",
    ) -> ServiceResult[Optional[Notification]]:
        """
        Create a notification unless an identical one was sent recently.

        Returns ``service_ok(None)`` for a skipped duplicate so callers can
        tell the two outcomes apart without treating a duplicate as an error.
        """
        try:
            content_id = str(content_id) if content_id else None

            with transaction.atomic():
                # Serializes concurrent deliveries for one user so the check below holds
                User.objects.select_for_update().filter(id=user_id).first()

                if self._is_duplicate(user_id, notification_type, content_id):
                    notifications_deduplicated_total.labels(type=notification_type).inc()
                    self.logger.info(f"Skipped duplicate {notification_type} notification for user {user_id}")
                    return service_ok(None)

                notification = Notification.objects.create(
                    user_id=user_id,
                    title=title,
                    message=message,
                    title_ar=title_ar,
                    message_ar=message_ar,
                    notification_type=notification_type,
                    content_id=content_id,
                )
            notifications_sent_total.labels(type=notification_type).inc()
            return service_ok(notification)

        except Exception as e:
            self.logger.error(f"Error creating notification for user {user_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def notify_many(self, items: Iterable[Dict]) -> int:
        """Send a batch of notifications (dicts of ``notify`` kwargs). Returns how many were created."""
        sent = 0
        for item in items:
            result = self.notify(**item)
            if result.ok and result.value is not None:
                sent += 1
        return sent

    @BaseService.log_performance
    def list_notifications(
        self, user, unread_only: bool = False, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict]:
        try:
            queryset = Notification.objects.filter(user=user)
            if unread_only:
                queryset = queryset.filter(is_read=False)

            return service_ok(paginate(queryset, page, page_size))
        except Exception as e:
            self.logger.error(f"Error listing notifications for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def unread_count(self, user) -> ServiceResult[int]:
        try:
            return service_ok(Notification.objects.filter(user=user, is_read=False).count())
        except Exception as e:
            self.logger.error(f"Error counting notifications for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def mark_read(self, user, notification_id) -> ServiceResult[Notification]:
        try:
            notification = Notification.objects.get(id=notification_id)
        except (Notification.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.NOTIFICATION_NOT_FOUND, f"Notification {notification_id} not found")

        if notification.user_id != user.id:
            return service_err(ErrorCodes.PERMISSION_DENIED, "You do not own this notification")

        try:
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = timezone.now()
                notification.save(update_fields=["is_read", "read_at"])
            return service_ok(notification)
        except Exception as e:
            self.logger.error(f"Error marking notification {notification_id} read: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def mark_all_read(self, user) -> ServiceResult[int]:
        try:
            updated = Notification.objects.filter(user=user, is_read=False).update(is_read=True, read_at=timezone.now())
            return service_ok(updated)
        except Exception as e:
            self.logger.error(f"Error marking notifications read for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
