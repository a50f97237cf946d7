"""
NudgeService - reminds buyers to confirm jobs the seller marked complete.

Runs hourly (Celery beat and the ``nudge_completion`` command). Each run
sends at most one reminder per job, following the threshold ladder, and
auto-closes jobs left unconfirmed for too long; those lose their warranty.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from marketplace.domain.lifecycle import BOOKING, REQUEST, BookingStatus, RequestStatus, can_transition
from marketplace.infra.observability.metrics import completion_nudges_total, jobs_auto_closed_total
from marketplace.models import BookingRequest, MaintenanceRequest
from marketplace.services.base import BaseService
from notifications.services import NotificationService

logger = logging.getLogger(__name__)

NUDGE_TITLE = {"en": "Confirm Work Complete", "ar": "أكّد إتمام العمل"}
NUDGE_MESSAGES = [
    {"en": "Activate your warranty now!", "ar": "فعّل ضمانك الآن!"},
    {"en": "Your warranty is waiting...", "ar": "ضمانك في الانتظار..."},
    {"en": "Job still unconfirmed. Confirm to protect your work.", "ar": "العمل لم يُؤكد بعد. أكّد لحماية عملك."},
    {"en": "Final reminder: Confirm your job completion", "ar": "تذكير أخير: أكّد إتمام عملك"},
    {"en": "Auto-closing soon without warranty", "ar": "سيُغلق تلقائياً قريباً بدون ضمان"},
]
AUTO_CLOSE_TITLE = {"en": "Job Auto-Closed", "ar": "تم إغلاق العمل تلقائياً"}
AUTO_CLOSE_MESSAGE = {
    "en": "Your job was auto-closed without warranty activation due to no confirmation.",
    "ar": "تم إغلاق عملك تلقائياً بدون تفعيل الضمان لعدم التأكيد.",
}

UNCONFIRMED_STATUS = {REQUEST: RequestStatus.UNCONFIRMED_NO_WARRANTY, BOOKING: BookingStatus.UNCONFIRMED_NO_WARRANTY}


class NudgeService(BaseService):
    def __init__(
        self,
        notification_service: NotificationService = None,
        thresholds: Optional[List[int]] = None,
        auto_close_hours: Optional[int] = None,
    ):
        super().__init__()
        config = getattr(settings, "MAINTMENA", {})
        self.notification_service = notification_service or NotificationService()
        self.thresholds = thresholds or config.get("NUDGE_THRESHOLD_HOURS", [1, 6, 24, 72, 168])
        self.auto_close_hours = auto_close_hours or config.get("AUTO_CLOSE_HOURS", 168)

    @staticmethod
    def pending_jobs(model):
        return model.objects.filter(
            seller_marked_complete=True,
            buyer_marked_complete=False,
            auto_closed=False,
            seller_completion_date__isnull=False,
        )

    def next_step(self, nudge_count: int, hours: float) -> Optional[int]:
        """Index of the reminder due now, or None."""
        if nudge_count < len(self.thresholds) and hours >= self.thresholds[nudge_count]:
            return nudge_count
        return None

    def _auto_close(self, kind: str, job) -> bool:
        target = UNCONFIRMED_STATUS[kind]
        if not can_transition(kind, job.status, target):
            self.logger.warning(f"Cannot auto-close {kind} {job.id} in status '{job.status}'")
            return False
        job.auto_closed = True
        job.status = target
        job.save(update_fields=["auto_closed", "status", "updated_at"])
        self.notification_service.notify(
            user_id=job.buyer_id,
            title=AUTO_CLOSE_TITLE["en"],
            message=AUTO_CLOSE_MESSAGE["en"],
            title_ar=AUTO_CLOSE_TITLE["ar"],
            message_ar=AUTO_CLOSE_MESSAGE["ar"],
            notification_type="auto_close",
            content_id=job.id,
        )
        jobs_auto_closed_total.inc()
        return True

    def _nudge(self, job, step: int, now: datetime) -> bool:
        messages = NUDGE_MESSAGES[min(step, len(NUDGE_MESSAGES) - 1)]
        result = self.notification_service.notify(
            user_id=job.buyer_id,
            title=NUDGE_TITLE["en"],
            message=messages["en"],
            title_ar=NUDGE_TITLE["ar"],
            message_ar=messages["ar"],
            notification_type="warranty_nudge",
            content_id=job.id,
        )
        job.nudge_count = step + 1
        job.last_nudge_at = now
        job.save(update_fields=["nudge_count", "last_nudge_at", "updated_at"])
        completion_nudges_total.labels(step=str(self.thresholds[step])).inc()
        return bool(result.ok and result.value is not None)

    def run(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """One sweep over requests and bookings. Returns ``{"nudges_sent", "jobs_auto_closed"}``."""
        now = now or timezone.now()
        nudges_sent = 0
        jobs_auto_closed = 0

        for kind, model in ((BOOKING, BookingRequest), (REQUEST, MaintenanceRequest)):
            for job_id in self.pending_jobs(model).values_list("id", flat=True):
                try:
                    with transaction.atomic():
                        job = self.pending_jobs(model).select_for_update().filter(id=job_id).first()
                        if job is None:
                            continue

                        hours = (now - job.seller_completion_date).total_seconds() / 3600
                        if hours >= self.auto_close_hours:
                            if self._auto_close(kind, job):
                                jobs_auto_closed += 1
                            continue

                        step = self.next_step(job.nudge_count, hours)
                        if step is not None and self._nudge(job, step, now):
                            nudges_sent += 1
                except Exception as e:
                    self.logger.error(f"Error nudging {kind} {job_id}: {e}", exc_info=True)

        self.logger.info(f"Nudge run complete. Nudges sent: {nudges_sent}, jobs auto-closed: {jobs_auto_closed}")
        return {"nudges_sent": nudges_sent, "jobs_auto_closed": jobs_auto_closed}
