"""
CompletionService - running a job to completion.

A job is an executed request (``assigned``) or booking (``accepted``). The
seller starts and marks the job complete, the buyer confirms. Only when both
have marked it does the job become ``completed``: the contract is closed and
the warranty runs from the buyer's confirmation date.
"""

import logging
from datetime import timedelta
from typing import Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from authentication.models import Profile
from infrastructure.events.redis_event_bus import get_event_bus
from marketplace.domain.events import JobCompletedEvent, JobSellerCompletedEvent
from marketplace.domain.lifecycle import (
    BOOKING,
    CONTRACT,
    REQUEST,
    BookingStatus,
    ContractStatus,
    RequestStatus,
    can_transition,
)
from marketplace.infra.observability.metrics import jobs_completed_total
from marketplace.models import BookingRequest, Contract, MaintenanceRequest
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)

JOB_KINDS = {REQUEST: MaintenanceRequest, BOOKING: BookingRequest}
# Statuses in which work may be marked done, per kind
WORKING_STATUSES = {
    REQUEST: (RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS),
    BOOKING: (BookingStatus.ACCEPTED, BookingStatus.IN_PROGRESS),
}


def job_seller_id(kind: str, job) -> Optional[str]:
    return job.assigned_seller_id if kind == REQUEST else job.seller_id


def job_contract(kind: str, job) -> Optional[Contract]:
    """The executed (or already completed) contract covering a job."""
    lookup = {"request": job} if kind == REQUEST else {"booking": job}
    return (
        Contract.objects.filter(status__in=(ContractStatus.EXECUTED, ContractStatus.COMPLETED), **lookup)
        .order_by("-executed_at")
        .first()
    )


class CompletionService(BaseService):
    def __init__(self, event_bus=None):
        super().__init__()
        self.event_bus = event_bus

    def _bus(self):
        return self.event_bus or get_event_bus()

    def _lock_job(self, kind: str, job_id) -> ServiceResult:
        model = JOB_KINDS.get(kind)
        if model is None:
            return service_err(ErrorCodes.INVALID_INPUT, f"Unknown job kind '{kind}'")
        try:
            return service_ok(model.objects.select_for_update().get(id=job_id))
        except (model.DoesNotExist, ValidationError):
            code = ErrorCodes.REQUEST_NOT_FOUND if kind == REQUEST else ErrorCodes.BOOKING_NOT_FOUND
            return service_err(code, f"{kind.title()} {job_id} not found")

    def _lock_for_seller(self, seller, kind: str, job_id) -> ServiceResult:
        result = self._lock_job(kind, job_id)
        if result.ok and job_seller_id(kind, result.value) != seller.id:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only the seller doing this job can do that")
        return result

    def _lock_for_buyer(self, buyer, kind: str, job_id) -> ServiceResult:
        result = self._lock_job(kind, job_id)
        if result.ok and result.value.buyer_id != buyer.id:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only the buyer of this job can do that")
        return result

    def _finalize(self, kind: str, job) -> Optional[ServiceResult]:
        """Both sides marked the job: complete it, close the contract and start the warranty."""
        target = RequestStatus.COMPLETED if kind == REQUEST else BookingStatus.COMPLETED
        if not can_transition(kind, job.status, target):
            return service_err(ErrorCodes.INVALID_STATE, f"Cannot complete a job in status '{job.status}'")

        warranty_days = getattr(settings, "MAINTMENA", {}).get("WARRANTY_DAYS", 90)
        contract = job_contract(kind, job)
        if contract is not None:
            terms = getattr(contract, "binding_terms", None)
            if terms is not None:
                warranty_days = terms.warranty_days
            if can_transition(CONTRACT, contract.status, ContractStatus.COMPLETED):
                contract.status = ContractStatus.COMPLETED
                contract.save(update_fields=["status", "updated_at"])

        job.status = target
        job.completed_at = timezone.now()
        job.warranty_expires_at = job.buyer_completion_date + timedelta(days=warranty_days)
        Profile.objects.filter(user_id=job_seller_id(kind, job)).update(completed_projects=F("completed_projects") + 1)
        jobs_completed_total.labels(kind=kind).inc()
        return None

    def _publish_completed(self, kind: str, job) -> None:
        self.publish_event(
            self._bus(),
            JobCompletedEvent(
                kind=kind,
                job_id=str(job.id),
                buyer_id=str(job.buyer_id),
                seller_id=str(job_seller_id(kind, job)),
                warranty_expires_at=job.warranty_expires_at.isoformat() if job.warranty_expires_at else None,
            ),
        )

    @BaseService.log_performance
    def start_job(self, seller, kind: str, job_id) -> ServiceResult:
        try:
            with transaction.atomic():
                result = self._lock_for_seller(seller, kind, job_id)
                if not result.ok:
                    return result
                job = result.value

                target = RequestStatus.IN_PROGRESS if kind == REQUEST else BookingStatus.IN_PROGRESS
                if not can_transition(kind, job.status, target):
                    return service_err(ErrorCodes.INVALID_STATE, f"Cannot start a job in status '{job.status}'")
                job.status = target
                job.save(update_fields=["status", "updated_at"])
                return service_ok(job)
        except Exception as e:
            self.logger.error(f"Error starting {kind} {job_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def seller_mark_complete(self, seller, kind: str, job_id) -> ServiceResult:
        try:
            with transaction.atomic():
                result = self._lock_for_seller(seller, kind, job_id)
                if not result.ok:
                    return result
                job = result.value

                if job.status not in WORKING_STATUSES[kind]:
                    return service_err(ErrorCodes.INVALID_STATE, f"Cannot complete a job in status '{job.status}'")
                if job.seller_marked_complete:
                    return service_err(ErrorCodes.INVALID_STATE, "You already marked this job complete")

                job.seller_marked_complete = True
                job.seller_completion_date = timezone.now()
                if job.buyer_marked_complete:
                    error = self._finalize(kind, job)
                    if error:
                        return error
                job.save()
        except Exception as e:
            self.logger.error(f"Error marking {kind} {job_id} complete: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if job.buyer_marked_complete:
            self._publish_completed(kind, job)
        else:
            self.publish_event(
                self._bus(),
                JobSellerCompletedEvent(
                    kind=kind, job_id=str(job.id), buyer_id=str(job.buyer_id), seller_id=str(seller.id)
                ),
            )
        return service_ok(job)

    @BaseService.log_performance
    def buyer_confirm_complete(self, buyer, kind: str, job_id) -> ServiceResult:
        """Buyer confirms the work; with the seller's mark already in, this completes the job."""
        try:
            with transaction.atomic():
                result = self._lock_for_buyer(buyer, kind, job_id)
                if not result.ok:
                    return result
                job = result.value

                if job.status not in WORKING_STATUSES[kind]:
                    return service_err(ErrorCodes.INVALID_STATE, f"Cannot confirm a job in status '{job.status}'")
                if job.buyer_marked_complete:
                    return service_err(ErrorCodes.INVALID_STATE, "You already confirmed this job")

                job.buyer_marked_complete = True
                job.buyer_completion_date = timezone.now()
                if job.seller_marked_complete:
                    error = self._finalize(kind, job)
                    if error:
                        return error
                job.save()
        except Exception as e:
            self.logger.error(f"Error confirming {kind} {job_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if job.seller_marked_complete:
            self._publish_completed(kind, job)
        return service_ok(job)

    @BaseService.log_performance
    def list_active_jobs(self, user, role: str = "seller") -> ServiceResult[Dict]:
        try:
            if role == "seller":
                requests = MaintenanceRequest.objects.filter(assigned_seller=user)
                bookings = BookingRequest.objects.filter(seller=user)
            else:
                requests = MaintenanceRequest.objects.filter(buyer=user)
                bookings = BookingRequest.objects.filter(buyer=user)

            requests = requests.filter(status__in=WORKING_STATUSES[REQUEST]).select_related("buyer", "assigned_seller")
            bookings = bookings.filter(status__in=WORKING_STATUSES[BOOKING]).select_related("buyer", "seller")
            return service_ok(
                {
                    "requests": list(requests.order_by("-updated_at")),
                    "bookings": list(bookings.order_by("-updated_at")),
                }
            )
        except Exception as e:
            self.logger.error(f"Error listing active jobs for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
