"""
ReviewService - buyers rate sellers after a completed job.

A review must point at a request or booking the buyer owns, done with that
seller, that the buyer sees as completed. One review per job. The seller's
``seller_rating`` and ``review_count`` are recomputed on every new review.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from authentication.models import Profile
from infrastructure.events.redis_event_bus import get_event_bus
from marketplace.domain.events import ReviewCreatedEvent
from marketplace.domain.lifecycle import BOOKING, BUYER, REQUEST, classify_job
from marketplace.infra.observability.metrics import review_rating, reviews_created_total
from marketplace.jobs.domain.services.completion_service import job_contract, job_seller_id
from marketplace.models import BookingRequest, Contract, MaintenanceRequest, SellerReview
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(self, event_bus=None):
        super().__init__()
        self.event_bus = event_bus

    def _bus(self):
        return self.event_bus or get_event_bus()

    def _resolve_job(self, buyer, request_id=None, booking_id=None, contract_id=None) -> ServiceResult:
        """
        Find the (kind, job, contract) a review refers to.

        A contract given alongside a request or booking must belong to that
        job and to the reviewing buyer.
        """
        try:
            contract = Contract.objects.get(id=contract_id) if contract_id else None
        except (Contract.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.CONTRACT_NOT_FOUND, f"Contract {contract_id} not found")

        if contract is not None:
            if contract.buyer_id != buyer.id:
                return service_err(ErrorCodes.VALIDATION_ERROR, "That contract is not yours")
            if request_id and str(contract.request_id) != str(request_id):
                return service_err(ErrorCodes.VALIDATION_ERROR, "That contract does not belong to this request")
            if booking_id and str(contract.booking_id) != str(booking_id):
                return service_err(ErrorCodes.VALIDATION_ERROR, "That contract does not belong to this booking")

        request_id = request_id or (contract.request_id if contract else None)
        booking_id = booking_id or (contract.booking_id if contract else None)

        if request_id:
            try:
                job = MaintenanceRequest.objects.get(id=request_id)
            except (MaintenanceRequest.DoesNotExist, ValidationError):
                return service_err(ErrorCodes.REQUEST_NOT_FOUND, f"Request {request_id} not found")
            return service_ok((REQUEST, job, contract or job_contract(REQUEST, job)))

        if booking_id:
            try:
                job = BookingRequest.objects.get(id=booking_id)
            except (BookingRequest.DoesNotExist, ValidationError):
                return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")
            return service_ok((BOOKING, job, contract or job_contract(BOOKING, job)))

        return service_err(ErrorCodes.VALIDATION_ERROR, "A review needs a request, booking or contract")

    @staticmethod
    def refresh_seller_rating(seller_id) -> Dict:
        stats = SellerReview.objects.filter(seller_id=seller_id).aggregate(avg=Avg("rating"), count=Count("id"))
        average = Decimal(str(stats["avg"] or 0)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        Profile.objects.filter(user_id=seller_id).update(seller_rating=average, review_count=stats["count"])
        return {"average": average, "count": stats["count"]}

    @BaseService.log_performance
    def create_review(
        self,
        buyer,
        seller_id,
        rating: int,
        review_text: str = "",
        request_id=None,
        booking_id=None,
        contract_id=None,
    ) -> ServiceResult[SellerReview]:
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Rating must be a number between 1 and 5")
        if not 1 <= rating <= 5:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Rating must be between 1 and 5")
        if review_text and len(review_text) > 2000:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Review text is too long (max 2000 characters)")

        job_result = self._resolve_job(buyer, request_id, booking_id, contract_id)
        if not job_result.ok:
            return job_result
        kind, job, contract = job_result.value

        if job.buyer_id != buyer.id:
            return service_err(ErrorCodes.PERMISSION_DENIED, "You can only review your own jobs")
        if str(job_seller_id(kind, job)) != str(seller_id):
            return service_err(ErrorCodes.VALIDATION_ERROR, "This seller did not do that job")

        classification = classify_job(job, BUYER, contract.status if contract else None)
        if not classification.is_completed:
            return service_err(ErrorCodes.JOB_NOT_COMPLETED, "You can review a job once it is completed")

        lookup = {"request": job} if kind == REQUEST else {"booking": job}
        if SellerReview.objects.filter(seller_id=seller_id, buyer=buyer, **lookup).exists():
            return service_err(ErrorCodes.DUPLICATE_REVIEW, "You already reviewed this job")

        try:
            with transaction.atomic():
                review = SellerReview.objects.create(
                    seller_id=seller_id,
                    buyer=buyer,
                    contract=contract,
                    rating=rating,
                    review_text=review_text or "",
                    **lookup,
                )
                self.refresh_seller_rating(seller_id)
        except IntegrityError:
            return service_err(ErrorCodes.DUPLICATE_REVIEW, "You already reviewed this job")
        except Exception as e:
            self.logger.error(f"Error creating review for seller {seller_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        reviews_created_total.inc()
        review_rating.observe(rating)
        self.publish_event(
            self._bus(),
            ReviewCreatedEvent(
                review_id=str(review.id), seller_id=str(seller_id), buyer_id=str(buyer.id), rating=rating
            ),
        )
        return service_ok(review)

    @BaseService.log_performance
    def list_seller_reviews(self, seller_id, page: int = 1, page_size: int = 20) -> ServiceResult[Dict]:
        """Paginated reviews plus the seller's average and a 1-5 star distribution."""
        try:
            if not User.objects.filter(id=seller_id).exists():
                return service_err(ErrorCodes.VENDOR_NOT_FOUND, f"Seller {seller_id} not found")
        except ValidationError:
            return service_err(ErrorCodes.VENDOR_NOT_FOUND, f"Seller {seller_id} not found")

        try:
            queryset = SellerReview.objects.filter(seller_id=seller_id).select_related("buyer").order_by("-created_at")
            data = paginate(queryset, page, page_size)

            distribution = {str(star): 0 for star in range(1, 6)}
            for row in queryset.order_by().values("rating").annotate(total=Count("id")):
                distribution[str(row["rating"])] = row["total"]
            average = queryset.aggregate(avg=Avg("rating"))["avg"]

            data["average_rating"] = round(float(average), 1) if average is not None else None
            data["distribution"] = distribution
            return service_ok(data)
        except Exception as e:
            self.logger.error(f"Error listing reviews for seller {seller_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

