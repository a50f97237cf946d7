"""
RequestService - maintenance requests posted by buyers.

Requests are open to every seller until a contract for one of their quotes is
executed. Only open requests can be edited; cancelling a request rejects the
quotes still in play and cancels unsigned contracts. Once a contract is
executed the request can no longer be cancelled.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Exists, OuterRef

from marketplace.domain.categories import is_category_allowed
from marketplace.domain.lifecycle import (
    REQUEST,
    ContractStatus,
    QuoteStatus,
    RequestStatus,
    can_transition,
)
from marketplace.infra.observability.metrics import requests_created_total
from marketplace.models import Contract, MaintenanceRequest, QuoteSubmission
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "category",
    "description",
    "urgency",
    "location",
    "city",
    "preferred_start_date",
    "estimated_budget_min",
    "estimated_budget_max",
    "photos",
)

SIGNED_CONTRACT_STATUSES = (ContractStatus.EXECUTED, ContractStatus.COMPLETED)


def validate_request_data(data: Dict) -> Optional[str]:
    """Return an error message for invalid request fields, None when valid."""
    title = (data.get("title") or "").strip()
    if not 5 <= len(title) <= 200:
        return "Title must be between 5 and 200 characters"

    description = (data.get("description") or "").strip()
    if not 20 <= len(description) <= 5000:
        return "Description must be between 20 and 5000 characters"

    if not is_category_allowed(data.get("category")):
        return f"Category '{data.get('category')}' is not available"

    if data.get("urgency", "medium") not in ("low", "medium", "high"):
        return "Urgency must be low, medium or high"

    budget_min = data.get("estimated_budget_min")
    budget_max = data.get("estimated_budget_max")
    if budget_min is not None and Decimal(budget_min) < 0:
        return "Budget cannot be negative"
    if budget_min is not None and budget_max is not None and Decimal(budget_min) > Decimal(budget_max):
        return "Minimum budget cannot exceed maximum budget"
    return None


class RequestService(BaseService):
    def _get_owned(self, buyer, request_id, lock: bool = False) -> ServiceResult[MaintenanceRequest]:
        try:
            queryset = MaintenanceRequest.objects.select_for_update() if lock else MaintenanceRequest.objects
            request = queryset.get(id=request_id)
        except (MaintenanceRequest.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.REQUEST_NOT_FOUND, f"Request {request_id} not found")

        if request.buyer_id != buyer.id:
            return service_err(ErrorCodes.NOT_REQUEST_OWNER, "You do not own this request")
        return service_ok(request)

    @BaseService.log_performance
    def create_request(self, buyer, data: Dict) -> ServiceResult[MaintenanceRequest]:
        error = validate_request_data(data)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            request = MaintenanceRequest.objects.create(
                buyer=buyer, **{field: data[field] for field in EDITABLE_FIELDS if field in data}
            )
            requests_created_total.labels(category=request.category).inc()
            self.logger.info(f"Buyer {buyer.id} posted request {request.id} ({request.category})")
            return service_ok(request)
        except Exception as e:
            self.logger.error(f"Error creating request for buyer {buyer.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def update_request(self, buyer, request_id, data: Dict) -> ServiceResult[MaintenanceRequest]:
        result = self._get_owned(buyer, request_id, lock=True)
        if not result.ok:
            return result
        request = result.value

        if request.status != RequestStatus.OPEN:
            return service_err(ErrorCodes.INVALID_STATE, "Only open requests can be edited")

        merged = {field: getattr(request, field) for field in EDITABLE_FIELDS}
        merged.update({field: data[field] for field in EDITABLE_FIELDS if field in data})
        error = validate_request_data(merged)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(request, field, data[field])
            request.save()
            return service_ok(request)
        except Exception as e:
            self.logger.error(f"Error updating request {request_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def cancel_request(self, buyer, request_id) -> ServiceResult[MaintenanceRequest]:
        result = self._get_owned(buyer, request_id, lock=True)
        if not result.ok:
            return result
        request = result.value

        if not can_transition(REQUEST, request.status, RequestStatus.CANCELLED):
            return service_err(ErrorCodes.INVALID_STATE, f"Cannot cancel a request in status '{request.status}'")
        if Contract.objects.filter(request=request, status__in=SIGNED_CONTRACT_STATUSES).exists():
            return service_err(ErrorCodes.INVALID_STATE, "A request with an executed contract can no longer be cancelled")

        try:
            request.status = RequestStatus.CANCELLED
            request.save(update_fields=["status", "updated_at"])

            QuoteSubmission.objects.filter(request=request, status__in=QuoteStatus.OPEN).update(
                status=QuoteStatus.REJECTED, decline_reason="Request cancelled"
            )
            Contract.objects.filter(
                request=request,
                status__in=(ContractStatus.DRAFT, ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER),
            ).update(status=ContractStatus.CANCELLED)
            return service_ok(request)
        except Exception as e:
            self.logger.error(f"Error cancelling request {request_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_request(self, user, request_id) -> ServiceResult[MaintenanceRequest]:
        """
        Owner, admin, the assigned seller and sellers who quoted can always
        read a request; any seller can read it while it is open.
        """
        try:
            request = MaintenanceRequest.objects.select_related("buyer", "assigned_seller").get(id=request_id)
        except (MaintenanceRequest.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.REQUEST_NOT_FOUND, f"Request {request_id} not found")

        if request.buyer_id == user.id or user.is_admin() or request.assigned_seller_id == user.id:
            return service_ok(request)
        if user.is_seller() and request.status == RequestStatus.OPEN:
            return service_ok(request)
        if QuoteSubmission.objects.filter(request=request, seller=user).exists():
            return service_ok(request)
        return service_err(ErrorCodes.PERMISSION_DENIED, "You cannot view this request")

    @BaseService.log_performance
    def list_buyer_requests(
        self, buyer, status: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict]:
        try:
            queryset = MaintenanceRequest.objects.filter(buyer=buyer).annotate(quote_count=Count("quotes"))
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size))
        except Exception as e:
            self.logger.error(f"Error listing requests for buyer {buyer.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def marketplace_feed(
        self,
        seller,
        category: Optional[str] = None,
        city: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ServiceResult[Dict]:
        """Open requests from other buyers, each flagged with ``has_quoted`` for this seller."""
        try:
            seller_quotes = QuoteSubmission.objects.filter(request=OuterRef("pk"), seller=seller)
            queryset = (
                MaintenanceRequest.objects.filter(status=RequestStatus.OPEN)
                .exclude(buyer=seller)
                .select_related("buyer")
                .annotate(has_quoted=Exists(seller_quotes), quote_count=Count("quotes"))
            )
            if category:
                queryset = queryset.filter(category=category)
            if city:
                queryset = queryset.filter(city__iexact=city)
            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size))
        except Exception as e:
            self.logger.error(f"Error building marketplace feed for seller {seller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
