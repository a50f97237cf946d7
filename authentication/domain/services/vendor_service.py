"""
VendorService - vendor discovery and saved vendors.

Only discoverable sellers are listed. Results are ordered best first: rating,
then completed projects, then the fastest response time.
"""

import logging
from typing import Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db.models import Exists, OuterRef

from authentication.domain.events import EventDispatcher
from authentication.filters import VendorFilter
from authentication.infra.observability.metrics import saved_vendors_total, vendor_searches_total
from authentication.infra.observability.tracing import trace_function
from authentication.models import SavedVendor
from marketplace.models import SellerReview
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)

VENDOR_ORDERING = ("-profile__seller_rating", "-profile__completed_projects", "profile__response_time_hours")


def discoverable_vendors():
    return User.objects.filter(role="seller", is_active=True, profile__discoverable=True).select_related("profile")


class VendorService(BaseService):
    def _get_vendor(self, vendor_id) -> ServiceResult:
        try:
            return service_ok(discoverable_vendors().get(id=vendor_id))
        except (User.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.VENDOR_NOT_FOUND, f"Vendor {vendor_id} not found")

    @trace_function("vendor.discover")
    @BaseService.log_performance
    def discover(self, filters: Optional[Dict] = None, user=None, page: int = 1, page_size: int = 20) -> ServiceResult:
        """
        Filter discoverable sellers.

        Args:
            filters: query parameters for VendorFilter (category, city, min_rating,
                verified, availability, search)
            user: when given, each vendor carries ``is_saved`` for that buyer
        """
        vendor_filter = VendorFilter(filters or {}, queryset=discoverable_vendors())
        if not vendor_filter.is_valid():
            errors = "; ".join(f"{field}: {' '.join(messages)}" for field, messages in vendor_filter.errors.items())
            return service_err(ErrorCodes.VALIDATION_ERROR, errors)

        try:
            queryset = vendor_filter.qs.order_by(*VENDOR_ORDERING)
            if user is not None and user.is_authenticated:
                queryset = queryset.annotate(
                    is_saved=Exists(SavedVendor.objects.filter(buyer=user, vendor=OuterRef("pk")))
                )
            vendor_searches_total.inc()
            return service_ok(paginate(queryset, page, page_size))
        except Exception as e:
            self.logger.error(f"Error discovering vendors: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_vendor(self, vendor_id, user=None) -> ServiceResult[Dict]:
        """Vendor with their three latest reviews."""
        result = self._get_vendor(vendor_id)
        if not result.ok:
            return result
        vendor = result.value

        reviews = list(
            SellerReview.objects.filter(seller=vendor).select_related("buyer").order_by("-created_at")[:3]
        )
        is_saved = False
        if user is not None and user.is_authenticated:
            is_saved = SavedVendor.objects.filter(buyer=user, vendor=vendor).exists()
        return service_ok({"vendor": vendor, "recent_reviews": reviews, "is_saved": is_saved})

    @BaseService.log_performance
    def save_vendor(self, buyer, vendor_id) -> ServiceResult[SavedVendor]:
        """Idempotent: saving an already saved vendor returns the existing row."""
        result = self._get_vendor(vendor_id)
        if not result.ok:
            return result
        vendor = result.value
        if vendor.id == buyer.id:
            return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot save yourself")

        saved, created = SavedVendor.objects.get_or_create(buyer=buyer, vendor=vendor)
        if created:
            saved_vendors_total.labels(action="save").inc()
            EventDispatcher.dispatch_vendor_saved(buyer, vendor)
        return service_ok(saved)

    @BaseService.log_performance
    def unsave_vendor(self, buyer, vendor_id) -> ServiceResult[bool]:
        try:
            deleted, _ = SavedVendor.objects.filter(buyer=buyer, vendor_id=vendor_id).delete()
        except ValidationError:
            return service_err(ErrorCodes.VENDOR_NOT_FOUND, f"Vendor {vendor_id} not found")
        if deleted:
            saved_vendors_total.labels(action="unsave").inc()
        return service_ok(bool(deleted))

    @BaseService.log_performance
    def list_saved_vendors(self, buyer) -> ServiceResult:
        vendors = (
            User.objects.filter(saved_by__buyer=buyer)
            .select_related("profile")
            .order_by("-saved_by__created_at")
        )
        return service_ok(list(vendors))
