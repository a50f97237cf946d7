"""
HistoryService - buyer and seller job history.

Loads everything a user took part in with one query per record kind, indexes
it by foreign key in memory and sorts every job into the completed, rejected
or active bucket with the shared lifecycle classifier.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db.models import Q

from marketplace.domain.lifecycle import (
    BOOKING,
    BUYER,
    FLOW_BOOKING,
    FLOW_QUOTE,
    QUOTE,
    REQUEST,
    SELLER,
    BookingStatus,
    ContractStatus,
    QuoteStatus,
    RequestStatus,
    classify_job,
    derive_stage_index,
    group_open_requests,
    group_sent_bookings,
    journey_stages,
    quote_is_expired,
    resolve_booking_price,
    resolve_request_price,
    status_label,
)
from marketplace.infra.observability.metrics import history_build_duration
from marketplace.models import BookingRequest, Contract, MaintenanceRequest, QuoteSubmission, SellerReview
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)


def _labels(kind: str, status: str, job_completed: bool = False) -> Dict[str, str]:
    return {
        "en": status_label(kind, status, "en", job_completed),
        "ar": status_label(kind, status, "ar", job_completed),
    }


def _counterpart(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"id": str(user.id), "name": user.display_name}


def _first_present(*values):
    """First non-empty value, used as a sort key."""
    for value in values:
        if value is not None:
            return value
    return None


def _sort_desc(items: List[Dict], key_fields: Iterable[str]) -> List[Dict]:
    key_fields = tuple(key_fields)
    with_key = [(item, _first_present(*(item.get(field) for field in key_fields))) for item in items]
    dated = sorted((pair for pair in with_key if pair[1] is not None), key=lambda pair: pair[1], reverse=True)
    undated = [item for item, key in with_key if key is None]
    return [item for item, _ in dated] + undated


def index_contracts(contracts: Iterable[Contract]) -> Dict[str, Dict]:
    """
    Contracts by request id and booking id. A live contract wins over a
    cancelled one; among equals the newest wins.
    """
    by_request, by_booking = {}, {}
    ordered = sorted(contracts, key=lambda c: (c.status != ContractStatus.CANCELLED, c.created_at))
    for contract in ordered:
        if contract.request_id:
            by_request[contract.request_id] = contract
        if contract.booking_id:
            by_booking[contract.booking_id] = contract
    return {"request": by_request, "booking": by_booking}


class HistoryService(BaseService):
    # ------------------------------------------------------------------
    # Item builders
    # ------------------------------------------------------------------

    @staticmethod
    def _job_item(kind: str, job, contract: Optional[Contract], counterpart, price, role: str) -> Dict:
        classification = classify_job(job, role, contract.status if contract else None)
        title = job.title
        category = job.category
        return {
            "kind": kind,
            "id": str(job.id),
            "title": title,
            "category": category,
            "status": job.status,
            "status_label": _labels(kind, job.status),
            "bucket": classification.bucket,
            "counterpart": _counterpart(counterpart),
            "price": str(price),
            "contract_id": str(contract.id) if contract else None,
            "contract_status": contract.status if contract else None,
            "contract_status_label": (
                _labels("contract", contract.status, classification.is_completed) if contract else None
            ),
            "review": None,
            "waiting_for_seller": classification.waiting_for_seller,
            "waiting_for_buyer": classification.waiting_for_buyer,
            "expired": False,
            "buyer_marked_complete": job.buyer_marked_complete,
            "seller_marked_complete": job.seller_marked_complete,
            "warranty_expires_at": job.warranty_expires_at,
            "buyer_completion_date": job.buyer_completion_date,
            "seller_completion_date": job.seller_completion_date,
            "completed_at": job.completed_at,
            "created_at": job.created_at,
            "updated_at": job.updated_at,
        }

    @staticmethod
    def _quote_item(quote: QuoteSubmission, counterpart, expired: bool) -> Dict:
        return {
            "kind": QUOTE,
            "id": str(quote.id),
            "request_id": str(quote.request_id),
            "title": quote.request.title,
            "category": quote.request.category,
            "status": quote.status,
            "status_label": _labels(QUOTE, quote.status),
            "bucket": "rejected",
            "counterpart": _counterpart(counterpart),
            "price": str(quote.price),
            "contract_id": None,
            "review": None,
            "waiting_for_seller": False,
            "waiting_for_buyer": False,
            "expired": expired,
            "decline_reason": quote.decline_reason,
            "created_at": quote.created_at,
            "updated_at": quote.updated_at,
        }

    @staticmethod
    def _bucket(items: List[Dict], completed_sort: Iterable[str]) -> Dict[str, Any]:
        buckets = {"completed": [], "rejected": [], "active": []}
        for item in items:
            buckets[item.pop("bucket")].append(item)
        buckets["completed"] = _sort_desc(buckets["completed"], completed_sort)
        buckets["rejected"] = _sort_desc(buckets["rejected"], ["updated_at"])
        buckets["active"] = _sort_desc(buckets["active"], ["updated_at"])
        buckets["counts"] = {name: len(buckets[name]) for name in ("completed", "rejected", "active")}
        return buckets

    # ------------------------------------------------------------------
    # Buyer
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def buyer_history(self, user) -> ServiceResult[Dict]:
        try:
            with history_build_duration.labels(role=BUYER).time():
                return service_ok(self._build_buyer_history(user))
        except Exception as e:
            self.logger.error(f"Error building buyer history for {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _build_buyer_history(self, user) -> Dict:
        requests = list(
            MaintenanceRequest.objects.filter(buyer=user).select_related("assigned_seller", "assigned_seller__profile")
        )
        bookings = list(BookingRequest.objects.filter(buyer=user).select_related("seller", "seller__profile"))
        contracts = index_contracts(Contract.objects.filter(buyer=user))
        quotes = list(QuoteSubmission.objects.filter(request__buyer=user).select_related("request", "seller"))
        reviews = list(SellerReview.objects.filter(buyer=user))

        quotes_by_request: Dict[Any, List[QuoteSubmission]] = {}
        for quote in quotes:
            quotes_by_request.setdefault(quote.request_id, []).append(quote)

        reviews_by_request = {review.request_id: review for review in reviews if review.request_id}
        reviews_by_booking = {review.booking_id: review for review in reviews if review.booking_id}
        reviews_by_contract = {review.contract_id: review for review in reviews if review.contract_id}

        items = []
        for request in requests:
            contract = contracts["request"].get(request.id)
            siblings = quotes_by_request.get(request.id, [])
            accepted = next((q for q in siblings if q.status == QuoteStatus.ACCEPTED), None)
            counterpart = request.assigned_seller or (accepted.seller if accepted else None)
            price = resolve_request_price(
                accepted.price if accepted else None,
                contract.metadata if contract else None,
                request.estimated_budget_max,
            )
            item = self._job_item(REQUEST, request, contract, counterpart, price, BUYER)
            review = reviews_by_request.get(request.id) or (reviews_by_contract.get(contract.id) if contract else None)
            item["review"] = review.rating if review else None
            items.append(item)

        for booking in bookings:
            contract = contracts["booking"].get(booking.id)
            price = resolve_booking_price(
                booking.final_agreed_price, booking.final_amount, contract.metadata if contract else None
            )
            item = self._job_item(BOOKING, booking, contract, booking.seller, price, BUYER)
            review = None
            if contract:
                review = reviews_by_contract.get(contract.id) or (
                    reviews_by_request.get(contract.request_id) if contract.request_id else None
                )
            review = review or reviews_by_booking.get(booking.id)
            item["review"] = review.rating if review else None
            items.append(item)

        for siblings in quotes_by_request.values():
            for quote in siblings:
                other_statuses = [q.status for q in siblings if q.id != quote.id]
                if quote.status in (QuoteStatus.REJECTED, QuoteStatus.DECLINED):
                    items.append(self._quote_item(quote, quote.seller, expired=False))
                elif quote_is_expired(quote.status, other_statuses):
                    items.append(self._quote_item(quote, quote.seller, expired=True))

        return self._bucket(items, ["buyer_completion_date", "updated_at"])

    # ------------------------------------------------------------------
    # Seller
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def seller_history(self, user) -> ServiceResult[Dict]:
        try:
            with history_build_duration.labels(role=SELLER).time():
                return service_ok(self._build_seller_history(user))
        except Exception as e:
            self.logger.error(f"Error building seller history for {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _build_seller_history(self, user) -> Dict:
        requests = list(MaintenanceRequest.objects.filter(assigned_seller=user).select_related("buyer"))
        bookings = list(BookingRequest.objects.filter(seller=user).select_related("buyer"))
        contracts = index_contracts(Contract.objects.filter(seller=user))
        quotes = list(QuoteSubmission.objects.filter(seller=user).select_related("request", "request__buyer"))
        reviews = list(SellerReview.objects.filter(seller=user))

        # Prefer the accepted quote when the seller quoted a request more than once
        quote_by_request: Dict[Any, QuoteSubmission] = {}
        for quote in sorted(quotes, key=lambda q: q.status == QuoteStatus.ACCEPTED):
            quote_by_request[quote.request_id] = quote

        reviews_by_request = {review.request_id: review for review in reviews if review.request_id}
        reviews_by_booking = {review.booking_id: review for review in reviews if review.booking_id}

        items = []
        for request in requests:
            contract = contracts["request"].get(request.id)
            quote = quote_by_request.get(request.id)
            price = resolve_request_price(
                quote.price if quote else None,
                contract.metadata if contract else None,
                request.estimated_budget_max,
            )
            item = self._job_item(REQUEST, request, contract, request.buyer, price, SELLER)
            review = reviews_by_request.get(request.id)
            item["review"] = review.rating if review else None
            items.append(item)

        for booking in bookings:
            contract = contracts["booking"].get(booking.id)
            price = resolve_booking_price(
                booking.final_agreed_price, booking.final_amount, contract.metadata if contract else None
            )
            item = self._job_item(BOOKING, booking, contract, booking.buyer, price, SELLER)
            review = reviews_by_booking.get(booking.id)
            item["review"] = review.rating if review else None
            items.append(item)

        for quote in quotes:
            if quote.status in (QuoteStatus.REJECTED, QuoteStatus.DECLINED):
                items.append(self._quote_item(quote, quote.request.buyer, expired=False))

        return self._bucket(items, ["seller_completion_date", "completed_at", "updated_at"])

    # ------------------------------------------------------------------
    # Buyer overview and journey
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def buyer_overview(self, user) -> ServiceResult[Dict]:
        """Open requests (open / in review) and pending bookings (sent / reviewed)."""
        try:
            requests = list(
                MaintenanceRequest.objects.filter(buyer=user)
                .exclude(
                    status__in=(RequestStatus.CANCELLED, RequestStatus.CLOSED, RequestStatus.UNCONFIRMED_NO_WARRANTY)
                )
                .order_by("-created_at")
            )
            statuses: Dict[Any, List[str]] = {}
            for request_id, status in QuoteSubmission.objects.filter(request__in=requests).values_list(
                "request_id", "status"
            ):
                statuses.setdefault(request_id, []).append(status)

            bookings = list(
                BookingRequest.objects.filter(buyer=user)
                .exclude(
                    status__in=(
                        BookingStatus.CANCELLED,
                        BookingStatus.IN_PROGRESS,
                        BookingStatus.UNCONFIRMED_NO_WARRANTY,
                    )
                )
                .select_related("seller")
                .order_by("-created_at")
            )

            request_groups = group_open_requests(requests, statuses)
            booking_groups = group_sent_bookings(bookings)
            return service_ok(
                {
                    "open": request_groups["open"],
                    "in_review": request_groups["in_review"],
                    "sent": booking_groups["sent"],
                    "reviewed": booking_groups["reviewed"],
                }
            )
        except Exception as e:
            self.logger.error(f"Error building overview for buyer {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def journey(self, user, flow: str, object_id, language: str = "en") -> ServiceResult[Dict]:
        """Stage list and current stage of a booking or quote on its way to an active contract."""
        if flow not in (FLOW_BOOKING, FLOW_QUOTE):
            return service_err(ErrorCodes.INVALID_INPUT, f"Unknown flow '{flow}'")

        try:
            if flow == FLOW_BOOKING:
                record = BookingRequest.objects.get(id=object_id)
                buyer_id, seller_id = record.buyer_id, record.seller_id
                contracts = Contract.objects.filter(booking=record)
            else:
                record = QuoteSubmission.objects.select_related("request").get(id=object_id)
                buyer_id, seller_id = record.request.buyer_id, record.seller_id
                contracts = Contract.objects.filter(quote=record)
        except BookingRequest.DoesNotExist:
            return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {object_id} not found")
        except QuoteSubmission.DoesNotExist:
            return service_err(ErrorCodes.QUOTE_NOT_FOUND, f"Quote {object_id} not found")
        except ValidationError:
            return service_err(ErrorCodes.INVALID_INPUT, f"Invalid id '{object_id}'")

        if user.id not in (buyer_id, seller_id):
            return service_err(ErrorCodes.PERMISSION_DENIED, "You are not part of this deal")

        contract = contracts.filter(~Q(status=ContractStatus.CANCELLED)).order_by("-created_at").first()
        role = BUYER if user.id == buyer_id else SELLER
        index = derive_stage_index(
            flow,
            {
                "status": record.status,
                "has_contract": contract is not None,
                "buyer_signed": bool(contract and contract.signed_at_buyer),
                "seller_signed": bool(contract and contract.signed_at_seller),
            },
        )
        return service_ok(
            {
                "flow": flow,
                "role": role,
                "stages": journey_stages(flow, role, language),
                "current_index": index,
                "contract_id": str(contract.id) if contract else None,
            }
        )
