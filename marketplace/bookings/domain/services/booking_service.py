"""
BookingService - direct bookings from a buyer to one seller.

State Machine:
    pending -> contract_pending | declined | counter_proposed | cancelled
    counter_proposed -> contract_pending | buyer_countered | cancelled
    buyer_countered -> contract_pending | counter_proposed | declined | cancelled
    contract_pending -> accepted (contract executed) | cancelled

Reaching ``contract_pending`` always creates the contract; the booking only
becomes ``accepted`` once both parties signed it.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.dateparse import parse_date

from infrastructure.events.redis_event_bus import get_event_bus
from marketplace.contracts.domain.services.contract_service import ContractService
from marketplace.domain.categories import is_category_allowed
from marketplace.domain.events import BookingCreatedEvent, BookingStatusChangedEvent
from marketplace.domain.lifecycle import BOOKING, BookingStatus, ContractStatus, can_transition
from marketplace.infra.observability.metrics import booking_transitions_total
from marketplace.messaging.domain.services.message_service import MessageService
from marketplace.models import BookingRequest, Contract
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)

BOOKING_FIELDS = (
    "service_category",
    "job_description",
    "proposed_start_date",
    "proposed_end_date",
    "preferred_time_slot",
    "budget_range",
    "location_city",
    "location_address",
)
PROPOSAL_KEYS = ("proposed_start_date", "proposed_end_date", "price_estimate", "deposit_amount", "notes")


def _as_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return parse_date(str(value))


def _as_amount(value) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def clean_proposal(proposal: Dict) -> Dict:
    """Keep the known proposal keys, stored as JSON-safe strings."""
    cleaned = {}
    for key in PROPOSAL_KEYS:
        value = (proposal or {}).get(key)
        if value in (None, ""):
            continue
        cleaned[key] = value.isoformat() if isinstance(value, date) else str(value)
    return cleaned


def validate_proposal(proposal: Dict) -> Optional[str]:
    if not proposal:
        return "A proposal is required"
    start = _as_date(proposal.get("proposed_start_date"))
    end = _as_date(proposal.get("proposed_end_date"))
    if start and end and end < start:
        return "proposed_end_date cannot be before proposed_start_date"
    for key in ("price_estimate", "deposit_amount"):
        if proposal.get(key) not in (None, ""):
            amount = _as_amount(proposal[key])
            if amount is None or amount < 0:
                return f"{key} must be a positive number"
    return None


class BookingService(BaseService):
    def __init__(self, contract_service: ContractService = None, message_service: MessageService = None, event_bus=None):
        super().__init__()
        self.contract_service = contract_service or ContractService(event_bus=event_bus)
        self.message_service = message_service or MessageService()
        self.event_bus = event_bus

    def _bus(self):
        return self.event_bus or get_event_bus()

    def _lock(self, booking_id) -> ServiceResult[BookingRequest]:
        try:
            return service_ok(BookingRequest.objects.select_for_update().get(id=booking_id))
        except (BookingRequest.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")

    def _lock_as(self, user, booking_id, party: str) -> ServiceResult[BookingRequest]:
        result = self._lock(booking_id)
        if not result.ok:
            return result
        booking = result.value
        owner_id = booking.seller_id if party == "seller" else booking.buyer_id
        if owner_id != user.id:
            return service_err(ErrorCodes.NOT_BOOKING_PARTY, f"Only the {party} can do this")
        return result

    def _move(self, booking: BookingRequest, target: str, actor, fields: List[str]) -> Optional[ServiceResult]:
        """Apply a validated transition; returns an error result when the move is illegal."""
        if not can_transition(BOOKING, booking.status, target):
            return service_err(ErrorCodes.INVALID_STATE, f"Cannot move booking from '{booking.status}' to '{target}'")
        booking.status = target
        booking.save(update_fields=["status", "updated_at", *fields])
        booking_transitions_total.labels(status=target).inc()
        self.logger.info(f"Booking {booking.id} -> {target} by {actor.id}")
        return None

    def _publish_status(self, booking: BookingRequest, actor) -> None:
        self.publish_event(
            self._bus(),
            BookingStatusChangedEvent(
                booking_id=str(booking.id),
                buyer_id=str(booking.buyer_id),
                seller_id=str(booking.seller_id),
                status=booking.status,
                actor_id=str(actor.id),
            ),
        )

    # ------------------------------------------------------------------
    # Buyer creates
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_booking(self, buyer, data: Dict) -> ServiceResult[BookingRequest]:
        """Send a booking to the seller named by ``data["seller_id"]``."""
        seller_id = data.get("seller_id")
        try:
            seller = User.objects.get(id=seller_id)
        except (User.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.VENDOR_NOT_FOUND, f"Seller {seller_id} not found")

        if not seller.is_seller():
            return service_err(ErrorCodes.VALIDATION_ERROR, "Bookings can only be sent to sellers")
        if seller.id == buyer.id:
            return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot book yourself")
        if not is_category_allowed(data.get("service_category")):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Category '{data.get('service_category')}' is not available")

        description = (data.get("job_description") or "").strip()
        if not 10 <= len(description) <= 5000:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Job description must be between 10 and 5000 characters")

        start = _as_date(data.get("proposed_start_date"))
        end = _as_date(data.get("proposed_end_date"))
        if start and end and end < start:
            return service_err(ErrorCodes.VALIDATION_ERROR, "proposed_end_date cannot be before proposed_start_date")

        try:
            booking = BookingRequest.objects.create(
                buyer=buyer,
                seller=seller,
                status=BookingStatus.PENDING,
                **{field: data[field] for field in BOOKING_FIELDS if field in data},
            )
        except Exception as e:
            self.logger.error(f"Error creating booking for buyer {buyer.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        booking_transitions_total.labels(status=BookingStatus.PENDING).inc()
        self.publish_event(
            self._bus(),
            BookingCreatedEvent(
                booking_id=str(booking.id),
                buyer_id=str(buyer.id),
                seller_id=str(seller.id),
                service_category=booking.service_category,
            ),
        )
        return service_ok(booking)

    # ------------------------------------------------------------------
    # Seller answers
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def accept_booking(self, seller, booking_id, response: str = "") -> ServiceResult[BookingRequest]:
        """Accept as proposed (or the buyer's counter) and open the contract."""
        try:
            with transaction.atomic():
                result = self._lock_as(seller, booking_id, "seller")
                if not result.ok:
                    return result
                booking = result.value

                if booking.status == BookingStatus.BUYER_COUNTERED and booking.buyer_counter_proposal:
                    self._apply_proposal(booking, booking.buyer_counter_proposal)

                booking.seller_response = response or booking.seller_response
                error = self._move(
                    booking,
                    BookingStatus.CONTRACT_PENDING,
                    seller,
                    ["seller_response", "proposed_start_date", "proposed_end_date", "final_agreed_price"],
                )
                if error:
                    return error
                contract = self.contract_service.create_for_booking(booking)
                self.message_service.post_system_message(
                    booking,
                    sender=seller,
                    content="Booking accepted. A contract is ready for signature.",
                    payload={"contract_id": str(contract.id)},
                )
        except Exception as e:
            self.logger.error(f"Error accepting booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, seller)
        return service_ok(booking)

    @BaseService.log_performance
    def decline_booking(self, seller, booking_id, reason: str = "") -> ServiceResult[BookingRequest]:
        try:
            with transaction.atomic():
                result = self._lock_as(seller, booking_id, "seller")
                if not result.ok:
                    return result
                booking = result.value

                booking.seller_response = reason or ""
                error = self._move(booking, BookingStatus.DECLINED, seller, ["seller_response"])
                if error:
                    return error
        except Exception as e:
            self.logger.error(f"Error declining booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, seller)
        return service_ok(booking)

    @BaseService.log_performance
    def counter_booking(self, seller, booking_id, proposal: Dict, response: str = "") -> ServiceResult[BookingRequest]:
        error_message = validate_proposal(proposal)
        if error_message:
            return service_err(ErrorCodes.VALIDATION_ERROR, error_message)

        try:
            with transaction.atomic():
                result = self._lock_as(seller, booking_id, "seller")
                if not result.ok:
                    return result
                booking = result.value

                booking.seller_counter_proposal = clean_proposal(proposal)
                booking.seller_response = response or booking.seller_response
                error = self._move(
                    booking, BookingStatus.COUNTER_PROPOSED, seller, ["seller_counter_proposal", "seller_response"]
                )
                if error:
                    return error
                self.message_service.post_system_message(
                    booking,
                    sender=seller,
                    content=response or "The seller sent a counter proposal.",
                    message_type="counter_offer",
                    payload=booking.seller_counter_proposal,
                )
        except Exception as e:
            self.logger.error(f"Error countering booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, seller)
        return service_ok(booking)

    # ------------------------------------------------------------------
    # Buyer answers the seller's counter
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_proposal(booking: BookingRequest, proposal: Dict) -> None:
        start = _as_date(proposal.get("proposed_start_date"))
        end = _as_date(proposal.get("proposed_end_date"))
        price = _as_amount(proposal.get("price_estimate"))
        if start:
            booking.proposed_start_date = start
        if end:
            booking.proposed_end_date = end
        if price is not None:
            booking.final_agreed_price = price

    @BaseService.log_performance
    def accept_counter(self, buyer, booking_id) -> ServiceResult[BookingRequest]:
        """Take the seller's counter: its dates and price become the agreed terms."""
        try:
            with transaction.atomic():
                result = self._lock_as(buyer, booking_id, "buyer")
                if not result.ok:
                    return result
                booking = result.value

                if booking.status != BookingStatus.COUNTER_PROPOSED:
                    return service_err(ErrorCodes.INVALID_STATE, "There is no counter proposal to accept")

                self._apply_proposal(booking, booking.seller_counter_proposal or {})
                error = self._move(
                    booking,
                    BookingStatus.CONTRACT_PENDING,
                    buyer,
                    ["proposed_start_date", "proposed_end_date", "final_agreed_price"],
                )
                if error:
                    return error
                contract = self.contract_service.create_for_booking(booking)
                self.message_service.post_system_message(
                    booking,
                    sender=buyer,
                    content="Counter proposal accepted. A contract is ready for signature.",
                    payload={"contract_id": str(contract.id)},
                )
        except Exception as e:
            self.logger.error(f"Error accepting counter on booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, buyer)
        return service_ok(booking)

    @BaseService.log_performance
    def decline_counter(self, buyer, booking_id) -> ServiceResult[BookingRequest]:
        try:
            with transaction.atomic():
                result = self._lock_as(buyer, booking_id, "buyer")
                if not result.ok:
                    return result
                booking = result.value

                if booking.status != BookingStatus.COUNTER_PROPOSED:
                    return service_err(ErrorCodes.INVALID_STATE, "There is no counter proposal to decline")
                error = self._move(booking, BookingStatus.CANCELLED, buyer, [])
                if error:
                    return error
        except Exception as e:
            self.logger.error(f"Error declining counter on booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, buyer)
        return service_ok(booking)

    @BaseService.log_performance
    def buyer_counter(self, buyer, booking_id, proposal: Dict) -> ServiceResult[BookingRequest]:
        error_message = validate_proposal(proposal)
        if error_message:
            return service_err(ErrorCodes.VALIDATION_ERROR, error_message)

        try:
            with transaction.atomic():
                result = self._lock_as(buyer, booking_id, "buyer")
                if not result.ok:
                    return result
                booking = result.value

                booking.buyer_counter_proposal = clean_proposal(proposal)
                error = self._move(booking, BookingStatus.BUYER_COUNTERED, buyer, ["buyer_counter_proposal"])
                if error:
                    return error
                self.message_service.post_system_message(
                    booking,
                    sender=buyer,
                    content=booking.buyer_counter_proposal.get("notes") or "The buyer sent a counter proposal.",
                    message_type="counter_offer",
                    payload=booking.buyer_counter_proposal,
                )
        except Exception as e:
            self.logger.error(f"Error sending buyer counter on booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, buyer)
        return service_ok(booking)

    @BaseService.log_performance
    def cancel_booking(self, buyer, booking_id) -> ServiceResult[BookingRequest]:
        """Cancel before execution; an unsigned contract is cancelled with it."""
        try:
            with transaction.atomic():
                result = self._lock_as(buyer, booking_id, "buyer")
                if not result.ok:
                    return result
                booking = result.value

                error = self._move(booking, BookingStatus.CANCELLED, buyer, [])
                if error:
                    return error
                Contract.objects.filter(
                    booking=booking,
                    status__in=(ContractStatus.DRAFT, ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER),
                ).update(status=ContractStatus.CANCELLED)
        except Exception as e:
            self.logger.error(f"Error cancelling booking {booking_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self._publish_status(booking, buyer)
        return service_ok(booking)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def get_booking(self, user, booking_id) -> ServiceResult[BookingRequest]:
        try:
            booking = BookingRequest.objects.select_related("buyer", "seller").get(id=booking_id)
        except (BookingRequest.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")

        if user.id not in (booking.buyer_id, booking.seller_id) and not user.is_admin():
            return service_err(ErrorCodes.NOT_BOOKING_PARTY, "You are not part of this booking")
        return service_ok(booking)

    @BaseService.log_performance
    def list_buyer_bookings(self, buyer, status: Optional[str] = None) -> ServiceResult[List[BookingRequest]]:
        try:
            queryset = BookingRequest.objects.filter(buyer=buyer).select_related("seller")
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(list(queryset.order_by("-created_at")))
        except Exception as e:
            self.logger.error(f"Error listing bookings for buyer {buyer.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_seller_bookings(self, seller, status: Optional[str] = None) -> ServiceResult[List[BookingRequest]]:
        try:
            queryset = BookingRequest.objects.filter(seller=seller).select_related("buyer")
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(list(queryset.order_by("-created_at")))
        except Exception as e:
            self.logger.error(f"Error listing bookings for seller {seller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
