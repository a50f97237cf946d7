"""
QuoteService - seller quotes on maintenance requests and the buyer's answers.

State Machine:
    pending -> accepted | rejected | negotiating | revision_requested
    negotiating -> accepted | rejected | negotiating | revision_requested | pending
    revision_requested -> pending (seller edits) | rejected
    accepted -> pending (buyer switches to another quote before signing)

Accepting a quote creates the contract. Every write locks the quote row and
validates the move against the lifecycle transition table.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from authentication.infra.observability.tracing import add_span_attributes, get_tracer
from infrastructure.events.redis_event_bus import get_event_bus
from marketplace.contracts.domain.services.contract_service import ContractService
from marketplace.domain.events import (
    QuoteAcceptedEvent,
    QuoteDeclinedEvent,
    QuoteNegotiationEvent,
    QuoteSubmittedEvent,
)
from marketplace.domain.lifecycle import (
    QUOTE,
    ContractStatus,
    QuoteStatus,
    RequestStatus,
    can_transition,
    quote_is_expired,
)
from marketplace.infra.observability.metrics import quote_decisions_total, quote_price, quotes_submitted_total
from marketplace.messaging.domain.services.message_service import MessageService
from marketplace.models import Contract, MaintenanceRequest, QuoteSubmission
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

EDITABLE_FIELDS = (
    "price",
    "estimated_duration",
    "start_date",
    "proposal",
    "labor_cost",
    "material_cost",
    "attachments",
)
UNSIGNED_CONTRACT_STATUSES = (ContractStatus.DRAFT, ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER)


def _max_quote_price() -> Decimal:
    return Decimal(str(getattr(settings, "MAINTMENA", {}).get("MAX_QUOTE_PRICE", 10_000_000)))


def validate_price(value) -> Optional[str]:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return "Price must be a number"
    if price <= 0:
        return "Price must be greater than zero"
    if price > _max_quote_price():
        return f"Price cannot exceed {_max_quote_price()}"
    return None


def validate_quote_data(data: Dict) -> Optional[str]:
    error = validate_price(data.get("price"))
    if error:
        return error
    proposal = (data.get("proposal") or "").strip()
    if not 20 <= len(proposal) <= 10000:
        return "Proposal must be between 20 and 10000 characters"
    for field in ("labor_cost", "material_cost"):
        if data.get(field) is not None and Decimal(str(data[field])) < 0:
            return f"{field} cannot be negative"
    return None


class QuoteService(BaseService):
    """
    Dependencies:
    - ContractService: creates the contract when a quote is accepted
    - MessageService: posts system and counter-offer messages on the quote thread
    """

    def __init__(self, contract_service: ContractService = None, message_service: MessageService = None, event_bus=None):
        super().__init__()
        self.contract_service = contract_service or ContractService(event_bus=event_bus)
        self.message_service = message_service or MessageService()
        self.event_bus = event_bus

    def _bus(self):
        return self.event_bus or get_event_bus()

    def _lock_quote(self, quote_id) -> ServiceResult[QuoteSubmission]:
        try:
            return service_ok(QuoteSubmission.objects.select_for_update().select_related("request").get(id=quote_id))
        except (QuoteSubmission.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.QUOTE_NOT_FOUND, f"Quote {quote_id} not found")

    def _lock_for_buyer(self, buyer, quote_id) -> ServiceResult[QuoteSubmission]:
        result = self._lock_quote(quote_id)
        if not result.ok:
            return result
        if result.value.request.buyer_id != buyer.id:
            return service_err(ErrorCodes.NOT_REQUEST_OWNER, "Only the request owner can answer this quote")
        return result

    @staticmethod
    def _check_move(quote: QuoteSubmission, target: str) -> Optional[ServiceResult]:
        if not can_transition(QUOTE, quote.status, target):
            return service_err(ErrorCodes.INVALID_STATE, f"Cannot move quote from '{quote.status}' to '{target}'")
        return None

    # ------------------------------------------------------------------
    # Seller side
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def submit_quote(self, seller, request_id, data: Dict) -> ServiceResult[QuoteSubmission]:
        if not seller.is_seller():
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only sellers can submit quotes")

        error = validate_quote_data(data)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            with transaction.atomic():
                try:
                    request = MaintenanceRequest.objects.select_for_update().get(id=request_id)
                except (MaintenanceRequest.DoesNotExist, ValidationError):
                    return service_err(ErrorCodes.REQUEST_NOT_FOUND, f"Request {request_id} not found")

                if request.status != RequestStatus.OPEN:
                    return service_err(ErrorCodes.INVALID_STATE, "This request is no longer accepting quotes")
                if request.buyer_id == seller.id:
                    return service_err(ErrorCodes.PERMISSION_DENIED, "You cannot quote your own request")

                active = QuoteSubmission.objects.filter(request=request, seller=seller).exclude(
                    status__in=(QuoteStatus.REJECTED, QuoteStatus.DECLINED)
                )
                if active.exists():
                    return service_err(ErrorCodes.DUPLICATE_QUOTE, "You already have an active quote on this request")

                quote = QuoteSubmission.objects.create(
                    request=request,
                    seller=seller,
                    **{field: data[field] for field in EDITABLE_FIELDS if field in data},
                )
        except Exception as e:
            self.logger.error(f"Error submitting quote on request {request_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        quotes_submitted_total.labels(status=quote.status).inc()
        quote_price.observe(float(quote.price))
        self.publish_event(
            self._bus(),
            QuoteSubmittedEvent(
                quote_id=str(quote.id),
                request_id=str(request.id),
                buyer_id=str(request.buyer_id),
                seller_id=str(seller.id),
                price=quote.price,
            ),
        )
        return service_ok(quote)

    @BaseService.log_performance
    @transaction.atomic
    def edit_quote(self, seller, quote_id, data: Dict) -> ServiceResult[QuoteSubmission]:
        """Seller revises an open quote; answering a revision request puts it back to pending."""
        result = self._lock_quote(quote_id)
        if not result.ok:
            return result
        quote = result.value

        if quote.seller_id != seller.id:
            return service_err(ErrorCodes.NOT_QUOTE_OWNER, "You do not own this quote")
        if quote.status not in QuoteStatus.EDITABLE:
            return service_err(ErrorCodes.INVALID_STATE, f"Cannot edit a quote in status '{quote.status}'")

        merged = {field: getattr(quote, field) for field in EDITABLE_FIELDS}
        merged.update({field: data[field] for field in EDITABLE_FIELDS if field in data})
        error = validate_quote_data(merged)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(quote, field, data[field])
            if quote.status == QuoteStatus.REVISION_REQUESTED:
                quote.status = QuoteStatus.PENDING
            quote.save()
            return service_ok(quote)
        except Exception as e:
            self.logger.error(f"Error editing quote {quote_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    # ------------------------------------------------------------------
    # Buyer side
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def accept_quote(self, buyer, quote_id, language_mode: str = "dual") -> ServiceResult[Contract]:
        """
        Accept a quote and create its contract.

        Accepting the quote that already has a live contract returns that
        contract unchanged. Accepting a different quote on the same request
        cancels the previous unsigned contract and puts its quote back to
        pending; once anybody signed, the switch is refused.
        """
        with tracer.start_as_current_span("quote.accept") as span:
            add_span_attributes(span, quote_id=quote_id, buyer_id=buyer.id)
            try:
                with transaction.atomic():
                    result = self._lock_for_buyer(buyer, quote_id)
                    if not result.ok:
                        return result
                    quote = result.value
                    request = quote.request

                    existing = Contract.objects.filter(quote=quote).exclude(status=ContractStatus.CANCELLED).first()
                    if existing:
                        return service_ok(existing)

                    if request.status != RequestStatus.OPEN:
                        return service_err(ErrorCodes.INVALID_STATE, "This request is no longer open")

                    error = self._check_move(quote, QuoteStatus.ACCEPTED)
                    if error:
                        return error

                    previous = (
                        Contract.objects.select_for_update()
                        .filter(request=request)
                        .exclude(quote=quote)
                        .exclude(status=ContractStatus.CANCELLED)
                    )
                    for contract in previous:
                        if contract.status not in UNSIGNED_CONTRACT_STATUSES or (
                            contract.signed_at_buyer or contract.signed_at_seller
                        ):
                            return service_err(
                                ErrorCodes.INVALID_STATE, "Another quote's contract is already signed"
                            )
                        contract.status = ContractStatus.CANCELLED
                        contract.save(update_fields=["status", "updated_at"])
                        QuoteSubmission.objects.filter(id=contract.quote_id, status=QuoteStatus.ACCEPTED).update(
                            status=QuoteStatus.PENDING
                        )
                        self.logger.info(f"Buyer switched from quote {contract.quote_id} to {quote.id}")

                    quote.status = QuoteStatus.ACCEPTED
                    quote.save(update_fields=["status", "updated_at"])

                    contract = self.contract_service.create_for_quote(quote, language_mode=language_mode)
                    self.message_service.post_system_message(
                        quote,
                        sender=buyer,
                        content="Quote accepted. A contract is ready for signature.",
                        payload={"contract_id": str(contract.id)},
                    )
            except Exception as e:
                self.logger.error(f"Error accepting quote {quote_id}: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            quote_decisions_total.labels(decision="accepted").inc()
            self.publish_event(
                self._bus(),
                QuoteAcceptedEvent(
                    quote_id=str(quote.id),
                    request_id=str(request.id),
                    buyer_id=str(buyer.id),
                    seller_id=str(quote.seller_id),
                    contract_id=str(contract.id),
                ),
            )
            return service_ok(contract)

    @BaseService.log_performance
    def decline_quote(self, buyer, quote_id, reason: str = "") -> ServiceResult[QuoteSubmission]:
        try:
            with transaction.atomic():
                result = self._lock_for_buyer(buyer, quote_id)
                if not result.ok:
                    return result
                quote = result.value

                error = self._check_move(quote, QuoteStatus.REJECTED)
                if error:
                    return error

                quote.status = QuoteStatus.REJECTED
                quote.decline_reason = reason or ""
                quote.save(update_fields=["status", "decline_reason", "updated_at"])
        except Exception as e:
            self.logger.error(f"Error declining quote {quote_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        quote_decisions_total.labels(decision="rejected").inc()
        self.publish_event(
            self._bus(),
            QuoteDeclinedEvent(
                quote_id=str(quote.id),
                request_id=str(quote.request_id),
                seller_id=str(quote.seller_id),
                reason=quote.decline_reason,
            ),
        )
        return service_ok(quote)

    @BaseService.log_performance
    def negotiate_quote(
        self, buyer, quote_id, price=None, duration: Optional[str] = None, message: str = ""
    ) -> ServiceResult[QuoteSubmission]:
        """Counter the seller's quote with a price and/or duration."""
        if price is None and not duration and not message:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Provide a price, a duration or a message")
        if price is not None:
            error = validate_price(price)
            if error:
                return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            with transaction.atomic():
                result = self._lock_for_buyer(buyer, quote_id)
                if not result.ok:
                    return result
                quote = result.value

                error = self._check_move(quote, QuoteStatus.NEGOTIATING)
                if error:
                    return error

                quote.status = QuoteStatus.NEGOTIATING
                quote.save(update_fields=["status", "updated_at"])

                payload = {
                    "proposed_price": str(price) if price is not None else None,
                    "proposed_duration": duration or None,
                    "message": message,
                }
                parts = []
                if price is not None:
                    parts.append(f"Proposed price: {price} SAR")
                if duration:
                    parts.append(f"Proposed duration: {duration}")
                if message:
                    parts.append(message)
                self.message_service.post_system_message(
                    quote, sender=buyer, content="\n".join(parts), message_type="counter_offer", payload=payload
                )
        except Exception as e:
            self.logger.error(f"Error negotiating quote {quote_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        quote_decisions_total.labels(decision="negotiating").inc()
        self.publish_event(
            self._bus(),
            QuoteNegotiationEvent(
                quote_id=str(quote.id), request_id=str(quote.request_id), seller_id=str(quote.seller_id), action="counter"
            ),
        )
        return service_ok(quote)

    @BaseService.log_performance
    def request_revision(self, buyer, quote_id, message: str) -> ServiceResult[QuoteSubmission]:
        """Ask the seller to rework the quote; the current terms are kept for comparison."""
        message = (message or "").strip()
        if not message:
            return service_err(ErrorCodes.VALIDATION_ERROR, "A revision message is required")

        try:
            with transaction.atomic():
                result = self._lock_for_buyer(buyer, quote_id)
                if not result.ok:
                    return result
                quote = result.value

                error = self._check_move(quote, QuoteStatus.REVISION_REQUESTED)
                if error:
                    return error

                quote.previous_price = quote.price
                quote.previous_duration = quote.estimated_duration
                quote.previous_proposal = quote.proposal
                quote.revision_message = message
                quote.status = QuoteStatus.REVISION_REQUESTED
                quote.save()

                self.message_service.post_system_message(
                    quote, sender=buyer, content=message, message_type="revision_request"
                )
        except Exception as e:
            self.logger.error(f"Error requesting revision on quote {quote_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        quote_decisions_total.labels(decision="revision_requested").inc()
        self.publish_event(
            self._bus(),
            QuoteNegotiationEvent(
                quote_id=str(quote.id),
                request_id=str(quote.request_id),
                seller_id=str(quote.seller_id),
                action="revision",
            ),
        )
        return service_ok(quote)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def _flag_expired(quotes: List[QuoteSubmission]) -> List[QuoteSubmission]:
        """Set ``quote.expired`` from the statuses of sibling quotes on the same request."""
        request_ids = {quote.request_id for quote in quotes}
        accepted_by_request = {}
        rows = QuoteSubmission.objects.filter(request_id__in=request_ids, status=QuoteStatus.ACCEPTED).values_list(
            "request_id", "id"
        )
        for request_id, accepted_id in rows:
            accepted_by_request.setdefault(request_id, set()).add(accepted_id)

        for quote in quotes:
            others = accepted_by_request.get(quote.request_id, set()) - {quote.id}
            quote.expired = quote_is_expired(quote.status, [QuoteStatus.ACCEPTED] * len(others))
        return quotes

    @BaseService.log_performance
    def list_request_quotes(self, buyer, request_id) -> ServiceResult[List[QuoteSubmission]]:
        try:
            request = MaintenanceRequest.objects.get(id=request_id)
        except (MaintenanceRequest.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.REQUEST_NOT_FOUND, f"Request {request_id} not found")

        if request.buyer_id != buyer.id and not buyer.is_admin():
            return service_err(ErrorCodes.NOT_REQUEST_OWNER, "You do not own this request")

        try:
            quotes = list(
                QuoteSubmission.objects.filter(request=request).select_related("seller", "seller__profile").order_by("price")
            )
            return service_ok(self._flag_expired(quotes))
        except Exception as e:
            self.logger.error(f"Error listing quotes for request {request_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_seller_quotes(self, seller, status: Optional[str] = None) -> ServiceResult[List[QuoteSubmission]]:
        try:
            queryset = QuoteSubmission.objects.filter(seller=seller).select_related("request")
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(self._flag_expired(list(queryset.order_by("-created_at"))))
        except Exception as e:
            self.logger.error(f"Error listing quotes for seller {seller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_quote(self, user, quote_id) -> ServiceResult[QuoteSubmission]:
        try:
            quote = QuoteSubmission.objects.select_related("request", "seller").get(id=quote_id)
        except (QuoteSubmission.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.QUOTE_NOT_FOUND, f"Quote {quote_id} not found")

        if user.id not in (quote.seller_id, quote.request.buyer_id) and not user.is_admin():
            return service_err(ErrorCodes.PERMISSION_DENIED, "You cannot view this quote")
        return service_ok(self._flag_expired([quote])[0])
