"""
ContractService - contracts created from accepted quotes and bookings.

Contracts start in ``pending_buyer``. Each party signs once; the second
signature executes the contract, which assigns the request (quote flow) or
accepts the booking (booking flow). Every signature leaves an audit row with
a SHA-256 hash of the signed content.
"""

import hashlib
import logging
import re
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.template import Context, Template
from django.utils import timezone

from authentication.infra.observability.tracing import add_span_attributes, get_tracer
from infrastructure.events.redis_event_bus import get_event_bus
from marketplace.domain.events import ContractExecutedEvent, ContractSignedEvent
from marketplace.domain.lifecycle import (
    BOOKING,
    CONTRACT,
    REQUEST,
    BookingStatus,
    ContractStatus,
    RequestStatus,
    can_transition,
)
from marketplace.infra.observability.metrics import (
    contract_signatures_total,
    contracts_created_total,
    contracts_executed_total,
)
from marketplace.models import (
    BindingTerms,
    BookingRequest,
    Contract,
    ContractClause,
    ContractSignature,
    ContractVersion,
    MaintenanceRequest,
    QuoteSubmission,
)
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.logging_utils import mask_ip

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DEFAULT_DURATION_DAYS = 7
LANGUAGE_MODES = ("dual", "english_only", "arabic_only")
SIGNABLE_STATUSES = (ContractStatus.DRAFT, ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER)
TWO_PLACES = Decimal("0.01")


def duration_days(estimated_duration: str, default: int = DEFAULT_DURATION_DAYS) -> int:
    """First integer in a free-text duration ("5 days", "2-3 weeks" -> 2)."""
    match = re.search(r"\d+", estimated_duration or "")
    if not match:
        return default
    return int(match.group(0)) or default


def _money(value) -> str:
    return str(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _warranty_days() -> int:
    return getattr(settings, "MAINTMENA", {}).get("WARRANTY_DAYS", 90)


class ContractService(BaseService):
    def __init__(self, event_bus=None):
        super().__init__()
        self.event_bus = event_bus

    def _bus(self):
        return self.event_bus or get_event_bus()

    # ------------------------------------------------------------------
    # Creation (called by the quote and booking flows inside their transaction)
    # ------------------------------------------------------------------

    def create_for_quote(self, quote: QuoteSubmission, language_mode: str = "dual") -> Contract:
        request = quote.request
        start_date = quote.start_date or timezone.localdate()
        contract = Contract.objects.create(
            buyer_id=request.buyer_id,
            seller_id=quote.seller_id,
            request=request,
            quote=quote,
            status=ContractStatus.PENDING_BUYER,
            language_mode=language_mode if language_mode in LANGUAGE_MODES else "dual",
            metadata={"final_price": str(quote.price)},
        )
        BindingTerms.objects.create(
            contract=contract,
            start_date=start_date,
            completion_date=start_date + timedelta(days=duration_days(quote.estimated_duration)),
            warranty_days=_warranty_days(),
            use_deposit_escrow=False,
        )
        contracts_created_total.labels(flow="quote").inc()
        self.logger.info(f"Created contract {contract.id} for quote {quote.id}")
        return contract

    def create_for_booking(self, booking: BookingRequest, language_mode: str = "dual") -> Contract:
        price = booking.final_agreed_price or booking.final_amount
        metadata = {"final_price": str(price)} if price else {}
        contract = Contract.objects.create(
            buyer_id=booking.buyer_id,
            seller_id=booking.seller_id,
            booking=booking,
            status=ContractStatus.PENDING_BUYER,
            language_mode=language_mode if language_mode in LANGUAGE_MODES else "dual",
            metadata=metadata,
        )
        BindingTerms.objects.create(
            contract=contract,
            start_date=booking.proposed_start_date,
            completion_date=booking.proposed_end_date,
            warranty_days=_warranty_days(),
            use_deposit_escrow=False,
        )
        contracts_created_total.labels(flow="booking").inc()
        self.logger.info(f"Created contract {contract.id} for booking {booking.id}")
        return contract

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _get_for_party(self, user, contract_id, lock: bool = False) -> ServiceResult[Contract]:
        try:
            queryset = Contract.objects.select_for_update() if lock else Contract.objects.select_related("binding_terms")
            contract = queryset.get(id=contract_id)
        except (Contract.DoesNotExist, ValidationError):
            return service_err(ErrorCodes.CONTRACT_NOT_FOUND, f"Contract {contract_id} not found")

        if not contract.is_party(user) and not user.is_admin():
            return service_err(ErrorCodes.NOT_CONTRACT_PARTY, "You are not a party to this contract")
        return service_ok(contract)

    @BaseService.log_performance
    def get_contract(self, user, contract_id) -> ServiceResult[Contract]:
        return self._get_for_party(user, contract_id)

    @BaseService.log_performance
    def list_contracts(self, user, role: Optional[str] = None) -> ServiceResult[List[Contract]]:
        try:
            queryset = Contract.objects.select_related("binding_terms", "buyer", "seller")
            if role == "buyer":
                queryset = queryset.filter(buyer=user)
            elif role == "seller":
                queryset = queryset.filter(seller=user)
            else:
                queryset = queryset.filter(Q(buyer=user) | Q(seller=user))
            return service_ok(list(queryset.order_by("-created_at")))
        except Exception as e:
            self.logger.error(f"Error listing contracts for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    @staticmethod
    def signature_hash(contract: Contract, user, signed_at) -> str:
        raw = f"{contract.id}:{user.id}:{contract.version}:{contract.content_hash}:{signed_at.isoformat()}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def _on_executed(self, contract: Contract) -> None:
        """Move the source record forward once both parties signed."""
        now = timezone.now()
        if contract.booking_id:
            booking = BookingRequest.objects.select_for_update().get(id=contract.booking_id)
            if can_transition(BOOKING, booking.status, BookingStatus.ACCEPTED):
                booking.status = BookingStatus.ACCEPTED
                booking.save(update_fields=["status", "updated_at"])
            else:
                self.logger.warning(f"Booking {booking.id} in status {booking.status} not moved to accepted")
        elif contract.request_id:
            request = MaintenanceRequest.objects.select_for_update().get(id=contract.request_id)
            if can_transition(REQUEST, request.status, RequestStatus.ASSIGNED):
                request.status = RequestStatus.ASSIGNED
                request.assigned_seller_id = contract.seller_id
                request.assigned_at = now
                request.save(update_fields=["status", "assigned_seller", "assigned_at", "updated_at"])
            else:
                self.logger.warning(f"Request {request.id} in status {request.status} not moved to assigned")

    @BaseService.log_performance
    def sign(self, user, contract_id, ip_address: Optional[str] = None) -> ServiceResult[Contract]:
        """
        Sign as buyer or seller.

        The first signature moves the contract to waiting on the other party,
        the second executes it.
        """
        with tracer.start_as_current_span("contract.sign") as span:
            add_span_attributes(span, contract_id=contract_id, user_id=user.id)
            try:
                with transaction.atomic():
                    result = self._get_for_party(user, contract_id, lock=True)
                    if not result.ok:
                        return result
                    contract = result.value

                    if not contract.is_party(user):
                        return service_err(ErrorCodes.NOT_CONTRACT_PARTY, "Only the buyer or seller can sign")
                    if contract.status not in SIGNABLE_STATUSES:
                        return service_err(
                            ErrorCodes.INVALID_STATE, f"Cannot sign a contract in status '{contract.status}'"
                        )

                    party = "buyer" if user.id == contract.buyer_id else "seller"
                    now = timezone.now()
                    if party == "buyer":
                        if contract.signed_at_buyer:
                            return service_err(ErrorCodes.ALREADY_SIGNED, "You have already signed this contract")
                        contract.signed_at_buyer = now
                    else:
                        if contract.signed_at_seller:
                            return service_err(ErrorCodes.ALREADY_SIGNED, "You have already signed this contract")
                        contract.signed_at_seller = now

                    if contract.signed_at_buyer and contract.signed_at_seller:
                        new_status = ContractStatus.EXECUTED
                    elif contract.signed_at_buyer:
                        new_status = ContractStatus.PENDING_SELLER
                    else:
                        new_status = ContractStatus.PENDING_BUYER

                    if new_status != contract.status and not can_transition(CONTRACT, contract.status, new_status):
                        return service_err(
                            ErrorCodes.INVALID_STATE, f"Cannot move contract from {contract.status} to {new_status}"
                        )
                    contract.status = new_status
                    if new_status == ContractStatus.EXECUTED:
                        contract.executed_at = now
                    contract.save()

                    ContractSignature.objects.create(
                        contract=contract,
                        user=user,
                        version=contract.version,
                        signature_hash=self.signature_hash(contract, user, now),
                        ip_address=ip_address,
                    )
                    contract_signatures_total.labels(party=party).inc()

                    if new_status == ContractStatus.EXECUTED:
                        self._on_executed(contract)
                        contracts_executed_total.inc()

            except Exception as e:
                self.logger.error(f"Error signing contract {contract_id}: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            add_span_attributes(span, party=party, status=contract.status)
            self.logger.info(f"Contract {contract.id} signed by {party} from {mask_ip(ip_address)}")
            bus = self._bus()
            self.publish_event(
                bus,
                ContractSignedEvent(
                    contract_id=str(contract.id),
                    signer_id=str(user.id),
                    party=party,
                    buyer_id=str(contract.buyer_id),
                    seller_id=str(contract.seller_id),
                ),
            )
            if contract.status == ContractStatus.EXECUTED:
                self.publish_event(
                    bus,
                    ContractExecutedEvent(
                        contract_id=str(contract.id),
                        buyer_id=str(contract.buyer_id),
                        seller_id=str(contract.seller_id),
                        flow=contract.flow,
                    ),
                )
            return service_ok(contract)

    @BaseService.log_performance
    @transaction.atomic
    def withdraw_signature(self, user, contract_id) -> ServiceResult[Contract]:
        """The buyer may take back a signature until the seller has signed."""
        result = self._get_for_party(user, contract_id, lock=True)
        if not result.ok:
            return result
        contract = result.value

        if user.id != contract.buyer_id:
            return service_err(ErrorCodes.NOT_CONTRACT_PARTY, "Only the buyer can withdraw a signature")
        if not contract.signed_at_buyer:
            return service_err(ErrorCodes.INVALID_STATE, "You have not signed this contract")
        if contract.signed_at_seller or contract.status != ContractStatus.PENDING_SELLER:
            return service_err(ErrorCodes.INVALID_STATE, "The seller has already signed this contract")

        try:
            contract.signed_at_buyer = None
            contract.status = ContractStatus.PENDING_BUYER
            contract.save(update_fields=["signed_at_buyer", "status", "updated_at"])
            return service_ok(contract)
        except Exception as e:
            self.logger.error(f"Error withdrawing signature on contract {contract_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    # ------------------------------------------------------------------
    # Terms and document
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_terms(data: Dict) -> Optional[str]:
        schedule = data.get("payment_schedule")
        if schedule is not None:
            keys = {"deposit", "progress", "completion"}
            if set(schedule) != keys:
                return "payment_schedule needs deposit, progress and completion"
            try:
                if sum(int(schedule[key]) for key in keys) != 100:
                    return "payment_schedule percentages must add up to 100"
            except (TypeError, ValueError):
                return "payment_schedule percentages must be integers"
        if "warranty_days" in data and int(data["warranty_days"]) < 0:
            return "warranty_days cannot be negative"
        start, end = data.get("start_date"), data.get("completion_date")
        if isinstance(start, date) and isinstance(end, date) and end < start:
            return "completion_date cannot be before start_date"
        if "language_mode" in data and data["language_mode"] not in LANGUAGE_MODES:
            return f"language_mode must be one of {', '.join(LANGUAGE_MODES)}"
        return None

    @BaseService.log_performance
    @transaction.atomic
    def update_terms(self, user, contract_id, data: Dict) -> ServiceResult[Contract]:
        """Change binding terms before anyone signed. Bumps the contract version."""
        result = self._get_for_party(user, contract_id, lock=True)
        if not result.ok:
            return result
        contract = result.value

        if not contract.is_party(user):
            return service_err(ErrorCodes.NOT_CONTRACT_PARTY, "Only the buyer or seller can change terms")
        if contract.signed_at_buyer or contract.signed_at_seller or contract.status not in SIGNABLE_STATUSES:
            return service_err(ErrorCodes.INVALID_STATE, "Terms can only change before anyone has signed")

        error = self._validate_terms(data)
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            terms, _ = BindingTerms.objects.get_or_create(contract=contract)
            for field in ("start_date", "completion_date", "warranty_days", "use_deposit_escrow", "access_hours"):
                if field in data:
                    setattr(terms, field, data[field])
            if "payment_schedule" in data:
                terms.payment_schedule = {key: int(value) for key, value in data["payment_schedule"].items()}
            terms.save()

            if "language_mode" in data:
                contract.language_mode = data["language_mode"]
            contract.version += 1
            contract.save(update_fields=["language_mode", "version", "updated_at"])
            return service_ok(contract)
        except Exception as e:
            self.logger.error(f"Error updating terms of contract {contract_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def merge_variables(self, contract: Contract) -> Dict:
        terms = getattr(contract, "binding_terms", None)
        schedule = (terms.payment_schedule if terms else None) or {"deposit": 30, "progress": 40, "completion": 30}

        if contract.quote_id:
            total = Decimal(contract.quote.price or 0)
            request = contract.request or contract.quote.request
            project_title = request.title
            service_category = request.category
            description = request.description
            location = request.location or request.city
        else:
            booking = contract.booking
            total = Decimal(booking.final_agreed_price or booking.final_amount or contract.metadata.get("final_price") or 0)
            project_title = booking.title
            service_category = booking.service_category
            description = booking.job_description
            location = booking.location_address or booking.location_city

        vat_rate = Decimal(str(getattr(settings, "MAINTMENA", {}).get("VAT_RATE", 0.15)))
        vat = total * vat_rate
        buyer_profile = getattr(contract.buyer, "profile", None)
        seller_profile = getattr(contract.seller, "profile", None)

        return {
            "contract_date": timezone.localdate().strftime("%d/%m/%Y"),
            "start_date": terms.start_date.isoformat() if terms and terms.start_date else "TBD",
            "completion_date": terms.completion_date.isoformat() if terms and terms.completion_date else "TBD",
            "seller_name": contract.seller.display_name,
            "seller_company": (seller_profile.company_name if seller_profile else "") or "",
            "buyer_name": contract.buyer.display_name,
            "buyer_company": (buyer_profile.company_name if buyer_profile else "") or "Individual",
            "project_title": project_title,
            "service_category": service_category,
            "project_description": description,
            "work_location": location,
            "total_amount": _money(total),
            "vat_amount": _money(vat),
            "total_with_vat": _money(total + vat),
            "deposit_pct": schedule["deposit"],
            "deposit_amount": _money(total * Decimal(schedule["deposit"]) / 100),
            "progress_pct": schedule["progress"],
            "progress_amount": _money(total * Decimal(schedule["progress"]) / 100),
            "final_pct": schedule["completion"],
            "final_amount": _money(total * Decimal(schedule["completion"]) / 100),
            "access_hours": terms.access_hours if terms else "8 AM - 5 PM",
            "warranty_days": terms.warranty_days if terms else _warranty_days(),
            "use_deposit_escrow": terms.use_deposit_escrow if terms else False,
        }

    @staticmethod
    def _render_section(clauses, variables: Dict, language: str) -> str:
        context = Context(variables)
        direction = ' dir="rtl"' if language == "ar" else ""
        parts = [f'<div class="contract-content"{direction}>']
        for clause in clauses:
            title = getattr(clause, f"title_{language}")
            content = Template(getattr(clause, f"content_{language}")).render(context)
            parts.append(f'<section class="clause"><h2>{title}</h2><div class="clause-body">{content}</div></section>')
        parts.append("</div>")
        return "".join(parts)

    def render_html(self, contract: Contract, variables: Dict) -> str:
        clauses = ContractClause.objects.filter(is_active=True).order_by("display_order", "key")
        if not variables["use_deposit_escrow"]:
            clauses = clauses.filter(requires_escrow=False)
        clauses = list(clauses)

        if contract.language_mode == "english_only":
            return self._render_section(clauses, variables, "en")
        if contract.language_mode == "arabic_only":
            return self._render_section(clauses, variables, "ar")
        return (
            '<div class="contract-bilingual">'
            f'<div class="english-version">{self._render_section(clauses, variables, "en")}</div>'
            f'<div class="arabic-version">{self._render_section(clauses, variables, "ar")}</div>'
            "</div>"
        )

    @BaseService.log_performance
    def generate_document(self, user, contract_id) -> ServiceResult[Dict]:
        """
        Render the contract HTML, store it with its content hash and record a version.

        Once either party has signed, the stored snapshot is returned as is:
        signature hashes cover that content.
        """
        with tracer.start_as_current_span("contract.generate_document") as span:
            add_span_attributes(span, contract_id=contract_id)
            try:
                with transaction.atomic():
                    result = self._get_for_party(user, contract_id, lock=True)
                    if not result.ok:
                        return result
                    contract = result.value

                    signed = bool(contract.signed_at_buyer or contract.signed_at_seller)
                    if signed and contract.html_snapshot:
                        add_span_attributes(span, frozen=True)
                        return service_ok(
                            {"contract": contract, "html": contract.html_snapshot, "content_hash": contract.content_hash}
                        )

                    html = self.render_html(contract, self.merge_variables(contract))
                    content_hash = hashlib.sha256(html.encode("utf-8")).hexdigest()

                    contract.html_snapshot = html
                    contract.content_hash = content_hash
                    contract.save(update_fields=["html_snapshot", "content_hash", "updated_at"])

                    terms = getattr(contract, "binding_terms", None)
                    ContractVersion.objects.create(
                        contract=contract,
                        version=contract.version,
                        html_snapshot=html,
                        binding_terms_snapshot=terms.snapshot() if terms else {},
                        content_hash=content_hash,
                        changed_by=user,
                    )
                    return service_ok({"contract": contract, "html": html, "content_hash": content_hash})
            except Exception as e:
                self.logger.error(f"Error generating document for contract {contract_id}: {e}", exc_info=True)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
