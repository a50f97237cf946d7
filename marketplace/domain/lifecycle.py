"""
Lifecycle vocabulary shared by requests, quotes, bookings and contracts.

One place defines every status string, the legal transitions between them,
their bilingual labels and the rules that sort a job into the completed,
rejected or active history bucket. Services validate writes against the
transition tables; the history views classify records with the same rules
for buyers and sellers, only the completion rule differs by role.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional

BUYER = "buyer"
SELLER = "seller"


class ContractStatus:
    DRAFT = "draft"
    PENDING_BUYER = "pending_buyer"
    PENDING_SELLER = "pending_seller"
    EXECUTED = "executed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    CHOICES = [
        (DRAFT, "Draft"),
        (PENDING_BUYER, "Pending Buyer Signature"),
        (PENDING_SELLER, "Pending Seller Signature"),
        (EXECUTED, "Executed"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]


class QuoteStatus:
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DECLINED = "declined"
    NEGOTIATING = "negotiating"
    REVISION_REQUESTED = "revision_requested"

    CHOICES = [
        (PENDING, "Pending"),
        (ACCEPTED, "Accepted"),
        (REJECTED, "Rejected"),
        (DECLINED, "Declined"),
        (NEGOTIATING, "Negotiating"),
        (REVISION_REQUESTED, "Revision Requested"),
    ]

    # Quotes the seller may still edit
    EDITABLE = {PENDING, NEGOTIATING, REVISION_REQUESTED}
    # Quotes that can still win the request
    OPEN = {PENDING, NEGOTIATING, REVISION_REQUESTED}


class BookingStatus:
    PENDING = "pending"
    CONTRACT_PENDING = "contract_pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DECLINED = "declined"
    COUNTER_PROPOSED = "counter_proposed"
    BUYER_COUNTERED = "buyer_countered"
    UNCONFIRMED_NO_WARRANTY = "unconfirmed_no_warranty"

    CHOICES = [
        (PENDING, "Pending"),
        (CONTRACT_PENDING, "Contract Pending"),
        (ACCEPTED, "Accepted"),
        (IN_PROGRESS, "In Progress"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
        (DECLINED, "Declined"),
        (COUNTER_PROPOSED, "Counter Proposed"),
        (BUYER_COUNTERED, "Buyer Countered"),
        (UNCONFIRMED_NO_WARRANTY, "Closed Without Warranty"),
    ]


class RequestStatus:
    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CLOSED = "closed"
    CANCELLED = "cancelled"
    UNCONFIRMED_NO_WARRANTY = "unconfirmed_no_warranty"

    CHOICES = [
        (OPEN, "Open"),
        (ASSIGNED, "Assigned"),
        (IN_PROGRESS, "In Progress"),
        (COMPLETED, "Completed"),
        (CLOSED, "Closed"),
        (CANCELLED, "Cancelled"),
        (UNCONFIRMED_NO_WARRANTY, "Closed Without Warranty"),
    ]


CONTRACT = "contract"
QUOTE = "quote"
BOOKING = "booking"
REQUEST = "request"

COMPLETED_STATUSES = frozenset({"completed", "closed"})
REJECTED_STATUSES = frozenset({"cancelled", "rejected", "declined"})

TRANSITIONS: Dict[str, Dict[str, frozenset]] = {
    QUOTE: {
        QuoteStatus.PENDING: frozenset(
            {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.NEGOTIATING, QuoteStatus.REVISION_REQUESTED}
        ),
        QuoteStatus.NEGOTIATING: frozenset(
            {
                QuoteStatus.ACCEPTED,
                QuoteStatus.REJECTED,
                QuoteStatus.NEGOTIATING,
                QuoteStatus.REVISION_REQUESTED,
                QuoteStatus.PENDING,
            }
        ),
        QuoteStatus.REVISION_REQUESTED: frozenset({QuoteStatus.PENDING, QuoteStatus.REJECTED}),
        QuoteStatus.ACCEPTED: frozenset({QuoteStatus.PENDING}),
    },
    BOOKING: {
        BookingStatus.PENDING: frozenset(
            {
                BookingStatus.CONTRACT_PENDING,
                BookingStatus.DECLINED,
                BookingStatus.COUNTER_PROPOSED,
                BookingStatus.CANCELLED,
            }
        ),
        BookingStatus.COUNTER_PROPOSED: frozenset(
            {BookingStatus.CONTRACT_PENDING, BookingStatus.BUYER_COUNTERED, BookingStatus.CANCELLED}
        ),
        BookingStatus.BUYER_COUNTERED: frozenset(
            {
                BookingStatus.CONTRACT_PENDING,
                BookingStatus.COUNTER_PROPOSED,
                BookingStatus.DECLINED,
                BookingStatus.CANCELLED,
            }
        ),
        BookingStatus.CONTRACT_PENDING: frozenset({BookingStatus.ACCEPTED, BookingStatus.CANCELLED}),
        BookingStatus.ACCEPTED: frozenset(
            {BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED, BookingStatus.UNCONFIRMED_NO_WARRANTY}
        ),
        BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.UNCONFIRMED_NO_WARRANTY}),
    },
    REQUEST: {
        RequestStatus.OPEN: frozenset({RequestStatus.ASSIGNED, RequestStatus.CANCELLED}),
        RequestStatus.ASSIGNED: frozenset(
            {
                RequestStatus.IN_PROGRESS,
                RequestStatus.COMPLETED,
                RequestStatus.CANCELLED,
                RequestStatus.UNCONFIRMED_NO_WARRANTY,
            }
        ),
        RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED, RequestStatus.UNCONFIRMED_NO_WARRANTY}),
        RequestStatus.COMPLETED: frozenset({RequestStatus.CLOSED}),
    },
    CONTRACT: {
        ContractStatus.DRAFT: frozenset(
            {ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER, ContractStatus.CANCELLED}
        ),
        ContractStatus.PENDING_BUYER: frozenset(
            {ContractStatus.PENDING_SELLER, ContractStatus.EXECUTED, ContractStatus.CANCELLED}
        ),
        ContractStatus.PENDING_SELLER: frozenset(
            {ContractStatus.PENDING_BUYER, ContractStatus.EXECUTED, ContractStatus.CANCELLED}
        ),
        ContractStatus.EXECUTED: frozenset({ContractStatus.COMPLETED}),
    },
}


def can_transition(kind: str, current: str, target: str) -> bool:
    """Return True when ``current -> target`` is a legal move for this record kind."""
    return target in TRANSITIONS.get(kind, {}).get(current, frozenset())


STATUS_LABELS: Dict[str, Dict[str, Dict[str, str]]] = {
    CONTRACT: {
        ContractStatus.DRAFT: {"en": "Draft", "ar": "مسودة"},
        ContractStatus.PENDING_BUYER: {"en": "Awaiting Buyer Signature", "ar": "بانتظار توقيع المشتري"},
        ContractStatus.PENDING_SELLER: {"en": "Awaiting Seller Signature", "ar": "بانتظار توقيع البائع"},
        ContractStatus.EXECUTED: {"en": "Active", "ar": "نشط"},
        ContractStatus.COMPLETED: {"en": "Completed", "ar": "مكتمل"},
        ContractStatus.CANCELLED: {"en": "Cancelled", "ar": "ملغي"},
    },
    QUOTE: {
        QuoteStatus.PENDING: {"en": "Pending", "ar": "قيد الانتظار"},
        QuoteStatus.ACCEPTED: {"en": "Accepted", "ar": "مقبول"},
        QuoteStatus.REJECTED: {"en": "Rejected", "ar": "مرفوض"},
        QuoteStatus.DECLINED: {"en": "Declined", "ar": "مرفوض"},
        QuoteStatus.NEGOTIATING: {"en": "Negotiating", "ar": "قيد التفاوض"},
        QuoteStatus.REVISION_REQUESTED: {"en": "Revision Requested", "ar": "طلب تعديل"},
    },
    BOOKING: {
        BookingStatus.PENDING: {"en": "Pending", "ar": "قيد الانتظار"},
        BookingStatus.CONTRACT_PENDING: {"en": "Contract Pending", "ar": "بانتظار العقد"},
        BookingStatus.ACCEPTED: {"en": "Accepted", "ar": "مقبول"},
        BookingStatus.IN_PROGRESS: {"en": "In Progress", "ar": "قيد التنفيذ"},
        BookingStatus.COMPLETED: {"en": "Completed", "ar": "مكتمل"},
        BookingStatus.CANCELLED: {"en": "Cancelled", "ar": "ملغي"},
        BookingStatus.DECLINED: {"en": "Declined", "ar": "مرفوض"},
        BookingStatus.COUNTER_PROPOSED: {"en": "Counter Offer", "ar": "عرض مضاد"},
        BookingStatus.BUYER_COUNTERED: {"en": "Buyer Counter Offer", "ar": "عرض مضاد من المشتري"},
        BookingStatus.UNCONFIRMED_NO_WARRANTY: {"en": "Closed Without Warranty", "ar": "مغلق بدون ضمان"},
    },
    REQUEST: {
        RequestStatus.OPEN: {"en": "Open", "ar": "مفتوح"},
        RequestStatus.ASSIGNED: {"en": "Assigned", "ar": "تم التعيين"},
        RequestStatus.IN_PROGRESS: {"en": "In Progress", "ar": "قيد التنفيذ"},
        RequestStatus.COMPLETED: {"en": "Completed", "ar": "مكتمل"},
        RequestStatus.CLOSED: {"en": "Closed", "ar": "مغلق"},
        RequestStatus.CANCELLED: {"en": "Cancelled", "ar": "ملغي"},
        RequestStatus.UNCONFIRMED_NO_WARRANTY: {"en": "Closed Without Warranty", "ar": "مغلق بدون ضمان"},
    },
}

EXECUTED_COMPLETE_LABEL = {"en": "Executed", "ar": "منفذ"}


def status_label(kind: str, status: str, language: str = "en", job_completed: bool = False) -> str:
    """
    Bilingual label for a status.

    An executed contract reads "Active" while work is ongoing and "Executed"
    once the job it covers is complete. Unknown statuses fall back to the raw
    string so new values never break rendering.
    """
    language = "ar" if language == "ar" else "en"
    if kind == CONTRACT and status == ContractStatus.EXECUTED and job_completed:
        return EXECUTED_COMPLETE_LABEL[language]
    labels = STATUS_LABELS.get(kind, {}).get(status)
    if not labels:
        return status
    return labels[language]


def all_labels() -> Dict[str, Dict[str, Dict[str, str]]]:
    return STATUS_LABELS


@dataclass
class JobClassification:
    bucket: str
    waiting_for_seller: bool = False
    waiting_for_buyer: bool = False

    @property
    def is_completed(self) -> bool:
        return self.bucket == "completed"


def _get(record: Any, name: str, default=None):
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def classify_job(record: Any, role: str, contract_status: Optional[str] = None) -> JobClassification:
    """
    Sort a request or booking into the completed, rejected or active bucket.

    ``record`` may be a model instance or a mapping exposing ``status``,
    ``buyer_marked_complete`` and ``seller_marked_complete``. Completion wins
    over rejection. The buyer counts a job as done as soon as they confirmed
    it; the seller only once both sides have marked it.
    """
    status = _get(record, "status", "")
    buyer_marked = bool(_get(record, "buyer_marked_complete", False))
    seller_marked = bool(_get(record, "seller_marked_complete", False))

    if status in COMPLETED_STATUSES:
        return JobClassification(bucket="completed")

    if role == BUYER and buyer_marked:
        return JobClassification(bucket="completed", waiting_for_seller=not seller_marked)

    if role == SELLER and buyer_marked and seller_marked:
        return JobClassification(bucket="completed")

    if contract_status == ContractStatus.COMPLETED:
        return JobClassification(bucket="completed")

    if status in REJECTED_STATUSES:
        return JobClassification(bucket="rejected")

    return JobClassification(
        bucket="active",
        waiting_for_buyer=role == SELLER and seller_marked and not buyer_marked,
    )


def quote_is_expired(quote_status: str, sibling_statuses: Iterable[str]) -> bool:
    """A still-open quote is expired once a competing quote on the same request was accepted."""
    if quote_status not in (QuoteStatus.PENDING, QuoteStatus.NEGOTIATING):
        return False
    return any(status == QuoteStatus.ACCEPTED for status in sibling_statuses)


def _first_amount(*values) -> Decimal:
    for value in values:
        if value in (None, ""):
            continue
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            continue
        if amount:
            return amount
    return Decimal("0")


def resolve_request_price(quote_price=None, contract_metadata: Optional[dict] = None, budget=None) -> Decimal:
    """Quote price, then the contract's final price, then the buyer's budget."""
    final_price = (contract_metadata or {}).get("final_price")
    return _first_amount(quote_price, final_price, budget)


def resolve_booking_price(final_agreed_price=None, final_amount=None, contract_metadata: Optional[dict] = None) -> Decimal:
    final_price = (contract_metadata or {}).get("final_price")
    return _first_amount(final_agreed_price, final_amount, final_price)


def group_open_requests(requests: Iterable[Any], quote_statuses_by_request: Mapping[Any, List[str]]) -> Dict[str, list]:
    """
    Split a buyer's requests into ``open`` and ``in_review``.

    A request is in review while any of its quotes is being negotiated.
    Requests already underway or confirmed by the buyer are left out.
    """
    groups = {"open": [], "in_review": []}
    for request in requests:
        status = _get(request, "status")
        if status in (RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED) or _get(request, "buyer_marked_complete"):
            continue
        statuses = quote_statuses_by_request.get(_get(request, "id"), [])
        if QuoteStatus.NEGOTIATING in statuses:
            groups["in_review"].append(request)
        else:
            groups["open"].append(request)
    return groups


def group_sent_bookings(bookings: Iterable[Any]) -> Dict[str, list]:
    """Split a buyer's bookings into ``sent`` and ``reviewed`` (seller has answered)."""
    groups = {"sent": [], "reviewed": []}
    for booking in bookings:
        status = _get(booking, "status")
        if status in (BookingStatus.ACCEPTED, BookingStatus.COMPLETED, BookingStatus.DECLINED):
            continue
        if _get(booking, "buyer_marked_complete"):
            continue
        if _get(booking, "seller_response") or status == BookingStatus.COUNTER_PROPOSED:
            groups["reviewed"].append(booking)
        else:
            groups["sent"].append(booking)
    return groups


FLOW_BOOKING = "booking"
FLOW_QUOTE = "quote"

JOURNEY_STAGES = {
    (FLOW_BOOKING, BUYER): [
        {"key": "requested", "en": "Booking Sent", "ar": "تم إرسال الحجز"},
        {"key": "accepted", "en": "Seller Accepted", "ar": "قبل البائع"},
        {"key": "buyer_signed", "en": "You Signed", "ar": "قمت بالتوقيع"},
        {"key": "executed", "en": "Contract Active", "ar": "العقد نشط"},
    ],
    (FLOW_BOOKING, SELLER): [
        {"key": "requested", "en": "Booking Received", "ar": "تم استلام الحجز"},
        {"key": "accepted", "en": "You Accepted", "ar": "قمت بالقبول"},
        {"key": "buyer_signed", "en": "Buyer Signed", "ar": "وقع المشتري"},
        {"key": "executed", "en": "Contract Active", "ar": "العقد نشط"},
    ],
    (FLOW_QUOTE, BUYER): [
        {"key": "quoted", "en": "Quote Received", "ar": "تم استلام العرض"},
        {"key": "accepted", "en": "Quote Accepted", "ar": "تم قبول العرض"},
        {"key": "buyer_signed", "en": "You Signed", "ar": "قمت بالتوقيع"},
        {"key": "executed", "en": "Contract Active", "ar": "العقد نشط"},
    ],
    (FLOW_QUOTE, SELLER): [
        {"key": "quoted", "en": "Quote Sent", "ar": "تم إرسال العرض"},
        {"key": "accepted", "en": "Buyer Accepted", "ar": "قبل المشتري"},
        {"key": "buyer_signed", "en": "Buyer Signed", "ar": "وقع المشتري"},
        {"key": "executed", "en": "Contract Active", "ar": "العقد نشط"},
    ],
}


def derive_stage_index(flow: str, data: Mapping[str, Any]) -> int:
    """
    Current journey stage (0-3) from the booking/quote and its contract.

    ``data`` keys: ``status`` (booking or quote status), ``has_contract``,
    ``buyer_signed``, ``seller_signed``.
    """
    if data.get("buyer_signed") and data.get("seller_signed"):
        return 3
    if data.get("buyer_signed"):
        return 2
    status = data.get("status")
    if flow == FLOW_BOOKING:
        if status in (BookingStatus.ACCEPTED, BookingStatus.CONTRACT_PENDING) or data.get("has_contract"):
            return 1
        return 0
    if status == QuoteStatus.ACCEPTED or data.get("has_contract"):
        return 1
    return 0


def journey_stages(flow: str, role: str, language: str = "en") -> List[Dict[str, str]]:
    language = "ar" if language == "ar" else "en"
    stages = JOURNEY_STAGES.get((flow, role), [])
    return [{"key": stage["key"], "label": stage[language]} for stage in stages]

