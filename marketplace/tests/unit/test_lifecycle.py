from decimal import Decimal

import pytest

from marketplace.domain.lifecycle import (
    BOOKING,
    BUYER,
    CONTRACT,
    FLOW_BOOKING,
    FLOW_QUOTE,
    QUOTE,
    REQUEST,
    SELLER,
    BookingStatus,
    ContractStatus,
    QuoteStatus,
    RequestStatus,
    can_transition,
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


@pytest.mark.unit
class TestTransitions:
    def test_request_moves_forward_only(self):
        assert can_transition(REQUEST, RequestStatus.OPEN, RequestStatus.ASSIGNED)
        assert can_transition(REQUEST, RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS)
        assert can_transition(REQUEST, RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED)
        assert not can_transition(REQUEST, RequestStatus.COMPLETED, RequestStatus.OPEN)
        assert not can_transition(REQUEST, RequestStatus.CANCELLED, RequestStatus.OPEN)

    def test_open_request_cannot_skip_to_completed(self):
        assert not can_transition(REQUEST, RequestStatus.OPEN, RequestStatus.COMPLETED)

    def test_booking_counter_loop(self):
        assert can_transition(BOOKING, BookingStatus.PENDING, BookingStatus.COUNTER_PROPOSED)
        assert can_transition(BOOKING, BookingStatus.COUNTER_PROPOSED, BookingStatus.BUYER_COUNTERED)
        assert can_transition(BOOKING, BookingStatus.BUYER_COUNTERED, BookingStatus.COUNTER_PROPOSED)
        assert can_transition(BOOKING, BookingStatus.BUYER_COUNTERED, BookingStatus.CONTRACT_PENDING)

    def test_declined_booking_is_terminal(self):
        for target in (BookingStatus.PENDING, BookingStatus.ACCEPTED, BookingStatus.CONTRACT_PENDING):
            assert not can_transition(BOOKING, BookingStatus.DECLINED, target)

    def test_contract_signature_order(self):
        assert can_transition(CONTRACT, ContractStatus.PENDING_BUYER, ContractStatus.PENDING_SELLER)
        assert can_transition(CONTRACT, ContractStatus.PENDING_SELLER, ContractStatus.EXECUTED)
        assert can_transition(CONTRACT, ContractStatus.PENDING_SELLER, ContractStatus.PENDING_BUYER)
        assert can_transition(CONTRACT, ContractStatus.EXECUTED, ContractStatus.COMPLETED)
        assert not can_transition(CONTRACT, ContractStatus.EXECUTED, ContractStatus.CANCELLED)

    def test_quote_revision_returns_to_pending(self):
        assert can_transition(QUOTE, QuoteStatus.REVISION_REQUESTED, QuoteStatus.PENDING)
        assert not can_transition(QUOTE, QuoteStatus.REJECTED, QuoteStatus.PENDING)

    def test_unknown_kind(self):
        assert not can_transition("invoice", "draft", "paid")


@pytest.mark.unit
class TestStatusLabels:
    def test_english_and_arabic(self):
        assert status_label(REQUEST, RequestStatus.OPEN) == "Open"
        assert status_label(REQUEST, RequestStatus.OPEN, "ar") == "مفتوح"

    def test_executed_contract_reads_active_until_job_done(self):
        assert status_label(CONTRACT, ContractStatus.EXECUTED) == "Active"
        assert status_label(CONTRACT, ContractStatus.EXECUTED, job_completed=True) == "Executed"
        assert status_label(CONTRACT, ContractStatus.EXECUTED, "ar", job_completed=True) == "منفذ"

    def test_unknown_status_falls_back_to_raw_value(self):
        assert status_label(BOOKING, "on_hold") == "on_hold"

    def test_unsupported_language_falls_back_to_english(self):
        assert status_label(QUOTE, QuoteStatus.PENDING, "fr") == "Pending"


@pytest.mark.unit
class TestClassifyJob:
    def test_completed_status_wins(self):
        job = {"status": "completed"}
        assert classify_job(job, BUYER).bucket == "completed"
        assert classify_job(job, SELLER).bucket == "completed"

    def test_buyer_confirmation_completes_for_buyer_only(self):
        job = {"status": "in_progress", "buyer_marked_complete": True, "seller_marked_complete": False}

        buyer_view = classify_job(job, BUYER)
        assert buyer_view.is_completed
        assert buyer_view.waiting_for_seller

        assert classify_job(job, SELLER).bucket == "active"

    def test_seller_waits_for_buyer(self):
        job = {"status": "in_progress", "buyer_marked_complete": False, "seller_marked_complete": True}

        seller_view = classify_job(job, SELLER)
        assert seller_view.bucket == "active"
        assert seller_view.waiting_for_buyer

    def test_completed_contract_wins_over_rejected_status(self):
        job = {"status": "cancelled"}

        assert classify_job(job, SELLER, contract_status=ContractStatus.COMPLETED).is_completed
        assert classify_job(job, SELLER).bucket == "rejected"

    def test_model_like_objects(self):
        class Job:
            status = "declined"
            buyer_marked_complete = False
            seller_marked_complete = False

        assert classify_job(Job(), BUYER).bucket == "rejected"


@pytest.mark.unit
class TestQuoteExpiry:
    def test_open_quote_expires_once_sibling_accepted(self):
        assert quote_is_expired(QuoteStatus.PENDING, [QuoteStatus.ACCEPTED, QuoteStatus.PENDING])
        assert quote_is_expired(QuoteStatus.NEGOTIATING, [QuoteStatus.ACCEPTED])

    def test_not_expired_without_accepted_sibling(self):
        assert not quote_is_expired(QuoteStatus.PENDING, [QuoteStatus.REJECTED, QuoteStatus.PENDING])

    def test_closed_quotes_never_expire(self):
        assert not quote_is_expired(QuoteStatus.REJECTED, [QuoteStatus.ACCEPTED])


@pytest.mark.unit
class TestPriceResolution:
    def test_request_price_precedence(self):
        assert resolve_request_price("450", {"final_price": "500"}, "300") == Decimal("450")
        assert resolve_request_price(None, {"final_price": "500"}, "300") == Decimal("500")
        assert resolve_request_price(None, {}, "300") == Decimal("300")

    def test_zero_and_garbage_are_skipped(self):
        assert resolve_request_price("0", {"final_price": "abc"}, "120.50") == Decimal("120.50")

    def test_booking_price_defaults_to_zero(self):
        assert resolve_booking_price() == Decimal("0")
        assert resolve_booking_price(None, "900", None) == Decimal("900")


@pytest.mark.unit
class TestGrouping:
    def test_group_open_requests(self):
        requests = [
            {"id": 1, "status": "open"},
            {"id": 2, "status": "open"},
            {"id": 3, "status": "in_progress"},
            {"id": 4, "status": "assigned", "buyer_marked_complete": True},
        ]
        groups = group_open_requests(requests, {2: [QuoteStatus.PENDING, QuoteStatus.NEGOTIATING]})

        assert [r["id"] for r in groups["open"]] == [1]
        assert [r["id"] for r in groups["in_review"]] == [2]

    def test_group_sent_bookings(self):
        bookings = [
            {"id": 1, "status": "pending"},
            {"id": 2, "status": "counter_proposed"},
            {"id": 3, "status": "pending", "seller_response": "Can do next week"},
            {"id": 4, "status": "accepted"},
            {"id": 5, "status": "declined"},
        ]
        groups = group_sent_bookings(bookings)

        assert [b["id"] for b in groups["sent"]] == [1]
        assert [b["id"] for b in groups["reviewed"]] == [2, 3]


@pytest.mark.unit
class TestJourney:
    def test_booking_stages(self):
        assert derive_stage_index(FLOW_BOOKING, {"status": "pending"}) == 0
        assert derive_stage_index(FLOW_BOOKING, {"status": "contract_pending"}) == 1
        assert derive_stage_index(FLOW_BOOKING, {"status": "contract_pending", "buyer_signed": True}) == 2
        assert derive_stage_index(FLOW_BOOKING, {"buyer_signed": True, "seller_signed": True}) == 3

    def test_quote_stages(self):
        assert derive_stage_index(FLOW_QUOTE, {"status": "pending"}) == 0
        assert derive_stage_index(FLOW_QUOTE, {"status": "pending", "has_contract": True}) == 1

    def test_stage_labels_follow_role_and_language(self):
        buyer_stages = journey_stages(FLOW_QUOTE, BUYER)
        seller_stages = journey_stages(FLOW_QUOTE, SELLER, "ar")

        assert [stage["key"] for stage in buyer_stages] == ["quoted", "accepted", "buyer_signed", "executed"]
        assert buyer_stages[0]["label"] == "Quote Received"
        assert seller_stages[0]["label"] == "تم إرسال العرض"
