"""
Marketplace event listeners.

Turn domain events into in-app notifications for the party that has to act
or be told. Each handler receives the bus envelope
``{"event_type", "occurred_at", "payload"}``; a failing handler is logged and
never affects the operation that published the event.
"""

import logging
from typing import Dict, Optional

from infrastructure.events import EventBus, get_event_bus
from notifications.services import NotificationService


logger = logging.getLogger(__name__)

BOOKING_STATUS_NOTIFICATIONS = {
    "contract_pending": (
        "booking_accepted",
        {"en": "Booking Accepted", "ar": "تم قبول الحجز"},
        {"en": "Your booking was accepted. Review and sign the contract.", "ar": "تم قبول حجزك. راجع العقد ووقّعه."},
    ),
    "declined": (
        "booking_declined",
        {"en": "Booking Declined", "ar": "تم رفض الحجز"},
        {"en": "The seller declined your booking request.", "ar": "رفض مقدم الخدمة طلب الحجز."},
    ),
    "counter_proposed": (
        "booking_countered",
        {"en": "New Counter Offer", "ar": "عرض مضاد جديد"},
        {"en": "The seller proposed new terms for your booking.", "ar": "اقترح مقدم الخدمة شروطاً جديدة لحجزك."},
    ),
    "buyer_countered": (
        "booking_countered",
        {"en": "Buyer Counter Offer", "ar": "عرض مضاد من العميل"},
        {"en": "The buyer replied to your offer with new terms.", "ar": "رد العميل على عرضك بشروط جديدة."},
    ),
    "cancelled": (
        "system",
        {"en": "Booking Cancelled", "ar": "تم إلغاء الحجز"},
        {"en": "A booking was cancelled.", "ar": "تم إلغاء حجز."},
    ),
}

NEGOTIATION_NOTIFICATIONS = {
    "counter": (
        "quote_negotiation",
        {"en": "Counter Offer Received", "ar": "تم استلام عرض مضاد"},
        {"en": "The buyer sent a counter offer on your quote.", "ar": "أرسل العميل عرضاً مضاداً على عرض السعر."},
    ),
    "revision": (
        "quote_revision",
        {"en": "Revision Requested", "ar": "طلب تعديل"},
        {"en": "The buyer asked you to revise your quote.", "ar": "طلب العميل تعديل عرض السعر."},
    ),
}


def get_notification_service() -> NotificationService:
    return NotificationService()


def _payload(event_data: Dict) -> Dict:
    return event_data.get("payload", {}) if isinstance(event_data, dict) else {}


def _notify(user_id, notification_type: str, title: Dict, message: Dict, content_id: Optional[str] = None):
    if not user_id:
        return
    result = get_notification_service().notify(
        user_id=user_id,
        title=title["en"],
        message=message["en"],
        title_ar=title["ar"],
        message_ar=message["ar"],
        notification_type=notification_type,
        content_id=content_id,
    )
    if not result.ok:
        logger.error(f"[Marketplace Listener] Failed to notify {user_id}: {result.error_detail}")


def handle_quote_submitted(event_data):
    """Tell the buyer a new quote arrived on their request."""
    try:
        payload = _payload(event_data)
        _notify(
            payload.get("buyer_id"),
            "quote_submitted",
            {"en": "New Quote Received", "ar": "عرض سعر جديد"},
            {
                "en": f"You received a new quote of {payload.get('price')} SAR.",
                "ar": f"وصلك عرض سعر جديد بقيمة {payload.get('price')} ريال.",
            },
            content_id=payload.get("request_id"),
        )
    except Exception as e:
        logger.error(f"Error handling quote.submitted event: {e}")


def handle_quote_accepted(event_data):
    try:
        payload = _payload(event_data)
        _notify(
            payload.get("seller_id"),
            "quote_accepted",
            {"en": "Quote Accepted", "ar": "تم قبول عرضك"},
            {"en": "Your quote was accepted. Review and sign the contract.", "ar": "تم قبول عرضك. راجع العقد ووقّعه."},
            content_id=payload.get("contract_id") or payload.get("quote_id"),
        )
    except Exception as e:
        logger.error(f"Error handling quote.accepted event: {e}")


def handle_quote_declined(event_data):
    try:
        payload = _payload(event_data)
        reason = payload.get("reason") or ""
        _notify(
            payload.get("seller_id"),
            "quote_declined",
            {"en": "Quote Declined", "ar": "تم رفض عرضك"},
            {
                "en": f"Your quote was declined. {reason}".strip(),
                "ar": f"تم رفض عرض السعر. {reason}".strip(),
            },
            content_id=payload.get("quote_id"),
        )
    except Exception as e:
        logger.error(f"Error handling quote.declined event: {e}")


def handle_quote_negotiation(event_data):
    """Counter offers and revision requests both go to the seller."""
    try:
        payload = _payload(event_data)
        notification = NEGOTIATION_NOTIFICATIONS.get(payload.get("action"))
        if notification is None:
            logger.warning(f"[Marketplace Listener] Unknown negotiation action: {payload.get('action')}")
            return
        notification_type, title, message = notification
        _notify(payload.get("seller_id"), notification_type, title, message, content_id=payload.get("quote_id"))
    except Exception as e:
        logger.error(f"Error handling quote.negotiation event: {e}")


def handle_booking_created(event_data):
    try:
        payload = _payload(event_data)
        _notify(
            payload.get("seller_id"),
            "booking_created",
            {"en": "New Booking Request", "ar": "طلب حجز جديد"},
            {"en": "A buyer wants to book your services.", "ar": "يرغب عميل في حجز خدماتك."},
            content_id=payload.get("booking_id"),
        )
    except Exception as e:
        logger.error(f"Error handling booking.created event: {e}")


def handle_booking_status_changed(event_data):
    """Notify whichever party did not make the change."""
    try:
        payload = _payload(event_data)
        notification = BOOKING_STATUS_NOTIFICATIONS.get(payload.get("status"))
        if notification is None:
            return
        notification_type, title, message = notification
        actor_id = payload.get("actor_id")
        recipient = payload.get("buyer_id") if actor_id == payload.get("seller_id") else payload.get("seller_id")
        _notify(recipient, notification_type, title, message, content_id=payload.get("booking_id"))
    except Exception as e:
        logger.error(f"Error handling booking.status_changed event: {e}")


def handle_contract_signed(event_data):
    try:
        payload = _payload(event_data)
        other_party = payload.get("seller_id") if payload.get("party") == "buyer" else payload.get("buyer_id")
        _notify(
            other_party,
            "contract_signed",
            {"en": "Contract Signed", "ar": "تم توقيع العقد"},
            {
                "en": f"The {payload.get('party')} signed the contract.",
                "ar": "قام الطرف الآخر بتوقيع العقد.",
            },
            content_id=payload.get("contract_id"),
        )
    except Exception as e:
        logger.error(f"Error handling contract.signed event: {e}")


def handle_contract_executed(event_data):
    """Both parties learn the contract is binding and the job can start."""
    try:
        payload = _payload(event_data)
        for user_id in (payload.get("buyer_id"), payload.get("seller_id")):
            _notify(
                user_id,
                "contract_executed",
                {"en": "Contract Executed", "ar": "تم تنفيذ العقد"},
                {"en": "Both parties signed. The job can start.", "ar": "وقّع الطرفان العقد. يمكن بدء العمل."},
                content_id=payload.get("contract_id"),
            )
    except Exception as e:
        logger.error(f"Error handling contract.executed event: {e}")


def handle_job_seller_completed(event_data):
    try:
        payload = _payload(event_data)
        _notify(
            payload.get("buyer_id"),
            "job_seller_completed",
            {"en": "Confirm Work Complete", "ar": "أكّد إتمام العمل"},
            {
                "en": "The seller marked the job complete. Confirm to activate your warranty.",
                "ar": "أنهى مقدم الخدمة العمل. أكّد الإتمام لتفعيل الضمان.",
            },
            content_id=payload.get("job_id"),
        )
    except Exception as e:
        logger.error(f"Error handling job.seller_completed event: {e}")


def handle_job_completed(event_data):
    try:
        payload = _payload(event_data)
        _notify(
            payload.get("seller_id"),
            "job_completed",
            {"en": "Job Completed", "ar": "اكتمل العمل"},
            {"en": "The buyer confirmed the job. Warranty is now active.", "ar": "أكّد العميل إتمام العمل. الضمان فعّال الآن."},
            content_id=payload.get("job_id"),
        )
    except Exception as e:
        logger.error(f"Error handling job.completed event: {e}")


def handle_review_created(event_data):
    try:
        payload = _payload(event_data)
        rating = payload.get("rating")
        _notify(
            payload.get("seller_id"),
            "review_received",
            {"en": "New Review", "ar": "تقييم جديد"},
            {"en": f"You received a {rating}-star review.", "ar": f"حصلت على تقييم {rating} نجوم."},
            content_id=payload.get("review_id"),
        )
    except Exception as e:
        logger.error(f"Error handling review.created event: {e}")


LISTENERS = {
    "quote.submitted": handle_quote_submitted,
    "quote.accepted": handle_quote_accepted,
    "quote.declined": handle_quote_declined,
    "quote.negotiation": handle_quote_negotiation,
    "booking.created": handle_booking_created,
    "booking.status_changed": handle_booking_status_changed,
    "contract.signed": handle_contract_signed,
    "contract.executed": handle_contract_executed,
    "job.seller_completed": handle_job_seller_completed,
    "job.completed": handle_job_completed,
    "review.created": handle_review_created,
}


def register_marketplace_listeners(event_bus: Optional[EventBus] = None):
    """Register all marketplace event listeners."""
    event_bus = event_bus or get_event_bus()
    for event_type, handler in LISTENERS.items():
        event_bus.subscribe(event_type, handler)
    logger.info("Marketplace event listeners registered")
