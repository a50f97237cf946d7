"""
MessageService - negotiation threads on quotes and bookings.

A thread belongs to exactly one quote or one booking. Only the two parties of
that quote/booking can read or post; the flows post ``system`` and
``counter_offer`` messages through ``post_system_message``.
"""

import logging
from typing import Dict, List, Optional, Tuple

from django.core.exceptions import ValidationError

from marketplace.models import BookingRequest, NegotiationMessage, QuoteSubmission
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)

THREAD_QUOTE = "quote"
THREAD_BOOKING = "booking"
THREAD_TYPES = (THREAD_QUOTE, THREAD_BOOKING)


def thread_parties(thread) -> Tuple:
    """(buyer_id, seller_id) of a quote or booking."""
    if isinstance(thread, QuoteSubmission):
        return thread.request.buyer_id, thread.seller_id
    return thread.buyer_id, thread.seller_id


class MessageService(BaseService):
    def _load_thread(self, thread_type: str, thread_id) -> ServiceResult:
        if thread_type not in THREAD_TYPES:
            return service_err(ErrorCodes.INVALID_INPUT, f"Unknown thread type '{thread_type}'")
        try:
            if thread_type == THREAD_QUOTE:
                return service_ok(QuoteSubmission.objects.select_related("request").get(id=thread_id))
            return service_ok(BookingRequest.objects.get(id=thread_id))
        except QuoteSubmission.DoesNotExist:
            return service_err(ErrorCodes.QUOTE_NOT_FOUND, f"Quote {thread_id} not found")
        except BookingRequest.DoesNotExist:
            return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {thread_id} not found")
        except ValidationError:
            return service_err(ErrorCodes.INVALID_INPUT, f"Invalid id '{thread_id}'")

    @staticmethod
    def _thread_kwargs(thread) -> Dict:
        if isinstance(thread, QuoteSubmission):
            return {"quote": thread}
        return {"booking": thread}

    @BaseService.log_performance
    def post_message(self, user, thread_type: str, thread_id, content: str) -> ServiceResult[NegotiationMessage]:
        """Post a text message; the recipient is the other party of the thread."""
        content = (content or "").strip()
        if not content:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Message content is required")
        if len(content) > 5000:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Message is too long (max 5000 characters)")

        thread_result = self._load_thread(thread_type, thread_id)
        if not thread_result.ok:
            return thread_result
        thread = thread_result.value

        buyer_id, seller_id = thread_parties(thread)
        if user.id not in (buyer_id, seller_id):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only the buyer and seller can post on this thread")

        try:
            recipient_id = seller_id if user.id == buyer_id else buyer_id
            message = NegotiationMessage.objects.create(
                sender=user,
                recipient_id=recipient_id,
                message_type="text",
                content=content,
                **self._thread_kwargs(thread),
            )
            return service_ok(message)
        except Exception as e:
            self.logger.error(f"Error posting message on {thread_type} {thread_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_messages(self, user, thread_type: str, thread_id) -> ServiceResult[List[NegotiationMessage]]:
        """Messages oldest first. Messages addressed to ``user`` are marked read."""
        thread_result = self._load_thread(thread_type, thread_id)
        if not thread_result.ok:
            return thread_result
        thread = thread_result.value

        if user.id not in thread_parties(thread) and not user.is_admin():
            return service_err(ErrorCodes.PERMISSION_DENIED, "You are not part of this thread")

        try:
            queryset = NegotiationMessage.objects.filter(**self._thread_kwargs(thread)).select_related("sender")
            queryset.filter(recipient=user, is_read=False).update(is_read=True)
            return service_ok(list(queryset.order_by("created_at")))
        except Exception as e:
            self.logger.error(f"Error listing messages on {thread_type} {thread_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def post_system_message(
        self,
        thread,
        sender,
        content: str,
        message_type: str = "system",
        payload: Optional[Dict] = None,
    ) -> Optional[NegotiationMessage]:
        """
        Post a message generated by a flow (acceptance, counter offer, revision).

        Called inside the caller's transaction; errors propagate so the flow
        rolls back with its message.
        """
        buyer_id, seller_id = thread_parties(thread)
        recipient_id = seller_id if sender.id == buyer_id else buyer_id
        return NegotiationMessage.objects.create(
            sender=sender,
            recipient_id=recipient_id,
            message_type=message_type,
            content=content,
            payload=payload or {},
            **self._thread_kwargs(thread),
        )
