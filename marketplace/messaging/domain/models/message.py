import uuid

from django.conf import settings
from django.db import models

from marketplace.bookings.domain.models.booking import BookingRequest
from marketplace.requests.domain.models.quote import QuoteSubmission


class NegotiationMessage(models.Model):
    """A message on a quote or booking thread. Exactly one of quote/booking is set."""

    MESSAGE_TYPE_CHOICES = [
        ("text", "Text"),
        ("counter_offer", "Counter Offer"),
        ("revision_request", "Revision Request"),
        ("system", "System"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    quote = models.ForeignKey(QuoteSubmission, on_delete=models.CASCADE, null=True, blank=True, related_name="messages")
    booking = models.ForeignKey(BookingRequest, on_delete=models.CASCADE, null=True, blank=True, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="messages_sent")
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="messages_received")

    message_type = models.CharField(max_length=20, choices=MESSAGE_TYPE_CHOICES, default="text")
    content = models.TextField(max_length=5000)
    payload = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        app_label = "marketplace"
