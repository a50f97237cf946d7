import uuid

from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    In-app notification for a single user.

    ``content_id`` points at the record the notification is about (request,
    booking, quote, contract); together with user and type it is the key used
    to drop duplicates sent within a short window.
    """

    TYPE_CHOICES = [
        ("quote_submitted", "Quote Submitted"),
        ("quote_accepted", "Quote Accepted"),
        ("quote_declined", "Quote Declined"),
        ("quote_negotiation", "Quote Negotiation"),
        ("quote_revision", "Quote Revision Requested"),
        ("booking_created", "Booking Created"),
        ("booking_accepted", "Booking Accepted"),
        ("booking_declined", "Booking Declined"),
        ("booking_countered", "Booking Counter Offer"),
        ("contract_signed", "Contract Signed"),
        ("contract_executed", "Contract Executed"),
        ("job_seller_completed", "Seller Marked Complete"),
        ("job_completed", "Job Completed"),
        ("warranty_nudge", "Warranty Nudge"),
        ("auto_close", "Auto Closed"),
        ("review_received", "Review Received"),
        ("message", "Message"),
        ("system", "System"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    title = models.CharField(max_length=200)
    message = models.TextField()
    title_ar = models.CharField(max_length=200, blank=True)
    message_ar = models.TextField(blank=True)
    notification_type = models.CharField(max_length=40, choices=TYPE_CHOICES, default="system")
    content_id = models.CharField(max_length=64, blank=True, null=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read", "created_at"]),
            models.Index(fields=["user", "notification_type", "content_id", "created_at"]),
        ]

    def __str__(self):
        return f"{self.notification_type} for {self.user_id}"

    def localized(self, language: str = "en") -> dict:
        if language == "ar":
            return {"title": self.title_ar or self.title, "message": self.message_ar or self.message}
        return {"title": self.title, "message": self.message}
