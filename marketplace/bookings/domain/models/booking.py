import uuid

from django.conf import settings
from django.db import models

from marketplace.domain.categories import CATEGORY_CHOICES
from marketplace.domain.lifecycle import BookingStatus
from marketplace.jobs.domain.models.completion import CompletionTracking


class BookingRequest(CompletionTracking):
    TIME_SLOT_CHOICES = [
        ("morning", "Morning"),
        ("afternoon", "Afternoon"),
        ("evening", "Evening"),
        ("flexible", "Flexible"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings_made")
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings_received")

    service_category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    job_description = models.TextField(max_length=5000)
    proposed_start_date = models.DateField(null=True, blank=True)
    proposed_end_date = models.DateField(null=True, blank=True)
    preferred_time_slot = models.CharField(max_length=20, choices=TIME_SLOT_CHOICES, default="flexible")
    budget_range = models.CharField(max_length=100, blank=True)
    location_city = models.CharField(max_length=100, blank=True)
    location_address = models.CharField(max_length=255, blank=True)

    status = models.CharField(max_length=30, choices=BookingStatus.CHOICES, default=BookingStatus.PENDING)
    seller_response = models.TextField(blank=True)
    # {proposed_start_date, proposed_end_date, price_estimate, deposit_amount, notes}
    seller_counter_proposal = models.JSONField(null=True, blank=True)
    buyer_counter_proposal = models.JSONField(null=True, blank=True)
    final_agreed_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    final_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "status"]),
            models.Index(fields=["seller", "status"]),
        ]

    def __str__(self):
        return f"Booking {str(self.id)[:8]} {self.service_category}"

    @property
    def title(self):
        return self.job_description[:80]

    @property
    def category(self):
        return self.service_category
