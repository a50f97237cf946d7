import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from marketplace.bookings.domain.models.booking import BookingRequest
from marketplace.contracts.domain.models.contract import Contract
from marketplace.requests.domain.models.request import MaintenanceRequest


class SellerReview(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews_received")
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews_written")
    request = models.ForeignKey(
        MaintenanceRequest, on_delete=models.SET_NULL, null=True, blank=True, related_name="reviews"
    )
    booking = models.ForeignKey(BookingRequest, on_delete=models.SET_NULL, null=True, blank=True, related_name="reviews")
    contract = models.ForeignKey(Contract, on_delete=models.SET_NULL, null=True, blank=True, related_name="reviews")

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    review_text = models.TextField(blank=True, max_length=2000)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(
                fields=["seller", "buyer", "request"],
                condition=models.Q(request__isnull=False),
                name="unique_review_per_request",
            ),
            models.UniqueConstraint(
                fields=["seller", "buyer", "booking"],
                condition=models.Q(booking__isnull=False),
                name="unique_review_per_booking",
            ),
        ]

    def __str__(self):
        return f"{self.rating}* for {self.seller_id} by {self.buyer_id}"
