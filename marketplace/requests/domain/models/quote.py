import uuid

from django.conf import settings
from django.db import models

from marketplace.domain.lifecycle import QuoteStatus

from .request import MaintenanceRequest


class QuoteSubmission(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    request = models.ForeignKey(MaintenanceRequest, on_delete=models.CASCADE, related_name="quotes")
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="quotes")

    price = models.DecimalField(max_digits=12, decimal_places=2)
    estimated_duration = models.CharField(max_length=100, blank=True)
    start_date = models.DateField(null=True, blank=True)
    proposal = models.TextField(max_length=10000)
    labor_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    material_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    attachments = models.JSONField(default=list, blank=True)  # URLs only

    status = models.CharField(max_length=30, choices=QuoteStatus.CHOICES, default=QuoteStatus.PENDING)
    decline_reason = models.TextField(blank=True)

    # Snapshot taken when the buyer asks for a revision
    revision_message = models.TextField(blank=True)
    previous_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    previous_duration = models.CharField(max_length=100, blank=True)
    previous_proposal = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["request", "status"]),
            models.Index(fields=["seller", "status"]),
        ]

    def __str__(self):
        return f"Quote {str(self.id)[:8]} on {str(self.request_id)[:8]} by {self.seller_id}"

    @property
    def buyer(self):
        return self.request.buyer
