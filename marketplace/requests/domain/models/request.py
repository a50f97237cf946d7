import uuid

from django.conf import settings
from django.db import models

from marketplace.domain.categories import CATEGORY_CHOICES
from marketplace.domain.lifecycle import RequestStatus
from marketplace.jobs.domain.models.completion import CompletionTracking


class MaintenanceRequest(CompletionTracking):
    URGENCY_CHOICES = [
        ("low", "Low"),
        ("medium", "Medium"),
        ("high", "High"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="maintenance_requests")

    title = models.CharField(max_length=200)
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    description = models.TextField(max_length=5000)
    urgency = models.CharField(max_length=10, choices=URGENCY_CHOICES, default="medium")
    location = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    preferred_start_date = models.DateField(null=True, blank=True)
    estimated_budget_min = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    estimated_budget_max = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    photos = models.JSONField(default=list, blank=True)  # URLs only

    status = models.CharField(max_length=30, choices=RequestStatus.CHOICES, default=RequestStatus.OPEN)
    assigned_seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_requests",
    )
    assigned_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["status", "category"]),
            models.Index(fields=["buyer", "status"]),
        ]

    def __str__(self):
        return f"Request {str(self.id)[:8]}: {self.title}"

    @property
    def seller(self):
        return self.assigned_seller
