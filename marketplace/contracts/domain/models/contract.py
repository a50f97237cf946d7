import uuid

from django.conf import settings
from django.db import models

from marketplace.bookings.domain.models.booking import BookingRequest
from marketplace.domain.lifecycle import ContractStatus
from marketplace.requests.domain.models.quote import QuoteSubmission
from marketplace.requests.domain.models.request import MaintenanceRequest


def default_payment_schedule():
    return {"deposit": 30, "progress": 40, "completion": 30}


class Contract(models.Model):
    LANGUAGE_MODE_CHOICES = [
        ("dual", "Arabic and English"),
        ("english_only", "English Only"),
        ("arabic_only", "Arabic Only"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="buyer_contracts")
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="seller_contracts")

    # Exactly one source: a quote on a request, or a booking
    request = models.ForeignKey(
        MaintenanceRequest, on_delete=models.CASCADE, null=True, blank=True, related_name="contracts"
    )
    quote = models.ForeignKey(QuoteSubmission, on_delete=models.CASCADE, null=True, blank=True, related_name="contracts")
    booking = models.ForeignKey(
        BookingRequest, on_delete=models.CASCADE, null=True, blank=True, related_name="contracts"
    )

    status = models.CharField(max_length=20, choices=ContractStatus.CHOICES, default=ContractStatus.PENDING_BUYER)
    version = models.PositiveIntegerField(default=1)
    language_mode = models.CharField(max_length=20, choices=LANGUAGE_MODE_CHOICES, default="dual")

    signed_at_buyer = models.DateTimeField(null=True, blank=True)
    signed_at_seller = models.DateTimeField(null=True, blank=True)
    executed_at = models.DateTimeField(null=True, blank=True)

    metadata = models.JSONField(default=dict, blank=True)
    html_snapshot = models.TextField(blank=True)
    content_hash = models.CharField(max_length=64, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"

    def __str__(self):
        return f"Contract {str(self.id)[:8]} ({self.status})"

    @property
    def flow(self):
        return "booking" if self.booking_id else "quote"

    def is_party(self, user) -> bool:
        return user.id in (self.buyer_id, self.seller_id)


class BindingTerms(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.OneToOneField(Contract, on_delete=models.CASCADE, related_name="binding_terms")
    start_date = models.DateField(null=True, blank=True)
    completion_date = models.DateField(null=True, blank=True)
    warranty_days = models.PositiveIntegerField(default=90)
    use_deposit_escrow = models.BooleanField(default=False)
    access_hours = models.CharField(max_length=100, default="8 AM - 5 PM")
    payment_schedule = models.JSONField(default=default_payment_schedule)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "marketplace"

    def snapshot(self) -> dict:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "completion_date": self.completion_date.isoformat() if self.completion_date else None,
            "warranty_days": self.warranty_days,
            "use_deposit_escrow": self.use_deposit_escrow,
            "access_hours": self.access_hours,
            "payment_schedule": self.payment_schedule,
        }


class ContractSignature(models.Model):
    """Append-only audit row written for every signature."""

    METHOD_CHOICES = [("digital", "Digital")]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.ForeignKey(Contract, on_delete=models.CASCADE, related_name="signatures")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="contract_signatures")
    version = models.PositiveIntegerField()
    signature_hash = models.CharField(max_length=64)
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default="digital")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    signed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["signed_at"]
        app_label = "marketplace"


class ContractClause(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.SlugField(max_length=100, unique=True)
    title_en = models.CharField(max_length=200)
    title_ar = models.CharField(max_length=200)
    content_en = models.TextField()
    content_ar = models.TextField()
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    requires_escrow = models.BooleanField(default=False)

    class Meta:
        ordering = ["display_order", "key"]
        app_label = "marketplace"

    def __str__(self):
        return self.key


class ContractVersion(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.ForeignKey(Contract, on_delete=models.CASCADE, related_name="versions")
    version = models.PositiveIntegerField()
    html_snapshot = models.TextField()
    binding_terms_snapshot = models.JSONField(default=dict)
    content_hash = models.CharField(max_length=64)
    changed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
