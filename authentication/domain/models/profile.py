import uuid

from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver

from .user import CustomUser


class Profile(models.Model):
    AVAILABILITY_CHOICES = [
        ("accepting_requests", "Accepting Requests"),
        ("busy", "Busy"),
        ("fully_booked", "Fully Booked"),
    ]

    CREW_SIZE_CHOICES = [
        ("1-3", "1-3"),
        ("4-10", "4-10"),
        ("11-20", "11-20"),
        ("20+", "20+"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")

    # Names, stored in both languages plus the one the user typed
    full_name = models.CharField(max_length=150, blank=True)
    full_name_en = models.CharField(max_length=150, blank=True)
    full_name_ar = models.CharField(max_length=150, blank=True)
    original_language = models.CharField(max_length=2, default="ar")

    # Contact
    phone = models.CharField(max_length=20, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True)

    # Company
    company_name = models.CharField(max_length=200, blank=True, null=True)
    company_name_en = models.CharField(max_length=200, blank=True, null=True)
    company_name_ar = models.CharField(max_length=200, blank=True, null=True)

    bio = models.TextField(blank=True, null=True)
    bio_en = models.TextField(blank=True, null=True)
    bio_ar = models.TextField(blank=True, null=True)

    # Vendor information
    service_categories = models.JSONField(default=list, blank=True)
    verified_seller = models.BooleanField(default=False)
    seller_rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    review_count = models.PositiveIntegerField(default=0)
    completed_projects = models.PositiveIntegerField(default=0)
    years_of_experience = models.PositiveIntegerField(default=0)
    response_time_hours = models.PositiveIntegerField(default=24)
    availability_status = models.CharField(max_length=20, choices=AVAILABILITY_CHOICES, default="accepting_requests")
    crew_size_range = models.CharField(max_length=10, choices=CREW_SIZE_CHOICES, default="1-3")

    # Visibility
    discoverable = models.BooleanField(default=True)
    system_generated = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "authentication"
        indexes = [
            models.Index(fields=["discoverable", "seller_rating"]),
            models.Index(fields=["system_generated"]),
        ]

    def __str__(self):
        return f"Profile of {self.user.email}"

    def localized_name(self, language: str = "en") -> str:
        if language == "ar":
            return self.full_name_ar or self.full_name
        return self.full_name_en or self.full_name


class SavedVendor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="saved_vendors")
    vendor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="saved_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "authentication"
        unique_together = ("buyer", "vendor")
        ordering = ["-created_at"]


@receiver(post_save, sender=CustomUser)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.get_or_create(user=instance)
