from rest_framework import serializers

from authentication.domain.models import CustomUser, Profile
from marketplace.domain.categories import CATEGORY_CHOICES
from marketplace.models import SellerReview

REPUTATION_FIELDS = (
    "verified_seller",
    "seller_rating",
    "review_count",
    "completed_projects",
    "system_generated",
)


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = (
            "full_name",
            "full_name_en",
            "full_name_ar",
            "original_language",
            "phone",
            "city",
            "company_name",
            "company_name_en",
            "company_name_ar",
            "bio",
            "bio_en",
            "bio_ar",
            "service_categories",
            "years_of_experience",
            "response_time_hours",
            "availability_status",
            "crew_size_range",
            "discoverable",
            *REPUTATION_FIELDS,
            "created_at",
            "updated_at",
        )
        read_only_fields = REPUTATION_FIELDS + ("created_at", "updated_at")


class ProfileUpdateSerializer(serializers.Serializer):
    """Input for PATCH /api/auth/profile/. Every field optional; business rules live in ProfileService."""

    full_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    full_name_en = serializers.CharField(max_length=150, required=False, allow_blank=True)
    full_name_ar = serializers.CharField(max_length=150, required=False, allow_blank=True)
    original_language = serializers.ChoiceField(choices=("en", "ar"), required=False)
    language = serializers.ChoiceField(choices=CustomUser.LANGUAGE_CHOICES, required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    company_name = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    company_name_en = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    company_name_ar = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    bio = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bio_en = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bio_ar = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    service_categories = serializers.ListField(
        child=serializers.ChoiceField(choices=CATEGORY_CHOICES), required=False
    )
    years_of_experience = serializers.IntegerField(min_value=0, required=False)
    response_time_hours = serializers.IntegerField(min_value=0, required=False)
    availability_status = serializers.ChoiceField(choices=Profile.AVAILABILITY_CHOICES, required=False)
    crew_size_range = serializers.ChoiceField(choices=Profile.CREW_SIZE_CHOICES, required=False)
    discoverable = serializers.BooleanField(required=False)


class VendorReviewSerializer(serializers.ModelSerializer):
    buyer_name = serializers.CharField(source="buyer.display_name", read_only=True)

    class Meta:
        model = SellerReview
        fields = ("id", "rating", "review_text", "buyer_name", "created_at")


class PublicProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = (
            "full_name",
            "full_name_en",
            "full_name_ar",
            "original_language",
            "city",
            "company_name",
            "company_name_en",
            "company_name_ar",
            "bio",
            "bio_en",
            "bio_ar",
            "service_categories",
            "verified_seller",
            "seller_rating",
            "review_count",
            "completed_projects",
            "years_of_experience",
            "response_time_hours",
            "availability_status",
            "crew_size_range",
        )
        read_only_fields = fields


class VendorSerializer(serializers.ModelSerializer):
    """Public vendor card used by discovery and saved vendors"""

    profile = PublicProfileSerializer(read_only=True)
    display_name = serializers.CharField(read_only=True)
    is_saved = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ("id", "display_name", "language", "profile", "is_saved")
        read_only_fields = fields

    def get_is_saved(self, obj):
        if hasattr(obj, "is_saved"):
            return bool(obj.is_saved)
        return bool(self.context.get("is_saved", False))
