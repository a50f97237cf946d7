from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.domain.categories import CATEGORY_CHOICES
from marketplace.domain.lifecycle import status_label
from marketplace.models import MaintenanceRequest


class MaintenanceRequestSerializer(serializers.ModelSerializer):
    buyer = PartySerializer(read_only=True)
    assigned_seller = PartySerializer(read_only=True)
    status_label = serializers.SerializerMethodField()
    quote_count = serializers.SerializerMethodField()
    has_quoted = serializers.SerializerMethodField()

    class Meta:
        model = MaintenanceRequest
        fields = [
            "id",
            "buyer",
            "title",
            "category",
            "description",
            "urgency",
            "location",
            "city",
            "preferred_start_date",
            "estimated_budget_min",
            "estimated_budget_max",
            "photos",
            "status",
            "status_label",
            "assigned_seller",
            "assigned_at",
            "quote_count",
            "has_quoted",
            "buyer_marked_complete",
            "seller_marked_complete",
            "buyer_completion_date",
            "seller_completion_date",
            "completed_at",
            "warranty_expires_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj):
        return {language: status_label("request", obj.status, language) for language in ("en", "ar")}

    def get_quote_count(self, obj):
        return getattr(obj, "quote_count", None)

    def get_has_quoted(self, obj):
        # Only set on the seller feed
        return getattr(obj, "has_quoted", None)


class MaintenanceRequestWriteSerializer(serializers.Serializer):
    """Create and update body; business rules (lengths, budgets, categories) are checked by RequestService"""

    title = serializers.CharField(max_length=200, required=False)
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES, required=False)
    description = serializers.CharField(max_length=5000, required=False)
    urgency = serializers.ChoiceField(choices=MaintenanceRequest.URGENCY_CHOICES, required=False)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    preferred_start_date = serializers.DateField(required=False, allow_null=True)
    estimated_budget_min = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    estimated_budget_max = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    photos = serializers.ListField(child=serializers.URLField(), required=False)
