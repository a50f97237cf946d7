from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.domain.categories import CATEGORY_CHOICES
from marketplace.domain.lifecycle import status_label
from marketplace.models import BookingRequest


class BookingSerializer(serializers.ModelSerializer):
    buyer = PartySerializer(read_only=True)
    seller = PartySerializer(read_only=True)
    status_label = serializers.SerializerMethodField()

    class Meta:
        model = BookingRequest
        fields = [
            "id",
            "buyer",
            "seller",
            "service_category",
            "job_description",
            "proposed_start_date",
            "proposed_end_date",
            "preferred_time_slot",
            "budget_range",
            "location_city",
            "location_address",
            "status",
            "status_label",
            "seller_response",
            "seller_counter_proposal",
            "buyer_counter_proposal",
            "final_agreed_price",
            "final_amount",
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
        return {language: status_label("booking", obj.status, language) for language in ("en", "ar")}


class BookingCreateSerializer(serializers.Serializer):
    seller_id = serializers.UUIDField()
    service_category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    job_description = serializers.CharField(max_length=5000)
    proposed_start_date = serializers.DateField(required=False, allow_null=True)
    proposed_end_date = serializers.DateField(required=False, allow_null=True)
    preferred_time_slot = serializers.ChoiceField(choices=BookingRequest.TIME_SLOT_CHOICES, required=False)
    budget_range = serializers.CharField(max_length=100, required=False, allow_blank=True)
    location_city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    location_address = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ProposalSerializer(serializers.Serializer):
    """Counter proposal; at least one key must be present"""

    proposed_start_date = serializers.DateField(required=False, allow_null=True)
    proposed_end_date = serializers.DateField(required=False, allow_null=True)
    price_estimate = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    deposit_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(max_length=5000, required=False, allow_blank=True)


class SellerCounterSerializer(serializers.Serializer):
    proposal = ProposalSerializer()
    response = serializers.CharField(max_length=5000, required=False, allow_blank=True, default="")


class BuyerCounterSerializer(serializers.Serializer):
    proposal = ProposalSerializer()


class SellerResponseSerializer(serializers.Serializer):
    response = serializers.CharField(max_length=5000, required=False, allow_blank=True, default="")


class DeclineReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")
