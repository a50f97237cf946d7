from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.models import SellerReview


class SellerReviewSerializer(serializers.ModelSerializer):
    buyer = PartySerializer(read_only=True)

    class Meta:
        model = SellerReview
        fields = ["id", "seller", "buyer", "request", "booking", "contract", "rating", "review_text", "created_at"]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    """One of request_id, booking_id or contract_id identifies the job"""

    seller_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    review_text = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")
    request_id = serializers.UUIDField(required=False, allow_null=True)
    booking_id = serializers.UUIDField(required=False, allow_null=True)
    contract_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if not any(attrs.get(key) for key in ("request_id", "booking_id", "contract_id")):
            raise serializers.ValidationError("Provide request_id, booking_id or contract_id")
        return attrs
