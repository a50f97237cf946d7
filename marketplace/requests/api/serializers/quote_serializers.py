from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.domain.lifecycle import status_label
from marketplace.models import Contract, QuoteSubmission


class QuoteSerializer(serializers.ModelSerializer):
    seller = PartySerializer(read_only=True)
    request_title = serializers.CharField(source="request.title", read_only=True)
    status_label = serializers.SerializerMethodField()
    expired = serializers.SerializerMethodField()

    class Meta:
        model = QuoteSubmission
        fields = [
            "id",
            "request",
            "request_title",
            "seller",
            "price",
            "estimated_duration",
            "start_date",
            "proposal",
            "labor_cost",
            "material_cost",
            "attachments",
            "status",
            "status_label",
            "expired",
            "decline_reason",
            "revision_message",
            "previous_price",
            "previous_duration",
            "previous_proposal",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj):
        return {language: status_label("quote", obj.status, language) for language in ("en", "ar")}

    def get_expired(self, obj):
        return bool(getattr(obj, "expired", False))


class QuoteWriteSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    estimated_duration = serializers.CharField(max_length=100, required=False, allow_blank=True)
    start_date = serializers.DateField(required=False, allow_null=True)
    proposal = serializers.CharField(max_length=10000, required=False)
    labor_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    material_cost = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    attachments = serializers.ListField(child=serializers.URLField(), required=False)


class QuoteAcceptSerializer(serializers.Serializer):
    language_mode = serializers.ChoiceField(choices=Contract.LANGUAGE_MODE_CHOICES, default="dual")


class QuoteDeclineSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")


class QuoteNegotiateSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    message = serializers.CharField(max_length=5000, required=False, allow_blank=True, default="")


class QuoteRevisionSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=5000)
