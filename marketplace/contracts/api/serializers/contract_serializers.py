from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.domain.lifecycle import status_label
from marketplace.models import BindingTerms, Contract, ContractSignature


class BindingTermsSerializer(serializers.ModelSerializer):
    class Meta:
        model = BindingTerms
        fields = [
            "start_date",
            "completion_date",
            "warranty_days",
            "use_deposit_escrow",
            "access_hours",
            "payment_schedule",
        ]
        read_only_fields = fields


class ContractSignatureSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContractSignature
        fields = ["user", "version", "signature_hash", "method", "signed_at"]
        read_only_fields = fields


class ContractSerializer(serializers.ModelSerializer):
    buyer = PartySerializer(read_only=True)
    seller = PartySerializer(read_only=True)
    flow = serializers.CharField(read_only=True)
    status_label = serializers.SerializerMethodField()
    binding_terms = serializers.SerializerMethodField()

    class Meta:
        model = Contract
        fields = [
            "id",
            "flow",
            "buyer",
            "seller",
            "request",
            "quote",
            "booking",
            "status",
            "status_label",
            "version",
            "language_mode",
            "signed_at_buyer",
            "signed_at_seller",
            "executed_at",
            "metadata",
            "content_hash",
            "binding_terms",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_label(self, obj):
        return {language: status_label("contract", obj.status, language) for language in ("en", "ar")}

    def get_binding_terms(self, obj):
        terms = BindingTerms.objects.filter(contract=obj).first()
        return BindingTermsSerializer(terms).data if terms else None


class ContractDetailSerializer(ContractSerializer):
    signatures = ContractSignatureSerializer(many=True, read_only=True)

    class Meta(ContractSerializer.Meta):
        fields = ContractSerializer.Meta.fields + ["signatures"]
        read_only_fields = fields


class ContractTermsUpdateSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False, allow_null=True)
    completion_date = serializers.DateField(required=False, allow_null=True)
    warranty_days = serializers.IntegerField(required=False, min_value=0)
    use_deposit_escrow = serializers.BooleanField(required=False)
    access_hours = serializers.CharField(max_length=100, required=False)
    payment_schedule = serializers.DictField(child=serializers.IntegerField(min_value=0), required=False)
    language_mode = serializers.ChoiceField(choices=Contract.LANGUAGE_MODE_CHOICES, required=False)
