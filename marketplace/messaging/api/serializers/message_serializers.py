from rest_framework import serializers

from marketplace.api.serializers.common import PartySerializer
from marketplace.models import NegotiationMessage


class NegotiationMessageSerializer(serializers.ModelSerializer):
    sender = PartySerializer(read_only=True)

    class Meta:
        model = NegotiationMessage
        fields = [
            "id",
            "quote",
            "booking",
            "sender",
            "recipient",
            "message_type",
            "content",
            "payload",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000)
