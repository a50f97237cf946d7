from .message_serializers import MessageCreateSerializer, NegotiationMessageSerializer


__all__ = ["MessageCreateSerializer", "NegotiationMessageSerializer"]
