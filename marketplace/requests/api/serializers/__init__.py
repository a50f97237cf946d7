from .quote_serializers import (
    QuoteAcceptSerializer,
    QuoteDeclineSerializer,
    QuoteNegotiateSerializer,
    QuoteRevisionSerializer,
    QuoteSerializer,
    QuoteWriteSerializer,
)
from .request_serializers import MaintenanceRequestSerializer, MaintenanceRequestWriteSerializer


__all__ = [
    "MaintenanceRequestSerializer",
    "MaintenanceRequestWriteSerializer",
    "QuoteSerializer",
    "QuoteWriteSerializer",
    "QuoteAcceptSerializer",
    "QuoteDeclineSerializer",
    "QuoteNegotiateSerializer",
    "QuoteRevisionSerializer",
]
