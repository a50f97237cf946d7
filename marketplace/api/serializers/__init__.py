# Marketplace API Serializers

from .common import PartySerializer
from .response_serializers import (
    ActiveJobsResponseSerializer,
    ContractDocumentResponseSerializer,
    ErrorResponseSerializer,
    HistoryResponseSerializer,
    JourneyResponseSerializer,
    PaginatedResponseSerializer,
    SellerReviewListResponseSerializer,
    SuccessResponseSerializer,
)


__all__ = [
    "PartySerializer",
    "ActiveJobsResponseSerializer",
    "ContractDocumentResponseSerializer",
    "ErrorResponseSerializer",
    "HistoryResponseSerializer",
    "JourneyResponseSerializer",
    "PaginatedResponseSerializer",
    "SellerReviewListResponseSerializer",
    "SuccessResponseSerializer",
]
