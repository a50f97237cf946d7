from .booking_serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BuyerCounterSerializer,
    DeclineReasonSerializer,
    ProposalSerializer,
    SellerCounterSerializer,
    SellerResponseSerializer,
)


__all__ = [
    "BookingCreateSerializer",
    "BookingSerializer",
    "BuyerCounterSerializer",
    "DeclineReasonSerializer",
    "ProposalSerializer",
    "SellerCounterSerializer",
    "SellerResponseSerializer",
]
