from marketplace.bookings.domain.models import BookingRequest
from marketplace.contracts.domain.models import (
    BindingTerms,
    Contract,
    ContractClause,
    ContractSignature,
    ContractVersion,
)
from marketplace.messaging.domain.models import NegotiationMessage
from marketplace.requests.domain.models import MaintenanceRequest, QuoteSubmission
from marketplace.reviews.domain.models import SellerReview


__all__ = [
    "MaintenanceRequest",
    "QuoteSubmission",
    "BookingRequest",
    "Contract",
    "BindingTerms",
    "ContractSignature",
    "ContractClause",
    "ContractVersion",
    "NegotiationMessage",
    "SellerReview",
]
