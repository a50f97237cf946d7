from .base import DomainEvent
from .booking_events import BookingCreatedEvent, BookingStatusChangedEvent
from .contract_events import ContractExecutedEvent, ContractSignedEvent
from .job_events import JobCompletedEvent, JobSellerCompletedEvent, ReviewCreatedEvent
from .quote_events import QuoteAcceptedEvent, QuoteDeclinedEvent, QuoteNegotiationEvent, QuoteSubmittedEvent


__all__ = [
    "DomainEvent",
    "QuoteSubmittedEvent",
    "QuoteAcceptedEvent",
    "QuoteDeclinedEvent",
    "QuoteNegotiationEvent",
    "BookingCreatedEvent",
    "BookingStatusChangedEvent",
    "ContractSignedEvent",
    "ContractExecutedEvent",
    "JobSellerCompletedEvent",
    "JobCompletedEvent",
    "ReviewCreatedEvent",
]
