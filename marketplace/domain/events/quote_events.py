from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class QuoteSubmittedEvent(DomainEvent):
    """Event: Seller quoted a maintenance request."""

    def __init__(self, quote_id: str, request_id: str, buyer_id: str, seller_id: str, price):
        super().__init__(
            event_type="quote.submitted",
            payload={
                "quote_id": quote_id,
                "request_id": request_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "price": str(price),
            },
        )


@dataclass
class QuoteAcceptedEvent(DomainEvent):
    """Event: Buyer accepted a quote; a contract now awaits signatures."""

    def __init__(self, quote_id: str, request_id: str, buyer_id: str, seller_id: str, contract_id: str):
        super().__init__(
            event_type="quote.accepted",
            payload={
                "quote_id": quote_id,
                "request_id": request_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "contract_id": contract_id,
            },
        )


@dataclass
class QuoteDeclinedEvent(DomainEvent):
    def __init__(self, quote_id: str, request_id: str, seller_id: str, reason: str = ""):
        super().__init__(
            event_type="quote.declined",
            payload={"quote_id": quote_id, "request_id": request_id, "seller_id": seller_id, "reason": reason},
        )


@dataclass
class QuoteNegotiationEvent(DomainEvent):
    """Event: Buyer countered a quote or asked for a revision."""

    def __init__(self, quote_id: str, request_id: str, seller_id: str, action: str):
        super().__init__(
            event_type="quote.negotiation",
            payload={"quote_id": quote_id, "request_id": request_id, "seller_id": seller_id, "action": action},
        )
