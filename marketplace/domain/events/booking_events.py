from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class BookingCreatedEvent(DomainEvent):
    def __init__(self, booking_id: str, buyer_id: str, seller_id: str, service_category: str):
        super().__init__(
            event_type="booking.created",
            payload={
                "booking_id": booking_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "service_category": service_category,
            },
        )


@dataclass
class BookingStatusChangedEvent(DomainEvent):
    """Event: Booking moved to a new status (accepted, declined, countered...)."""

    def __init__(self, booking_id: str, buyer_id: str, seller_id: str, status: str, actor_id: str):
        super().__init__(
            event_type="booking.status_changed",
            payload={
                "booking_id": booking_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "status": status,
                "actor_id": actor_id,
            },
        )
