from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class JobSellerCompletedEvent(DomainEvent):
    """Event: Seller marked the job complete; the buyer must confirm."""

    def __init__(self, kind: str, job_id: str, buyer_id: str, seller_id: str):
        super().__init__(
            event_type="job.seller_completed",
            payload={"kind": kind, "job_id": job_id, "buyer_id": buyer_id, "seller_id": seller_id},
        )


@dataclass
class JobCompletedEvent(DomainEvent):
    """Event: Both parties confirmed; warranty started."""

    def __init__(self, kind: str, job_id: str, buyer_id: str, seller_id: str, warranty_expires_at: str = None):
        super().__init__(
            event_type="job.completed",
            payload={
                "kind": kind,
                "job_id": job_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "warranty_expires_at": warranty_expires_at,
            },
        )


@dataclass
class ReviewCreatedEvent(DomainEvent):
    def __init__(self, review_id: str, seller_id: str, buyer_id: str, rating: int):
        super().__init__(
            event_type="review.created",
            payload={"review_id": review_id, "seller_id": seller_id, "buyer_id": buyer_id, "rating": rating},
        )
