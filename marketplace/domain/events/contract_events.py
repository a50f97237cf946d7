from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class ContractSignedEvent(DomainEvent):
    def __init__(self, contract_id: str, signer_id: str, party: str, buyer_id: str, seller_id: str):
        super().__init__(
            event_type="contract.signed",
            payload={
                "contract_id": contract_id,
                "signer_id": signer_id,
                "party": party,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
            },
        )


@dataclass
class ContractExecutedEvent(DomainEvent):
    """Event: Both parties signed."""

    def __init__(self, contract_id: str, buyer_id: str, seller_id: str, flow: str):
        super().__init__(
            event_type="contract.executed",
            payload={"contract_id": contract_id, "buyer_id": buyer_id, "seller_id": seller_id, "flow": flow},
        )
