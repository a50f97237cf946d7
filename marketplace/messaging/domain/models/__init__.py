from .message import NegotiationMessage


__all__ = ["NegotiationMessage"]
