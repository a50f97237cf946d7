from .booking import BookingRequest


__all__ = ["BookingRequest"]
