from .quote import QuoteSubmission
from .request import MaintenanceRequest


__all__ = ["MaintenanceRequest", "QuoteSubmission"]
