from .quote_service import QuoteService
from .request_service import RequestService


__all__ = ["QuoteService", "RequestService"]
