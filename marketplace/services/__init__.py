"""
Marketplace Service Layer

Business logic lives in the bounded contexts (requests, bookings, contracts,
jobs, reviews, messaging, history); this package holds what they share.

Usage:
    from marketplace.services import ErrorCodes, service_ok, service_err

    result = container.quote_service().accept_quote(buyer, quote_id)
    if result.ok:
        contract = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


__all__ = [
    "BaseService",
    "ErrorCodes",
    "ServiceResult",
    "paginate",
    "service_err",
    "service_ok",
]
