"""
Base classes and utilities for the service layer.

ServiceResult carries the outcome of a service call without raising for
expected failures (wrong owner, illegal status change, missing record).
Views translate the error code into an HTTP status.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if the operation succeeded
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Human-readable message (present if ok=False)

    Examples:
        >>> result = quote_service.accept_quote(buyer, quote_id)
        >>> if result.ok:
        ...     contract = result.value
        >>> else:
        ...     print(result.error)  # "invalid_state"
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """Transform the success value, passing errors through untouched."""
        if self.ok and self.value is not None:
            try:
                return service_ok(func(self.value))
            except Exception as e:
                return service_err("transformation_error", str(e))
        return self

    def flat_map(self, func: Callable[[T], "ServiceResult"]) -> "ServiceResult":
        """Chain another service call that itself returns a ServiceResult."""
        if self.ok and self.value is not None:
            return func(self.value)
        return self

    def to_dict(self) -> dict:
        if self.ok:
            return {"success": True, "data": self.value}
        return {
            "success": False,
            "error": {"code": self.error, "message": self.error_detail},
        }


def service_ok(value: T) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "quote_not_found", "invalid_state")
        error_detail: Human-readable error message, defaults to the code

    Example:
        >>> return service_err(ErrorCodes.QUOTE_NOT_FOUND, f"Quote {quote_id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services.

    Provides a logger named after the concrete service class and a
    performance decorator that logs duration and outcome of each call.

    Usage:
        class QuoteService(BaseService):
            @BaseService.log_performance
            def submit_quote(self, seller, request_id, data):
                self.logger.info(f"Seller {seller.id} quoting request {request_id}")
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """Log execution time and result of a service method."""

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper

    def publish_event(self, event_bus, event) -> None:
        """Publish a domain event; failures are logged and never reach the caller."""
        if event_bus is None:
            return
        try:
            event_bus.publish(event.event_type, event.payload)
            self.logger.info(f"Published event: {event.event_type}")
        except Exception as e:
            self.logger.error(f"Failed to publish {event.event_type}: {e}")


class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Request errors
    REQUEST_NOT_FOUND = "request_not_found"
    NOT_REQUEST_OWNER = "not_request_owner"

    # Quote errors
    QUOTE_NOT_FOUND = "quote_not_found"
    DUPLICATE_QUOTE = "duplicate_quote"
    NOT_QUOTE_OWNER = "not_quote_owner"

    # Booking errors
    BOOKING_NOT_FOUND = "booking_not_found"
    NOT_BOOKING_PARTY = "not_booking_party"

    # Contract errors
    CONTRACT_NOT_FOUND = "contract_not_found"
    NOT_CONTRACT_PARTY = "not_contract_party"
    ALREADY_SIGNED = "already_signed"

    # Job and review errors
    JOB_NOT_COMPLETED = "job_not_completed"
    DUPLICATE_REVIEW = "duplicate_review"
    REVIEW_NOT_FOUND = "review_not_found"

    # Users and vendors
    USER_NOT_FOUND = "user_not_found"
    VENDOR_NOT_FOUND = "vendor_not_found"
    NOTIFICATION_NOT_FOUND = "notification_not_found"

    # State errors
    INVALID_STATE = "invalid_state"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_INPUT = "invalid_input"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
    DATABASE_ERROR = "database_error"

    NOT_FOUND_CODES = {
        REQUEST_NOT_FOUND,
        QUOTE_NOT_FOUND,
        BOOKING_NOT_FOUND,
        CONTRACT_NOT_FOUND,
        REVIEW_NOT_FOUND,
        USER_NOT_FOUND,
        VENDOR_NOT_FOUND,
        NOTIFICATION_NOT_FOUND,
    }
    FORBIDDEN_CODES = {PERMISSION_DENIED, NOT_REQUEST_OWNER, NOT_QUOTE_OWNER, NOT_BOOKING_PARTY, NOT_CONTRACT_PARTY}
    CONFLICT_CODES = {INVALID_STATE, ALREADY_SIGNED, DUPLICATE_QUOTE, DUPLICATE_REVIEW, JOB_NOT_COMPLETED}
    BAD_REQUEST_CODES = {VALIDATION_ERROR, INVALID_INPUT}


def paginate(queryset, page: int = 1, page_size: int = 20) -> dict:
    """Slice a queryset into the page dict every list endpoint returns."""
    page = max(int(page or 1), 1)
    page_size = min(max(int(page_size or 20), 1), 100)
    offset = (page - 1) * page_size
    total_count = queryset.count()
    return {
        "results": list(queryset[offset : offset + page_size]),
        "count": total_count,
        "page": page,
        "page_size": page_size,
        "num_pages": (total_count + page_size - 1) // page_size,
    }
