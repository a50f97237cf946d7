from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ServiceResult


def error_status(code: str) -> int:
    if code in ErrorCodes.NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    elif code in ErrorCodes.FORBIDDEN_CODES:
        return status.HTTP_403_FORBIDDEN
    elif code in ErrorCodes.CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    elif code in ErrorCodes.BAD_REQUEST_CODES:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(result: ServiceResult) -> Response:
    """Turn a failed ServiceResult into ``{"detail": ...}`` with the matching status."""
    return Response({"detail": result.error_detail, "code": result.error}, status=error_status(result.error))


def page_params(request):
    """``(page, page_size)`` from the query string, falling back to 1 and 20 on junk input."""
    try:
        page = int(request.query_params.get("page", 1))
    except (TypeError, ValueError):
        page = 1
    try:
        page_size = int(request.query_params.get("page_size", 20))
    except (TypeError, ValueError):
        page_size = 20
    return page, page_size
