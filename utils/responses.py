"""
JSON envelope helpers.

Every API response has the shape
``{"success": bool, "message"?, "data"?, "error"?, "errors"?}``.
"""

import logging
from typing import Any, Dict, List, Optional

from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCategory, ServiceResult

logger = logging.getLogger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.PAYMENT_DECLINED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCategory.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.GATEWAY: status.HTTP_502_BAD_GATEWAY,
    ErrorCategory.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def envelope(
    success: bool,
    data: Any = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    errors: Optional[List[Dict[str, str]]] = None,
    **extra,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": success}
    if message:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    if error:
        body["error"] = error
    if errors:
        body["errors"] = errors
    return body


def success_response(data: Any = None, message: Optional[str] = None, status_code: int = status.HTTP_200_OK, **extra):
    return Response(envelope(True, data=data, message=message, **extra), status=status_code)


def error_response(result: ServiceResult) -> Response:
    """Map a failed ServiceResult onto its HTTP status and envelope."""
    category = result.category
    status_code = CATEGORY_STATUS.get(category, status.HTTP_500_INTERNAL_SERVER_ERROR)
    message = result.error_detail
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        # Internal detail stays in the logs
        logger.error(f"Service error '{result.error}': {result.error_detail}")
        message = GENERIC_ERROR_MESSAGE
    return Response(
        envelope(False, message=message, error=result.error, errors=result.errors),
        status=status_code,
    )


def serializer_errors(errors) -> List[Dict[str, str]]:
    """Flatten DRF serializer errors into ``[{"field", "message"}]``."""
    flat: List[Dict[str, str]] = []

    def walk(prefix: str, value):
        if isinstance(value, dict):
            for key, nested in value.items():
                walk(f"{prefix}.{key}" if prefix else str(key), nested)
        elif isinstance(value, (list, tuple)):
            for item in value:
                walk(prefix, item)
        else:
            flat.append({"field": prefix or "non_field_errors", "message": str(value)})

    walk("", errors)
    return flat


def validation_error_response(errors, message: str = "Validation failed") -> Response:
    return Response(
        envelope(False, message=message, error="validation_error", errors=serializer_errors(errors)),
        status=status.HTTP_400_BAD_REQUEST,
    )


def paginated_response(page: Dict[str, Any], serializer_class, **extra) -> Response:
    """Envelope for a ``paginate()`` result with the counters beside ``data``."""
    return success_response(
        serializer_class(page["results"], many=True).data,
        count=page["count"],
        total=page["total"],
        totalPages=page["totalPages"],
        currentPage=page["currentPage"],
        **extra,
    )
