"""DRF exception handler rendering every failure in the API envelope."""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from utils.responses import GENERIC_ERROR_MESSAGE, envelope, serializer_errors

logger = logging.getLogger(__name__)

ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "authentication_required",
    status.HTTP_403_FORBIDDEN: "permission_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "unsupported_media_type",
    status.HTTP_429_TOO_MANY_REQUESTS: "throttled",
}


def api_exception_handler(exc, context):
    """
    Wrap DRF's default handler so errors share the success envelope.

    Validation errors list per-field messages under ``errors``. Anything DRF
    does not recognise is logged with its traceback and answered with a
    generic 500.
    """
    response = exception_handler(exc, context)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if response is None:
        logger.error(f"Unhandled exception in {view_name}: {exc}", exc_info=exc)
        return Response(
            envelope(False, message=GENERIC_ERROR_MESSAGE, error="internal_error"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = envelope(
            False,
            message="Validation failed",
            error="validation_error",
            errors=serializer_errors(exc.detail),
        )
        return response

    if isinstance(exc, (Http404, DjangoPermissionDenied)):
        detail = str(exc) or ("Not found." if isinstance(exc, Http404) else "Permission denied.")
    elif isinstance(exc, exceptions.APIException):
        detail = exc.detail
        # simplejwt reports token problems as {"detail", "code", "messages"}
        if isinstance(detail, dict):
            detail = detail.get("detail", exc.default_detail)
        elif isinstance(detail, list):
            detail = detail[0] if detail else exc.default_detail
    else:
        detail = str(exc)

    if response.status_code >= 500:
        logger.error(f"{view_name} failed with {response.status_code}: {detail}")
        detail = GENERIC_ERROR_MESSAGE
    elif response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        logger.info(f"{view_name} denied with {response.status_code}: {detail}")

    response.data = envelope(
        False,
        message=str(detail),
        error=ERROR_CODES.get(response.status_code, getattr(exc, "default_code", "error")),
    )
    return response
