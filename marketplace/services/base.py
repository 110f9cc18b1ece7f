"""
Base classes and utilities for the service layer.

Services return a ``ServiceResult`` for every expected outcome (not found,
forbidden, wrong state...) and only raise for genuinely unexpected failures.
Views translate the result into the JSON envelope via ``utils.responses``.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code from ``ErrorCodes`` (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)
        errors: Per-field validation messages, ``[{"field", "message"}]``

    Examples:
        >>> result = service_ok(project)
        >>> result = service_err(ErrorCodes.PROJECT_NOT_FOUND, "Project not found")
        >>> result.category
        'not_found'
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    errors: Optional[List[Dict[str, str]]] = None

    @property
    def category(self) -> Optional[str]:
        """Error category used to pick the HTTP status."""
        if self.ok:
            return None
        return ErrorCodes.category_for(self.error)

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """Transform the success value, passing errors through untouched."""
        if self.ok:
            return service_ok(func(self.value))
        return self

    def to_dict(self) -> dict:
        if self.ok:
            return {"success": True, "data": self.value}
        payload = {"success": False, "message": self.error_detail, "error": self.error}
        if self.errors:
            payload["errors"] = self.errors
        return payload


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Example:
        >>> return service_ok(project)
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", errors: Optional[List[Dict[str, str]]] = None) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "project_not_found", "invalid_status_transition")
        error_detail: Human-readable error message
        errors: Optional per-field validation messages

    Example:
        >>> return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, errors=errors)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class ListingService(BaseService):
            @BaseService.log_performance
            def purchase(self, caller, project_id):
                self.logger.info(f"Purchase attempt on {project_id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and the ok/error outcome of the returned result.
        Exceptions are logged with traceback and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

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


class ErrorCategory:
    """Error classes the HTTP boundary understands."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    PAYMENT_DECLINED = "payment_declined"
    GATEWAY = "gateway"
    UNEXPECTED = "unexpected"


class ErrorCodes:
    """Standard error codes used across Codemart services."""

    # Project errors
    PROJECT_NOT_FOUND = "project_not_found"
    NOT_PROJECT_OWNER = "not_project_owner"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"
    PROJECT_UNDER_REVIEW = "project_under_review"
    PROJECT_SOLD = "project_sold"

    # Listing errors
    LISTING_NOT_FOUND = "listing_not_found"
    ALREADY_LISTED = "already_listed"
    NOT_LISTED = "not_listed"
    NOT_FOR_SALE = "not_for_sale"
    ALREADY_SOLD = "already_sold"
    SELF_PURCHASE = "self_purchase"

    # Order and payment errors
    ORDER_NOT_FOUND = "order_not_found"
    NOT_ORDER_OWNER = "not_order_owner"
    ORDER_ALREADY_PAID = "order_already_paid"
    PAYMENT_IN_PROGRESS = "payment_in_progress"
    PAYMENT_DECLINED = "payment_declined"
    GATEWAY_ERROR = "gateway_error"
    INVALID_SIGNATURE = "invalid_signature"

    # Review errors
    REVIEW_NOT_FOUND = "review_not_found"
    REVIEW_EXISTS = "review_exists"
    PURCHASE_REQUIRED = "purchase_required"
    NOT_REVIEW_OWNER = "not_review_owner"

    # Notification errors
    NOTIFICATION_NOT_FOUND = "notification_not_found"
    RECIPIENT_NOT_FOUND = "recipient_not_found"

    # Account errors
    USER_NOT_FOUND = "user_not_found"
    EMAIL_TAKEN = "email_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_BLOCKED = "account_blocked"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"
    AUTHENTICATION_REQUIRED = "authentication_required"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_INPUT = "invalid_input"
    MEDIA_REJECTED = "media_rejected"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
    STORAGE_ERROR = "storage_error"

    CATEGORIES = {
        PROJECT_NOT_FOUND: ErrorCategory.NOT_FOUND,
        LISTING_NOT_FOUND: ErrorCategory.NOT_FOUND,
        ORDER_NOT_FOUND: ErrorCategory.NOT_FOUND,
        REVIEW_NOT_FOUND: ErrorCategory.NOT_FOUND,
        NOTIFICATION_NOT_FOUND: ErrorCategory.NOT_FOUND,
        RECIPIENT_NOT_FOUND: ErrorCategory.NOT_FOUND,
        NOT_PROJECT_OWNER: ErrorCategory.FORBIDDEN,
        NOT_ORDER_OWNER: ErrorCategory.FORBIDDEN,
        NOT_REVIEW_OWNER: ErrorCategory.FORBIDDEN,
        PURCHASE_REQUIRED: ErrorCategory.FORBIDDEN,
        PERMISSION_DENIED: ErrorCategory.FORBIDDEN,
        INVALID_STATUS_TRANSITION: ErrorCategory.CONFLICT,
        PROJECT_UNDER_REVIEW: ErrorCategory.CONFLICT,
        PROJECT_SOLD: ErrorCategory.CONFLICT,
        ALREADY_LISTED: ErrorCategory.CONFLICT,
        NOT_LISTED: ErrorCategory.CONFLICT,
        NOT_FOR_SALE: ErrorCategory.CONFLICT,
        ALREADY_SOLD: ErrorCategory.CONFLICT,
        ORDER_ALREADY_PAID: ErrorCategory.CONFLICT,
        PAYMENT_IN_PROGRESS: ErrorCategory.CONFLICT,
        REVIEW_EXISTS: ErrorCategory.CONFLICT,
        SELF_PURCHASE: ErrorCategory.BAD_REQUEST,
        INVALID_SIGNATURE: ErrorCategory.BAD_REQUEST,
        VALIDATION_ERROR: ErrorCategory.VALIDATION,
        INVALID_INPUT: ErrorCategory.VALIDATION,
        MEDIA_REJECTED: ErrorCategory.VALIDATION,
        PAYMENT_DECLINED: ErrorCategory.PAYMENT_DECLINED,
        GATEWAY_ERROR: ErrorCategory.GATEWAY,
        AUTHENTICATION_REQUIRED: ErrorCategory.UNAUTHENTICATED,
        INVALID_CREDENTIALS: ErrorCategory.UNAUTHENTICATED,
        ACCOUNT_BLOCKED: ErrorCategory.FORBIDDEN,
        USER_NOT_FOUND: ErrorCategory.NOT_FOUND,
        EMAIL_TAKEN: ErrorCategory.CONFLICT,
    }

    @classmethod
    def category_for(cls, code: Optional[str]) -> str:
        return cls.CATEGORIES.get(code, ErrorCategory.UNEXPECTED)
