"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- HTTP status codes that views can return without extra mapping

Exception Hierarchy:
    BaseApplicationError (base, 500)
    ├── ValidationError - Input validation failures (400)
    ├── PermissionDeniedError - Authentication/authorization failures (403)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import ValidationError

    # Raise with message only
    raise ValidationError("Invalid email format")

    # Raise with error code and details
    raise ValidationError(
        "Validation failed",
        error_code="VALIDATION_ERROR",
        details={"quantity": ["Must be an integer"]}
    )

    # Convert to an HTTP response
    try:
        ...
    except BaseApplicationError as e:
        return HttpResponse(e.message, status=e.status_code)

Note:
    These exceptions are for domain/business logic errors.
    Django handles request-layer errors (CSRF, method not allowed, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status a view should answer with

    Example:
        try:
            validator.validate(fields)
        except BaseApplicationError as e:
            logger.warning(f"Rejected request: {e.error_code}")
            return HttpResponse(e.message, status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Invalid field formats (dates, numbers, enum values)
    - Missing required fields
    - Field-level validation errors

    Example:
        raise ValidationError(
            "Unparseable quantity",
            error_code="INVALID_QUANTITY",
            details={"PRODUCT_QUANTITY": "abc"}
        )
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when a caller cannot prove who it is or lacks permission.

    Use for:
    - Webhook signature mismatches
    - Requests carrying invalid shared secrets

    Note:
        HTTP 403 Forbidden keeps these failures distinguishable from
        transient server errors, so senders do not blindly retry them.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Third-party API failures (payment provider, exchange rates)
    - Network timeouts
    - Unexpected external service responses

    Example:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "Exchange rate service unavailable",
                error_code="EXCHANGE_RATES_ERROR",
                details={"original_error": str(e)}
            )

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502
