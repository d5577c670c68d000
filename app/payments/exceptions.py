"""
Payment-specific exceptions for PayPro operations.

This module provides a hierarchy of exceptions for the PayPro integration:
checkout link building, inbound IPN validation and subscription
cancellation.

Exception Hierarchy:
    PayProError (base for the PayPro integration)
    ├── PayProConfigurationError - Unsupported SKU / currency, bad AES params
    ├── PayProAuthenticationError - IPN signature mismatch (also PermissionDeniedError, 403)
    ├── PayProNotificationError - Signed IPN with malformed fields (also ValidationError, 400)
    ├── PayProTransportError - Non-2xx or network failure (transient, retry)
    └── PayProRejectionError - 2xx response with isSuccess=false

    ExchangeRateUnavailableError - Rate source failure (inherits ExternalServiceError)

Usage:
    from payments.exceptions import PayProError, PayProTransportError

    try:
        await canceller.cancel_subscription(subscription_id)
    except PayProError as e:
        if e.is_retryable:
            schedule_retry(e)
        else:
            alert_support(e)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    PermissionDeniedError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# PayPro Exceptions
# =============================================================================


class PayProError(BaseApplicationError):
    """
    Base exception for all PayPro-related errors.

    Use is_retryable to determine retry behavior:
    - True: Transient error, safe to retry with backoff
    - False: Permanent error, do not retry without changing input
    """

    default_error_code: str = "PAYPRO_ERROR"
    is_retryable: bool = False


class PayProConfigurationError(PayProError):
    """
    The request cannot be served with the current configuration.

    Raised for:
    - SKUs with no PayPro product id (e.g. perpetual licenses)
    - Currencies PayPro doesn't accept and that have no USD rate
    - AES parameter key/IV of the wrong length

    Raised before any network or crypto work wherever possible.
    """

    default_error_code: str = "PAYPRO_CONFIGURATION_ERROR"


class PayProAuthenticationError(PayProError, PermissionDeniedError):
    """
    An inbound IPN's SIGNATURE did not match the recomputed one.

    Surfaced to the sender as a 403 so it is distinguishable from
    transient failures. No subscription data may be touched after this.
    """

    default_error_code: str = "PAYPRO_SIGNATURE_MISMATCH"
    status_code: int = 403


class PayProNotificationError(PayProError, ValidationError):
    """
    A correctly signed IPN carried fields we can't decode.

    Covers unknown IPN types and malformed dates or quantities.
    """

    default_error_code: str = "PAYPRO_INVALID_NOTIFICATION"
    status_code: int = 400


class PayProTransportError(PayProError):
    """
    PayPro answered with a non-success HTTP status, or not at all.

    The operation may be retried by the caller; nothing here retries.

    Attributes:
        status: HTTP status from PayPro (None for network failures)
    """

    default_error_code: str = "PAYPRO_TRANSPORT_ERROR"
    status_code: int = 502
    is_retryable: bool = True

    def __init__(
        self,
        message: str,
        status: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if status is not None:
            details["status"] = status
        super().__init__(message, error_code=error_code, details=details)
        self.status = status


class PayProRejectionError(PayProError):
    """
    PayPro accepted the HTTP request but refused the operation.

    Attributes:
        errors: The provider's error list from the response body
    """

    default_error_code: str = "PAYPRO_REQUEST_REJECTED"
    status_code: int = 502

    def __init__(
        self,
        message: str,
        errors: list[Any] | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        self.errors = list(errors or [])
        if self.errors:
            details["errors"] = self.errors
        super().__init__(message, error_code=error_code, details=details)


# =============================================================================
# Exchange Rate Exceptions
# =============================================================================


class ExchangeRateUnavailableError(ExternalServiceError):
    """
    The exchange rate service could not provide rates.

    Raised for network failures, non-2xx responses and bodies
    without a rates object.
    """

    default_error_code: str = "EXCHANGE_RATES_UNAVAILABLE"
