"""
Tests for the PayPro exception hierarchy.
"""

import pytest

from core.exceptions import PermissionDeniedError, ValidationError
from payments.exceptions import (
    PayProAuthenticationError,
    PayProNotificationError,
    PayProRejectionError,
    PayProTransportError,
)


class TestPayProTransportError:
    """Tests for PayProTransportError."""

    def test_status_recorded_in_details(self):
        error = PayProTransportError("Unexpected 503", status=503)

        assert error.status == 503
        assert error.details == {"status": 503}
        assert error.is_retryable is True

    def test_caller_details_not_mutated(self):
        details = {"operation": "cancel_subscription"}

        error = PayProTransportError("Unexpected 503", status=503, details=details)

        assert details == {"operation": "cancel_subscription"}
        assert error.details == {"operation": "cancel_subscription", "status": 503}

    def test_network_failure_has_no_status(self):
        error = PayProTransportError("Could not connect")

        assert error.status is None
        assert error.details == {}


class TestPayProRejectionError:
    """Tests for PayProRejectionError."""

    def test_errors_recorded_in_details(self):
        errors = [{"code": 1, "message": "Already terminated"}]

        error = PayProRejectionError("Rejected", errors=errors)

        assert error.errors == errors
        assert error.details == {"errors": errors}
        assert error.is_retryable is False

    def test_caller_details_not_mutated(self):
        details = {"subscription_id": "987654"}

        PayProRejectionError("Rejected", errors=[{"code": 1}], details=details)

        assert details == {"subscription_id": "987654"}


@pytest.mark.parametrize(
    "error_class, base_class, status_code",
    [
        (PayProAuthenticationError, PermissionDeniedError, 403),
        (PayProNotificationError, ValidationError, 400),
    ],
)
def test_inbound_errors_map_to_client_statuses(error_class, base_class, status_code):
    error = error_class("message")

    assert isinstance(error, base_class)
    assert error.status_code == status_code
