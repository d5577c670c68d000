"""
Pytest fixtures for PayPro webhook tests.

Provides signed IPN payloads and routes subscription updates to a
recording updater.
"""

import hashlib

import pytest

from payments.webhooks.tests.updaters import RECORDED_UPDATES, REPORTED_ERRORS


def sign(fields: dict, validation_key: str) -> str:
    """Sign IPN fields the way PayPro does."""
    joined = "".join(
        [
            fields.get("ORDER_ID", ""),
            fields.get("ORDER_STATUS", ""),
            fields.get("ORDER_TOTAL_AMOUNT", ""),
            fields.get("CUSTOMER_EMAIL", ""),
            validation_key,
            fields.get("TEST_MODE", ""),
            fields.get("IPN_TYPE_NAME", ""),
        ]
    )
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


# =============================================================================
# IPN Payload Fixtures
# =============================================================================


@pytest.fixture
def ipn_fields(paypro_config):
    """
    Factory for signed IPN form fields.

    Starts from a realistic OrderCharged IPN for a Pro monthly
    subscription. Keyword overrides replace fields; pass None to drop a
    field. The signature is computed after overrides unless SIGNATURE is
    given explicitly.

    Usage:
        fields = ipn_fields(IPN_TYPE_NAME="SubscriptionRenewed")
    """

    def _create(**overrides) -> dict[str, str]:
        fields = {
            "IPN_TYPE_NAME": "OrderCharged",
            "TEST_MODE": "0",
            "HASH": "ignored",
            "ORDER_ID": "22334455",
            "ORDER_STATUS": "Processed",
            "ORDER_TOTAL_AMOUNT": "7.00",
            "ORDER_CURRENCY_CODE": "EUR",
            "ORDER_PLACED_TIME_UTC": "03/15/2024 09:05:30",
            "CUSTOMER_ID": "123",
            "CUSTOMER_EMAIL": "user@example.com",
            "PRODUCT_ID": "79920",
            "ORDER_ITEM_SKU": "pro-monthly",
            "PRODUCT_QUANTITY": "1",
            "ORDER_ITEM_TOTAL_AMOUNT": "7.00",
            "SUBSCRIPTION_ID": "456",
            "SUBSCRIPTION_STATUS_NAME": "Active",
            "SUBSCRIPTION_NEXT_CHARGE_DATE": "4/15/2024 9:05 AM",
            "SUBSCRIPTION_RENEWAL_TYPE": "Auto",
            "INVOICE_LINK": "https://store.example.test/invoice/22334455",
            "ORDER_CUSTOM_FIELDS": 'x-passthrough={"id":1},x-source=web',
        }
        signature = overrides.pop("SIGNATURE", None)

        for name, value in overrides.items():
            if value is None:
                fields.pop(name, None)
            else:
                fields[name] = value

        fields["SIGNATURE"] = signature or sign(fields, paypro_config.ipn_validation_key)
        return fields

    return _create


# =============================================================================
# Updater Fixtures
# =============================================================================


@pytest.fixture
def recorded_updates(paypro_settings):
    """
    Route subscription updates to the recording updater.

    Returns the list updates are appended to.
    """
    RECORDED_UPDATES.clear()
    paypro_settings.PAYPRO_SUBSCRIPTION_UPDATER = "payments.webhooks.tests.updaters.record_update"
    yield RECORDED_UPDATES
    RECORDED_UPDATES.clear()


@pytest.fixture
def reported_errors(paypro_settings):
    """
    Route error reports to the recording reporter.

    Returns the list reported messages are appended to.
    """
    REPORTED_ERRORS.clear()
    paypro_settings.ERROR_REPORTER = "payments.webhooks.tests.updaters.RecordingErrorReporter"
    yield REPORTED_ERRORS
    REPORTED_ERRORS.clear()
