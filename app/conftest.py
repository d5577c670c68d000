"""
Project-wide pytest fixtures and test markers.

Tests never talk to PayPro or the exchange rate API; HTTP collaborators
are replaced with httpx.MockTransport in the app-level conftest files.
"""

import pytest

# Valid AES-128 parameters (16 single-byte characters each)
TEST_PARAM_KEY = "0123456789abcdef"
TEST_PARAM_IV = "fedcba9876543210"
TEST_IPN_VALIDATION_KEY = "ipn-test-secret"


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_handlers.py → integration
    - Everything else → unit (no Django request cycle, no network)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_handlers.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def paypro_settings(settings):
    """Django settings with a complete, fake PayPro configuration."""
    settings.PAYPRO_API_BASE_URL = "https://store.example.test"
    settings.PAYPRO_ACCOUNT_ID = "1234"
    settings.PAYPRO_API_KEY = "api-secret"
    settings.PAYPRO_PARAM_KEY = TEST_PARAM_KEY
    settings.PAYPRO_PARAM_IV = TEST_PARAM_IV
    settings.PAYPRO_IPN_VALIDATION_KEY = TEST_IPN_VALIDATION_KEY
    settings.PAYPRO_SUBSCRIPTION_UPDATER = ""
    settings.ERROR_REPORTER = ""
    return settings


@pytest.fixture
def paypro_config():
    """PayPro config matching paypro_settings."""
    from payments.adapters import PayProConfig

    return PayProConfig(
        base_url="https://store.example.test",
        account_id="1234",
        api_key="api-secret",
        param_key=TEST_PARAM_KEY,
        param_iv=TEST_PARAM_IV,
        ipn_validation_key=TEST_IPN_VALIDATION_KEY,
        timeout_seconds=5,
    )
