"""
Pytest fixtures for PayPro adapter tests.

This module provides fixtures for testing the PayPro adapter and the
exchange rate client without any network access.

Sections:
    - Configuration Fixtures
    - Collaborator Doubles
    - HTTP Transport Fixtures
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from payments.adapters import ProductParamsCipher


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def cipher(paypro_config):
    """Cipher sharing the config's key and IV."""
    return ProductParamsCipher(paypro_config.param_key, paypro_config.param_iv)


# =============================================================================
# Collaborator Doubles
# =============================================================================


class StaticRateSource:
    """RateSource returning fixed rates and recording each lookup."""

    def __init__(self, rates: dict[str, str] | None = None):
        self.rates = rates or {}
        self.calls: list[str] = []

    async def get_latest_rates(self, base: str) -> dict[str, str]:
        self.calls.append(base)
        return self.rates


class RecordingReporter:
    """ErrorReporter collecting messages instead of logging them."""

    def __init__(self):
        self.messages: list[str] = []

    def report_error(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def rate_source():
    """Rate source with a VND rate and no rates for anything else."""
    return StaticRateSource({"VND": "25000", "EUR": "0.92"})


@pytest.fixture
def reporter():
    """Error reporter that records messages."""
    return RecordingReporter()


# =============================================================================
# HTTP Transport Fixtures
# =============================================================================


@pytest.fixture
def mock_http_client():
    """
    Factory for httpx clients served by a handler function.

    Every request the client sends is recorded in client.sent_requests.

    Usage:
        client = mock_http_client(lambda request: httpx.Response(200, json={}))
    """

    def _create(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        sent_requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        client.sent_requests = sent_requests
        return client

    return _create

