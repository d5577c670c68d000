"""
Payment adapters for external services.

This module provides adapters for PayPro Global and the exchange rate
service used for checkout currency conversion. All outbound payment
calls go through these adapters to ensure consistent error handling,
timeouts and observability.

Usage:
    from payments.adapters import PayProCheckoutBuilder, PayProConfig

    builder = PayProCheckoutBuilder(PayProConfig.from_settings())
    url = await builder.build_checkout_url(request)
"""

from payments.adapters.exchange_rates import ExchangeRateClient, RateSource
from payments.adapters.paypro_adapter import (
    PAYPRO_CURRENCIES,
    SKU_TO_PAYPRO_ID,
    PayProCheckoutBuilder,
    PayProConfig,
    PayProSubscriptionCanceller,
    ProductParamsCipher,
)

__all__ = [
    "ExchangeRateClient",
    "PAYPRO_CURRENCIES",
    "PayProCheckoutBuilder",
    "PayProConfig",
    "PayProSubscriptionCanceller",
    "ProductParamsCipher",
    "RateSource",
    "SKU_TO_PAYPRO_ID",
]
