"""
PayPro Global adapter for checkout links and subscription management.

This module provides the classes that talk to (or build links for) PayPro:

- PayProConfig: process-wide credentials and secrets, injected everywhere
- ProductParamsCipher: AES-CBC encryption of the product parameter blob
- PayProCheckoutBuilder: builds checkout URLs with tamper-proof pricing
- PayProSubscriptionCanceller: terminates subscriptions via the PayPro API

Inbound IPN validation lives in payments.webhooks.validation.

Configuration (via settings):
- PAYPRO_API_BASE_URL: PayPro store URL (default: https://store.payproglobal.com)
- PAYPRO_ACCOUNT_ID: Vendor account id for API calls
- PAYPRO_API_KEY: API secret key for API calls
- PAYPRO_PARAM_KEY: AES key for dynamic product parameters (16/24/32 chars)
- PAYPRO_PARAM_IV: AES IV for dynamic product parameters (16 chars)
- PAYPRO_IPN_VALIDATION_KEY: Shared secret for IPN signatures
- PAYPRO_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from payments.adapters import PayProCheckoutBuilder, PayProSubscriptionCanceller

    builder = PayProCheckoutBuilder.from_settings()
    url = await builder.build_checkout_url(
        CheckoutRequest(sku="pro-monthly", currency="EUR", price=Decimal("7"), source="web")
    )

    canceller = PayProSubscriptionCanceller.from_settings()
    await canceller.cancel_subscription("123456")
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from django.conf import settings

from core.reporting import get_error_reporter
from payments.adapters.exchange_rates import ExchangeRateClient
from payments.adapters.http import use_client
from payments.exceptions import (
    PayProConfigurationError,
    PayProRejectionError,
    PayProTransportError,
)
from payments.types import SKU

if TYPE_CHECKING:
    from core.protocols import ErrorReporter
    from payments.adapters.exchange_rates import RateSource
    from payments.types import CheckoutRequest


DEFAULT_PAYPRO_API_BASE_URL = "https://store.payproglobal.com"

CANCELLATION_REASON = "API cancellation"

# Product ids configured in the PayPro vendor dashboard. A negative id
# marks a SKU that can't be sold through PayPro at all.
SKU_TO_PAYPRO_ID: dict[str, int] = {
    SKU.PRO_MONTHLY.value: 79920,
    SKU.PRO_ANNUAL.value: 82586,
    SKU.TEAM_ANNUAL.value: 82587,
    SKU.TEAM_MONTHLY.value: 82588,
    SKU.PRO_PERPETUAL.value: -1,
}

# https://developers.payproglobal.com/docs/checkout-pages/url-parameters/#list-of-currencies-with-codes
PAYPRO_CURRENCIES: frozenset[str] = frozenset(
    {
        "AFN", "DZD", "AED", "ARS", "AMD", "AUD", "AZN", "BSD", "BHD", "BDT",
        "BBD", "BYN", "BZD", "BMD", "BOB", "BWP", "BRL", "GBP", "BND", "BGN",
        "CAD", "CVE", "KYD", "XOF", "CLP", "COP", "CRC", "HRK", "CZK", "DKK",
        "DJF", "DOP", "XCD", "EGP", "EUR", "FJD", "GEL", "GTQ", "HNL", "HKD",
        "HUF", "ISK", "INR", "IDR", "ILS", "JOD", "KHR", "KZT", "KES", "BAM",
        "KRW", "KWD", "KGS", "LAK", "LBP", "MOP", "MKD", "MYR", "MVR", "MXN",
        "MDL", "MNT", "MAD", "NAD", "TRY", "NZD", "NGN", "NOK", "OMR", "PKR",
        "PAB", "PGK", "PYG", "PEN", "PHP", "PLN", "QAR", "RON", "RUB", "SAR",
        "RSD", "SGD", "ZAR", "LKR", "SEK", "CHF", "TWD", "TZS", "THB", "TMT",
        "TTD", "TND", "TJS", "UAH", "USD", "UYU", "UZS", "YER", "CNY", "JPY",
    }
)

FALLBACK_CURRENCY = "USD"

AES_KEY_LENGTHS = (16, 24, 32)
AES_BLOCK_BYTES = 16


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class PayProConfig:
    """
    Process-wide PayPro credentials and secrets.

    Secrets are excluded from repr so configs can be logged safely.

    Attributes:
        base_url: PayPro store URL, without trailing slash
        account_id: Vendor account id
        api_key: API secret key
        param_key: AES key for product parameters
        param_iv: AES IV for product parameters
        ipn_validation_key: Shared secret for IPN signatures
        timeout_seconds: Timeout for PayPro API calls
    """

    base_url: str = DEFAULT_PAYPRO_API_BASE_URL
    account_id: str = ""
    api_key: str = field(default="", repr=False)
    param_key: str = field(default="", repr=False)
    param_iv: str = field(default="", repr=False)
    ipn_validation_key: str = field(default="", repr=False)
    timeout_seconds: float = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls) -> PayProConfig:
        """Build the config from Django settings."""
        return cls(
            base_url=getattr(settings, "PAYPRO_API_BASE_URL", "")
            or DEFAULT_PAYPRO_API_BASE_URL,
            account_id=getattr(settings, "PAYPRO_ACCOUNT_ID", ""),
            api_key=getattr(settings, "PAYPRO_API_KEY", ""),
            param_key=getattr(settings, "PAYPRO_PARAM_KEY", ""),
            param_iv=getattr(settings, "PAYPRO_PARAM_IV", ""),
            ipn_validation_key=getattr(settings, "PAYPRO_IPN_VALIDATION_KEY", ""),
            timeout_seconds=getattr(settings, "PAYPRO_API_TIMEOUT_SECONDS", 10),
        )


# =============================================================================
# Product Parameter Encryption
# =============================================================================


class ProductParamsCipher:
    """
    AES-CBC cipher for PayPro's dynamic product parameters.

    PayPro decrypts `products[1][data]` with the key and IV shared via the
    vendor dashboard and treats the result as the authoritative price.
    Key and IV are raw strings, one byte per character. Plaintext is
    PKCS#7 padded and the ciphertext travels base64 encoded.

    Holds no cipher state between calls, so one instance may be shared
    by concurrent checkouts.

    Example:
        cipher = ProductParamsCipher(config.param_key, config.param_iv)
        blob = cipher.encrypt("price%5BEUR%5D%5BAmount%5D=7.00")
        assert cipher.decrypt(blob) == "price%5BEUR%5D%5BAmount%5D=7.00"
    """

    def __init__(self, key: str, iv: str):
        self._key = self._to_bytes(key, "param_key")
        self._iv = self._to_bytes(iv, "param_iv")

        if len(self._key) not in AES_KEY_LENGTHS:
            raise PayProConfigurationError(
                "PayPro parameter key must be 16, 24 or 32 bytes",
                details={"key_length": len(self._key)},
            )
        if len(self._iv) != AES_BLOCK_BYTES:
            raise PayProConfigurationError(
                "PayPro parameter IV must be 16 bytes",
                details={"iv_length": len(self._iv)},
            )

    @staticmethod
    def _to_bytes(value: str, name: str) -> bytes:
        try:
            return value.encode("latin-1")
        except UnicodeEncodeError as e:
            raise PayProConfigurationError(
                f"PayPro {name} must only contain single-byte characters"
            ) from e

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a parameter string, returning base64 ciphertext."""
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher().encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, blob: str) -> str:
        """
        Decrypt base64 ciphertext produced by encrypt().

        Raises:
            ValueError: The blob is not valid base64 or its padding is invalid
        """
        try:
            ciphertext = base64.b64decode(blob, validate=True)
        except binascii.Error as e:
            raise ValueError("Product parameter blob is not valid base64") from e

        decryptor = self._cipher().decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode("utf-8")


# =============================================================================
# Checkout Links
# =============================================================================


class PayProCheckoutBuilder:
    """
    Builds PayPro checkout URLs.

    Visible query parameters (currency, billing details, x- tags) are
    informational only. The price PayPro charges comes from the encrypted
    `products[1][data]` blob, so customers can't edit it.

    Features:
    - SKU validation before any network or crypto work
    - USD fallback pricing for currencies PayPro doesn't support
    - Structured logging with timing metrics

    Usage:
        builder = PayProCheckoutBuilder(config, rate_source=ExchangeRateClient())
        url = await builder.build_checkout_url(request)
    """

    def __init__(
        self,
        config: PayProConfig,
        rate_source: RateSource | None = None,
        error_reporter: ErrorReporter | None = None,
    ):
        self.config = config
        self.rate_source = rate_source or ExchangeRateClient()
        self.error_reporter = error_reporter or get_error_reporter()

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient | None = None) -> PayProCheckoutBuilder:
        """Build a checkout builder from Django settings."""
        return cls(PayProConfig.from_settings(), ExchangeRateClient(client=client))

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @staticmethod
    def get_product_id(sku: str) -> int:
        """
        Map a SKU to its PayPro product id.

        Raises:
            PayProConfigurationError: Unknown SKU, or one PayPro can't sell
        """
        product_id = SKU_TO_PAYPRO_ID.get(str(sku))

        if product_id is None:
            raise PayProConfigurationError(
                f"Unknown SKU {sku}",
                details={"sku": str(sku)},
            )
        if product_id < 0:
            raise PayProConfigurationError(
                f"SKU {sku} is not available through PayPro",
                details={"sku": str(sku)},
            )

        return product_id

    async def build_checkout_url(self, request: CheckoutRequest) -> str:
        """
        Build the checkout URL for a purchase.

        Args:
            request: Product, price and customer details

        Returns:
            Full checkout URL on the PayPro store

        Raises:
            PayProConfigurationError: Unsupported SKU, unsupported currency
                without a USD rate, or invalid AES parameters
            ExchangeRateUnavailableError: The rate source failed
        """
        product_id = self.get_product_id(request.sku)
        logger = self.get_logger()

        log_context = {
            "operation": "build_checkout_url",
            "sku": str(request.sku),
            "currency": request.currency,
        }

        start_time = time.time()
        logger.info("Building PayPro checkout", extra=log_context)

        checkout_params: list[tuple[str, str]] = [("currency", request.currency)]

        if request.email:
            checkout_params.append(("billing-email", request.email))
        if request.country_code:
            checkout_params.append(("billing-country", request.country_code))
        if request.source:
            checkout_params.append(("x-source", request.source))
        if request.passthrough:
            checkout_params.append(("x-passthrough", request.passthrough))
        if request.return_url:
            checkout_params.append(("x-return-url", request.return_url))

        cipher = ProductParamsCipher(self.config.param_key, self.config.param_iv)
        pricing_currency, amount = await self._resolve_price(request)

        product_params = urlencode({f"price[{pricing_currency}][Amount]": amount})

        checkout_params.append(("products[1][id]", str(product_id)))
        if request.quantity:
            checkout_params.append(("products[1][qty]", str(request.quantity)))
        checkout_params.append(("products[1][data]", cipher.encrypt(product_params)))

        logger.info(
            "PayPro checkout built",
            extra={
                **log_context,
                "pricing_currency": pricing_currency,
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )

        return f"{self.config.base_url}/checkout?{urlencode(checkout_params)}"

    async def _resolve_price(self, request: CheckoutRequest) -> tuple[str, str]:
        """
        Pick the currency and amount PayPro will charge.

        Supported currencies pass through unchanged. Anything else is
        reported (without failing) and priced in USD at the fetched
        USD rate for that currency, sent as the rate source returned it.
        """
        if request.currency in PAYPRO_CURRENCIES:
            return request.currency, format(request.price, "f")

        self.error_reporter.report_error(
            f"Opening unsupported {request.currency} PayPro checkout"
        )

        rates = await self.rate_source.get_latest_rates(FALLBACK_CURRENCY)
        rate = rates.get(request.currency)

        if not self._is_usable_rate(rate):
            raise PayProConfigurationError(
                f"Can't show PayPro checkout for currency {request.currency} "
                f"with no {FALLBACK_CURRENCY} rate available",
                details={"currency": request.currency},
            )

        return FALLBACK_CURRENCY, str(rate)

    @staticmethod
    def _is_usable_rate(value: Any) -> bool:
        if not value:
            return False
        try:
            rate = Decimal(str(value))
        except InvalidOperation:
            return False
        return rate.is_finite() and rate > 0


# =============================================================================
# Subscription Management
# =============================================================================


class PayProSubscriptionCanceller:
    """
    Terminates PayPro subscriptions through the vendor API.

    PayPro is the system of record: nothing is stored locally, and no
    retries happen here. Callers own retry policy (see is_retryable on
    the raised exceptions).

    Usage:
        async with httpx.AsyncClient() as client:
            canceller = PayProSubscriptionCanceller(config, client)
            await canceller.cancel_subscription(subscription_id)
    """

    TERMINATE_PATH = "/api/Subscriptions/Terminate"

    def __init__(self, config: PayProConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.client = client

    @classmethod
    def from_settings(
        cls, client: httpx.AsyncClient | None = None
    ) -> PayProSubscriptionCanceller:
        """Build a canceller from Django settings."""
        return cls(PayProConfig.from_settings(), client)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    async def cancel_subscription(self, subscription_id: str | int) -> None:
        """
        Terminate a subscription, notifying the customer.

        Args:
            subscription_id: PayPro subscription id

        Raises:
            PayProTransportError: Network failure or non-2xx status
            PayProRejectionError: PayPro answered with isSuccess=false
        """
        logger = self.get_logger()

        log_context = {
            "operation": "cancel_subscription",
            "subscription_id": str(subscription_id),
        }

        payload = {
            "vendorAccountId": self.config.account_id,
            "apiSecretKey": self.config.api_key,
            "reasonText": CANCELLATION_REASON,
            "sendCustomerNotification": True,
            "subscriptionId": subscription_id,
        }

        start_time = time.time()
        logger.info("Starting PayPro operation", extra=log_context)

        try:
            async with use_client(self.client, self.config.timeout_seconds) as client:
                response = await client.post(
                    f"{self.config.base_url}{self.TERMINATE_PATH}",
                    json=payload,
                    timeout=self.config.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logger.error(
                "Connection error to PayPro",
                extra={**log_context, "duration_ms": (time.time() - start_time) * 1000},
                exc_info=True,
            )
            raise PayProTransportError(
                "Could not connect to PayPro during cancellation",
                details={"original_error": str(e)},
            ) from e

        duration_ms = (time.time() - start_time) * 1000

        if not response.is_success:
            logger.error(
                f"{response.status_code} {response.reason_phrase}",
                extra={
                    **log_context,
                    "status": response.status_code,
                    "headers": dict(response.headers),
                    "body": response.text,
                    "duration_ms": duration_ms,
                },
            )
            raise PayProTransportError(
                f"Unexpected {response.status_code} during PayPro cancellation",
                status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error(
                "Unparseable PayPro response",
                extra={**log_context, "body": response.text, "duration_ms": duration_ms},
            )
            raise PayProTransportError(
                "Unparseable response during PayPro cancellation",
                status=response.status_code,
            ) from e

        if not isinstance(body, dict) or not body.get("isSuccess"):
            errors = body.get("errors") if isinstance(body, dict) else None
            logger.warning(
                "PayPro errors",
                extra={**log_context, "errors": errors, "duration_ms": duration_ms},
            )
            raise PayProRejectionError(
                "PayPro cancellation request failed",
                errors=errors if isinstance(errors, list) else None,
            )

        logger.info(
            "PayPro operation completed",
            extra={**log_context, "duration_ms": duration_ms},
        )
