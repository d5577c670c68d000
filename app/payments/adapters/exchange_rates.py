"""
Exchange rate lookups for checkout currency conversion.

PayPro only prices checkouts in its own list of currencies. For anything
else the checkout builder converts the price to USD using the latest
rates from this module.

Configuration (via settings):
- EXCHANGE_RATES_API_URL: URL template with a {base} placeholder
  (default: https://open.er-api.com/v6/latest/{base})
- EXCHANGE_RATES_TIMEOUT_SECONDS: Request timeout (default: 10)

Usage:
    from payments.adapters import ExchangeRateClient

    rates = await ExchangeRateClient().get_latest_rates("USD")
    eur_per_usd = rates["EUR"]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

import httpx
from django.conf import settings

from payments.adapters.http import use_client
from payments.exceptions import ExchangeRateUnavailableError

DEFAULT_EXCHANGE_RATES_API_URL = "https://open.er-api.com/v6/latest/{base}"

logger = logging.getLogger(__name__)


@runtime_checkable
class RateSource(Protocol):
    """
    Protocol for exchange rate sources.

    Rates map currency codes to the amount of that currency one unit of
    `base` buys, as decimal strings.
    """

    async def get_latest_rates(self, base: str) -> Mapping[str, str]:
        """
        Fetch the latest rates relative to a base currency.

        Args:
            base: ISO 4217 code of the base currency

        Returns:
            Mapping of currency code to rate string
        """
        ...


class ExchangeRateClient:
    """
    RateSource backed by an HTTP exchange rate API.

    The API must answer with a JSON object holding a `rates` object,
    e.g. {"base_code": "USD", "rates": {"EUR": 0.92, ...}}.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url_template: str | None = None,
        timeout: float | None = None,
    ):
        self.client = client
        self.url_template = url_template or getattr(
            settings, "EXCHANGE_RATES_API_URL", DEFAULT_EXCHANGE_RATES_API_URL
        )
        self.timeout = timeout or getattr(settings, "EXCHANGE_RATES_TIMEOUT_SECONDS", 10)

    async def get_latest_rates(self, base: str = "USD") -> dict[str, str]:
        """
        Fetch the latest rates for `base`.

        Raises:
            ExchangeRateUnavailableError: Network failure, non-2xx status,
                or a body without a rates object
        """
        url = self.url_template.format(base=base)
        log_context = {"operation": "get_latest_rates", "base": base}

        start_time = time.time()
        try:
            async with use_client(self.client, self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Exchange rate lookup failed",
                extra={**log_context, "error": str(e)},
                exc_info=True,
            )
            raise ExchangeRateUnavailableError(
                f"Could not fetch {base} exchange rates",
                details={"base": base, "original_error": str(e)},
            ) from e

        rates = body.get("rates") if isinstance(body, dict) else None
        if not isinstance(rates, dict):
            logger.error("Exchange rate response has no rates", extra=log_context)
            raise ExchangeRateUnavailableError(
                f"Exchange rate response for {base} has no rates",
                details={"base": base},
            )

        logger.debug(
            "Exchange rates fetched",
            extra={
                **log_context,
                "rate_count": len(rates),
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )

        return {code: str(value) for code, value in rates.items()}
