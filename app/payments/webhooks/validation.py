"""
PayPro IPN authentication and custom-field decoding.

PayPro signs only a handful of IPN fields: the sha256 hex digest of
ORDER_ID, ORDER_STATUS, ORDER_TOTAL_AMOUNT, CUSTOMER_EMAIL, our
validation key, TEST_MODE and IPN_TYPE_NAME, concatenated in that order.
The remaining fields are unauthenticated. That is PayPro's scheme and
has to be matched exactly; the secret can't be obtained and a signature
can't be replayed for another order or email.

Usage:
    from payments.webhooks.validation import PayProWebhookValidator, parse_custom_fields

    PayProWebhookValidator(config).validate(request.POST.dict())
    custom = parse_custom_fields(fields["ORDER_CUSTOM_FIELDS"])
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from payments.exceptions import PayProAuthenticationError, PayProConfigurationError

if TYPE_CHECKING:
    from payments.adapters.paypro_adapter import PayProConfig


logger = logging.getLogger(__name__)

# Fields covered by the signature, in digest order. The validation key
# goes between CUSTOMER_EMAIL and TEST_MODE.
SIGNED_FIELDS_BEFORE_KEY = ("ORDER_ID", "ORDER_STATUS", "ORDER_TOTAL_AMOUNT", "CUSTOMER_EMAIL")
SIGNED_FIELDS_AFTER_KEY = ("TEST_MODE", "IPN_TYPE_NAME")

# ORDER_CUSTOM_FIELDS looks like "x-a=1,x-b=2" but values may contain
# commas, so a value runs lazily until the end of the string or the next
# ",x-<word>". A value that itself contains ",x-<word>" gets split.
CUSTOM_FIELD_PATTERN = re.compile(r"x-(\w+)=(.*?)(?=\Z|,x-\w+)", re.ASCII)


def compute_signature(fields: Mapping[str, str], validation_key: str) -> str:
    """
    Compute the signature PayPro sends for an IPN.

    Missing fields contribute an empty string.

    Args:
        fields: IPN form fields
        validation_key: Shared IPN validation secret

    Returns:
        Lowercase sha256 hex digest
    """
    parts = [fields.get(name) or "" for name in SIGNED_FIELDS_BEFORE_KEY]
    parts.append(validation_key)
    parts.extend(fields.get(name) or "" for name in SIGNED_FIELDS_AFTER_KEY)

    return hashlib.sha256("".join(parts).encode("utf-8")).hexdigest()


class PayProWebhookValidator:
    """
    Gate for inbound PayPro IPNs.

    validate() returns nothing on success and raises on any mismatch;
    there is no partial trust.
    """

    def __init__(self, config: PayProConfig):
        self.config = config

    def validate(self, fields: Mapping[str, str]) -> None:
        """
        Check an IPN's SIGNATURE against the recomputed one.

        Args:
            fields: IPN form fields

        Raises:
            PayProAuthenticationError: Signature missing or mismatched (403)
            PayProConfigurationError: No validation key configured
        """
        if not self.config.ipn_validation_key:
            logger.critical("PayPro IPN received but no validation key is configured")
            raise PayProConfigurationError("PayPro IPN validation key is not configured")

        expected = compute_signature(fields, self.config.ipn_validation_key)
        received = fields.get("SIGNATURE") or ""

        if not hmac.compare_digest(expected.encode("ascii"), received.encode("utf-8")):
            logger.warning(
                "PayPro IPN signature mismatch",
                extra={
                    "order_id": fields.get("ORDER_ID"),
                    "ipn_type": fields.get("IPN_TYPE_NAME"),
                    "received_signature": received,
                },
            )
            raise PayProAuthenticationError("PayPro IPN signature did not match")


def parse_custom_fields(custom_fields: str | None) -> dict[str, str]:
    """
    Decode PayPro's ORDER_CUSTOM_FIELDS string.

    Best effort only: the format has no escaping, so this reproduces the
    heuristic downstream code depends on rather than a stricter grammar.
    Later duplicates overwrite earlier ones.

    Args:
        custom_fields: Raw field, e.g. 'x-passthrough={"id":1},x-source=web'

    Returns:
        Mapping of field name (without the x- prefix) to value

    Example:
        >>> parse_custom_fields('x-passthrough={"a":1,"b":2},x-source=web')
        {'passthrough': '{"a":1,"b":2}', 'source': 'web'}
    """
    if not custom_fields:
        return {}

    return {
        match.group(1): match.group(2)
        for match in CUSTOM_FIELD_PATTERN.finditer(custom_fields)
    }
