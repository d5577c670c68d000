"""
Typed view of a PayPro IPN.

PayPro posts every IPN as flat form fields. PayProNotification decodes
those fields once, after the signature has been checked, so handlers
work with enums, datetimes and Decimals instead of raw strings.

PayPro uses two date formats that are not interchangeable:
- ORDER_PLACED_TIME_UTC: "MM/DD/YYYY HH:mm:ss" (24 hour clock)
- SUBSCRIPTION_NEXT_CHARGE_DATE: "M/D/YYYY h:mm AM" (12 hour clock),
  empty once a subscription is terminated

Usage:
    from payments.webhooks.notifications import PayProNotification

    notification = PayProNotification.from_fields(request.POST.dict())
    if notification.ipn_type == IPNType.SUBSCRIPTION_RENEWED:
        ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from payments.exceptions import PayProNotificationError
from payments.types import IPNType, PayProSubscriptionStatus, RenewalType
from payments.webhooks.validation import parse_custom_fields

ORDER_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"
RENEWAL_DATE_FORMAT = "%m/%d/%Y %I:%M %p"


@dataclass(frozen=True)
class PayProNotification:
    """
    A decoded PayPro IPN.

    Only ipn_type is required. Every other field is None when PayPro
    leaves it out or sends it empty, which happens routinely (e.g. no
    next charge date after termination, no subscription on one-off
    orders).

    Attributes:
        ipn_type: Event kind (IPN_TYPE_NAME)
        test_mode: True for sandbox orders (TEST_MODE == "1")
        order_id: PayPro order id
        order_status: PayPro order status name
        order_total_amount: Order total in order_currency
        order_currency: ISO 4217 code of the order
        order_placed_at: When the order was placed (UTC)
        customer_id: PayPro customer id
        customer_email: Email PayPro holds for the customer
        product_id: PayPro product id
        sku: Our SKU, as configured on the PayPro product
        quantity: Seat count
        item_total_amount: Line item total
        subscription_id: PayPro subscription id
        subscription_status: Subscription status after this event
        next_charge_at: Next renewal (UTC), None once terminated
        renewal_type: Automatic or manual renewal
        invoice_link: Link to the customer's invoice
        custom_fields: Decoded ORDER_CUSTOM_FIELDS
    """

    ipn_type: IPNType
    test_mode: bool = False
    order_id: str | None = None
    order_status: str | None = None
    order_total_amount: Decimal | None = None
    order_currency: str | None = None
    order_placed_at: datetime | None = None
    customer_id: str | None = None
    customer_email: str | None = None
    product_id: str | None = None
    sku: str | None = None
    quantity: int | None = None
    item_total_amount: Decimal | None = None
    subscription_id: str | None = None
    subscription_status: PayProSubscriptionStatus | None = None
    next_charge_at: datetime | None = None
    renewal_type: RenewalType | None = None
    invoice_link: str | None = None
    custom_fields: dict[str, str] = field(default_factory=dict)

    @property
    def passthrough(self) -> str | None:
        """Opaque data passed to the checkout as x-passthrough."""
        return self.custom_fields.get("passthrough")

    @property
    def source(self) -> str | None:
        """Checkout source tag passed as x-source."""
        return self.custom_fields.get("source")

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> PayProNotification:
        """
        Decode raw IPN form fields.

        Call only after PayProWebhookValidator has accepted the fields.

        Args:
            fields: IPN form fields

        Returns:
            PayProNotification

        Raises:
            PayProNotificationError: Unknown IPN type, or a field that
                doesn't parse (date, amount, quantity, enum)
        """

        def value(name: str) -> str | None:
            raw = fields.get(name)
            if raw is None:
                return None
            raw = raw.strip()
            return raw or None

        return cls(
            ipn_type=_parse_choice(IPNType, "IPN_TYPE_NAME", value("IPN_TYPE_NAME"), required=True),
            test_mode=value("TEST_MODE") == "1",
            order_id=value("ORDER_ID"),
            order_status=value("ORDER_STATUS"),
            order_total_amount=_parse_amount("ORDER_TOTAL_AMOUNT", value("ORDER_TOTAL_AMOUNT")),
            order_currency=value("ORDER_CURRENCY_CODE"),
            order_placed_at=_parse_date(
                "ORDER_PLACED_TIME_UTC", value("ORDER_PLACED_TIME_UTC"), ORDER_DATE_FORMAT
            ),
            customer_id=value("CUSTOMER_ID"),
            customer_email=value("CUSTOMER_EMAIL"),
            product_id=value("PRODUCT_ID"),
            sku=value("ORDER_ITEM_SKU"),
            quantity=_parse_quantity(value("PRODUCT_QUANTITY")),
            item_total_amount=_parse_amount(
                "ORDER_ITEM_TOTAL_AMOUNT", value("ORDER_ITEM_TOTAL_AMOUNT")
            ),
            subscription_id=value("SUBSCRIPTION_ID"),
            subscription_status=_parse_choice(
                PayProSubscriptionStatus,
                "SUBSCRIPTION_STATUS_NAME",
                value("SUBSCRIPTION_STATUS_NAME"),
            ),
            next_charge_at=_parse_date(
                "SUBSCRIPTION_NEXT_CHARGE_DATE",
                value("SUBSCRIPTION_NEXT_CHARGE_DATE"),
                RENEWAL_DATE_FORMAT,
            ),
            renewal_type=_parse_choice(
                RenewalType, "SUBSCRIPTION_RENEWAL_TYPE", value("SUBSCRIPTION_RENEWAL_TYPE")
            ),
            invoice_link=value("INVOICE_LINK"),
            custom_fields=parse_custom_fields(fields.get("ORDER_CUSTOM_FIELDS")),
        )


# =============================================================================
# Field Parsers
# =============================================================================


def _invalid(name: str, raw: str, reason: str) -> PayProNotificationError:
    return PayProNotificationError(
        f"Invalid {name} in PayPro IPN: {reason}",
        details={"field": name, "value": raw},
    )


def _parse_choice(choices, name: str, raw: str | None, required: bool = False):
    if raw is None:
        if required:
            raise PayProNotificationError(
                f"PayPro IPN is missing {name}",
                details={"field": name},
            )
        return None
    try:
        return choices(raw)
    except ValueError as e:
        raise _invalid(name, raw, "unknown value") from e


def _parse_date(name: str, raw: str | None, date_format: str) -> datetime | None:
    if raw is None:
        return None
    try:
        parsed = datetime.strptime(raw, date_format)
    except ValueError as e:
        raise _invalid(name, raw, f"expected format {date_format}") from e
    return parsed.replace(tzinfo=timezone.utc)


def _parse_amount(name: str, raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    try:
        amount = Decimal(raw)
    except InvalidOperation as e:
        raise _invalid(name, raw, "not a number") from e
    if not amount.is_finite():
        raise _invalid(name, raw, "not a finite number")
    return amount


def _parse_quantity(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        quantity = int(raw)
    except ValueError as e:
        raise _invalid("PRODUCT_QUANTITY", raw, "not an integer") from e
    if quantity < 0:
        raise _invalid("PRODUCT_QUANTITY", raw, "negative")
    return quantity
