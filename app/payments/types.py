"""
Data types for PayPro operations.

This module defines the enums and dataclasses passed between the PayPro
adapter, the IPN webhook layer and the external subscription logic.

Types:
    SKU: Internal product identifiers
    IPNType: The nine PayPro IPN event kinds
    PayProSubscriptionStatus: Subscription status reported in IPNs
    RenewalType: Auto/manual renewal reported in IPNs
    SubscriptionState: Status we hand to subscription-update logic
    CheckoutRequest: Inputs for building a checkout URL
    SubscriptionUpdate: Decoded IPN data for subscription-update logic

Usage:
    from payments.types import SKU, CheckoutRequest

    request = CheckoutRequest(
        sku=SKU.PRO_MONTHLY,
        currency="EUR",
        price=Decimal("7.00"),
        source="web",
        email="user@example.com",
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.db import models


# =============================================================================
# Enums
# =============================================================================


class SKU(models.TextChoices):
    """Internal product identifiers sold through PayPro checkouts."""

    PRO_MONTHLY = "pro-monthly", "Pro (monthly)"
    PRO_ANNUAL = "pro-annual", "Pro (annual)"
    TEAM_MONTHLY = "team-monthly", "Team (monthly)"
    TEAM_ANNUAL = "team-annual", "Team (annual)"
    PRO_PERPETUAL = "pro-perpetual", "Pro (perpetual)"


class IPNType(models.TextChoices):
    """
    IPN_TYPE_NAME values sent by PayPro.

    ORDER_CHARGED is the initial subscription purchase,
    SUBSCRIPTION_FINISHED arrives once a terminated subscription
    has fully run out.
    """

    ORDER_CHARGED = "OrderCharged", "Order charged"
    ORDER_CHARGED_BACK = "OrderChargedBack", "Order charged back"
    ORDER_ON_WAITING = "OrderOnWaiting", "Order on waiting"
    SUBSCRIPTION_RENEWED = "SubscriptionRenewed", "Subscription renewed"
    SUBSCRIPTION_TERMINATED = "SubscriptionTerminated", "Subscription terminated"
    SUBSCRIPTION_FINISHED = "SubscriptionFinished", "Subscription finished"
    SUBSCRIPTION_CHARGE_SUCCEED = "SubscriptionChargeSucceed", "Subscription charged"
    SUBSCRIPTION_CHARGE_FAILED = "SubscriptionChargeFailed", "Subscription charge failed"
    SUBSCRIPTION_SUSPENDED = "SubscriptionSuspended", "Subscription suspended"


class PayProSubscriptionStatus(models.TextChoices):
    """SUBSCRIPTION_STATUS_NAME values sent by PayPro."""

    ACTIVE = "Active", "Active"
    SUSPENDED = "Suspended", "Suspended"
    TERMINATED = "Terminated", "Terminated"
    FINISHED = "Finished", "Finished"


class RenewalType(models.TextChoices):
    """SUBSCRIPTION_RENEWAL_TYPE values sent by PayPro."""

    AUTO = "Auto", "Automatic"
    MANUAL = "Manual", "Manual"


class SubscriptionState(models.TextChoices):
    """Subscription status handed to subscription-update logic."""

    ACTIVE = "active", "Active"
    PAST_DUE = "past_due", "Past due"
    DELETED = "deleted", "Deleted"


# =============================================================================
# Checkout
# =============================================================================


@dataclass(frozen=True)
class CheckoutRequest:
    """
    Inputs for a PayPro checkout URL.

    Attributes:
        sku: Internal product identifier (see SKU)
        currency: ISO 4217 code the price is denominated in
        price: Price in `currency`
        source: Tag recorded as x-source on the order
        email: Billing email (absent for manual purchase links)
        quantity: Seat count, always set for team accounts
        country_code: Billing country
        return_url: Where PayPro sends the customer afterwards
        passthrough: Opaque caller data, echoed back in IPN custom fields
    """

    sku: str
    currency: str
    price: Decimal
    source: str
    email: str | None = None
    quantity: int | None = None
    country_code: str | None = None
    return_url: str | None = None
    passthrough: str | None = None

    def __post_init__(self) -> None:
        """Validate and normalize parameters after initialization."""
        if not self.currency:
            raise ValueError("currency is required")
        if not isinstance(self.price, Decimal):
            try:
                object.__setattr__(self, "price", Decimal(str(self.price)))
            except InvalidOperation as e:
                raise ValueError(f"price is not a number: {self.price!r}") from e
        if self.price.is_nan() or self.price < 0:
            raise ValueError("price must be a non-negative number")


# =============================================================================
# Subscription updates
# =============================================================================


@dataclass(frozen=True)
class SubscriptionUpdate:
    """
    Decoded IPN data for the external subscription-update logic.

    Attributes:
        status: New subscription state
        subscription_id: PayPro subscription id
        customer_email: Email PayPro holds for the customer
        sku: Product SKU on the order
        quantity: Seat count on the order
        expiry: When the current period ends (None if PayPro sent none)
        passthrough: x-passthrough custom field from the checkout, if any
        payment_provider: Always "paypro"
    """

    status: SubscriptionState
    subscription_id: str
    customer_email: str
    sku: str
    quantity: int
    expiry: datetime | None = None
    passthrough: str | None = None
    payment_provider: str = "paypro"
