"""
IPN handlers for PayPro events.

This module provides a handler registry and the built-in handlers that
turn decoded PayPro IPNs into SubscriptionUpdate hand-offs.

The handler registry allows:
- Clean separation between event routing and handling
- Overriding or adding handlers per IPN type
- Centralized logging of unhandled events

Subscription records live outside this service. Handlers pass each
SubscriptionUpdate to the callable named by the
PAYPRO_SUBSCRIPTION_UPDATER setting (a dotted path). Without it, updates
are only logged.

Usage:
    from payments.webhooks.handlers import dispatch_notification, register_handler

    # Register a custom handler
    @register_handler(IPNType.ORDER_ON_WAITING)
    def handle_waiting(notification: PayProNotification) -> ServiceResult:
        ...

    # Dispatch a notification to its handler
    result = dispatch_notification(notification)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from django.conf import settings
from django.utils.module_loading import import_string

from core.reporting import get_error_reporter
from core.services import ServiceResult
from payments.types import IPNType, SubscriptionState, SubscriptionUpdate

if TYPE_CHECKING:
    from payments.webhooks.notifications import PayProNotification


logger = logging.getLogger(__name__)

NotificationHandler = Callable[["PayProNotification"], ServiceResult]


# =============================================================================
# Handler Registry
# =============================================================================


# Maps IPN types to handler functions
NOTIFICATION_HANDLERS: dict[str, NotificationHandler] = {}


def register_handler(*ipn_types: IPNType) -> Callable:
    """
    Decorator to register an IPN handler for one or more IPN types.

    A later registration for the same type replaces the earlier one.

    Usage:
        @register_handler(IPNType.SUBSCRIPTION_RENEWED)
        def handle_renewed(notification: PayProNotification) -> ServiceResult:
            ...

    Args:
        ipn_types: IPN types the handler processes

    Returns:
        Decorator function that registers the handler
    """

    def decorator(func: NotificationHandler) -> NotificationHandler:
        for ipn_type in ipn_types:
            NOTIFICATION_HANDLERS[str(ipn_type)] = func
            logger.debug(f"Registered IPN handler for {ipn_type}")
        return func

    return decorator


def dispatch_notification(notification: PayProNotification) -> ServiceResult:
    """
    Dispatch a notification to the handler registered for its type.

    Unknown types never reach this point (decoding rejects them), but a
    type with no handler is logged and treated as success so PayPro
    doesn't keep redelivering it.

    Args:
        notification: Decoded, authenticated IPN

    Returns:
        ServiceResult from the handler, or success if no handler
    """
    ipn_type = str(notification.ipn_type)
    handler = NOTIFICATION_HANDLERS.get(ipn_type)
    log_context = {
        "ipn_type": ipn_type,
        "order_id": notification.order_id,
        "subscription_id": notification.subscription_id,
    }

    if not handler:
        logger.info(f"No handler registered for IPN type: {ipn_type}", extra=log_context)
        return ServiceResult.ok(None)

    logger.info(f"Dispatching {ipn_type} to handler", extra=log_context)

    return handler(notification)


# =============================================================================
# Subscription Updates
# =============================================================================


def get_subscription_updater() -> Callable[[SubscriptionUpdate], None] | None:
    """Load the callable named by PAYPRO_SUBSCRIPTION_UPDATER, if set."""
    path = getattr(settings, "PAYPRO_SUBSCRIPTION_UPDATER", "")
    if not path:
        return None
    return import_string(path)


def build_subscription_update(
    notification: PayProNotification,
    status: SubscriptionState,
) -> ServiceResult[SubscriptionUpdate]:
    """
    Translate a notification into a SubscriptionUpdate.

    Fails (without raising) when PayPro sent no subscription id or no
    customer email, since the update can't be attributed.
    """
    if not notification.subscription_id:
        return ServiceResult.failure(
            f"{notification.ipn_type} IPN has no subscription id",
            error_code="MISSING_SUBSCRIPTION_ID",
        )
    if not notification.customer_email:
        return ServiceResult.failure(
            f"{notification.ipn_type} IPN has no customer email",
            error_code="MISSING_CUSTOMER_EMAIL",
        )

    return ServiceResult.ok(
        SubscriptionUpdate(
            status=status,
            subscription_id=notification.subscription_id,
            customer_email=notification.customer_email,
            sku=notification.sku or "",
            quantity=notification.quantity if notification.quantity is not None else 1,
            expiry=notification.next_charge_at,
            passthrough=notification.passthrough,
        )
    )


def apply_subscription_update(
    notification: PayProNotification,
    status: SubscriptionState,
) -> ServiceResult[SubscriptionUpdate]:
    """
    Build the update for a notification and hand it to the updater.

    Exceptions raised by the updater propagate, so the webhook answers
    with an error and PayPro redelivers the IPN.
    """
    result = build_subscription_update(notification, status)
    if not result:
        logger.warning(
            f"Skipping subscription update: {result.error}",
            extra={"ipn_type": str(notification.ipn_type), "order_id": notification.order_id},
        )
        return result

    update = result.data
    log_context = {
        "ipn_type": str(notification.ipn_type),
        "subscription_id": update.subscription_id,
        "status": str(update.status),
        "test_mode": notification.test_mode,
    }

    updater = get_subscription_updater()
    if updater is None:
        logger.info("No subscription updater configured, update not applied", extra=log_context)
        return result

    updater(update)
    logger.info("Subscription update applied", extra=log_context)

    return result


# =============================================================================
# Built-in Handlers
# =============================================================================


@register_handler(
    IPNType.ORDER_CHARGED,
    IPNType.SUBSCRIPTION_RENEWED,
    IPNType.SUBSCRIPTION_CHARGE_SUCCEED,
)
def handle_subscription_active(notification: PayProNotification) -> ServiceResult:
    """Initial purchase or successful renewal: subscription is active."""
    return apply_subscription_update(notification, SubscriptionState.ACTIVE)


@register_handler(IPNType.SUBSCRIPTION_CHARGE_FAILED, IPNType.SUBSCRIPTION_SUSPENDED)
def handle_subscription_past_due(notification: PayProNotification) -> ServiceResult:
    """Renewal charge failed or PayPro suspended the subscription."""
    return apply_subscription_update(notification, SubscriptionState.PAST_DUE)


@register_handler(IPNType.SUBSCRIPTION_TERMINATED, IPNType.SUBSCRIPTION_FINISHED)
def handle_subscription_ended(notification: PayProNotification) -> ServiceResult:
    """Subscription terminated or run out."""
    return apply_subscription_update(notification, SubscriptionState.DELETED)


@register_handler(IPNType.ORDER_CHARGED_BACK)
def handle_order_charged_back(notification: PayProNotification) -> ServiceResult:
    """
    Handle a charge-back.

    The customer got their money back, so access is revoked. Charge-backs
    always need a human look, so they are also sent to the error sink.
    """
    get_error_reporter().report_error(
        f"PayPro order {notification.order_id} charged back "
        f"(subscription {notification.subscription_id})"
    )
    return apply_subscription_update(notification, SubscriptionState.DELETED)


@register_handler(IPNType.ORDER_ON_WAITING)
def handle_order_on_waiting(notification: PayProNotification) -> ServiceResult:
    """Order awaits payment (e.g. bank transfer); nothing changes yet."""
    logger.info(
        "PayPro order waiting for payment",
        extra={"order_id": notification.order_id, "customer_id": notification.customer_id},
    )
    return ServiceResult.ok(None)
