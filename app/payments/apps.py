"""
Payments app configuration.

This app provides the PayPro Global integration:
- Checkout link building
- IPN webhook handling
- Subscription cancellation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    name = "payments"
    verbose_name = "Payments"

    def ready(self) -> None:
        # Registers the built-in IPN handlers
        from payments.webhooks import handlers  # noqa: F401
