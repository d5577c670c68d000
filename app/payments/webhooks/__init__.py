"""
Webhook handling for PayPro IPNs.

This module provides the view, signature validation, decoding and
handler registry for PayPro's instant payment notifications.

Usage:
    # In urls.py
    from payments.webhooks.views import paypro_webhook

    urlpatterns = [
        path("webhooks/paypro/", paypro_webhook, name="paypro_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_notification, register_handler
from payments.webhooks.notifications import PayProNotification
from payments.webhooks.validation import PayProWebhookValidator, parse_custom_fields
from payments.webhooks.views import paypro_webhook

__all__ = [
    "PayProNotification",
    "PayProWebhookValidator",
    "dispatch_notification",
    "parse_custom_fields",
    "paypro_webhook",
    "register_handler",
]
