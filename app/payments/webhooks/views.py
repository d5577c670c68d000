"""
Webhook endpoint views for PayPro.

This module provides the HTTP endpoint for receiving PayPro IPNs.
The view:
1. Verifies the IPN signature
2. Decodes the form fields into a PayProNotification
3. Dispatches it to the registered handler
4. Returns 200

Usage:
    # In urls.py
    from payments.webhooks.views import paypro_webhook

    urlpatterns = [
        path("webhooks/paypro/", paypro_webhook, name="paypro_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.exceptions import BaseApplicationError
from payments.adapters import PayProConfig
from payments.webhooks.handlers import dispatch_notification
from payments.webhooks.notifications import PayProNotification
from payments.webhooks.validation import PayProWebhookValidator


logger = logging.getLogger(__name__)


def error_response(error: BaseApplicationError) -> HttpResponse:
    """Render an application error as a plain-text, uncacheable response."""
    response = HttpResponse(error.message, status=error.status_code, content_type="text/plain")
    response["Cache-Control"] = "no-store"
    return response


@csrf_exempt
@require_POST
def paypro_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive and process PayPro IPNs.

    PayPro posts IPNs form-encoded. Nothing about the payload is
    trusted until the signature checks out; a mismatch answers 403
    and no handler runs.

    Security:
    - Signature verification prevents spoofed IPNs
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Returns:
        HttpResponse with status:
        - 200: IPN accepted (handled, or skipped by its handler)
        - 400: Signed IPN with undecodable fields
        - 403: Signature mismatch
        - 5xx: Misconfiguration or updater failure; PayPro redelivers
    """
    fields = request.POST.dict()
    ipn_type = fields.get("IPN_TYPE_NAME", "")

    try:
        PayProWebhookValidator(PayProConfig.from_settings()).validate(fields)
        notification = PayProNotification.from_fields(fields)
    except BaseApplicationError as e:
        logger.warning(
            "PayPro IPN rejected",
            extra={"ipn_type": ipn_type, "error_code": e.error_code},
        )
        return error_response(e)

    logger.info(
        f"Received PayPro IPN: {ipn_type}",
        extra={
            "ipn_type": ipn_type,
            "order_id": notification.order_id,
            "subscription_id": notification.subscription_id,
            "test_mode": notification.test_mode,
        },
    )

    try:
        result = dispatch_notification(notification)
    except BaseApplicationError as e:
        logger.error(
            f"PayPro IPN handler failed: {e.error_code}",
            extra={"ipn_type": ipn_type, "order_id": notification.order_id},
            exc_info=True,
        )
        return error_response(e)

    if not result:
        logger.warning(
            f"PayPro IPN not applied: {result.error}",
            extra={"ipn_type": ipn_type, "error_code": result.error_code},
        )

    return HttpResponse("OK", status=200)
