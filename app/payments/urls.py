"""
URL configuration for the payments app.

Routes:
    - POST /webhooks/paypro/ - PayPro IPN endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.webhooks.views import paypro_webhook

app_name = "payments"

urlpatterns = [
    # Webhook endpoints
    path("webhooks/paypro/", paypro_webhook, name="paypro_webhook"),
]
