"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks.
"""

from django.conf import settings
from django.http import JsonResponse

# Settings without which no PayPro operation can succeed
REQUIRED_PAYPRO_SETTINGS = (
    "PAYPRO_ACCOUNT_ID",
    "PAYPRO_API_KEY",
    "PAYPRO_PARAM_KEY",
    "PAYPRO_PARAM_IV",
    "PAYPRO_IPN_VALIDATION_KEY",
)


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    This endpoint is used by:
    - Docker health checks
    - Kubernetes liveness/readiness probes
    - Load balancers

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "misconfigured"
        - paypro: "configured" or a list of missing settings

    HTTP Status Codes:
        200: All systems operational
        503: Payment provider configuration incomplete

    Example Response:
        {
            "status": "healthy",
            "paypro": "configured"
        }
    """
    missing = [
        name for name in REQUIRED_PAYPRO_SETTINGS if not getattr(settings, name, "")
    ]

    if missing:
        return JsonResponse(
            {"status": "misconfigured", "paypro": {"missing": missing}},
            status=503,
        )

    return JsonResponse({"status": "healthy", "paypro": "configured"}, status=200)
