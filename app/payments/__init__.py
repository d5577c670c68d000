"""
Payments app for PayPro Global integration.

This app handles:
- Checkout links with encrypted, tamper-proof pricing
- PayPro IPN signature validation and decoding
- Subscription cancellation through the PayPro API

Subscription records themselves live outside this service; IPN handlers
hand decoded updates to the callable named by PAYPRO_SUBSCRIPTION_UPDATER.

Usage:
    from payments.adapters import PayProCheckoutBuilder, PayProSubscriptionCanceller

    url = await PayProCheckoutBuilder.from_settings().build_checkout_url(request)
    await PayProSubscriptionCanceller.from_settings().cancel_subscription(subscription_id)
"""
