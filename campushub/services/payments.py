"""Subscription plans and the Stripe calls behind them.

Stripe is reached over its REST API with ``requests`` (form-encoded bodies,
secret key as basic-auth user). Webhook payloads are authenticated by
recomputing the ``Stripe-Signature`` HMAC.
"""

import hashlib
import hmac
import json
import time
from typing import Optional

import requests

from campushub.core.config import STRIPE_CURRENCY, STRIPE_SECRET_KEY
from campushub.core.logging import log_evt

STRIPE_API = "https://api.stripe.com/v1"

# Prices are in whole rupees
PLANS = {
    "free": {
        "name": "Free Starter",
        "price": 0,
        "features": [
            "Register & Join Events",
            "Basic Profile Management",
            "Attendee Access",
            "Limited Committee Tools",
            "No Event Reports",
        ],
    },
    "standard": {
        "name": "Standard Access",
        "price": 499,
        "features": [
            "Committee Registration",
            "Manage Members & Roles",
            "Event Reports",
            "Email Notifications",
            "Basic Analytics",
        ],
    },
    "premium": {
        "name": "Premium Pro",
        "price": 999,
        "features": [
            "Unlock All Features",
            "Unlimited Committees",
            "Analytics Dashboard",
            "Custom Branding",
            "24/7 Priority Support",
        ],
    },
    "custom": {
        "name": "Custom Flex",
        "price": 1499,
        "features": [
            "Build Your Own Plan",
            "Choose Needed Features",
            "Flexible Pricing",
            "Dedicated Account Manager",
            "Tailored for Institutions",
        ],
    },
}

WEBHOOK_TOLERANCE_SECONDS = 300


class PaymentError(RuntimeError):
    pass


class WebhookSignatureError(ValueError):
    pass


def _stripe_post(path: str, data: dict) -> dict:
    if not STRIPE_SECRET_KEY:
        raise PaymentError("STRIPE_SECRET_KEY is not set")
    try:
        r = requests.post(f"{STRIPE_API}{path}", data=data, auth=(STRIPE_SECRET_KEY, ""), timeout=20)
    except requests.RequestException as ex:
        raise PaymentError(str(ex)) from ex
    if not r.ok:
        try:
            message = r.json().get("error", {}).get("message")
        except ValueError:
            message = None
        raise PaymentError(message or f"Stripe returned {r.status_code}")
    return r.json()


def create_checkout_session(plan_id: str, user_id: Optional[str], base_url: str) -> dict:
    """Create a monthly subscription checkout for a paid plan; returns the Stripe session."""
    plan = PLANS[plan_id]
    data = {
        "payment_method_types[0]": "card",
        "line_items[0][price_data][currency]": STRIPE_CURRENCY,
        "line_items[0][price_data][product_data][name]": plan["name"],
        "line_items[0][price_data][product_data][description]": f"Monthly subscription for {plan['name']}",
        # smallest currency unit (paise)
        "line_items[0][price_data][unit_amount]": plan["price"] * 100,
        "line_items[0][price_data][recurring][interval]": "month",
        "line_items[0][quantity]": 1,
        "mode": "subscription",
        "success_url": f"{base_url}/success.html?plan={plan_id}&session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{base_url}/plans.html?cancelled=true",
        "metadata[plan]": plan_id,
        "metadata[user_id]": user_id or "anonymous",
    }
    session = _stripe_post("/checkout/sessions", data)
    log_evt("info", "checkout_created", plan=plan_id, session_id=session.get("id"))
    return session


def cancel_subscription(subscription_id: str) -> dict:
    """Cancel at the end of the current billing period."""
    subscription = _stripe_post(f"/subscriptions/{subscription_id}", {"cancel_at_period_end": "true"})
    log_evt("info", "subscription_cancel_scheduled", subscription_id=subscription_id)
    return subscription


def verify_webhook(payload: bytes, sig_header: Optional[str], secret: str, now: Optional[float] = None) -> dict:
    """Check the ``Stripe-Signature`` header against ``payload`` and return the parsed event."""
    if not secret:
        raise WebhookSignatureError("webhook secret is not configured")
    if not sig_header:
        raise WebhookSignatureError("missing Stripe-Signature header")

    timestamp = None
    signatures = []
    for item in sig_header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)

    if not timestamp or not timestamp.isdigit() or not signatures:
        raise WebhookSignatureError("unable to extract timestamp and signatures from header")

    signed_payload = f"{timestamp}.".encode() + payload
    expected = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    if not any(hmac.compare_digest(expected, s) for s in signatures):
        raise WebhookSignatureError("no signatures found matching the expected signature for payload")

    now = time.time() if now is None else now
    if abs(now - int(timestamp)) > WEBHOOK_TOLERANCE_SECONDS:
        raise WebhookSignatureError("timestamp outside the tolerance zone")

    try:
        return json.loads(payload)
    except ValueError as ex:
        raise WebhookSignatureError("invalid payload") from ex


def handle_webhook_event(event: dict) -> str:
    """Log the event by type; returns the action name that was logged."""
    event_type = event.get("type")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type == "checkout.session.completed":
        action = "payment_succeeded"
    elif event_type == "invoice.payment_succeeded":
        action = "subscription_payment_succeeded"
    elif event_type == "invoice.payment_failed":
        action = "subscription_payment_failed"
    else:
        log_evt("info", "webhook_unhandled", event_type=event_type)
        return "webhook_unhandled"

    log_evt("warning" if action.endswith("failed") else "info", action, object_id=obj.get("id"))
    return action
