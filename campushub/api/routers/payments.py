from datetime import datetime, timedelta

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from campushub.api.schemas import CancelSubscriptionRequest, CheckoutRequest
from campushub.core.config import STRIPE_WEBHOOK_SECRET
from campushub.core.logging import logger
from campushub.services.payments import (
    PLANS,
    PaymentError,
    WebhookSignatureError,
    cancel_subscription,
    create_checkout_session,
    handle_webhook_event,
    verify_webhook,
)

router = APIRouter(prefix="/api/payment", tags=["payment"])


@router.get("/plans")
def list_plans():
    return {"success": True, "plans": PLANS}


@router.get("/plans/{plan_id}")
def get_plan(plan_id: str):
    plan = PLANS.get(plan_id)
    if not plan:
        return JSONResponse({"success": False, "message": "Plan not found"}, status_code=404)
    return {"success": True, "plan": {"id": plan_id, **plan}}


@router.post("/create-checkout-session")
def checkout(payload: CheckoutRequest, request: Request):
    plan_id = payload.plan
    if not plan_id or plan_id not in PLANS:
        return JSONResponse({"success": False, "message": "Invalid plan selected"}, status_code=400)

    if PLANS[plan_id]["price"] == 0:
        return {"success": True, "redirectUrl": f"/success.html?plan={plan_id}"}

    base_url = str(request.base_url).rstrip("/")
    try:
        session = create_checkout_session(plan_id, payload.userId, base_url)
    except PaymentError as ex:
        logger.error("Stripe error: %s", ex)
        return JSONResponse(
            {"success": False, "message": "Payment processing failed", "error": str(ex)},
            status_code=500,
        )
    return {"success": True, "sessionId": session.get("id"), "url": session.get("url")}


@router.post("/webhook")
async def webhook(request: Request):
    payload = await request.body()
    try:
        event = verify_webhook(payload, request.headers.get("stripe-signature"), STRIPE_WEBHOOK_SECRET)
    except WebhookSignatureError as ex:
        logger.warning("Webhook signature verification failed: %s", ex)
        return PlainTextResponse(f"Webhook Error: {ex}", status_code=400)

    handle_webhook_event(event)
    return {"received": True}


@router.get("/subscription/{user_id}")
def subscription_status(user_id: str):
    return {
        "success": True,
        "subscription": {
            "status": "active",
            "plan": "premium",
            "current_period_end": (datetime.utcnow() + timedelta(days=30)).isoformat(),
        },
    }


@router.post("/cancel-subscription")
def cancel(payload: CancelSubscriptionRequest):
    if not payload.subscriptionId:
        return JSONResponse({"success": False, "message": "Subscription ID required"}, status_code=400)
    try:
        subscription = cancel_subscription(payload.subscriptionId)
    except PaymentError as ex:
        logger.error("Cancel subscription error: %s", ex)
        return JSONResponse(
            {"success": False, "message": "Failed to cancel subscription"},
            status_code=500,
        )
    return {
        "success": True,
        "message": "Subscription will be cancelled at the end of the current period",
        "subscription": subscription,
    }
