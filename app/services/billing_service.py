"""Thin wrapper around the Stripe SDK.

Every call goes through `_stripe_call` so SDK failures surface as
`BillingProviderError` with the upstream message logged server-side only.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import stripe

from app.core.config import settings
from app.core.constants import PlanTier
from app.utils.errors import BillingNotConfiguredError, BillingProviderError

logger = logging.getLogger(__name__)

DEFAULT_PREMIUM_PRICE_CENTS = 999


def field(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a Stripe object or a plain dict."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    try:
        return obj[key]
    except (KeyError, TypeError):
        return getattr(obj, key, default)


def get_premium_price() -> int:
    """Premium price in cents, from STRIPE_PREMIUM_PRICE given in dollars."""
    raw = settings.STRIPE_PREMIUM_PRICE
    if raw:
        try:
            price = float(raw)
        except ValueError:
            price = 0
        if price > 0:
            return round(price * 100)
    return DEFAULT_PREMIUM_PRICE_CENTS


def format_price(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def get_plans() -> Dict[str, Dict[str, Any]]:
    return {
        PlanTier.FREE.value: {
            "name": "Free",
            "price": 0,
            "features": ["Access to all developer tools", "Basic tool functionality"],
            "limitations": ["Limited saved items", "No advanced features", "No priority support"],
        },
        PlanTier.PREMIUM.value: {
            "name": "Premium",
            "price": get_premium_price(),
            "price_id": settings.STRIPE_PREMIUM_PRICE_ID,
            "features": [
                "Unlimited saved items across all tools",
                "Advanced features and algorithms",
                "Early access to new tools",
                "Advanced analytics and insights",
                "Batch processing capabilities",
                "Export/import functionality",
            ],
            "limitations": [],
        },
    }


SUBSCRIPTION_PLANS = get_plans()


@contextmanager
def _stripe_call(action: str):
    if not settings.STRIPE_SECRET_KEY:
        raise BillingNotConfiguredError()
    stripe.api_key = settings.STRIPE_SECRET_KEY
    try:
        yield
    except stripe.StripeError as e:
        logger.error(f"Stripe error during {action}: {e}")
        raise BillingProviderError(f"Failed to {action}")


class BillingGateway:
    @staticmethod
    def is_configured() -> bool:
        return bool(settings.STRIPE_SECRET_KEY)

    @staticmethod
    def retrieve_customer(customer_id: str) -> Optional[Any]:
        """Return the customer, or None when Stripe reports it deleted."""
        with _stripe_call("retrieve customer"):
            customer = stripe.Customer.retrieve(customer_id)
        if field(customer, "deleted"):
            return None
        return customer

    @staticmethod
    def find_customer_by_email(email: str) -> Optional[Any]:
        with _stripe_call("look up customer"):
            customers = stripe.Customer.list(email=email, limit=1)
        data = field(customers, "data") or []
        return data[0] if data else None

    @staticmethod
    def create_customer(email: str, metadata: Dict[str, str]) -> Any:
        with _stripe_call("create customer"):
            return stripe.Customer.create(email=email, metadata=metadata)

    @staticmethod
    def list_active_subscriptions(customer_id: str, limit: int = 1) -> List[Any]:
        with _stripe_call("list subscriptions"):
            subscriptions = stripe.Subscription.list(customer=customer_id, status="active", limit=limit)
        return list(field(subscriptions, "data") or [])

    @staticmethod
    def retrieve_subscription(subscription_id: str) -> Any:
        with _stripe_call("retrieve subscription"):
            return stripe.Subscription.retrieve(subscription_id)

    @staticmethod
    def cancel_at_period_end(subscription_id: str) -> Any:
        with _stripe_call("cancel subscription"):
            return stripe.Subscription.modify(subscription_id, cancel_at_period_end=True)

    @staticmethod
    def create_checkout_session(customer_id: str, user_id: str, price_id: str) -> Any:
        metadata = {"user_id": user_id, "plan": PlanTier.PREMIUM.value}
        with _stripe_call("create checkout session"):
            return stripe.checkout.Session.create(
                customer=customer_id,
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                mode="subscription",
                success_url=f"{settings.APP_URL}/settings?success=true&session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{settings.APP_URL}/settings?canceled=true",
                metadata=metadata,
                subscription_data={"metadata": metadata},
            )

    @staticmethod
    def create_portal_session(customer_id: str) -> Any:
        with _stripe_call("create billing portal session"):
            return stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=f"{settings.APP_URL}/settings",
            )

    @staticmethod
    def list_invoices(customer_id: str, limit: int = 10) -> List[Any]:
        with _stripe_call("list invoices"):
            invoices = stripe.Invoice.list(customer=customer_id, limit=limit)
        return list(field(invoices, "data") or [])

    @staticmethod
    def construct_event(payload: bytes, signature: str) -> Any:
        """Verify a webhook payload. Raises ValueError on a bad payload or signature."""
        if not settings.STRIPE_SECRET_KEY:
            raise BillingNotConfiguredError()
        if not settings.STRIPE_WEBHOOK_SECRET:
            raise BillingNotConfiguredError("Webhook secret not configured")
        try:
            return stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
        except stripe.SignatureVerificationError as e:
            raise ValueError("Invalid signature") from e
