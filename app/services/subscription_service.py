"""Keeps the locally stored plan tier in step with Stripe.

The plan and the Stripe customer reference are always written in the same
commit. Cancelling only schedules the end of the billing period; the plan
flips to free when Stripe reports the subscription is over (webhook or a
later reconcile).
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import PlanTier, ReconcileState, ENDED_SUBSCRIPTION_STATUSES
from app.models.user import User
from app.services.billing_service import BillingGateway, field, get_plans
from app.services.user_service import UserService
from app.utils.errors import (
    BillingNotConfiguredError,
    BillingProviderError,
    NotFoundError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def _subscription_summary(subscription: Any) -> Optional[Dict[str, Any]]:
    if subscription is None:
        return None
    period_end = field(subscription, "current_period_end")
    period_start = field(subscription, "current_period_start")
    if period_end is None:
        # Newer API versions report the billing period per subscription item
        items = field(field(subscription, "items"), "data") or []
        if items:
            period_end = field(items[0], "current_period_end")
            period_start = field(items[0], "current_period_start")
    return {
        "id": field(subscription, "id"),
        "status": field(subscription, "status"),
        "cancel_at_period_end": bool(field(subscription, "cancel_at_period_end", False)),
        "current_period_start": period_start,
        "current_period_end": period_end,
    }


def _invoice_summary(invoice: Any) -> Dict[str, Any]:
    return {
        "id": field(invoice, "id"),
        "amount_paid": field(invoice, "amount_paid"),
        "currency": field(invoice, "currency"),
        "status": field(invoice, "status"),
        "created": field(invoice, "created"),
        "invoice_pdf": field(invoice, "invoice_pdf"),
        "hosted_invoice_url": field(invoice, "hosted_invoice_url"),
    }


class SubscriptionService:
    @staticmethod
    def _write_plan(db: Session, user: User, plan: PlanTier, customer_id: Optional[str] = None) -> User:
        """Persist plan (and reference when given) in a single commit."""
        try:
            user.plan = plan.value
            if customer_id:
                user.stripe_customer_id = customer_id
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update plan for user {user.id}: {e}")
            raise UpstreamError("Failed to update subscription")
        db.refresh(user)
        return user

    @staticmethod
    def reconcile(db: Session, user: User) -> Dict[str, Any]:
        """
        Re-derive the user's plan from Stripe.
        - No stored reference: look the customer up by email.
        - No customer at all: nothing is written.
        - Active subscription: premium + reference.
        - Otherwise: free + reference.
        """
        customer_id = user.stripe_customer_id
        if not customer_id:
            customer = BillingGateway.find_customer_by_email(user.email)
            customer_id = field(customer, "id")

        if not customer_id:
            logger.info(f"No Stripe customer for user {user.id}")
            return {
                "state": ReconcileState.NO_CUSTOMER_REFERENCE.value,
                "plan": user.plan,
                "customer_id": None,
                "subscription_id": None,
            }

        subscriptions = BillingGateway.list_active_subscriptions(customer_id, limit=1)
        if subscriptions:
            SubscriptionService._write_plan(db, user, PlanTier.PREMIUM, customer_id)
            state = ReconcileState.ACTIVE_SUBSCRIPTION
            subscription_id = field(subscriptions[0], "id")
        else:
            SubscriptionService._write_plan(db, user, PlanTier.FREE, customer_id)
            state = ReconcileState.NO_ACTIVE_SUBSCRIPTION
            subscription_id = None

        logger.info(f"Reconciled user {user.id}: {state.value}")
        return {
            "state": state.value,
            "plan": user.plan,
            "customer_id": customer_id,
            "subscription_id": subscription_id,
        }

    @staticmethod
    def cancel_subscription(db: Session, user: User) -> Dict[str, Any]:
        if not user.stripe_customer_id:
            raise NotFoundError("No subscription found")

        subscriptions = BillingGateway.list_active_subscriptions(user.stripe_customer_id, limit=1)
        if not subscriptions:
            raise NotFoundError("No active subscription found")

        subscription = BillingGateway.cancel_at_period_end(field(subscriptions[0], "id"))
        logger.info(f"Subscription {field(subscription, 'id')} for user {user.id} set to cancel at period end")
        return {
            "message": "Subscription will be canceled at the end of the current billing period",
            "subscription": _subscription_summary(subscription),
        }

    @staticmethod
    def _ensure_customer(db: Session, user: User) -> str:
        customer_id = user.stripe_customer_id
        if customer_id:
            try:
                if BillingGateway.retrieve_customer(customer_id) is None:
                    logger.warning(f"Stored Stripe customer {customer_id} was deleted, creating a new one")
                    customer_id = None
            except BillingProviderError:
                logger.warning(f"Stored Stripe customer {customer_id} is invalid, creating a new one")
                customer_id = None

        if not customer_id:
            customer = BillingGateway.create_customer(user.email, {"user_id": user.id})
            customer_id = field(customer, "id")
            try:
                user.stripe_customer_id = customer_id
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to store Stripe customer for user {user.id}: {e}")
                raise UpstreamError("Failed to create checkout session")
        return customer_id

    @staticmethod
    def create_checkout_session(db: Session, user: User) -> Dict[str, Any]:
        if not BillingGateway.is_configured():
            raise BillingNotConfiguredError()
        if not settings.STRIPE_PREMIUM_PRICE_ID:
            raise BillingNotConfiguredError("Premium price not configured")

        customer_id = SubscriptionService._ensure_customer(db, user)
        session = BillingGateway.create_checkout_session(customer_id, user.id, settings.STRIPE_PREMIUM_PRICE_ID)
        return {"session_id": field(session, "id"), "url": field(session, "url")}

    @staticmethod
    def create_portal_session(db: Session, user: User) -> Dict[str, Any]:
        if not user.stripe_customer_id:
            raise NotFoundError("No billing account found")
        session = BillingGateway.create_portal_session(user.stripe_customer_id)
        return {"url": field(session, "url")}

    @staticmethod
    def get_overview(db: Session, user: User) -> Dict[str, Any]:
        """Plan, subscription, customer and billing history. Stripe failures degrade to empty values."""
        subscription = None
        customer = None
        billing_history = []

        if user.stripe_customer_id and BillingGateway.is_configured():
            try:
                subscriptions = BillingGateway.list_active_subscriptions(user.stripe_customer_id, limit=1)
                subscription = _subscription_summary(subscriptions[0]) if subscriptions else None
            except (BillingProviderError, BillingNotConfiguredError):
                logger.warning(f"Could not load subscription for user {user.id}")
            try:
                stripe_customer = BillingGateway.retrieve_customer(user.stripe_customer_id)
                if stripe_customer is not None:
                    customer = {
                        "id": field(stripe_customer, "id"),
                        "email": field(stripe_customer, "email"),
                    }
            except (BillingProviderError, BillingNotConfiguredError):
                logger.warning(f"Could not load customer for user {user.id}")
            try:
                invoices = BillingGateway.list_invoices(user.stripe_customer_id, limit=10)
                billing_history = [_invoice_summary(invoice) for invoice in invoices]
            except (BillingProviderError, BillingNotConfiguredError):
                logger.warning(f"Could not load billing history for user {user.id}")

        return {
            "current_plan": user.plan,
            "subscription": subscription,
            "customer": customer,
            "billing_history": billing_history,
            "plans": get_plans(),
        }

    @staticmethod
    def get_provider_view(user: User) -> Dict[str, Any]:
        """What Stripe reports for this user, alongside the local state."""
        data = {
            "user_id": user.id,
            "email": user.email,
            "plan": user.plan,
            "customer_id": user.stripe_customer_id,
            "subscriptions": [],
        }
        if user.stripe_customer_id:
            subscriptions = BillingGateway.list_active_subscriptions(user.stripe_customer_id, limit=10)
            data["subscriptions"] = [_subscription_summary(s) for s in subscriptions]
        return data

    @staticmethod
    def handle_webhook_event(db: Session, event: Any) -> bool:
        """Apply a verified Stripe event. Returns False for events we only log."""
        event_type = field(event, "type")
        obj = field(field(event, "data"), "object")
        customer_id = field(obj, "customer")

        if event_type == "checkout.session.completed":
            metadata = field(obj, "metadata") or {}
            user = None
            user_id = field(metadata, "user_id")
            if user_id:
                user = db.query(User).filter(User.id == str(user_id)).first()
            if not user:
                user = UserService.get_by_customer_id(db, customer_id)
            if not user:
                logger.warning(f"Checkout completed for unknown user (customer {customer_id})")
                return False
            SubscriptionService._write_plan(db, user, PlanTier.PREMIUM, customer_id)
            logger.info(f"User {user.id} upgraded to premium after checkout")
            return True

        if event_type in ("customer.subscription.created", "invoice.payment_succeeded"):
            return SubscriptionService._apply_to_customer(db, customer_id, PlanTier.PREMIUM, event_type)

        if event_type == "customer.subscription.updated":
            status = field(obj, "status")
            if status == "active":
                return SubscriptionService._apply_to_customer(db, customer_id, PlanTier.PREMIUM, event_type)
            if status in ENDED_SUBSCRIPTION_STATUSES:
                return SubscriptionService._apply_to_customer(db, customer_id, PlanTier.FREE, event_type)
            logger.info(f"Subscription for customer {customer_id} updated with status {status}")
            return False

        if event_type == "customer.subscription.deleted":
            return SubscriptionService._apply_to_customer(db, customer_id, PlanTier.FREE, event_type)

        if event_type == "invoice.payment_failed":
            logger.warning(f"Payment failed for customer {customer_id}")
            return False

        logger.info(f"Unhandled Stripe event type: {event_type}")
        return False

    @staticmethod
    def _apply_to_customer(db: Session, customer_id: Optional[str], plan: PlanTier, event_type: str) -> bool:
        user = UserService.get_by_customer_id(db, customer_id)
        if not user:
            logger.warning(f"{event_type}: no user for customer {customer_id}")
            return False
        SubscriptionService._write_plan(db, user, plan)
        logger.info(f"{event_type}: user {user.id} set to {plan.value}")
        return True
