import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import rate_limit
from app.models.user import User
from app.schemas.subscription import SubscriptionAction
from app.services.subscription_service import SubscriptionService
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings/subscription", tags=["subscription"])


@router.get("")
async def get_subscription(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current plan, Stripe subscription and billing history."""
    try:
        return {"success": True, "data": SubscriptionService.get_overview(db, current_user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to load subscription for user {current_user.id}: {e}")
        raise UpstreamError("Failed to fetch subscription data")


@router.post("")
async def subscription_action(
    payload: SubscriptionAction,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """
    - create_checkout_session: Stripe Checkout URL for the premium plan
    - create_portal_session: Stripe billing portal URL
    - cancel_subscription: cancel at the end of the current period; the plan stays premium until then
    """
    try:
        if payload.action == "create_checkout_session":
            data = SubscriptionService.create_checkout_session(db, current_user)
        elif payload.action == "create_portal_session":
            data = SubscriptionService.create_portal_session(db, current_user)
        else:
            data = SubscriptionService.cancel_subscription(db, current_user)
        return {"success": True, "data": data}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Subscription action {payload.action} failed for user {current_user.id}: {e}")
        raise UpstreamError("Internal server error")


@router.post("/reconcile")
async def reconcile_subscription(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """Re-check Stripe and fix the stored plan."""
    try:
        return {"success": True, "data": SubscriptionService.reconcile(db, current_user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Reconcile failed for user {current_user.id}: {e}")
        raise UpstreamError("Failed to reconcile subscription")
