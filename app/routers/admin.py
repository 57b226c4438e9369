"""Admin endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_admin
from app.dependencies.rate_limit import rate_limit
from app.models.user import User
from app.services.subscription_service import SubscriptionService
from app.services.user_service import UserService
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users/{user_id}/subscription")
async def user_subscription(
    user_id: str,
    current_admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """Local plan and customer reference next to what Stripe reports."""
    try:
        user = UserService.get_user(db, user_id)
        return {"success": True, "data": SubscriptionService.get_provider_view(user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Admin {current_admin.id} failed to inspect subscription of {user_id}: {e}")
        raise UpstreamError("Failed to fetch subscription")


@router.post("/users/{user_id}/reconcile")
async def reconcile_user(
    user_id: str,
    current_admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    try:
        user = UserService.get_user(db, user_id)
        result = SubscriptionService.reconcile(db, user)
        logger.info(f"Admin {current_admin.id} reconciled subscription of {user_id}: {result['state']}")
        return {"success": True, "data": result}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Admin {current_admin.id} failed to reconcile {user_id}: {e}")
        raise UpstreamError("Failed to reconcile subscription")
