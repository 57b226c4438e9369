import logging
from datetime import timedelta
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from app.core.constants import ACCOUNT_DELETION_GRACE_DAYS
from app.core.security import generate_recovery_token, hash_token
from app.models.account_deletion import AccountDeletion
from app.models.user import User
from app.services import storage_service
from app.services.billing_service import BillingGateway, field
from app.utils.errors import ConflictError, NotFoundError, UpstreamError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class AccountService:
    @staticmethod
    def get_pending_deletion(db: Session, user_id: str) -> Optional[AccountDeletion]:
        return (
            db.query(AccountDeletion)
            .filter(AccountDeletion.user_id == user_id, AccountDeletion.is_cancelled.is_(False))
            .order_by(AccountDeletion.created_at.desc())
            .first()
        )

    @staticmethod
    def initiate_deletion(db: Session, user: User, reason: Optional[str] = None) -> Dict[str, Any]:
        """
        Schedule the account for deletion after the grace period.
        The plain recovery token is returned once; only its hash is stored.
        """
        if AccountService.get_pending_deletion(db, user.id):
            raise ConflictError("Account deletion already requested")

        token = generate_recovery_token()
        deletion = AccountDeletion(
            user_id=user.id,
            reason=reason,
            recovery_token_hash=hash_token(token),
            scheduled_for=utcnow() + timedelta(days=ACCOUNT_DELETION_GRACE_DAYS),
        )
        db.add(deletion)
        db.commit()
        db.refresh(deletion)
        logger.info(f"Account deletion scheduled for user {user.id} on {deletion.scheduled_for}")

        return {
            "message": f"Account deletion scheduled. You have {ACCOUNT_DELETION_GRACE_DAYS} days to cancel this request.",
            "recovery_token": token,
            "scheduled_for": deletion.scheduled_for,
        }

    @staticmethod
    def cancel_deletion(db: Session, user: User) -> Dict[str, Any]:
        deletion = AccountService.get_pending_deletion(db, user.id)
        if not deletion:
            raise NotFoundError("No active deletion request found")
        deletion.is_cancelled = True
        deletion.cancelled_at = utcnow()
        db.commit()
        logger.info(f"Account deletion cancelled for user {user.id}")
        return {"message": "Account deletion cancelled successfully"}

    @staticmethod
    def delete_account_immediate(db: Session, user: User) -> Dict[str, Any]:
        """Delete the user and everything they own. Billing cleanup is best effort."""
        user_id = user.id
        if user.stripe_customer_id and BillingGateway.is_configured():
            try:
                for subscription in BillingGateway.list_active_subscriptions(user.stripe_customer_id, limit=10):
                    BillingGateway.cancel_at_period_end(field(subscription, "id"))
            except Exception as e:
                logger.warning(f"Could not cancel Stripe subscriptions for user {user_id}: {e}")

        avatar_url = user.avatar_url
        try:
            db.delete(user)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete account {user_id}: {e}")
            raise UpstreamError("Failed to delete account")

        if avatar_url:
            try:
                storage_service.delete_avatar(avatar_url, user_id)
            except Exception as e:
                logger.warning(f"Could not delete avatar for deleted user {user_id}: {e}")

        logger.info(f"Account {user_id} deleted")
        return {"message": "Account deleted successfully"}
