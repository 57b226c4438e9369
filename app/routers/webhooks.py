import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.services.billing_service import BillingGateway, field
from app.services.subscription_service import SubscriptionService
from app.utils.errors import UpstreamError, ValidationFailed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    if not stripe_signature:
        raise ValidationFailed("Missing stripe-signature header")

    payload = await request.body()
    try:
        event = BillingGateway.construct_event(payload, stripe_signature)
    except ValueError as e:
        logger.warning(f"Rejected Stripe webhook: {e}")
        raise ValidationFailed("Invalid signature")

    try:
        handled = SubscriptionService.handle_webhook_event(db, event)
        return {"received": True, "handled": handled}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error handling Stripe event {field(event, 'type')}: {e}")
        raise UpstreamError("Webhook handler failed")
