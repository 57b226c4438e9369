import logging
from fastapi import APIRouter, Depends, Request
from app.core.config import settings
from app.dependencies.rate_limit import support_rate_limit
from app.schemas.support import SupportRequest
from app.services import email_service
from app.services.captcha_service import verify_turnstile_token
from app.utils.errors import UpstreamError, ValidationFailed
from app.utils.helpers import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/support", tags=["support"])


@router.post("")
async def submit_support_request(
    payload: SupportRequest,
    request: Request,
    _: bool = Depends(support_rate_limit),
):
    """
    Contact form. Limited per address, guarded by a honeypot field and,
    when configured, a Turnstile captcha.
    """
    client_ip = get_client_ip(request)

    if payload.honeypot:
        logger.info(f"Honeypot triggered for IP: {client_ip}")
        raise ValidationFailed("Invalid submission")

    if settings.TURNSTILE_SECRET_KEY:
        if not payload.turnstile_token:
            raise ValidationFailed("Security check required")
        if not await verify_turnstile_token(payload.turnstile_token, client_ip):
            logger.info(f"Turnstile verification failed for IP: {client_ip}")
            raise ValidationFailed("Security check failed. Please try again.")

    try:
        email_service.send_support_request_email(
            payload.name,
            payload.email,
            payload.subject,
            payload.message,
            payload.priority,
            client_ip,
        )
    except Exception as e:
        logger.error(f"Failed to send support request email: {e}")
        raise UpstreamError("Failed to send support request")

    return {"success": True, "data": {"message": "Support request submitted successfully"}}
