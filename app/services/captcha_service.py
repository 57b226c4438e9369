import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


async def verify_turnstile_token(token: str, client_ip: str) -> bool:
    """Ask Cloudflare Turnstile whether the form token is valid. Any failure counts as invalid."""
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                TURNSTILE_VERIFY_URL,
                json={"secret": settings.TURNSTILE_SECRET_KEY, "response": token, "remoteip": client_ip},
            )
        return response.json().get("success") is True
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Turnstile verification error: {e}")
        return False
