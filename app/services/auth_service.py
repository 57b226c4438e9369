import logging
from typing import Any, Dict, Optional

import httpx
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.user import User
from app.services.user_service import UserService
from app.tasks.notification_tasks import send_new_user_notification, send_welcome_email
from app.utils.errors import Unauthorized

logger = logging.getLogger(__name__)


class AuthService:
    """Sign-in glue around the external auth provider. Credentials never touch this service."""

    @staticmethod
    async def exchange_code(code: str, code_verifier: Optional[str] = None) -> Dict[str, Any]:
        """Trade an OAuth authorization code for a provider session."""
        if not settings.AUTH_PROVIDER_URL:
            logger.error("AUTH_PROVIDER_URL not configured")
            raise Unauthorized("auth_error")

        payload = {"auth_code": code}
        if code_verifier:
            payload["code_verifier"] = code_verifier

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{settings.AUTH_PROVIDER_URL.rstrip('/')}/auth/v1/token",
                    params={"grant_type": "pkce"},
                    headers={
                        "apikey": settings.AUTH_PROVIDER_ANON_KEY or "",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Auth provider unreachable during code exchange: {e}")
            raise Unauthorized("auth_error")

        if response.status_code != 200:
            logger.warning(f"Code exchange rejected by auth provider: {response.status_code} {response.text}")
            raise Unauthorized("auth_error")

        session = response.json()
        if not session.get("access_token") or not (session.get("user") or {}).get("id"):
            logger.warning("Code exchange returned no session")
            raise Unauthorized("auth_error")
        return session

    @staticmethod
    def complete_sign_in(db: Session, provider_user: Dict[str, Any]) -> tuple[User, bool]:
        """
        Sync the local profile for a freshly signed-in provider user and
        queue the first-login emails. Email hand-off failures are logged only.
        """
        claims = {
            "sub": provider_user["id"],
            "email": provider_user.get("email"),
            "user_metadata": provider_user.get("user_metadata") or {},
            "app_metadata": provider_user.get("app_metadata") or {},
        }
        user, created = UserService.upsert_from_claims(db, claims)
        UserService.mark_login(db, user)

        if created:
            try:
                send_welcome_email.delay(user_id=user.id)
            except Exception as e:
                logger.error(f"Failed to queue welcome email for user {user.id}: {e}")
            try:
                send_new_user_notification.delay(user_id=user.id)
            except Exception as e:
                logger.error(f"Failed to queue new user notification for user {user.id}: {e}")

        return user, created
