import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import rate_limit
from app.models.user import User
from app.schemas.auth import AuthCallbackRequest
from app.services.auth_service import AuthService
from app.services.session_service import SessionService
from app.utils.errors import Unauthorized

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/callback")
async def auth_callback(
    payload: AuthCallbackRequest,
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """
    Exchange the OAuth code returned by the auth provider for a session.
    First-time users get a welcome email and the admin inbox is notified.
    """
    try:
        session = await AuthService.exchange_code(payload.code, payload.code_verifier)
        user, created = AuthService.complete_sign_in(db, session["user"])
        return {
            "success": True,
            "data": {
                "access_token": session["access_token"],
                "refresh_token": session.get("refresh_token"),
                "expires_in": session.get("expires_in"),
                "token_type": session.get("token_type", "bearer"),
                "user_id": user.id,
                "is_new_user": created,
            },
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Auth callback failed: {e}")
        raise Unauthorized("auth_error")


@router.post("/signout")
async def signout(
    x_session_id: Optional[str] = Header(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The provider session is ended client side; here we only retire the session record."""
    deactivated = 0
    if x_session_id:
        deactivated = SessionService.deactivate_by_session_id(db, current_user.id, x_session_id)
    return {"success": True, "data": {"sessions_deactivated": deactivated}}
