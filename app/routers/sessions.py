import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import rate_limit
from app.models.user import User
from app.schemas.session import DeviceInfoRead, SessionCreate, SessionRead, SessionRevoke
from app.services.session_service import SessionService
from app.utils.device import parse_user_agent
from app.utils.errors import UpstreamError
from app.utils.helpers import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings/sessions", tags=["sessions"])


def _session_read(session, current_session_id: Optional[str]) -> dict:
    data = SessionRead.model_validate(session)
    data.is_current = bool(current_session_id) and session.session_id == current_session_id
    data.device_info = DeviceInfoRead(**parse_user_agent(session.user_agent).to_dict())
    return data.model_dump()


@router.get("")
async def list_sessions(
    x_session_id: Optional[str] = Header(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active sessions, most recently used first."""
    try:
        sessions = SessionService.list_active_sessions(db, current_user.id)
        return {"success": True, "data": [_session_read(s, x_session_id) for s in sessions]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch sessions for user {current_user.id}: {e}")
        raise UpstreamError("Failed to fetch sessions")


@router.post("")
async def record_session(
    payload: SessionCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """
    Record the caller's browser session.
    Missing user agent / address are taken from the request itself.
    """
    user_agent = payload.user_agent or request.headers.get("user-agent")
    ip_address = payload.ip_address or get_client_ip(request)
    try:
        session, created = SessionService.record_session(
            db, current_user, payload.session_id, user_agent, ip_address
        )
        data = _session_read(session, payload.session_id) if session else None
        return {"success": True, "data": {"session": data, "created": created}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to record session for user {current_user.id}: {e}")
        raise UpstreamError("Failed to create session")


@router.delete("")
async def revoke_session(
    payload: SessionRevoke,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        SessionService.revoke_session(db, current_user.id, payload.session_id)
        return {"success": True, "data": {"message": "Session revoked successfully"}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to revoke session for user {current_user.id}: {e}")
        raise UpstreamError("Failed to revoke session")


@router.post("/cleanup")
async def cleanup_sessions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate the caller's sessions idle for more than 30 days."""
    try:
        count = SessionService.cleanup_stale_sessions(db, current_user.id)
        return {"success": True, "data": {"sessions_deactivated": count}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Session cleanup failed for user {current_user.id}: {e}")
        raise UpstreamError("Failed to clean up sessions")
