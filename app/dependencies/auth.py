from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.services.user_service import UserService
from app.utils.errors import Unauthorized, Forbidden

security = HTTPBearer(auto_error=False)


def get_user_from_token(token: str, db: Session) -> User:
    """
    Verify an auth-provider access token and return the local profile,
    creating it on first sight.
    """
    payload = decode_access_token(token)
    if payload is None:
        raise Unauthorized("Invalid token")
    return UserService.sync_from_claims(db, payload)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Verify bearer token and return current user"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    return get_user_from_token(credentials.credentials, db)


async def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Verify current user is an admin"""
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user
