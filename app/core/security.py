from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
import secrets
import hashlib
from app.core.config import settings


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_recovery_token() -> str:
    return secrets.token_urlsafe(32)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify an access token issued by the auth provider.

    Returns the claims when the signature, expiry and audience check out,
    otherwise ``None``. Tokens without a subject are rejected.
    """
    if not token or not settings.AUTH_JWT_SECRET:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
        )
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def read_unverified_token(token: str) -> Optional[Tuple[Dict[str, Any], Dict[str, Any]]]:
    """Header and claims of a JWT without checking its signature, or ``None`` if malformed."""
    try:
        return jwt.get_unverified_header(token), jwt.get_unverified_claims(token)
    except JWTError:
        return None
