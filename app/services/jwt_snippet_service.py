import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.security import read_unverified_token
from app.models.jwt_snippets import JwtSnippet
from app.schemas.jwt_snippet import JwtSnippetCreate, JwtSnippetUpdate
from app.utils.errors import NotFoundError, ValidationFailed
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _expiry_from_claims(claims: dict) -> Optional[datetime]:
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


class JwtSnippetService:
    """Tokens saved from the JWT decoder. Every lookup is scoped to the owner."""

    @staticmethod
    def list_snippets(
        db: Session,
        user_id: str,
        search: Optional[str] = None,
        is_favorite: Optional[bool] = None,
        algorithm: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> List[JwtSnippet]:
        query = db.query(JwtSnippet).filter(JwtSnippet.user_id == user_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(JwtSnippet.name.ilike(pattern), JwtSnippet.description.ilike(pattern)))
        if is_favorite is not None:
            query = query.filter(JwtSnippet.is_favorite == is_favorite)
        if algorithm:
            query = query.filter(JwtSnippet.algorithm == algorithm)

        snippets = query.order_by(JwtSnippet.created_at.desc()).all()

        # Tags are a JSON list, so overlap is checked here to stay portable across backends
        wanted = set(tags or [])
        if wanted:
            snippets = [s for s in snippets if wanted.intersection(s.tags or [])]
        return snippets

    @staticmethod
    def get_snippet(db: Session, user_id: str, snippet_id: str) -> JwtSnippet:
        snippet = (
            db.query(JwtSnippet)
            .filter(JwtSnippet.id == snippet_id, JwtSnippet.user_id == user_id)
            .first()
        )
        if not snippet:
            raise NotFoundError("Snippet not found")
        return snippet

    @staticmethod
    def create_snippet(db: Session, user_id: str, data: JwtSnippetCreate) -> JwtSnippet:
        token = data.jwt_token.strip()
        parsed = read_unverified_token(token)
        if parsed is None:
            raise ValidationFailed("Invalid JWT token")
        header, claims = parsed

        snippet = JwtSnippet(
            user_id=user_id,
            name=data.name,
            description=data.description,
            jwt_token=token,
            decoded_header=data.decoded_header if data.decoded_header is not None else header,
            decoded_payload=data.decoded_payload if data.decoded_payload is not None else claims,
            algorithm=data.algorithm or header.get("alg"),
            expires_at=_naive_utc(data.expires_at) or _expiry_from_claims(claims),
            tags=data.tags,
        )
        db.add(snippet)
        db.commit()
        db.refresh(snippet)
        logger.info(f"Saved JWT snippet {snippet.id} for user {user_id}")
        return snippet

    @staticmethod
    def update_snippet(db: Session, user_id: str, snippet_id: str, data: JwtSnippetUpdate) -> JwtSnippet:
        snippet = JwtSnippetService.get_snippet(db, user_id, snippet_id)
        changes = data.model_dump(exclude_unset=True)
        # name and is_favorite are required columns
        for field in ("name", "is_favorite"):
            if changes.get(field, False) is None:
                changes.pop(field)
        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []
        for field, value in changes.items():
            setattr(snippet, field, value)
        snippet.updated_at = utcnow()
        db.commit()
        db.refresh(snippet)
        return snippet

    @staticmethod
    def toggle_favorite(db: Session, user_id: str, snippet_id: str) -> JwtSnippet:
        snippet = JwtSnippetService.get_snippet(db, user_id, snippet_id)
        snippet.is_favorite = not snippet.is_favorite
        snippet.updated_at = utcnow()
        db.commit()
        db.refresh(snippet)
        return snippet

    @staticmethod
    def delete_snippet(db: Session, user_id: str, snippet_id: str) -> None:
        snippet = JwtSnippetService.get_snippet(db, user_id, snippet_id)
        db.delete(snippet)
        db.commit()
