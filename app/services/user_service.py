import logging
from typing import Any, Dict, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import User
from app.utils.errors import ConflictError, UserNotFoundError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "An account with this email already exists"

class UserService:
    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == str(user_id)).first()
        if not user:
            raise UserNotFoundError()
        return user

    @staticmethod
    def get_by_customer_id(db: Session, customer_id: str) -> User | None:
        if not customer_id:
            return None
        return db.query(User).filter(User.stripe_customer_id == customer_id).first()

    @staticmethod
    def _email_taken(db: Session, email: str, user_id: str) -> bool:
        return db.query(User.id).filter(User.email == email, User.id != user_id).first() is not None

    @staticmethod
    def upsert_from_claims(db: Session, claims: Dict[str, Any]) -> Tuple[User, bool]:
        """Create or refresh the local profile from auth-provider claims.

        Returns ``(user, created)``. Name and avatar are only filled in when
        the local profile has none, so edits made in settings survive logins.
        An email already held by another local profile is never reassigned.
        """
        user_id = str(claims["sub"])
        metadata = claims.get("user_metadata") or {}
        app_metadata = claims.get("app_metadata") or {}
        email = claims.get("email") or metadata.get("email")

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            email = email or f"{user_id}@users.noreply"
            if UserService._email_taken(db, email, user_id):
                logger.warning(f"Refusing profile for {user_id}: email belongs to another account")
                raise ConflictError(EMAIL_IN_USE)

            user = User(
                id=user_id,
                email=email,
                name=metadata.get("full_name") or metadata.get("name"),
                avatar_url=metadata.get("avatar_url"),
                signup_method=app_metadata.get("provider"),
            )
            db.add(user)
            try:
                db.commit()
            except IntegrityError:
                # A concurrent first request may have inserted the same profile
                db.rollback()
                existing = db.query(User).filter(User.id == user_id).first()
                if existing:
                    return existing, False
                raise ConflictError(EMAIL_IN_USE)
            db.refresh(user)
            logger.info("Created local profile for user %s", user_id)
            return user, True

        if email and user.email != email:
            if UserService._email_taken(db, email, user_id):
                logger.warning(f"Keeping stored email for {user_id}: new email belongs to another account")
            else:
                user.email = email
        if not user.name:
            user.name = metadata.get("full_name") or metadata.get("name")
        if not user.avatar_url:
            user.avatar_url = metadata.get("avatar_url")

        db.commit()
        db.refresh(user)
        return user, False

    @staticmethod
    def sync_from_claims(db: Session, claims: Dict[str, Any]) -> User:
        user = db.query(User).filter(User.id == str(claims["sub"])).first()
        if user:
            return user
        user, _ = UserService.upsert_from_claims(db, claims)
        return user

    @staticmethod
    def mark_login(db: Session, user: User) -> User:
        user.last_login = utcnow()
        db.commit()
        return user
