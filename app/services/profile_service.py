import logging
from typing import Any, Dict, Optional
from fastapi import UploadFile
from sqlalchemy.orm import Session
from app.core.constants import AVATAR_MAX_BYTES
from app.models.account_deletion import AccountDeletion
from app.models.jwt_snippets import JwtSnippet
from app.models.notification import NotificationPreferences
from app.models.preferences import UserPreferences
from app.models.session import UserSession
from app.models.timezones import UserTimezone, WorldClockCity
from app.models.user import User
from app.schemas.settings import PreferencesUpdate, ProfileUpdate
from app.services import storage_service
from app.utils.errors import ValidationFailed, UpstreamError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES = {
    "timezone": "UTC",
    "theme": "system",
    "language": "en",
    "email_notifications": {},
    "developer_preferences": {},
    "bio": None,
}


def _row_to_dict(row) -> Dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def _profile_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "avatar_url": user.avatar_url,
        "plan": user.plan,
        "signup_method": user.signup_method,
        "is_admin": user.is_admin,
        "last_login": user.last_login,
        "created_at": user.created_at,
    }


class ProfileService:
    @staticmethod
    def get_preferences(db: Session, user_id: str) -> Dict[str, Any]:
        prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
        if not prefs:
            return dict(DEFAULT_PREFERENCES)
        return {key: getattr(prefs, key) for key in DEFAULT_PREFERENCES}

    @staticmethod
    def get_settings(db: Session, user: User) -> Dict[str, Any]:
        return {
            "profile": _profile_dict(user),
            "preferences": ProfileService.get_preferences(db, user.id),
        }

    @staticmethod
    def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_preferences(db: Session, user_id: str, data: PreferencesUpdate) -> Dict[str, Any]:
        """Upsert the preferences row; fields left out of the payload keep their value."""
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "bio"}
        prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
        if not prefs:
            prefs = UserPreferences(user_id=user_id, **{k: v for k, v in DEFAULT_PREFERENCES.items() if k != "bio"})
            db.add(prefs)
        for field, value in changes.items():
            setattr(prefs, field, value)
        prefs.updated_at = utcnow()
        db.commit()
        return ProfileService.get_preferences(db, user_id)

    @staticmethod
    async def upload_avatar(db: Session, user: User, file: UploadFile) -> str:
        """
        Store a new avatar and point the profile at it.
        The previous avatar is removed afterwards; a failed removal is only logged.
        """
        if not file.content_type or not file.content_type.startswith("image/"):
            raise ValidationFailed("File must be an image")

        contents = await file.read()
        if len(contents) > AVATAR_MAX_BYTES:
            raise ValidationFailed("File size must be less than 5MB")

        try:
            url = await storage_service.upload_avatar(file, user.id, contents)
        except Exception as e:
            logger.error(f"Avatar upload failed for user {user.id}: {e}")
            raise UpstreamError("Failed to upload file")

        old_url = user.avatar_url
        user.avatar_url = url
        db.commit()

        if old_url and old_url != url:
            try:
                storage_service.delete_avatar(old_url, user.id)
            except Exception as e:
                logger.warning(f"Could not delete old avatar for user {user.id}: {e}")

        return url

    @staticmethod
    def export_data(db: Session, user: User) -> Dict[str, Any]:
        def rows(model):
            query = db.query(model).filter(model.user_id == user.id)
            return [_row_to_dict(r) for r in query.all()]

        notification_prefs: Optional[NotificationPreferences] = (
            db.query(NotificationPreferences).filter(NotificationPreferences.user_id == user.id).first()
        )
        preferences = db.query(UserPreferences).filter(UserPreferences.user_id == user.id).first()
        active_sessions = (
            db.query(UserSession)
            .filter(UserSession.user_id == user.id, UserSession.is_active.is_(True))
            .all()
        )

        return {
            "export_info": {
                "exported_at": utcnow(),
                "user_id": user.id,
                "export_version": "1.0",
            },
            "user_profile": _row_to_dict(user),
            "user_preferences": _row_to_dict(preferences) if preferences else None,
            "notification_preferences": _row_to_dict(notification_prefs) if notification_prefs else None,
            "active_sessions": [_row_to_dict(s) for s in active_sessions],
            "account_deletions": [
                {k: v for k, v in row.items() if k != "recovery_token_hash"} for row in rows(AccountDeletion)
            ],
            "timezones": rows(UserTimezone),
            "world_clock_cities": rows(WorldClockCity),
            "jwt_snippets": rows(JwtSnippet),
        }
