import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.core.constants import MAX_ACTIVE_SESSIONS, DEVICE_HISTORY_LIMIT, SESSION_STALE_DAYS
from app.models.notification import NotificationPreferences
from app.models.session import UserSession
from app.models.user import User
from app.tasks.notification_tasks import send_login_alert, send_new_device_alert
from app.utils.crawlers import is_search_engine_crawler
from app.utils.device import is_new_device, parse_user_agent
from app.utils.errors import NotFoundError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def _login_context(session: UserSession) -> dict:
    device = parse_user_agent(session.user_agent)
    return {
        "timestamp": session.last_active.isoformat() if session.last_active else None,
        "ip_address": session.ip_address,
        "device_type": device.device_type,
        "browser": device.browser,
    }


class SessionService:
    @staticmethod
    def get_notification_preferences(db: Session, user_id: str) -> dict:
        """Both alert kinds default to enabled when the user never saved preferences."""
        prefs = db.query(NotificationPreferences).filter(NotificationPreferences.user_id == user_id).first()
        if not prefs:
            return {"login_alerts": True, "new_device_logins": True}
        return {"login_alerts": prefs.login_alerts, "new_device_logins": prefs.new_device_logins}

    @staticmethod
    def save_notification_preferences(db: Session, user_id: str, login_alerts: bool, new_device_logins: bool) -> dict:
        prefs = db.query(NotificationPreferences).filter(NotificationPreferences.user_id == user_id).first()
        if not prefs:
            prefs = NotificationPreferences(user_id=user_id)
            db.add(prefs)
        prefs.login_alerts = login_alerts
        prefs.new_device_logins = new_device_logins
        prefs.updated_at = utcnow()
        db.commit()
        return {"login_alerts": prefs.login_alerts, "new_device_logins": prefs.new_device_logins}

    @staticmethod
    def list_active_sessions(db: Session, user_id: str) -> List[UserSession]:
        return (
            db.query(UserSession)
            .filter(UserSession.user_id == user_id, UserSession.is_active.is_(True))
            .order_by(UserSession.last_active.desc())
            .all()
        )

    @staticmethod
    def record_session(
        db: Session,
        user: User,
        session_id: str,
        user_agent: Optional[str],
        ip_address: Optional[str],
        now: Optional[datetime] = None,
    ) -> Tuple[Optional[UserSession], bool]:
        """
        Record an observation of `session_id` for `user`.
        - Known session id: refresh last_active, user agent and address.
        - New session id: queue login / new-device alerts per the user's
          preferences, insert the row and keep only the newest
          MAX_ACTIVE_SESSIONS active.
        Returns (session, created). Crawler traffic is ignored: (None, False).
        """
        if is_search_engine_crawler(user_agent):
            logger.info(f"Ignoring crawler session for user {user.id}")
            return None, False

        now = now or utcnow()
        active_sessions = SessionService.list_active_sessions(db, user.id)

        existing = next((s for s in active_sessions if s.session_id == session_id), None)
        if existing:
            existing.last_active = now
            existing.user_agent = user_agent
            existing.ip_address = ip_address
            db.commit()
            db.refresh(existing)
            return existing, False

        prefs = SessionService.get_notification_preferences(db, user.id)
        history = active_sessions[:DEVICE_HISTORY_LIMIT]
        new_device = is_new_device(user_agent, [s.user_agent for s in history])

        device = parse_user_agent(user_agent)
        login = {
            "timestamp": now.isoformat(),
            "ip_address": ip_address,
            "device_type": device.device_type,
            "browser": device.browser,
        }

        if prefs["login_alerts"]:
            try:
                send_login_alert.delay(user_id=user.id, login=login)
            except Exception as e:
                logger.error(f"Failed to queue login alert for user {user.id}: {e}")

        if prefs["new_device_logins"] and new_device:
            previous_login = _login_context(history[0]) if history else None
            try:
                send_new_device_alert.delay(user_id=user.id, login=login, previous_login=previous_login)
            except Exception as e:
                logger.error(f"Failed to queue new device alert for user {user.id}: {e}")

        session = UserSession(
            user_id=user.id,
            session_id=session_id,
            user_agent=user_agent,
            ip_address=ip_address,
            created_at=now,
            last_active=now,
            is_active=True,
        )
        db.add(session)
        db.commit()
        db.refresh(session)

        SessionService._enforce_active_limit(db, user.id)
        return session, True

    @staticmethod
    def _enforce_active_limit(db: Session, user_id: str) -> int:
        active_sessions = SessionService.list_active_sessions(db, user_id)
        excess = active_sessions[MAX_ACTIVE_SESSIONS:]
        if not excess:
            return 0
        for session in excess:
            session.is_active = False
        db.commit()
        logger.info(f"Deactivated {len(excess)} old sessions for user {user_id}")
        return len(excess)

    @staticmethod
    def revoke_session(db: Session, user_id: str, session_row_id: str) -> None:
        updated = (
            db.query(UserSession)
            .filter(UserSession.id == session_row_id, UserSession.user_id == user_id)
            .update({UserSession.is_active: False}, synchronize_session=False)
        )
        if not updated:
            raise NotFoundError("Session not found")
        db.commit()

    @staticmethod
    def cleanup_stale_sessions(db: Session, user_id: str, now: Optional[datetime] = None) -> int:
        cutoff = (now or utcnow()) - timedelta(days=SESSION_STALE_DAYS)
        count = (
            db.query(UserSession)
            .filter(
                UserSession.user_id == user_id,
                UserSession.is_active.is_(True),
                UserSession.last_active < cutoff,
            )
            .update({UserSession.is_active: False}, synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def deactivate_by_session_id(db: Session, user_id: str, session_id: str) -> int:
        count = (
            db.query(UserSession)
            .filter(UserSession.user_id == user_id, UserSession.session_id == session_id)
            .update({UserSession.is_active: False}, synchronize_session=False)
        )
        db.commit()
        return count
