# app/tasks/notification_tasks.py
from celery import shared_task
from typing import Optional
import logging

from app.core.database import SessionLocal
from app.models.user import User
from app.services import email_service

logger = logging.getLogger(__name__)


def _load_user(db, user_id: str) -> Optional[User]:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.error(f"User {user_id} not found for notification.")
    return user


@shared_task(bind=True, max_retries=3)
def send_login_alert(self, user_id: str, login: dict):
    """
    Email the user about a sign-in.
    `login` carries timestamp, ip_address, device_type and browser.
    """
    db = SessionLocal()
    try:
        user = _load_user(db, user_id)
        if not user:
            return False
        email_service.send_login_alert_email(user.email, user.name, login)
        logger.info(f"Login alert sent to user {user_id}")
        return True
    except Exception as e:
        logger.error(f"Error in send_login_alert for user {user_id}: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()


@shared_task(bind=True, max_retries=3)
def send_new_device_alert(self, user_id: str, login: dict, previous_login: Optional[dict] = None):
    """
    Email the user about a sign-in from a device we have not seen before,
    with the most recent prior session for comparison.
    """
    db = SessionLocal()
    try:
        user = _load_user(db, user_id)
        if not user:
            return False
        email_service.send_new_device_alert_email(user.email, user.name, login, previous_login)
        logger.info(f"New device alert sent to user {user_id}")
        return True
    except Exception as e:
        logger.error(f"Error in send_new_device_alert for user {user_id}: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()


@shared_task(bind=True, max_retries=3)
def send_welcome_email(self, user_id: str):
    db = SessionLocal()
    try:
        user = _load_user(db, user_id)
        if not user:
            return False
        email_service.send_welcome_email(user.email, user.name)
        return True
    except Exception as e:
        logger.error(f"Error in send_welcome_email for user {user_id}: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()


@shared_task(bind=True, max_retries=3)
def send_new_user_notification(self, user_id: str):
    """Tell the admin inbox about a signup."""
    db = SessionLocal()
    try:
        user = _load_user(db, user_id)
        if not user:
            return False
        return email_service.send_new_user_notification(user.email, user.name, user.signup_method)
    except Exception as e:
        logger.error(f"Error in send_new_user_notification for user {user_id}: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()
