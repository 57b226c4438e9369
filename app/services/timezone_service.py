import logging
from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.constants import DEFAULT_TIMEZONES
from app.models.timezones import UserTimezone
from app.schemas.timezone import TimezoneCreate, TimezoneOrder, TimezoneUpdate
from app.utils.errors import ConflictError, Forbidden, NotFoundError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class TimezoneService:
    """Timezones a user keeps in the comparison view, always scoped to that user."""

    @staticmethod
    def list_timezones(db: Session, user_id: str) -> List[UserTimezone]:
        return (
            db.query(UserTimezone)
            .filter(UserTimezone.user_id == user_id)
            .order_by(UserTimezone.display_order.asc(), UserTimezone.created_at.asc())
            .all()
        )

    @staticmethod
    def _get_owned(db: Session, user_id: str, timezone_row_id: str) -> UserTimezone:
        row = (
            db.query(UserTimezone)
            .filter(UserTimezone.id == timezone_row_id, UserTimezone.user_id == user_id)
            .first()
        )
        if not row:
            raise NotFoundError("Timezone not found")
        return row

    @staticmethod
    def create_timezone(db: Session, user_id: str, data: TimezoneCreate) -> UserTimezone:
        exists = (
            db.query(UserTimezone.id)
            .filter(UserTimezone.user_id == user_id, UserTimezone.timezone == data.timezone)
            .first()
        )
        if exists:
            raise ConflictError("This timezone is already added to your comparison")

        display_order = data.display_order
        if display_order is None:
            display_order = db.query(UserTimezone).filter(UserTimezone.user_id == user_id).count()

        row = UserTimezone(
            user_id=user_id,
            timezone=data.timezone,
            label=data.label,
            display_order=display_order,
            is_default=data.is_default,
        )
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("This timezone is already added to your comparison")
        db.refresh(row)
        return row

    @staticmethod
    def update_timezone(db: Session, user_id: str, timezone_row_id: str, data: TimezoneUpdate) -> UserTimezone:
        row = TimezoneService._get_owned(db, user_id, timezone_row_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def delete_timezone(db: Session, user_id: str, timezone_row_id: str) -> None:
        row = TimezoneService._get_owned(db, user_id, timezone_row_id)
        if row.is_default:
            raise Forbidden("Cannot delete default timezone")
        db.delete(row)
        db.commit()

    @staticmethod
    def reorder(db: Session, user_id: str, orders: List[TimezoneOrder]) -> List[UserTimezone]:
        for order in orders:
            (
                db.query(UserTimezone)
                .filter(UserTimezone.id == order.id, UserTimezone.user_id == user_id)
                .update({UserTimezone.display_order: order.display_order}, synchronize_session=False)
            )
        db.commit()
        return TimezoneService.list_timezones(db, user_id)

    @staticmethod
    def initialize_defaults(db: Session, user_id: str) -> List[UserTimezone]:
        """Add the default set, skipping any timezone the user already has."""
        existing = {
            tz for (tz,) in db.query(UserTimezone.timezone).filter(UserTimezone.user_id == user_id).all()
        }
        for default in DEFAULT_TIMEZONES:
            if default["timezone"] in existing:
                continue
            db.add(UserTimezone(user_id=user_id, **default))
        db.commit()
        return TimezoneService.list_timezones(db, user_id)

    @staticmethod
    def stats(db: Session, user_id: str) -> Dict[str, Any]:
        rows = (
            db.query(UserTimezone.created_at)
            .filter(UserTimezone.user_id == user_id)
            .order_by(UserTimezone.created_at.asc())
            .all()
        )
        if not rows:
            return {"total": 0, "oldest": None, "newest": None}
        return {"total": len(rows), "oldest": rows[0][0], "newest": rows[-1][0]}
