from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, UUIDMixin


class NotificationPreferences(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_notification_preferences"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    login_alerts = Column(Boolean, default=True, nullable=False)
    new_device_logins = Column(Boolean, default=True, nullable=False)

    user = relationship("User", back_populates="notification_preferences")
