from sqlalchemy import Column, String, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, UUIDMixin


class UserPreferences(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_preferences"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    timezone = Column(String(64), default="UTC", nullable=False)
    theme = Column(String(20), default="system", nullable=False)
    language = Column(String(10), default="en", nullable=False)
    email_notifications = Column(JSON, default=dict, nullable=False)
    developer_preferences = Column(JSON, default=dict, nullable=False)
    bio = Column(Text, nullable=True)

    user = relationship("User", back_populates="preferences")
