"""User session model: one row per observed browser session."""
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin
from app.utils.helpers import utcnow


class UserSession(UUIDMixin, Base):
    __tablename__ = "user_sessions"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Client-generated, stable per browser
    session_id = Column(String(255), nullable=False, index=True)

    user_agent = Column(String(512), nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_active = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Deactivated rather than deleted so history survives
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    user = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("ix_user_sessions_user_active", "user_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<UserSession user={self.user_id} session={self.session_id} active={self.is_active}>"
