from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin
from app.utils.helpers import utcnow


class AccountDeletion(UUIDMixin, Base):
    __tablename__ = "account_deletions"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reason = Column(Text, nullable=True)
    recovery_token_hash = Column(String(128), nullable=False)
    scheduled_for = Column(DateTime, nullable=False)

    is_cancelled = Column(Boolean, default=False, nullable=False, index=True)
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="account_deletions")
