"""JWTs a user saved from the decoder tool."""
from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, UUIDMixin


class JwtSnippet(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "jwt_snippets"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    jwt_token = Column(Text, nullable=False)
    decoded_header = Column(JSON, nullable=True)
    decoded_payload = Column(JSON, nullable=True)
    algorithm = Column(String(20), nullable=True, index=True)
    # From the token's `exp` claim, naive UTC
    expires_at = Column(DateTime, nullable=True)
    is_favorite = Column(Boolean, default=False, nullable=False)
    tags = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="jwt_snippets")
