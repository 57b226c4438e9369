from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship, validates
from app.core.constants import PlanTier
from app.core.database import Base
from app.models.base import TimestampMixin


class User(TimestampMixin, Base):
    """Local mirror of an auth-provider user plus billing state."""

    __tablename__ = "users"

    # Same identifier the auth provider puts in the JWT `sub` claim
    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)
    signup_method = Column(String(50), nullable=True)

    # Billing
    plan = Column(String(20), default=PlanTier.FREE.value, nullable=False, index=True)
    stripe_customer_id = Column(String(255), unique=True, index=True, nullable=True)

    is_admin = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    notification_preferences = relationship(
        "NotificationPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    account_deletions = relationship("AccountDeletion", back_populates="user", cascade="all, delete-orphan")
    timezones = relationship("UserTimezone", back_populates="user", cascade="all, delete-orphan")
    world_clock_cities = relationship("WorldClockCity", back_populates="user", cascade="all, delete-orphan")
    jwt_snippets = relationship("JwtSnippet", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} plan={self.plan}>"

    @property
    def is_premium(self) -> bool:
        return self.plan == PlanTier.PREMIUM.value

    @validates("stripe_customer_id")
    def normalize_customer_id(self, key, value):
        return value or None
