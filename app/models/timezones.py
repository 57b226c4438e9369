"""Timezone comparison slots and World Clock cities saved per user."""
from sqlalchemy import Column, String, Integer, Boolean, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, UUIDMixin


class UserTimezone(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_timezones"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    timezone = Column(String(64), nullable=False)
    label = Column(String(100), nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="timezones")

    __table_args__ = (
        UniqueConstraint("user_id", "timezone", name="uq_user_timezones_user_timezone"),
    )


class WorldClockCity(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_world_clock_cities"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(String(100), nullable=False)
    city_name = Column(String(255), nullable=False)
    custom_label = Column(String(255), nullable=True)
    country = Column(String(255), nullable=False)
    country_code = Column(String(8), nullable=False)
    timezone = Column(String(64), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    region = Column(String(100), nullable=True)
    population = Column(Integer, nullable=True)
    is_popular = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    user = relationship("User", back_populates="world_clock_cities")

    __table_args__ = (
        UniqueConstraint("user_id", "city_id", name="uq_world_clock_cities_user_city"),
    )
