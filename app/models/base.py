"""Base SQLAlchemy model utilities."""
import uuid
from sqlalchemy import Column, DateTime, String
from app.utils.helpers import utcnow


def new_uuid() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class UUIDMixin:
    id = Column(String(36), primary_key=True, default=new_uuid)
