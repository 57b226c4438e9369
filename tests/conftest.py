"""Pytest fixtures for async FastAPI testing.

Points the app at a throwaway SQLite database, mints auth-provider style
JWTs, and stubs the outside world: Redis counters, Celery hand-offs and
outgoing email never leave the process.
"""
import os
import pathlib
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from dotenv import load_dotenv

ROOT = pathlib.Path(__file__).resolve().parent.parent

# Settings are read at import time, so the test environment goes in first.
if (ROOT / ".env.test").exists():
    load_dotenv(dotenv_path=str(ROOT / ".env.test"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{ROOT / 'test.db'}")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_dummy")
os.environ.setdefault("STRIPE_PREMIUM_PRICE_ID", "price_premium")
os.environ.setdefault("ADMIN_EMAIL", "admin@devtoolshub.test")
os.environ.setdefault("STORAGE_BACKEND", "local")


@pytest.fixture(scope="session")
def prepare_database():
    """Create clean schema for the test session."""
    from app.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables(prepare_database):
    """Empty every table after each test."""
    yield
    from app.core.database import engine, Base

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from app.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def stub_redis():
    """Rate-limit counters always report a first hit unless a test overrides them."""
    from app.cache.cache_service import redis_cache

    with patch.object(redis_cache, "incr", new=AsyncMock(return_value=1)) as incr:
        yield incr


@pytest.fixture(autouse=True)
def task_queue():
    """Capture Celery hand-offs instead of talking to a broker."""
    with patch("app.services.session_service.send_login_alert") as login_alert, \
         patch("app.services.session_service.send_new_device_alert") as new_device_alert, \
         patch("app.services.auth_service.send_welcome_email") as welcome, \
         patch("app.services.auth_service.send_new_user_notification") as new_user:
        yield {
            "login_alert": login_alert,
            "new_device_alert": new_device_alert,
            "welcome": welcome,
            "new_user": new_user,
        }


@pytest.fixture
def sent_emails():
    """Record outgoing email instead of sending it."""
    with patch("app.services.email_service.send_email", return_value=True) as send:
        yield send


def make_token(user_id: str, email: str, expires_in: int = 3600, **claims) -> str:
    from jose import jwt
    from app.core.config import settings

    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "aud": settings.AUTH_JWT_AUDIENCE,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        "user_metadata": {"full_name": "Test User"},
        "app_metadata": {"provider": "email"},
    }
    payload.update(claims)
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


@pytest.fixture
def create_user(db_session):
    """Factory for local user rows."""
    from app.models.user import User

    def _create(**overrides):
        user_id = overrides.pop("id", str(uuid.uuid4()))
        user = User(
            id=user_id,
            email=overrides.pop("email", f"user_{user_id[:8]}@example.com"),
            name=overrides.pop("name", "Test User"),
            **overrides,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def user(create_user):
    return create_user()


@pytest.fixture
def headers_for():
    """Build an Authorization header for any user row."""
    def _headers(user, **claims):
        return {"Authorization": f"Bearer {make_token(user.id, user.email, **claims)}"}

    return _headers


@pytest.fixture
def auth_headers(user, headers_for):
    return headers_for(user)


@pytest.fixture
async def async_client(prepare_database):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import ASGITransport, AsyncClient
    from app.main import create_app

    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
