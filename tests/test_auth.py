"""OAuth callback and sign-out."""
from unittest.mock import AsyncMock, patch

from app.models.session import UserSession
from app.models.user import User
from app.utils.errors import Unauthorized

PROVIDER_SESSION = {
    "access_token": "provider-access-token",
    "refresh_token": "provider-refresh-token",
    "expires_in": 3600,
    "token_type": "bearer",
    "user": {
        "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
        "email": "new@example.com",
        "user_metadata": {"full_name": "New Person", "avatar_url": "https://cdn.example/avatar.png"},
        "app_metadata": {"provider": "github"},
    },
}


async def test_callback_creates_profile_and_queues_first_login_emails(async_client, db_session, task_queue):
    with patch("app.services.auth_service.AuthService.exchange_code", new=AsyncMock(return_value=PROVIDER_SESSION)):
        r = await async_client.post("/auth/callback", json={"code": "abc", "code_verifier": "xyz"})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["access_token"] == "provider-access-token"
    assert data["is_new_user"] is True

    user = db_session.query(User).filter(User.id == PROVIDER_SESSION["user"]["id"]).one()
    assert user.name == "New Person"
    assert user.signup_method == "github"
    assert user.last_login is not None
    task_queue["welcome"].delay.assert_called_once_with(user_id=user.id)
    task_queue["new_user"].delay.assert_called_once_with(user_id=user.id)


async def test_returning_user_gets_no_welcome_email(async_client, create_user, task_queue):
    create_user(id=PROVIDER_SESSION["user"]["id"], email="new@example.com")
    with patch("app.services.auth_service.AuthService.exchange_code", new=AsyncMock(return_value=PROVIDER_SESSION)):
        r = await async_client.post("/auth/callback", json={"code": "abc"})

    assert r.json()["data"]["is_new_user"] is False
    task_queue["welcome"].delay.assert_not_called()


async def test_callback_provider_failure_is_401(async_client):
    with patch("app.services.auth_service.AuthService.exchange_code", new=AsyncMock(side_effect=Unauthorized("auth_error"))):
        r = await async_client.post("/auth/callback", json={"code": "expired"})
    assert r.status_code == 401
    assert r.json() == {"error": "auth_error"}


async def test_callback_requires_code(async_client):
    r = await async_client.post("/auth/callback", json={})
    assert r.status_code == 400


async def test_signout_deactivates_current_session(async_client, auth_headers, db_session, user):
    await async_client.post(
        "/settings/sessions",
        json={"session_id": "browser-1", "user_agent": "Mozilla/5.0 (Windows NT 10.0) Chrome/120"},
        headers=auth_headers,
    )

    r = await async_client.post("/auth/signout", headers={**auth_headers, "X-Session-Id": "browser-1"})
    assert r.status_code == 200
    assert r.json()["data"]["sessions_deactivated"] == 1

    session = db_session.query(UserSession).filter(UserSession.user_id == user.id).one()
    assert session.is_active is False
