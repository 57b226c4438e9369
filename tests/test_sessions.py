"""Session recording, retention and the /settings/sessions endpoints."""
from datetime import datetime, timedelta

import pytest

from app.models.notification import NotificationPreferences
from app.models.session import UserSession
from app.services.session_service import SessionService
from app.utils.errors import NotFoundError

WINDOWS_CHROME = "Mozilla/5.0 (Windows NT 10.0) Chrome/120 Safari/537"
IPHONE_SAFARI = "Mozilla/5.0 (iPhone) Safari/604"

T0 = datetime(2024, 1, 1, 12, 0, 0)


def _sessions(db_session, user_id):
    db_session.expire_all()
    return db_session.query(UserSession).filter(UserSession.user_id == user_id).all()


def test_same_session_id_updates_in_place(db_session, user, task_queue):
    first, created = SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)
    assert created is True

    later = T0 + timedelta(minutes=5)
    second, created = SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.2", now=later)
    assert created is False
    assert second.id == first.id

    rows = _sessions(db_session, user.id)
    assert len(rows) == 1
    assert rows[0].last_active == later
    assert rows[0].ip_address == "10.0.0.2"
    # Only the first observation triggers alerts
    assert task_queue["login_alert"].delay.call_count == 1


def test_rapid_repeats_keep_one_row_with_latest_timestamp(db_session, user):
    stamps = [T0 + timedelta(milliseconds=100 * i) for i in range(5)]
    for stamp in stamps:
        SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=stamp)

    rows = _sessions(db_session, user.id)
    assert len(rows) == 1
    assert rows[0].last_active == stamps[-1]


def test_sixth_session_deactivates_the_oldest(db_session, user):
    for i in range(6):
        SessionService.record_session(
            db_session, user, f"browser-{i}", WINDOWS_CHROME, "10.0.0.1", now=T0 + timedelta(hours=i)
        )

    rows = _sessions(db_session, user.id)
    assert len(rows) == 6
    active = [r for r in rows if r.is_active]
    inactive = [r for r in rows if not r.is_active]
    assert len(active) == 5
    assert len(inactive) == 1
    assert inactive[0].session_id == "browser-0"


def test_first_login_sends_login_and_new_device_alerts(db_session, user, task_queue):
    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)

    task_queue["login_alert"].delay.assert_called_once()
    task_queue["new_device_alert"].delay.assert_called_once()
    kwargs = task_queue["new_device_alert"].delay.call_args.kwargs
    assert kwargs["user_id"] == user.id
    assert kwargs["login"]["browser"] == "Chrome"
    assert kwargs["previous_login"] is None


def test_known_device_only_sends_login_alert(db_session, user, task_queue):
    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)
    task_queue["login_alert"].reset_mock()
    task_queue["new_device_alert"].reset_mock()

    SessionService.record_session(db_session, user, "browser-2", WINDOWS_CHROME, "10.0.0.9", now=T0 + timedelta(days=1))

    task_queue["login_alert"].delay.assert_called_once()
    task_queue["new_device_alert"].delay.assert_not_called()


def test_new_device_alert_includes_previous_login(db_session, user, task_queue):
    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)
    task_queue["new_device_alert"].reset_mock()

    SessionService.record_session(db_session, user, "phone-1", IPHONE_SAFARI, "10.0.0.2", now=T0 + timedelta(days=1))

    task_queue["new_device_alert"].delay.assert_called_once()
    kwargs = task_queue["new_device_alert"].delay.call_args.kwargs
    assert kwargs["login"]["device_type"] == "Mobile Device"
    assert kwargs["previous_login"]["browser"] == "Chrome"
    assert kwargs["previous_login"]["ip_address"] == "10.0.0.1"


def test_previous_login_reports_when_old_device_was_last_active(db_session, user, task_queue):
    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)
    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0 + timedelta(hours=2))

    SessionService.record_session(db_session, user, "phone-1", IPHONE_SAFARI, "10.0.0.2", now=T0 + timedelta(days=1))

    kwargs = task_queue["new_device_alert"].delay.call_args.kwargs
    assert kwargs["previous_login"]["timestamp"] == (T0 + timedelta(hours=2)).isoformat()


def test_disabled_preferences_suppress_alerts(db_session, user, task_queue):
    db_session.add(NotificationPreferences(user_id=user.id, login_alerts=False, new_device_logins=False))
    db_session.commit()

    SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1", now=T0)

    task_queue["login_alert"].delay.assert_not_called()
    task_queue["new_device_alert"].delay.assert_not_called()


def test_queue_failures_do_not_block_session_creation(db_session, user, task_queue):
    task_queue["login_alert"].delay.side_effect = RuntimeError("broker down")
    task_queue["new_device_alert"].delay.side_effect = RuntimeError("broker down")

    session, created = SessionService.record_session(db_session, user, "browser-1", WINDOWS_CHROME, "10.0.0.1")

    assert created is True
    assert session.is_active is True


def test_crawler_traffic_is_not_recorded(db_session, user, task_queue):
    session, created = SessionService.record_session(
        db_session, user, "bot-1", "Mozilla/5.0 (compatible; Googlebot/2.1)", "66.249.66.1"
    )
    assert session is None
    assert created is False
    assert _sessions(db_session, user.id) == []
    task_queue["login_alert"].delay.assert_not_called()


def test_revoke_is_scoped_to_owner(db_session, create_user):
    owner = create_user()
    other = create_user()
    session, _ = SessionService.record_session(db_session, owner, "browser-1", WINDOWS_CHROME, "10.0.0.1")

    with pytest.raises(NotFoundError):
        SessionService.revoke_session(db_session, other.id, session.id)

    SessionService.revoke_session(db_session, owner.id, session.id)
    assert _sessions(db_session, owner.id)[0].is_active is False


def test_cleanup_deactivates_only_stale_sessions(db_session, user):
    now = T0 + timedelta(days=60)
    SessionService.record_session(db_session, user, "old", WINDOWS_CHROME, "10.0.0.1", now=T0)
    SessionService.record_session(db_session, user, "recent", WINDOWS_CHROME, "10.0.0.1", now=now - timedelta(days=1))

    count = SessionService.cleanup_stale_sessions(db_session, user.id, now=now)

    assert count == 1
    by_id = {s.session_id: s for s in _sessions(db_session, user.id)}
    assert by_id["old"].is_active is False
    assert by_id["recent"].is_active is True


async def test_sessions_require_authentication(async_client):
    r = await async_client.get("/settings/sessions")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


async def test_invalid_token_is_rejected(async_client):
    r = await async_client.get("/settings/sessions", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


async def test_record_and_list_sessions(async_client, auth_headers):
    r = await async_client.post(
        "/settings/sessions",
        json={"session_id": "browser-1"},
        headers={**auth_headers, "User-Agent": WINDOWS_CHROME, "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"]["created"] is True
    assert body["data"]["session"]["ip_address"] == "203.0.113.7"
    assert body["data"]["session"]["user_agent"] == WINDOWS_CHROME

    r = await async_client.get("/settings/sessions", headers={**auth_headers, "X-Session-Id": "browser-1"})
    assert r.status_code == 200
    sessions = r.json()["data"]
    assert len(sessions) == 1
    assert sessions[0]["is_current"] is True
    assert sessions[0]["device_info"] == {
        "device_type": "Desktop",
        "browser": "Chrome",
        "os": "Windows",
        "is_mobile": False,
    }


async def test_record_session_requires_session_id(async_client, auth_headers):
    r = await async_client.post("/settings/sessions", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert "error" in r.json()


async def test_revoke_session_endpoint(async_client, auth_headers):
    r = await async_client.post(
        "/settings/sessions",
        json={"session_id": "browser-1", "user_agent": WINDOWS_CHROME, "ip_address": "10.0.0.1"},
        headers=auth_headers,
    )
    row_id = r.json()["data"]["session"]["id"]

    r = await async_client.request("DELETE", "/settings/sessions", json={"session_id": row_id}, headers=auth_headers)
    assert r.status_code == 200

    r = await async_client.get("/settings/sessions", headers=auth_headers)
    assert r.json()["data"] == []


async def test_revoke_unknown_session_is_404(async_client, auth_headers):
    r = await async_client.request("DELETE", "/settings/sessions", json={"session_id": "missing"}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "Session not found"}


async def test_cleanup_endpoint(async_client, auth_headers):
    r = await async_client.post("/settings/sessions/cleanup", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"]["sessions_deactivated"] == 0
