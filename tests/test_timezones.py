"""Saved timezones for the comparison tool."""


async def test_create_and_list_timezones(async_client, auth_headers):
    r = await async_client.post("/user-timezones", json={"timezone": "Asia/Kolkata", "label": "Mumbai"}, headers=auth_headers)
    assert r.status_code == 201
    first = r.json()["data"]
    assert first["display_order"] == 0

    r = await async_client.post("/user-timezones", json={"timezone": "Europe/Berlin", "label": "Berlin"}, headers=auth_headers)
    assert r.json()["data"]["display_order"] == 1

    r = await async_client.get("/user-timezones", headers=auth_headers)
    assert [tz["label"] for tz in r.json()["data"]] == ["Mumbai", "Berlin"]


async def test_duplicate_timezone_conflicts(async_client, auth_headers):
    payload = {"timezone": "Asia/Kolkata", "label": "Mumbai"}
    await async_client.post("/user-timezones", json=payload, headers=auth_headers)
    r = await async_client.post("/user-timezones", json=payload, headers=auth_headers)
    assert r.status_code == 409
    assert r.json() == {"error": "This timezone is already added to your comparison"}


async def test_same_timezone_for_different_users(async_client, auth_headers, create_user, headers_for):
    payload = {"timezone": "Asia/Kolkata", "label": "Mumbai"}
    r = await async_client.post("/user-timezones", json=payload, headers=auth_headers)
    assert r.status_code == 201
    r = await async_client.post("/user-timezones", json=payload, headers=headers_for(create_user()))
    assert r.status_code == 201


async def test_update_and_delete_are_owner_scoped(async_client, auth_headers, create_user, headers_for):
    r = await async_client.post("/user-timezones", json={"timezone": "Asia/Kolkata", "label": "Mumbai"}, headers=auth_headers)
    tz_id = r.json()["data"]["id"]
    stranger = headers_for(create_user())

    r = await async_client.put(f"/user-timezones/{tz_id}", json={"label": "Hacked"}, headers=stranger)
    assert r.status_code == 404
    r = await async_client.delete(f"/user-timezones/{tz_id}", headers=stranger)
    assert r.status_code == 404

    r = await async_client.put(f"/user-timezones/{tz_id}", json={"label": "Bombay"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"]["label"] == "Bombay"

    r = await async_client.delete(f"/user-timezones/{tz_id}", headers=auth_headers)
    assert r.status_code == 200


async def test_update_rejects_unknown_fields(async_client, auth_headers):
    r = await async_client.post("/user-timezones", json={"timezone": "Asia/Kolkata", "label": "Mumbai"}, headers=auth_headers)
    tz_id = r.json()["data"]["id"]
    r = await async_client.put(f"/user-timezones/{tz_id}", json={"user_id": "someone-else"}, headers=auth_headers)
    assert r.status_code == 400


async def test_initialize_defaults_and_protect_default(async_client, auth_headers):
    await async_client.post("/user-timezones", json={"timezone": "Europe/London", "label": "Home"}, headers=auth_headers)

    r = await async_client.post("/user-timezones/initialize", headers=auth_headers)
    assert r.status_code == 200
    timezones = r.json()["data"]
    assert sorted(tz["timezone"] for tz in timezones) == ["America/New_York", "Asia/Tokyo", "Europe/London", "UTC"]
    # Existing entry is kept as it was
    assert next(tz for tz in timezones if tz["timezone"] == "Europe/London")["label"] == "Home"

    default = next(tz for tz in timezones if tz["is_default"])
    r = await async_client.delete(f"/user-timezones/{default['id']}", headers=auth_headers)
    assert r.status_code == 403
    assert r.json() == {"error": "Cannot delete default timezone"}


async def test_reorder_and_stats(async_client, auth_headers):
    r = await async_client.post("/user-timezones/initialize", headers=auth_headers)
    timezones = r.json()["data"]
    orders = [{"id": tz["id"], "display_order": len(timezones) - 1 - i} for i, tz in enumerate(timezones)]

    r = await async_client.post("/user-timezones/reorder", json={"timezones": orders}, headers=auth_headers)
    assert r.status_code == 200
    assert [tz["id"] for tz in r.json()["data"]] == [tz["id"] for tz in reversed(timezones)]

    r = await async_client.get("/user-timezones/stats", headers=auth_headers)
    stats = r.json()["data"]
    assert stats["total"] == 4
    assert stats["oldest"] is not None


async def test_stats_for_empty_list(async_client, auth_headers):
    r = await async_client.get("/user-timezones/stats", headers=auth_headers)
    assert r.json()["data"] == {"total": 0, "oldest": None, "newest": None}
