"""Saved World Clock cities."""

PARIS = {
    "city_id": "paris",
    "city_name": "Paris",
    "country": "France",
    "country_code": "FR",
    "timezone": "Europe/Paris",
    "latitude": 48.8566,
    "longitude": 2.3522,
    "is_popular": True,
}


async def test_add_and_list_cities(async_client, auth_headers):
    r = await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)
    assert r.status_code == 200
    city = r.json()["data"]
    assert city["id"] == "paris"
    assert city["name"] == "Paris"
    assert city["coordinates"] == {"lat": 48.8566, "lng": 2.3522}

    r = await async_client.get("/world-clock-cities", headers=auth_headers)
    assert [c["id"] for c in r.json()["data"]] == ["paris"]


async def test_invalid_city_is_rejected(async_client, auth_headers):
    r = await async_client.post("/world-clock-cities", json={"city_id": "paris"}, headers=auth_headers)
    assert r.status_code == 400


async def test_duplicate_city_conflicts(async_client, auth_headers):
    await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)
    r = await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)
    assert r.status_code == 409


async def test_custom_label_becomes_display_name(async_client, auth_headers):
    await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)

    r = await async_client.patch("/world-clock-cities/paris", json={"custom_label": "HQ"}, headers=auth_headers)
    assert r.status_code == 200
    city = r.json()["data"]
    assert city["name"] == "HQ"
    assert city["original_name"] == "Paris"

    r = await async_client.patch("/world-clock-cities/paris", json={"custom_label": ""}, headers=auth_headers)
    assert r.json()["data"]["name"] == "Paris"


async def test_update_requires_a_field(async_client, auth_headers):
    await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)
    r = await async_client.patch("/world-clock-cities/paris", json={}, headers=auth_headers)
    assert r.status_code == 400


async def test_update_and_remove_missing_city(async_client, auth_headers):
    r = await async_client.patch("/world-clock-cities/atlantis", json={"display_order": 2}, headers=auth_headers)
    assert r.status_code == 404
    r = await async_client.delete("/world-clock-cities/atlantis", headers=auth_headers)
    assert r.status_code == 404


async def test_initialize_reorder_and_clear(async_client, auth_headers):
    r = await async_client.post("/world-clock-cities/initialize", headers=auth_headers)
    assert [c["id"] for c in r.json()["data"]] == ["new-york", "london", "tokyo"]

    # Initializing twice does not duplicate anything
    r = await async_client.post("/world-clock-cities/initialize", headers=auth_headers)
    assert len(r.json()["data"]) == 3

    orders = [
        {"city_id": "tokyo", "display_order": 0},
        {"city_id": "london", "display_order": 1},
        {"city_id": "new-york", "display_order": 2},
    ]
    r = await async_client.post("/world-clock-cities/reorder", json={"cities": orders}, headers=auth_headers)
    assert [c["id"] for c in r.json()["data"]] == ["tokyo", "london", "new-york"]

    r = await async_client.get("/world-clock-cities/stats", headers=auth_headers)
    stats = r.json()["data"]
    assert stats["total"] == 3
    assert set(stats["timezones"]) == {"America/New_York", "Europe/London", "Asia/Tokyo"}

    r = await async_client.delete("/world-clock-cities", headers=auth_headers)
    assert r.json()["data"] == {"removed": 3}

    r = await async_client.get("/world-clock-cities", headers=auth_headers)
    assert r.json()["data"] == []


async def test_cities_are_private(async_client, auth_headers, create_user, headers_for):
    await async_client.post("/world-clock-cities", json=PARIS, headers=auth_headers)
    r = await async_client.get("/world-clock-cities", headers=headers_for(create_user()))
    assert r.json()["data"] == []
