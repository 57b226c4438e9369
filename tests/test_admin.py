"""Admin-only subscription inspection and repair."""
from unittest.mock import patch

from app.services.billing_service import BillingGateway


async def test_non_admin_is_forbidden(async_client, auth_headers, user):
    r = await async_client.get(f"/admin/users/{user.id}/subscription", headers=auth_headers)
    assert r.status_code == 403
    assert r.json() == {"error": "Admin access required"}

    r = await async_client.post(f"/admin/users/{user.id}/reconcile", headers=auth_headers)
    assert r.status_code == 403


async def test_admin_requires_authentication(async_client, user):
    r = await async_client.get(f"/admin/users/{user.id}/subscription")
    assert r.status_code == 401


async def test_admin_views_provider_state(async_client, create_user, headers_for):
    admin = create_user(is_admin=True)
    customer = create_user(plan="premium", stripe_customer_id="cus_123")

    subscription = {"id": "sub_1", "status": "active", "cancel_at_period_end": False, "current_period_end": 1735689600}
    with patch.object(BillingGateway, "list_active_subscriptions", return_value=[subscription]):
        r = await async_client.get(f"/admin/users/{customer.id}/subscription", headers=headers_for(admin))

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["plan"] == "premium"
    assert data["customer_id"] == "cus_123"
    assert data["subscriptions"][0]["id"] == "sub_1"


async def test_admin_reconciles_another_user(async_client, create_user, headers_for):
    admin = create_user(is_admin=True)
    customer = create_user()

    with patch.object(BillingGateway, "find_customer_by_email", return_value={"id": "cus_999"}), \
         patch.object(BillingGateway, "list_active_subscriptions", return_value=[{"id": "sub_9"}]):
        r = await async_client.post(f"/admin/users/{customer.id}/reconcile", headers=headers_for(admin))

    assert r.status_code == 200
    assert r.json()["data"]["state"] == "customer_with_active_subscription"
    assert r.json()["data"]["plan"] == "premium"


async def test_admin_unknown_user_is_404(async_client, create_user, headers_for):
    admin = create_user(is_admin=True)
    r = await async_client.post("/admin/users/does-not-exist/reconcile", headers=headers_for(admin))
    assert r.status_code == 404
    assert r.json() == {"error": "User not found"}
