from datetime import timedelta

import pytest

from database.base import get_utc_now
from database.models import SubscriptionStatus
from tests.helpers import auth, reload


def _create_category(client, token, name="Starters"):
    return client.post("/api/menu/categories", json={"name": name}, headers=auth(token))


def test_active_subscription_may_write(client, make_restaurant):
    _, token = make_restaurant(expiry=get_utc_now() + timedelta(days=5))
    assert _create_category(client, token).status_code == 201


def test_grace_state_may_write(client, make_restaurant):
    _, token = make_restaurant(expiry=None)
    assert _create_category(client, token).status_code == 201


@pytest.mark.parametrize(
    "status",
    [SubscriptionStatus.past_due, SubscriptionStatus.canceled, SubscriptionStatus.expired, SubscriptionStatus.inactive],
)
def test_inactive_subscription_is_payment_required(client, make_restaurant, status):
    _, token = make_restaurant(status=status)

    resp = _create_category(client, token)

    assert resp.status_code == 402
    body = resp.json()
    assert body["success"] is False
    assert body["stage"] == "access"
    assert body["subscription_status"] == status.value


def test_expiry_passing_denies_and_persists(client, db_session, make_restaurant):
    expiry = get_utc_now() - timedelta(minutes=1)
    restaurant, token = make_restaurant(expiry=expiry)

    resp = _create_category(client, token)

    assert resp.status_code == 402
    assert resp.json()["subscription_status"] == "expired"
    assert resp.json()["subscription_expiry"] == expiry.isoformat()
    assert reload(db_session, restaurant.id).subscription_status == "expired"


def test_missing_token_is_unauthorized_not_payment_required(client, make_restaurant):
    make_restaurant(status=SubscriptionStatus.expired)
    assert client.post("/api/menu/categories", json={"name": "Starters"}).status_code == 401


def test_invalid_token_is_unauthorized(client):
    resp = client.post(
        "/api/menu/categories",
        json={"name": "Starters"},
        headers=auth("not-a-jwt"),
    )
    assert resp.status_code == 401


def test_reads_stay_open_when_inactive(client, make_restaurant):
    _, token = make_restaurant(status=SubscriptionStatus.canceled)

    assert client.get("/api/menu/categories", headers=auth(token)).status_code == 200
    assert client.get("/api/menu/items", headers=auth(token)).status_code == 200
    assert client.get("/api/restaurants/me", headers=auth(token)).status_code == 200


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("put", "/api/restaurants/me", {"phone": "+91 98765 43210"}),
        ("post", "/api/menu/items", {"name": "Masala Dosa", "price_cents": 12000}),
        ("put", "/api/menu/categories/1", {"name": "Mains"}),
        ("delete", "/api/menu/items/1", None),
    ],
)
def test_every_write_is_gated(client, make_restaurant, method, path, body):
    _, token = make_restaurant(status=SubscriptionStatus.past_due)
    kwargs = {"headers": auth(token)}
    if body is not None:
        kwargs["json"] = body

    resp = getattr(client, method)(path, **kwargs)

    assert resp.status_code == 402


def test_profile_reports_lazy_expiry(client, make_restaurant):
    _, token = make_restaurant(expiry=get_utc_now() - timedelta(days=1))

    data = client.get("/api/restaurants/me", headers=auth(token)).json()

    assert data["subscription_status"] == "expired"
    assert data["is_expired"] is True
    assert data["restaurant"]["subscription_status"] == "expired"


def test_renewal_unlocks_writes(client, make_restaurant):
    restaurant, token = make_restaurant(
        status=SubscriptionStatus.expired,
        expiry=get_utc_now() - timedelta(days=2),
    )
    assert _create_category(client, token).status_code == 402

    payment_id = client.post(
        "/api/payments/initiate",
        json={"payment_method": "upi", "amount_cents": 50000},
        headers=auth(token),
    ).json()["payment_id"]
    confirmed = client.post(
        "/api/payments/confirm",
        json={"payment_id": payment_id, "restaurant_id": restaurant.id, "payment_status": "success"},
    )
    assert confirmed.status_code == 200

    assert _create_category(client, token).status_code == 201


class TestBillingPortal:
    def test_returns_portal_link_and_status(self, client, make_restaurant):
        expiry = get_utc_now() + timedelta(days=12)
        restaurant, token = make_restaurant(expiry=expiry)

        resp = client.post("/api/restaurants/billing-portal", headers=auth(token))

        assert resp.status_code == 200
        data = resp.json()
        assert data["billing_portal_url"] == (
            f"https://menu.example.org/billing-portal?restaurantId={restaurant.id}&status=active"
        )
        assert data["subscription_status"] == "active"
        assert data["subscription_expiry"] == expiry.isoformat()

    def test_open_to_lapsed_restaurant_and_applies_expiry(self, client, db_session, make_restaurant):
        restaurant, token = make_restaurant(expiry=get_utc_now() - timedelta(hours=2))

        resp = client.post("/api/restaurants/billing-portal", headers=auth(token))

        assert resp.status_code == 200
        assert resp.json()["subscription_status"] == "expired"
        assert resp.json()["billing_portal_url"].endswith("status=expired")
        assert reload(db_session, restaurant.id).subscription_status == "expired"

    def test_requires_login(self, client):
        assert client.post("/api/restaurants/billing-portal").status_code == 401
