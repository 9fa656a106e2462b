import os
import re
from datetime import timedelta

import pytest

from core.config import settings
from database.base import get_utc_now
from database.models import MenuItem, SubscriptionStatus
from services.qr import menu_url
from tests.helpers import auth


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _category(client, token, **fields):
    body = {"name": "Starters"}
    body.update(fields)
    resp = client.post("/api/menu/categories", json=body, headers=auth(token))
    assert resp.status_code == 201
    return resp.json()


def _item(client, token, **fields):
    body = {"name": "Paneer Tikka", "price_cents": 24000}
    body.update(fields)
    resp = client.post("/api/menu/items", json=body, headers=auth(token))
    assert resp.status_code == 201
    return resp.json()


class TestCategories:
    def test_create_and_list(self, client, make_restaurant):
        _, token = make_restaurant()
        _category(client, token, name="Mains", sort_order=2)
        _category(client, token, name="Starters", sort_order=1)

        names = [c["name"] for c in client.get("/api/menu/categories", headers=auth(token)).json()]

        assert names == ["Starters", "Mains"]

    def test_blank_name_is_rejected(self, client, make_restaurant):
        _, token = make_restaurant()
        resp = client.post("/api/menu/categories", json={"name": "   "}, headers=auth(token))
        assert resp.status_code == 400

    def test_update(self, client, make_restaurant):
        _, token = make_restaurant()
        category = _category(client, token)

        resp = client.put(
            f"/api/menu/categories/{category['id']}",
            json={"name": "Small Plates"},
            headers=auth(token),
        )

        assert resp.status_code == 200
        assert resp.json()["name"] == "Small Plates"

    def test_delete_keeps_items(self, client, db_session, make_restaurant):
        _, token = make_restaurant()
        category = _category(client, token)
        item = _item(client, token, category_id=category["id"])

        resp = client.delete(f"/api/menu/categories/{category['id']}", headers=auth(token))

        assert resp.status_code == 200
        db_session.expire_all()
        assert db_session.get(MenuItem, item["id"]).category_id is None

    @pytest.mark.parametrize("field", ["name", "sort_order", "is_active"])
    def test_null_for_required_field_is_rejected(self, client, make_restaurant, field):
        _, token = make_restaurant()
        category = _category(client, token)

        resp = client.put(
            f"/api/menu/categories/{category['id']}",
            json={field: None},
            headers=auth(token),
        )

        assert resp.status_code == 400
        assert resp.json()["stage"] == "validation"
        listed = client.get("/api/menu/categories", headers=auth(token)).json()
        assert listed[0]["name"] == "Starters"

    def test_description_can_be_cleared(self, client, make_restaurant):
        _, token = make_restaurant()
        category = _category(client, token, description="Small bites")

        resp = client.put(
            f"/api/menu/categories/{category['id']}",
            json={"description": None},
            headers=auth(token),
        )

        assert resp.status_code == 200
        assert resp.json()["description"] is None

    def test_other_restaurants_category_is_not_found(self, client, make_restaurant):
        _, token = make_restaurant()
        _, other_token = make_restaurant(name="Spice Route")
        category = _category(client, other_token)

        resp = client.put(
            f"/api/menu/categories/{category['id']}",
            json={"name": "Mine now"},
            headers=auth(token),
        )

        assert resp.status_code == 404


class TestItems:
    def test_create_and_filter_by_category(self, client, make_restaurant):
        _, token = make_restaurant()
        starters = _category(client, token)
        _item(client, token, category_id=starters["id"], name="Samosa", price_cents=6000)
        _item(client, token, name="Lassi", price_cents=9000)

        all_items = client.get("/api/menu/items", headers=auth(token)).json()
        filtered = client.get(
            "/api/menu/items",
            params={"category_id": starters["id"]},
            headers=auth(token),
        ).json()

        assert {i["name"] for i in all_items} == {"Samosa", "Lassi"}
        assert [i["name"] for i in filtered] == ["Samosa"]

    def test_item_fields(self, client, make_restaurant):
        _, token = make_restaurant()
        item = _item(client, token, is_vegetarian=True, allergens=["dairy"])

        assert item["price_cents"] == 24000
        assert item["currency"] == "INR"
        assert item["is_vegetarian"] is True
        assert item["allergens"] == ["dairy"]

    def test_foreign_category_is_rejected(self, client, make_restaurant):
        _, token = make_restaurant()
        _, other_token = make_restaurant(name="Spice Route")
        foreign = _category(client, other_token)

        resp = client.post(
            "/api/menu/items",
            json={"name": "Biryani", "price_cents": 30000, "category_id": foreign["id"]},
            headers=auth(token),
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid category"

    def test_negative_price_is_rejected(self, client, make_restaurant):
        _, token = make_restaurant()
        resp = client.post(
            "/api/menu/items",
            json={"name": "Chai", "price_cents": -1},
            headers=auth(token),
        )
        assert resp.status_code == 400

    def test_update_and_delete(self, client, make_restaurant):
        _, token = make_restaurant()
        item = _item(client, token)

        updated = client.put(
            f"/api/menu/items/{item['id']}",
            json={"price_cents": 26000, "is_available": False},
            headers=auth(token),
        ).json()
        assert updated["price_cents"] == 26000
        assert updated["is_available"] is False

        assert client.delete(f"/api/menu/items/{item['id']}", headers=auth(token)).status_code == 200
        assert client.get("/api/menu/items", headers=auth(token)).json() == []

    @pytest.mark.parametrize("field", ["name", "price_cents", "currency", "is_available", "allergens"])
    def test_null_for_required_field_is_rejected(self, client, make_restaurant, field):
        _, token = make_restaurant()
        item = _item(client, token)

        resp = client.put(f"/api/menu/items/{item['id']}", json={field: None}, headers=auth(token))

        assert resp.status_code == 400

    def test_category_can_be_cleared(self, client, make_restaurant):
        _, token = make_restaurant()
        category = _category(client, token)
        item = _item(client, token, category_id=category["id"])

        resp = client.put(
            f"/api/menu/items/{item['id']}",
            json={"category_id": None},
            headers=auth(token),
        )

        assert resp.status_code == 200
        assert resp.json()["category_id"] is None

    def test_empty_update_is_rejected(self, client, make_restaurant):
        _, token = make_restaurant()
        item = _item(client, token)
        resp = client.put(f"/api/menu/items/{item['id']}", json={}, headers=auth(token))
        assert resp.status_code == 400

    def test_photo_upload(self, client, make_restaurant):
        _, token = make_restaurant()
        item = _item(client, token)

        resp = client.post(
            f"/api/menu/items/{item['id']}/photo",
            files={"file": ("tikka.png", PNG_BYTES, "image/png")},
            headers=auth(token),
        )

        assert resp.status_code == 200
        photo_url = resp.json()["photo_url"]
        assert photo_url.startswith("/uploads/menu-items/")
        assert photo_url.endswith(".png")
        stored = os.path.join(settings.upload_dir, photo_url[len("/uploads/"):])
        with open(stored, "rb") as f:
            assert f.read() == PNG_BYTES

    @pytest.mark.parametrize("filename", ["menu./card", "../../evil.png", "noextension"])
    def test_photo_name_comes_from_content_type(self, client, make_restaurant, filename):
        _, token = make_restaurant()
        item = _item(client, token)

        resp = client.post(
            f"/api/menu/items/{item['id']}/photo",
            files={"file": (filename, PNG_BYTES, "image/png")},
            headers=auth(token),
        )

        assert resp.status_code == 200
        photo_url = resp.json()["photo_url"]
        assert re.fullmatch(r"/uploads/menu-items/[0-9a-f]{32}\.png", photo_url)
        assert os.path.exists(os.path.join(settings.upload_dir, photo_url[len("/uploads/"):]))

    def test_photo_must_be_an_image(self, client, make_restaurant):
        _, token = make_restaurant()
        item = _item(client, token)

        resp = client.post(
            f"/api/menu/items/{item['id']}/photo",
            files={"file": ("menu.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth(token),
        )

        assert resp.status_code == 400
        assert resp.json()["stage"] == "upload"


class TestOwnerMenu:
    def test_lists_every_item_with_menu_photo(self, client, make_restaurant):
        _, token = make_restaurant()
        starters = _category(client, token)
        _item(client, token, category_id=starters["id"], name="Samosa", sort_order=1)
        _item(client, token, name="Sold Out", is_available=False, sort_order=2)
        client.post(
            "/api/restaurants/me/menu-photo",
            files={"file": ("card.png", PNG_BYTES, "image/png")},
            headers=auth(token),
        )

        resp = client.get("/api/menu", headers=auth(token))

        assert resp.status_code == 200
        data = resp.json()
        assert data["restaurant"]["name"] == "Cafe Aroma"
        assert data["restaurant"]["menu_photo_url"].startswith("/uploads/menu-photos/")
        assert [i["name"] for i in data["menu_items"]] == ["Samosa", "Sold Out"]
        assert data["menu_items"][1]["is_available"] is False

    def test_readable_without_active_subscription(self, client, make_restaurant):
        _, token = make_restaurant(status=SubscriptionStatus.expired)

        data = client.get("/api/menu", headers=auth(token)).json()

        assert data == {"restaurant": {"name": "Cafe Aroma", "menu_photo_url": None}, "menu_items": []}

    def test_requires_login(self, client):
        assert client.get("/api/menu").status_code == 401


class TestPublicMenu:
    def test_shows_active_content_only(self, client, make_restaurant):
        restaurant, token = make_restaurant()
        starters = _category(client, token, name="Starters")
        hidden = _category(client, token, name="Seasonal", is_active=False)
        _item(client, token, category_id=starters["id"], name="Samosa")
        _item(client, token, category_id=starters["id"], name="Sold Out", is_available=False)
        _item(client, token, category_id=hidden["id"], name="Mango Kulfi")

        resp = client.get(f"/api/restaurants/{restaurant.slug}/public")

        assert resp.status_code == 200
        data = resp.json()
        assert data["restaurant"]["name"] == "Cafe Aroma"
        assert "owner_email" not in data["restaurant"]
        assert [c["name"] for c in data["menu"]] == ["Starters"]
        assert [i["name"] for i in data["menu"][0]["items"]] == ["Samosa"]

    def test_inactive_restaurant_is_hidden(self, client, make_restaurant):
        restaurant, _ = make_restaurant(status=SubscriptionStatus.canceled)
        assert client.get(f"/api/restaurants/{restaurant.slug}/public").status_code == 404

    def test_expired_restaurant_is_hidden(self, client, make_restaurant):
        restaurant, _ = make_restaurant(expiry=get_utc_now() - timedelta(hours=1))
        assert client.get(f"/api/restaurants/{restaurant.slug}/public").status_code == 404

    def test_unknown_slug(self, client):
        assert client.get("/api/restaurants/no-such-place/public").status_code == 404


class TestQrCodes:
    def test_menu_url(self):
        assert menu_url("cafe-aroma-ab12c") == "https://menu.example.org/menu/cafe-aroma-ab12c"

    def test_png(self, client, make_restaurant):
        restaurant, _ = make_restaurant()

        resp = client.get(f"/api/restaurants/{restaurant.slug}/qr.png")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"\x89PNG")

    def test_svg(self, client, make_restaurant):
        restaurant, _ = make_restaurant()

        resp = client.get(f"/api/restaurants/{restaurant.slug}/qr.svg")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("image/svg+xml")
        assert b"<svg" in resp.content

    def test_unknown_slug(self, client):
        assert client.get("/api/restaurants/no-such-place/qr.png").status_code == 404
