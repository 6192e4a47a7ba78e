"""HTTP tests for the storefront API."""

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.main import create_app

ORDER = {
    "user_id": "user-1",
    "restaurant_id": "ChIJabc123XYZ456",
    "restaurant_name": "Pizza Corner",
    "items": [
        {"id": "pizza_corner_1", "name": "Margherita Pizza", "price": 299, "quantity": 2},
    ],
    "delivery_address": "12 MG Road, Bengaluru",
}


class TestSystemEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["environment"] == "development"

    def test_health_without_database(self, client):
        data = client.get("/health").json()

        assert data["status"] == "operational"
        assert data["database"] == "disabled"
        assert data["places_service"] == "healthy"
        assert data["stored_orders"] == 0


class TestRestaurantEndpoints:
    """Tests for search, slug, and lookup endpoints."""

    def test_nearby_then_slug(self, client):
        """Test every searched restaurant resolves by its slug."""
        search = client.post("/api/restaurants/nearby", json={"lat": 12.9716, "lng": 77.5946})

        assert search.status_code == 200
        body = search.json()
        assert body["source"] == "places"
        assert len(body["restaurants"]) == 20

        first = body["restaurants"][0]
        resolved = client.get(f"/api/restaurants/slug/{first['slug']}").json()["restaurant"]

        assert resolved["id"] == first["id"]
        assert resolved["menu"] == first["menu"]

    def test_nearby_default_radius_and_paging(self, client):
        first = client.post("/api/restaurants/nearby", json={"lat": 12.9716, "lng": 77.5946}).json()
        second = client.post(
            "/api/restaurants/nearby",
            json={"lat": 12.9716, "lng": 77.5946, "page_token": first["next_page_token"]},
        ).json()

        assert len(second["restaurants"]) == 5
        assert second["next_page_token"] is None

    def test_nearby_invalid_coordinates(self, client):
        response = client.post("/api/restaurants/nearby", json={"lat": 120, "lng": 77.5946})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_cache_then_slug(self, client):
        restaurant = {
            "id": "ChIJabc123XYZ456",
            "name": "Pizza Corner",
            "menu": [{"id": "pizza_corner_1", "name": "Margherita Pizza", "price": 299}],
        }

        cached = client.post("/api/restaurants/cache", json={"restaurants": [restaurant]})
        resolved = client.get("/api/restaurants/slug/pizza-corner-XYZ456").json()["restaurant"]

        assert cached.json() == {"success": True, "cached": 1}
        assert resolved["id"] == "ChIJabc123XYZ456"
        assert resolved["menu"][0]["name"] == "Margherita Pizza"

    def test_unknown_slug_is_reconstructed(self, client):
        response = client.get("/api/restaurants/slug/golden-dragon-AbC123")

        assert response.status_code == 200
        restaurant = response.json()["restaurant"]
        assert restaurant["id"] == "reconstructed_AbC123"
        assert restaurant["name"] == "Golden Dragon"

    def test_google_place(self, client):
        search = client.post("/api/restaurants/nearby", json={"lat": 12.9716, "lng": 77.5946}).json()
        place_id = search["restaurants"][0]["id"]

        response = client.get(f"/api/restaurants/google/{place_id}")

        assert response.status_code == 200
        assert response.json()["restaurant"]["id"] == place_id

    def test_google_place_unknown_falls_back(self, client):
        response = client.get("/api/restaurants/google/ChIJnowhere")

        assert response.status_code == 200
        assert response.json()["restaurant"]["id"] == "ChIJnowhere"

    def test_restaurant_by_id_without_database(self, client):
        response = client.get("/api/restaurants/7")

        assert response.status_code == 200
        assert response.json()["restaurant"]["name"] == "Pizza Palace"

    def test_reverse_geocode(self, client):
        response = client.post("/api/geocode/reverse", json={"lat": 12.9716, "lng": 77.5946})

        assert response.status_code == 200
        assert "Demo Street" in response.json()["address"]


class TestOrderEndpoints:
    """Tests for checkout and tracking."""

    def test_create_and_track(self, client):
        created = client.post("/api/orders", json=ORDER)

        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["order_id"].startswith("ORD-")
        assert body["total"] == pytest.approx(598 + 49 + 107.64)

        tracked = client.get(f"/api/orders/{body['order_id']}").json()
        assert tracked["source"] == "memory"
        assert tracked["order"]["status"] == "pending"
        assert tracked["order"]["restaurant_phone"] == "+91 98765 43210"

    def test_empty_cart_rejected_and_not_recorded(self, client):
        response = client.post("/api/orders", json={**ORDER, "items": []})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert client.get("/api/orders/user", params={"user_id": "user-1"}).json()["orders"] == []

    def test_blank_address_rejected(self, client):
        response = client.post("/api/orders", json={**ORDER, "delivery_address": "   "})

        assert response.status_code == 400

    def test_zero_quantity_rejected(self, client):
        items = [{**ORDER["items"][0], "quantity": 0}]

        response = client.post("/api/orders", json={**ORDER, "items": items})

        assert response.status_code == 400

    def test_orders_for_user_newest_first(self, client):
        first = client.post("/api/orders", json=ORDER).json()["order_id"]
        second = client.post("/api/orders", json=ORDER).json()["order_id"]
        client.post("/api/orders", json={**ORDER, "user_id": "user-2"})

        data = client.get("/api/orders/user", params={"user_id": "user-1"}).json()

        assert data["total"] == 2
        assert [o["id"] for o in data["orders"]] == [second, first]

    def test_orders_for_user_requires_user_id(self, client):
        response = client.get("/api/orders/user")

        assert response.status_code == 400
        assert response.json()["error"] == "user_id is required"

    def test_unknown_order_is_sample(self, client):
        data = client.get("/api/orders/ORD-404").json()

        assert data["source"] == "fallback"
        assert data["order"]["id"] == "ORD-404"

    def test_list_all_orders(self, client):
        client.post("/api/orders", json=ORDER)
        client.post("/api/orders", json={**ORDER, "user_id": "user-2"})

        data = client.get("/api/orders").json()

        assert data["total"] == 2
        assert data["source"] == "memory"


class TestSignup:
    """Tests for account creation."""

    def test_signup_without_database(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"username": "priya", "email": "priya@example.com", "password": "secret123"},
        )

        assert response.status_code == 503

    def test_signup_missing_field(self, client):
        response = client.post("/api/auth/signup", json={"username": "priya", "email": "priya@example.com"})

        assert response.status_code == 400

    def test_signup_and_duplicate(self, db_client):
        payload = {"username": "priya", "email": "Priya@Example.com", "password": "secret123"}

        created = db_client.post("/api/auth/signup", json=payload)
        duplicate = db_client.post("/api/auth/signup", json={**payload, "username": "priya2"})

        assert created.status_code == 201
        assert created.json()["message"] == "User created successfully"
        assert duplicate.status_code == 400
        assert duplicate.json()["error"] == "User already exists"


class TestWithDatabase:
    """Tests for an app backed by a database."""

    def test_health_reports_database(self, db_client):
        assert db_client.get("/health").json()["database"] == "healthy"

    def test_unknown_restaurant_is_404(self, db_client):
        response = db_client.get("/api/restaurants/does-not-exist")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_order_mirrored_and_tracked(self, db_client):
        order_id = db_client.post("/api/orders", json=ORDER).json()["order_id"]

        tracked = db_client.get(f"/api/orders/{order_id}").json()

        assert tracked["source"] == "memory"
        assert tracked["order"]["total"] == pytest.approx(754.64)

    def test_signup_hashes_off_event_loop(self, db_client, monkeypatch):
        """Test password hashing is dispatched to the threadpool."""
        import storefront.main as main_module

        dispatched = []
        original = main_module.run_in_threadpool

        async def recording_threadpool(func, *args, **kwargs):
            dispatched.append(func)
            return await original(func, *args, **kwargs)

        monkeypatch.setattr(main_module, "run_in_threadpool", recording_threadpool)

        response = db_client.post(
            "/api/auth/signup",
            json={"username": "arjun", "email": "arjun@example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        assert main_module.hash_password in dispatched


class TestUnreachableDatabase:
    """Tests for an app whose database cannot be opened."""

    @pytest.fixture
    def broken_db_client(self, tmp_path, places):
        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'storefront.db'}"
        settings = Settings(_env_file=None, env_mode="development", database_url=url)
        with TestClient(create_app(settings=settings, places=places)) as test_client:
            yield test_client

    def test_startup_survives_and_health_degrades(self, broken_db_client):
        data = broken_db_client.get("/health").json()

        assert data["database"] == "unhealthy"
        assert data["status"] == "degraded"

    def test_orders_still_served_from_memory(self, broken_db_client):
        order_id = broken_db_client.post("/api/orders", json=ORDER).json()["order_id"]

        tracked = broken_db_client.get(f"/api/orders/{order_id}").json()

        assert tracked["source"] == "memory"

    def test_search_still_served(self, broken_db_client):
        response = broken_db_client.post("/api/restaurants/nearby", json={"lat": 12.9716, "lng": 77.5946})

        assert response.status_code == 200
        assert response.json()["source"] == "places"
