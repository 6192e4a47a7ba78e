"""Tests for the restaurant slug lookup cache."""

import pytest

from storefront.schemas import Coordinates, MenuItem, Restaurant
from storefront.services import catalog
from storefront.services.restaurant_cache import RestaurantCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_restaurant(restaurant_id: str = "ChIJabc123XYZ456", name: str = "Pizza Corner") -> Restaurant:
    return Restaurant(
        id=restaurant_id,
        name=name,
        cuisine="Pizza",
        rating=4.3,
        delivery_time="25-35 min",
        delivery_fee=39,
        address="12 MG Road",
        coordinates=Coordinates(lat=12.97, lng=77.59),
        phone="+91 80 1111 2222",
        menu=[MenuItem(id="pizza_corner_1", name="Margherita Pizza", price=299)],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> RestaurantCache:
    return RestaurantCache(max_entries=3, ttl_seconds=60, clock=clock)


class TestResolveCachedSlug:
    """Tests for slugs whose hash is cached."""

    def test_resolves_cached_record(self, cache):
        """Test a cached restaurant comes back unchanged, menu included."""
        restaurant = make_restaurant()
        cache.put([restaurant])

        resolved = cache.resolve_slug("pizza-corner-XYZ456")

        assert resolved == restaurant
        assert resolved.menu[0].name == "Margherita Pizza"

    def test_slug_round_trip(self, cache):
        """Test resolving the slug built for a record returns that record."""
        restaurant = make_restaurant("place-with-hash-Q1w2E3", "Romano's Trattoria")
        cache.put([restaurant])

        assert cache.resolve_slug(catalog.slugify(restaurant.name, restaurant.id)) == restaurant

    def test_slug_round_trip_with_hyphenated_hash(self, cache):
        """Test a hash fragment containing a hyphen still resolves."""
        restaurant = make_restaurant("ChIJN1t_tDeuEmsRab-cd1", "Pizza Corner")
        cache.put([restaurant])

        slug = catalog.slugify(restaurant.name, restaurant.id)

        assert slug == "pizza-corner-ab-cd1"
        assert cache.resolve_slug(slug) == restaurant

    def test_put_returns_count(self, cache):
        assert cache.put([make_restaurant("aaaaaa111111"), make_restaurant("bbbbbb222222")]) == 2
        assert len(cache) == 2

    def test_hash_collision_overwrites(self, cache):
        """Test the later record wins when two ids share their last six characters."""
        cache.put([make_restaurant("first-XYZ456", "Pizza Corner")])
        cache.put([make_restaurant("second-XYZ456", "Pasta Place")])

        assert cache.get("XYZ456").name == "Pasta Place"
        assert len(cache) == 1


class TestResolveUnknownSlug:
    """Tests for slugs never cached, expired, or evicted."""

    def test_never_cached_slug_is_reconstructed(self, cache):
        """Test an unknown hash yields a placeholder built from the slug text."""
        resolved = cache.resolve_slug("golden-dragon-AbC123")

        assert resolved.id == "reconstructed_AbC123"
        assert resolved.name == "Golden Dragon"
        assert resolved.cuisine == "Chinese"
        assert resolved.slug == "golden-dragon-AbC123"
        assert resolved.coordinates.lat == 0 and resolved.coordinates.lng == 0
        assert resolved.price_range == "₹₹"
        assert 4.0 <= resolved.rating <= 5.0
        assert 25 <= resolved.delivery_fee <= 74
        assert len(resolved.menu) > 0

    def test_reconstructed_menu_matches_name(self, cache):
        resolved = cache.resolve_slug("biryani-house-Zz9Yy8")

        assert resolved.cuisine == "Indian"
        assert resolved.menu[0].id.startswith("biryani_house_")

    def test_unmatched_name_is_multi_cuisine(self, cache):
        resolved = cache.resolve_slug("the-local-diner-Qq1Ww2")

        assert resolved.name == "The Local Diner"
        assert resolved.cuisine == "Multi-cuisine"

    def test_expired_entry_is_reconstructed(self, cache, clock):
        """Test entries older than the TTL are no longer served."""
        cache.put([make_restaurant()])
        clock.now += 61

        resolved = cache.resolve_slug("pizza-corner-XYZ456")

        assert resolved.id == "reconstructed_XYZ456"
        assert len(cache) == 0

    def test_entry_within_ttl_is_served(self, cache, clock):
        cache.put([make_restaurant()])
        clock.now += 59

        assert cache.resolve_slug("pizza-corner-XYZ456").id == "ChIJabc123XYZ456"


class TestCacheBounds:
    """Tests for least-recently-used eviction."""

    def test_oldest_entry_evicted(self, cache):
        cache.put([make_restaurant(f"place-00000{i}", f"Place {i}") for i in range(4)])

        assert len(cache) == 3
        assert "000000" not in cache
        assert "000003" in cache

    def test_recent_read_protects_entry(self, cache):
        """Test reading an entry moves it to the back of the eviction queue."""
        cache.put([make_restaurant(f"place-00000{i}", f"Place {i}") for i in range(3)])
        cache.get("000000")
        cache.put([make_restaurant("place-000003", "Place 3")])

        assert "000000" in cache
        assert "000001" not in cache

    def test_clear(self, cache):
        cache.put([make_restaurant()])
        cache.clear()

        assert len(cache) == 0

    def test_rejects_empty_capacity(self):
        with pytest.raises(ValueError):
            RestaurantCache(max_entries=0)
