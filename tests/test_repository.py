"""Tests for StorefrontRepository against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from storefront.models import MenuItemRecord, OrderStatus, RestaurantRecord
from storefront.services.order_store import OrderLine, StoredOrder
from storefront.services.repository import StorefrontRepository


def make_order(order_id: str, user_id: str = "user-1", minutes_ago: int = 0) -> StoredOrder:
    created = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    return StoredOrder(
        id=order_id,
        user_id=user_id,
        restaurant_id="1",
        restaurant_name="Pizza Palace",
        items=(
            OrderLine(menu_item_id="1", name="Margherita Pizza", price=299, quantity=1),
            OrderLine(menu_item_id="4", name="Garlic Bread", price=149, quantity=2),
        ),
        subtotal=597,
        delivery_fee=49,
        tax=107.46,
        total=753.46,
        delivery_address="MG Road",
        created_at=created,
        updated_at=created,
    )


async def add_restaurant(session_maker, name: str, lat: float, lng: float, is_open: bool = True) -> str:
    async with session_maker() as session:
        record = RestaurantRecord(
            name=name,
            cuisine="Italian",
            address="MG Road",
            latitude=lat,
            longitude=lng,
            is_open=is_open,
        )
        record.menu_items = [
            MenuItemRecord(name="Margherita Pizza", price=299, category="pizza"),
            MenuItemRecord(name="Sold Out Special", price=499, category="pizza", is_available=False),
        ]
        session.add(record)
        await session.commit()
        return record.id


class TestRepositoryOrders:
    """Tests for mirrored orders."""

    @pytest.mark.asyncio
    async def test_save_and_find(self, repository):
        order = make_order("ORD-1")

        saved = await repository.save_order(order)
        found = await repository.find_order("ORD-1")

        assert saved.success
        assert found.success
        assert found.value.id == "ORD-1"
        assert found.value.status == OrderStatus.PENDING
        assert [line.name for line in found.value.items] == ["Margherita Pizza", "Garlic Bread"]
        assert found.value.items[1].quantity == 2

    @pytest.mark.asyncio
    async def test_find_missing_order(self, repository):
        found = await repository.find_order("ORD-404")

        assert found.success
        assert found.value is None

    @pytest.mark.asyncio
    async def test_orders_by_user_newest_first(self, repository):
        await repository.save_order(make_order("old", minutes_ago=20))
        await repository.save_order(make_order("new", minutes_ago=1))
        await repository.save_order(make_order("other", user_id="user-2"))

        found = await repository.find_orders_by_user("user-1")

        assert [o.id for o in found.value] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_duplicate_order_id_fails_softly(self, repository):
        await repository.save_order(make_order("ORD-1"))

        again = await repository.save_order(make_order("ORD-1"))

        assert not again.success
        assert again.error_code == "database_error"


class TestRepositoryRestaurants:
    """Tests for restaurant queries."""

    @pytest.mark.asyncio
    async def test_nearby_filters_by_radius_and_open(self, repository, session_maker):
        await add_restaurant(session_maker, "Near", 12.9720, 77.5950)
        await add_restaurant(session_maker, "Farther", 12.9900, 77.5946)
        await add_restaurant(session_maker, "Closed", 12.9717, 77.5947, is_open=False)
        await add_restaurant(session_maker, "Delhi", 28.6139, 77.2090)

        result = await repository.find_restaurants_near(12.9716, 77.5946, 5000)

        assert result.success
        assert [r.name for r in result.value] == ["Near", "Farther"]
        assert result.value[0].distance < result.value[1].distance
        assert result.value[0].menu == []

    @pytest.mark.asyncio
    async def test_nearby_respects_limit(self, repository, session_maker):
        for n in range(3):
            await add_restaurant(session_maker, f"Place {n}", 12.9716 + n * 0.001, 77.5946)

        result = await repository.find_restaurants_near(12.9716, 77.5946, 5000, limit=2)

        assert len(result.value) == 2

    @pytest.mark.asyncio
    async def test_get_restaurant_only_available_items(self, repository, session_maker):
        restaurant_id = await add_restaurant(session_maker, "Pizza Palace", 12.9716, 77.5946)

        result = await repository.get_restaurant(restaurant_id)

        assert result.success
        assert result.value.name == "Pizza Palace"
        assert [item.name for item in result.value.menu] == ["Margherita Pizza"]
        assert result.value.image == "/placeholder.svg"

    @pytest.mark.asyncio
    async def test_get_unknown_restaurant(self, repository):
        result = await repository.get_restaurant("missing")

        assert result.success
        assert result.value is None


class TestRepositoryUsers:
    """Tests for signup persistence."""

    @pytest.mark.asyncio
    async def test_create_user(self, repository):
        result = await repository.create_user("priya", "priya@example.com", "hash")

        assert result.success
        assert len(result.value) == 32

    @pytest.mark.asyncio
    async def test_duplicate_email(self, repository):
        await repository.create_user("priya", "priya@example.com", "hash")

        result = await repository.create_user("priya2", "priya@example.com", "hash")

        assert not result.success
        assert result.error_code == "user_exists"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, repository):
        await repository.create_user("priya", "priya@example.com", "hash")

        result = await repository.create_user("priya", "other@example.com", "hash")

        assert result.error_code == "user_exists"


class TestRepositoryUnavailable:
    """Tests for database failures surfacing as results."""

    @pytest.fixture
    def broken_repository(self) -> StorefrontRepository:
        def broken_session():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        return StorefrontRepository(broken_session)

    @pytest.mark.asyncio
    async def test_health_check(self, repository, broken_repository):
        assert await repository.health_check() is True
        assert await broken_repository.health_check() is False

    @pytest.mark.asyncio
    async def test_lookups_fail_softly(self, broken_repository):
        assert not (await broken_repository.find_order("ORD-1")).success
        assert not (await broken_repository.get_restaurant("1")).success
        assert not (await broken_repository.find_restaurants_near(12.97, 77.59, 5000)).success
        assert not (await broken_repository.save_order(make_order("ORD-1"))).success
