"""Tests for the in-memory order store."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from storefront.models import OrderStatus
from storefront.services.order_store import OrderLine, OrderStore, StoredOrder


def make_order(order_id: str, user_id: str = "user-1", minutes_ago: int = 0) -> StoredOrder:
    created = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    return StoredOrder(
        id=order_id,
        user_id=user_id,
        restaurant_id="ChIJabc123XYZ456",
        restaurant_name="Pizza Corner",
        items=(OrderLine(menu_item_id="pizza_corner_1", name="Margherita Pizza", price=299, quantity=2),),
        subtotal=598,
        delivery_fee=49,
        tax=107.64,
        total=754.64,
        delivery_address="12 MG Road",
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def store() -> OrderStore:
    return OrderStore()


class TestOrderStoreRecord:
    """Tests for recording and reading back orders."""

    def test_record_then_find_by_user(self, store):
        """Test a recorded order is the first entry for its user."""
        order = make_order("ORD-1")
        store.record("user-1", order)

        assert store.find_by_user("user-1")[0] is order

    def test_newest_first(self, store):
        """Test later records come before earlier ones."""
        first = make_order("ORD-1")
        second = make_order("ORD-2")
        store.record("user-1", first)
        store.record("user-1", second)

        assert [o.id for o in store.find_by_user("user-1")] == ["ORD-2", "ORD-1"]

    def test_unknown_user_returns_empty_list(self, store):
        """Test a user with no orders is not an error."""
        assert store.find_by_user("nobody") == []

    def test_users_are_isolated(self, store):
        """Test orders never leak between users."""
        store.record("user-1", make_order("ORD-1", "user-1"))
        store.record("user-2", make_order("ORD-2", "user-2"))

        assert [o.id for o in store.find_by_user("user-1")] == ["ORD-1"]
        assert [o.id for o in store.find_by_user("user-2")] == ["ORD-2"]

    def test_returned_list_is_a_copy(self, store):
        """Test mutating a returned list does not change the store."""
        store.record("user-1", make_order("ORD-1"))
        store.find_by_user("user-1").clear()

        assert len(store.find_by_user("user-1")) == 1

    def test_duplicate_ids_are_both_kept(self, store):
        """Test ids are not checked for uniqueness."""
        store.record("user-1", make_order("ORD-1"))
        store.record("user-1", make_order("ORD-1"))

        assert len(store.find_by_user("user-1")) == 2
        assert len(store) == 2


class TestOrderStoreLookup:
    """Tests for id lookup and diagnostics listing."""

    def test_find_by_id_across_users(self, store):
        store.record("user-1", make_order("ORD-1", "user-1"))
        store.record("user-2", make_order("ORD-2", "user-2"))

        found = store.find_by_id("ORD-2")

        assert found is not None
        assert found.user_id == "user-2"

    def test_find_by_id_missing(self, store):
        assert store.find_by_id("ORD-404") is None

    def test_all_sorted_by_creation_time(self, store):
        """Test all() merges every user's orders newest first."""
        store.record("user-1", make_order("old", "user-1", minutes_ago=30))
        store.record("user-2", make_order("new", "user-2", minutes_ago=1))
        store.record("user-1", make_order("mid", "user-1", minutes_ago=10))

        assert [o.id for o in store.all()] == ["new", "mid", "old"]

    def test_default_status_is_pending(self):
        assert make_order("ORD-1").status == OrderStatus.PENDING

    def test_line_total(self):
        line = OrderLine(menu_item_id="x", name="Naan", price=49.5, quantity=3)
        assert line.line_total == 148.5


class TestOrderStoreConcurrency:
    """Tests for concurrent writers."""

    def test_concurrent_records_are_all_kept(self, store):
        """Test no order is lost when many threads record at once."""
        def writer(user_index: int):
            for n in range(50):
                store.record(f"user-{user_index}", make_order(f"ORD-{user_index}-{n}", f"user-{user_index}"))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 400
        assert all(len(store.find_by_user(f"user-{i}")) == 50 for i in range(8))
