"""
In-Memory Order Store

Process-local store for placed orders, indexed by owning user. It is the
primary store when no database is configured and the first place reads
look when one is.

Contents live for the lifetime of the process only. One instance is
created at application startup and handed to request handlers; the lock
makes it safe to share across threadpool workers.

Version: 1.0.0
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from storefront.models import OrderStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """Price snapshot of one cart line at checkout."""
    menu_item_id: str
    name: str
    price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


@dataclass(frozen=True)
class StoredOrder:
    """
    A placed order.

    Attributes:
        id: Opaque order id, unique per process (caller generated)
        user_id: Owning user
        restaurant_id: Restaurant the order was placed with
        restaurant_name: Name at the time of ordering (denormalized)
        items: Ordered lines
        subtotal: Sum of line totals
        delivery_fee: Delivery charge
        tax: Tax on the subtotal
        total: subtotal + delivery_fee + tax
        delivery_address: Free-text address
        status: Lifecycle label
        estimated_delivery_time: Display text, e.g. "25-35 min"
        created_at: Placement time (UTC)
        updated_at: Last status change (UTC)
    """
    id: str
    user_id: str
    restaurant_id: str
    restaurant_name: str
    items: tuple[OrderLine, ...]
    subtotal: float
    delivery_fee: float
    tax: float
    total: float
    delivery_address: str
    status: OrderStatus = OrderStatus.PENDING
    estimated_delivery_time: str = "30-45 min"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class OrderStore:
    """
    Orders grouped by user, newest first.

    Example:
        >>> store = OrderStore()
        >>> store.record("user-1", order)
        >>> store.find_by_user("user-1")[0] is order
        True
    """

    def __init__(self):
        self._orders_by_user: dict[str, list[StoredOrder]] = {}
        self._lock = threading.RLock()

    def record(self, user_id: str, order: StoredOrder) -> None:
        """
        Store an order at the front of the user's list.

        Order ids are not checked for uniqueness.
        """
        with self._lock:
            self._orders_by_user.setdefault(user_id, []).insert(0, order)
        logger.info(f"Stored order {order.id} for user {user_id}")

    def find_by_user(self, user_id: str) -> list[StoredOrder]:
        """All orders for a user, newest first; empty for unknown users."""
        with self._lock:
            return list(self._orders_by_user.get(user_id, []))

    def find_by_id(self, order_id: str) -> Optional[StoredOrder]:
        """First order with this id across every user, or None."""
        with self._lock:
            for orders in self._orders_by_user.values():
                for order in orders:
                    if order.id == order_id:
                        return order
        return None

    def all(self) -> list[StoredOrder]:
        """Every stored order, newest first. Diagnostics only."""
        with self._lock:
            orders = [o for user_orders in self._orders_by_user.values() for o in user_orders]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(orders) for orders in self._orders_by_user.values())
