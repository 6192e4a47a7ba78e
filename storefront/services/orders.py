"""
Order Service

Checkout and order tracking. New orders always land in the in-memory
order store and are mirrored to the database when one is configured.
Reads try the in-memory store, then the database, then sample data.

Version: 1.0.0
"""

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Optional

from storefront.core.config import Settings
from storefront.models import OrderStatus
from storefront.schemas import OrderCreate, OrderItemResponse, OrderResponse
from storefront.services import catalog, fallback
from storefront.services.order_store import OrderLine, OrderStore, StoredOrder
from storefront.services.repository import StorefrontRepository

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    """Timestamp plus random suffix, e.g. ``ORD-1729334400123-9f2c1a``."""
    return f"ORD-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def calculate_order_totals(
    lines: list[OrderLine],
    delivery_fee: float,
    tax_rate: float,
) -> dict[str, float]:
    """Calculate order subtotal, tax, and total."""
    subtotal = round(sum(line.price * line.quantity for line in lines), 2)
    tax = round(subtotal * tax_rate, 2)
    total = round(subtotal + delivery_fee + tax, 2)

    return {
        "subtotal": subtotal,
        "delivery_fee": round(delivery_fee, 2),
        "tax": tax,
        "total": total,
    }


def to_response(order: StoredOrder, restaurant_phone: Optional[str] = None) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        user_id=order.user_id or None,
        restaurant_id=order.restaurant_id,
        restaurant_name=order.restaurant_name,
        items=[
            OrderItemResponse(
                id=line.menu_item_id,
                name=line.name,
                quantity=line.quantity,
                price=line.price,
            )
            for line in order.items
        ],
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        tax=order.tax,
        total=order.total,
        status=order.status.value,
        estimated_delivery_time=order.estimated_delivery_time,
        delivery_address=order.delivery_address,
        restaurant_phone=restaurant_phone,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


class OrderService:
    """
    Order creation and lookup.

    Args:
        store: In-memory order store
        settings: Application settings (fees, tax rate)
        repository: Database repository, or None when no database is configured
    """

    def __init__(
        self,
        store: OrderStore,
        settings: Settings,
        repository: Optional[StorefrontRepository] = None,
    ):
        self.store = store
        self.settings = settings
        self.repository = repository

    async def create(self, payload: OrderCreate) -> StoredOrder:
        """
        Place an order.

        The payload is already validated (at least one item, non-empty
        address), so this never rejects. A failed database mirror is logged
        and the in-memory copy still serves reads.
        """
        lines = [
            OrderLine(
                menu_item_id=item.id,
                name=item.name,
                price=item.price,
                quantity=item.quantity,
            )
            for item in payload.items
        ]

        delivery_fee = (
            payload.delivery_fee
            if payload.delivery_fee is not None
            else self.settings.delivery_fee
        )
        totals = calculate_order_totals(lines, delivery_fee, self.settings.tax_rate)
        now = datetime.now(timezone.utc)

        order = StoredOrder(
            id=new_order_id(),
            user_id=payload.user_id,
            restaurant_id=payload.restaurant_id,
            restaurant_name=payload.restaurant_name,
            items=tuple(lines),
            subtotal=totals["subtotal"],
            delivery_fee=totals["delivery_fee"],
            tax=totals["tax"],
            total=totals["total"],
            delivery_address=payload.delivery_address,
            status=OrderStatus.PENDING,
            estimated_delivery_time=catalog.estimate_delivery_time(),
            created_at=now,
            updated_at=now,
        )

        self.store.record(payload.user_id, order)

        if self.repository is not None:
            mirrored = await self.repository.save_order(order)
            if not mirrored.success:
                logger.warning(f"Order {order.id} kept in memory only: {mirrored.error_message}")

        logger.info(f"Order {order.id} placed with {order.restaurant_name} (total {order.total})")
        return order

    async def list_for_user(self, user_id: str) -> tuple[list[StoredOrder], str]:
        """User's orders, newest first, with the source that answered."""
        orders = self.store.find_by_user(user_id)
        if orders:
            logger.debug(f"Found {len(orders)} orders in memory for {user_id}")
            return orders, "memory"

        if self.repository is not None:
            result = await self.repository.find_orders_by_user(user_id)
            if result.success and result.value:
                logger.debug(f"Found {len(result.value)} orders in database for {user_id}")
                return result.value, "database"
            if not result.success:
                logger.warning(f"Database unavailable for orders of {user_id}")

        return [], "none"

    async def get(self, order_id: str) -> tuple[StoredOrder, str]:
        """Order for tracking; the sample order when no store has it."""
        order = self.store.find_by_id(order_id)
        if order is not None:
            return order, "memory"

        if self.repository is not None:
            result = await self.repository.find_order(order_id)
            if result.success and result.value is not None:
                return result.value, "database"
            if not result.success:
                logger.warning(f"Database unavailable for order {order_id}")

        logger.info(f"Order {order_id} unknown; serving sample order")
        return fallback.sample_order(order_id), "fallback"

    def all_orders(self) -> list[StoredOrder]:
        return self.store.all()
