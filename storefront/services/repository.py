"""
Storefront Repository

Database access for users, restaurants and orders. Every method returns a
DatabaseResult instead of raising, so handlers can see (and log) which
fallback they pick when the database is down.

Version: 1.0.0
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.models import (
    MenuItemRecord,
    OrderRecord,
    OrderStatus,
    RestaurantRecord,
    User,
)
from storefront.schemas import Coordinates, MenuItem, Restaurant
from storefront.services import catalog
from storefront.services.order_store import OrderLine, StoredOrder

logger = logging.getLogger(__name__)

KM_PER_DEGREE_LAT = 111.32


@dataclass
class DatabaseResult:
    """
    Outcome of a database call.

    Attributes:
        success: False when the database could not be reached or failed
        value: Query result (None for "not found" on a successful call)
        error_message: Description of the failure
        error_code: Machine-readable failure code
    """
    success: bool
    value: Any = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, value: Any = None) -> "DatabaseResult":
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error: Exception, code: str = "database_error") -> "DatabaseResult":
        return cls(success=False, error_message=str(error), error_code=code)


def order_to_record(order: StoredOrder) -> OrderRecord:
    return OrderRecord(
        id=order.id,
        user_id=order.user_id,
        restaurant_id=order.restaurant_id,
        restaurant_name=order.restaurant_name,
        items=json.dumps([
            {
                "menu_item_id": line.menu_item_id,
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
            }
            for line in order.items
        ]),
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        tax=order.tax,
        total=order.total,
        delivery_address=order.delivery_address,
        status=order.status,
        estimated_delivery_time=order.estimated_delivery_time,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def record_to_order(record: OrderRecord) -> StoredOrder:
    lines = tuple(
        OrderLine(
            menu_item_id=str(item["menu_item_id"]),
            name=item["name"],
            price=float(item["price"]),
            quantity=int(item["quantity"]),
        )
        for item in json.loads(record.items)
    )
    return StoredOrder(
        id=record.id,
        user_id=record.user_id,
        restaurant_id=record.restaurant_id,
        restaurant_name=record.restaurant_name,
        items=lines,
        subtotal=record.subtotal,
        delivery_fee=record.delivery_fee,
        tax=record.tax,
        total=record.total,
        delivery_address=record.delivery_address,
        status=OrderStatus(record.status),
        estimated_delivery_time=record.estimated_delivery_time,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def record_to_restaurant(
    record: RestaurantRecord,
    distance: Optional[float] = None,
    placeholder_image: Optional[str] = None,
    include_menu: bool = False,
) -> Restaurant:
    menu = []
    if include_menu:
        menu = [
            MenuItem(
                id=item.id,
                name=item.name,
                description=item.description,
                price=item.price,
                category=item.category,
                image=item.image_url or placeholder_image,
                is_vegetarian=item.is_vegetarian,
                is_spicy=item.is_spicy,
                is_available=item.is_available,
            )
            for item in record.menu_items
            if item.is_available
        ]

    return Restaurant(
        id=record.id,
        name=record.name,
        cuisine=record.cuisine,
        rating=record.rating,
        delivery_time=record.delivery_time,
        delivery_fee=record.delivery_fee,
        image=record.image_url or placeholder_image,
        distance=distance,
        is_open=record.is_open,
        price_range=record.price_range,
        address=record.address,
        coordinates=Coordinates(lat=record.latitude, lng=record.longitude),
        phone=record.phone,
        menu=menu,
    )


class StorefrontRepository:
    """
    Async repository over the optional storefront database.

    Args:
        session_maker: Factory bound to the configured engine
        placeholder_image: Image used for rows without one
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        placeholder_image: Optional[str] = None,
    ):
        self._session_maker = session_maker
        self._placeholder_image = placeholder_image

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def save_order(self, order: StoredOrder) -> DatabaseResult:
        try:
            async with self._session_maker() as session:
                session.add(order_to_record(order))
                await session.commit()
            logger.info(f"Order {order.id} mirrored to database")
            return DatabaseResult.ok(order.id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to mirror order {order.id}: {e}")
            return DatabaseResult.failed(e)

    async def find_orders_by_user(self, user_id: str) -> DatabaseResult:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(OrderRecord)
                    .where(OrderRecord.user_id == user_id)
                    .order_by(OrderRecord.created_at.desc())
                )
                orders = [record_to_order(r) for r in result.scalars().all()]
            return DatabaseResult.ok(orders)
        except SQLAlchemyError as e:
            logger.error(f"Order lookup for user {user_id} failed: {e}")
            return DatabaseResult.failed(e)

    async def find_order(self, order_id: str) -> DatabaseResult:
        try:
            async with self._session_maker() as session:
                record = await session.get(OrderRecord, order_id)
                order = record_to_order(record) if record else None
            return DatabaseResult.ok(order)
        except SQLAlchemyError as e:
            logger.error(f"Order lookup for {order_id} failed: {e}")
            return DatabaseResult.failed(e)

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    async def find_restaurants_near(
        self,
        lat: float,
        lng: float,
        radius_m: int,
        limit: int = 10,
    ) -> DatabaseResult:
        """
        Open restaurants within ``radius_m`` of a point, nearest first.

        A bounding box narrows the query; the exact radius is applied with
        the haversine distance.
        """
        radius_km = radius_m / 1000
        lat_delta = radius_km / KM_PER_DEGREE_LAT
        cos_lat = max(math.cos(math.radians(lat)), 1e-6)
        lng_delta = radius_km / (KM_PER_DEGREE_LAT * cos_lat)

        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(RestaurantRecord).where(
                        RestaurantRecord.is_open.is_(True),
                        RestaurantRecord.latitude.between(lat - lat_delta, lat + lat_delta),
                        RestaurantRecord.longitude.between(lng - lng_delta, lng + lng_delta),
                    )
                )
                records = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Nearby restaurant query failed: {e}")
            return DatabaseResult.failed(e)

        nearby = []
        for record in records:
            distance = catalog.haversine_km(lat, lng, record.latitude, record.longitude)
            if distance <= radius_km:
                nearby.append((distance, record))

        nearby.sort(key=lambda pair: pair[0])

        return DatabaseResult.ok([
            record_to_restaurant(record, distance, self._placeholder_image)
            for distance, record in nearby[:limit]
        ])

    async def get_restaurant(self, restaurant_id: str) -> DatabaseResult:
        """Restaurant with its available menu items, or None when unknown."""
        try:
            async with self._session_maker() as session:
                record = await session.get(RestaurantRecord, restaurant_id)
                restaurant = (
                    record_to_restaurant(
                        record,
                        placeholder_image=self._placeholder_image,
                        include_menu=True,
                    )
                    if record
                    else None
                )
            return DatabaseResult.ok(restaurant)
        except SQLAlchemyError as e:
            logger.error(f"Restaurant lookup for {restaurant_id} failed: {e}")
            return DatabaseResult.failed(e)

    # =========================================================================
    # USERS
    # =========================================================================

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        address: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> DatabaseResult:
        """
        Insert a user.

        Fails with ``error_code="user_exists"`` when the username or email
        is already registered.
        """
        try:
            async with self._session_maker() as session:
                existing = await session.execute(
                    select(func.count(User.id)).where(
                        or_(User.email == email, User.username == username)
                    )
                )
                if existing.scalar():
                    return DatabaseResult(
                        success=False,
                        error_message="User already exists",
                        error_code="user_exists",
                    )

                user = User(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    address=address,
                    phone=phone,
                )
                session.add(user)
                await session.commit()
                await session.refresh(user)

            logger.info(f"User {username} created")
            return DatabaseResult.ok(user.id)

        except IntegrityError:
            return DatabaseResult(
                success=False,
                error_message="User already exists",
                error_code="user_exists",
            )
        except SQLAlchemyError as e:
            logger.error(f"User creation failed: {e}")
            return DatabaseResult.failed(e)

    # =========================================================================
    # HEALTH
    # =========================================================================

    async def health_check(self) -> bool:
        try:
            async with self._session_maker() as session:
                await session.execute(select(1))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False
