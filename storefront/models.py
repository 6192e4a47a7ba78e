"""
SQLAlchemy Database Models

Optional persistent backing store for the storefront:
- Users created through signup
- Seeded restaurants and their menu items
- Orders mirrored from the in-memory order store

Version: 1.0.0
"""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class OrderStatus(str, enum.Enum):
    """Order lifecycle labels."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    ON_THE_WAY = "on_the_way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class User(Base):
    """Storefront account."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.username}>"


class RestaurantRecord(Base):
    """
    Restaurant owned by the storefront (as opposed to one discovered
    through the places provider).
    """
    __tablename__ = "restaurants"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    cuisine = Column(String(50), nullable=False, index=True)
    address = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False, index=True)
    longitude = Column(Float, nullable=False, index=True)
    phone = Column(String(30), nullable=True)
    rating = Column(Float, nullable=False, default=4.0, index=True)
    delivery_fee = Column(Float, nullable=False, default=49.0)
    delivery_time = Column(String(20), nullable=False, default="30-45 min")
    is_open = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(500), nullable=True)
    price_range = Column(String(10), nullable=False, default="₹₹")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    menu_items = relationship(
        "MenuItemRecord",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Restaurant {self.name} ({self.cuisine})>"


class MenuItemRecord(Base):
    __tablename__ = "menu_items"

    id = Column(String(32), primary_key=True, default=_new_id)
    restaurant_id = Column(
        String(32),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    category = Column(String(50), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_vegetarian = Column(Boolean, nullable=False, default=False)
    is_spicy = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    restaurant = relationship("RestaurantRecord", back_populates="menu_items")


class OrderRecord(Base):
    """
    Persistent copy of an order.

    Restaurant details are denormalized: the order keeps the name it was
    placed under even if the restaurant later changes.
    """
    __tablename__ = "orders"

    id = Column(String(40), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    restaurant_id = Column(String(255), nullable=False)
    restaurant_name = Column(String(255), nullable=False)

    items = Column(Text, nullable=False)  # JSON string of ordered items

    subtotal = Column(Float, nullable=False)
    delivery_fee = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    delivery_address = Column(String(255), nullable=False)
    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    estimated_delivery_time = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Order {self.id} - {self.restaurant_name} - {self.status.value}>"
