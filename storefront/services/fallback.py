"""
Fallback Data

Static sample records served when a live source (places provider or
database) is unavailable, so storefront pages always have something to show.
"""

from datetime import datetime, timezone

from storefront.models import OrderStatus
from storefront.schemas import Coordinates, MenuItem, Restaurant
from storefront.services.order_store import OrderLine, StoredOrder

PLACEHOLDER_CARD_IMAGE = "/placeholder.svg?height=200&width=300"
PLACEHOLDER_HERO_IMAGE = "/placeholder.svg?height=300&width=800"


def sample_restaurants() -> list[Restaurant]:
    """Restaurants shown when nearby search cannot reach any source."""
    return [
        Restaurant(
            id="1",
            name="Pizza Palace",
            cuisine="Italian",
            rating=4.5,
            delivery_time="25-35 min",
            delivery_fee=49,
            image=PLACEHOLDER_CARD_IMAGE,
            distance=1.2,
            is_open=True,
            price_range="₹₹",
            address="MG Road, Bangalore, Karnataka 560001",
            coordinates=Coordinates(lat=12.9716, lng=77.5946),
            phone="+91 80 1234 5678",
            menu=[
                MenuItem(
                    id="pizza_palace_1",
                    name="Margherita Pizza",
                    description="Fresh tomatoes, mozzarella, and basil",
                    price=299,
                    category="pizza",
                    image=PLACEHOLDER_CARD_IMAGE,
                    is_vegetarian=True,
                ),
            ],
        ),
        Restaurant(
            id="2",
            name="Burger Junction",
            cuisine="American",
            rating=4.2,
            delivery_time="20-30 min",
            delivery_fee=29,
            image=PLACEHOLDER_CARD_IMAGE,
            distance=0.8,
            is_open=True,
            price_range="₹",
            address="Connaught Place, New Delhi, Delhi 110001",
            coordinates=Coordinates(lat=28.6139, lng=77.209),
            phone="+91 11 2345 6789",
            menu=[
                MenuItem(
                    id="burger_junction_1",
                    name="Classic Burger",
                    description="Beef patty with lettuce and tomato",
                    price=199,
                    category="burgers",
                    image=PLACEHOLDER_CARD_IMAGE,
                ),
            ],
        ),
    ]


def sample_restaurant(restaurant_id: str) -> Restaurant:
    """Restaurant page shown when the database cannot be queried."""
    dishes = [
        ("Margherita Pizza", "Fresh tomatoes, mozzarella, basil, and olive oil", 299, "pizza", True, False),
        ("Pepperoni Pizza", "Classic pepperoni with mozzarella cheese", 399, "pizza", False, False),
        ("Caesar Salad", "Romaine lettuce, parmesan, croutons, caesar dressing", 199, "salads", True, False),
        ("Chicken Alfredo", "Grilled chicken with creamy alfredo sauce over fettuccine", 449, "pasta", False, False),
        ("Tiramisu", "Classic Italian dessert with coffee and mascarpone", 149, "desserts", True, False),
        ("Spicy Arrabbiata", "Penne pasta with spicy tomato sauce and red peppers", 349, "pasta", True, True),
    ]

    return Restaurant(
        id=restaurant_id,
        name="Pizza Palace",
        cuisine="Italian",
        rating=4.5,
        delivery_time="25-35 min",
        delivery_fee=49,
        image=PLACEHOLDER_HERO_IMAGE,
        address="MG Road, Bangalore, Karnataka 560001",
        phone="+91 80 1234 5678",
        is_open=True,
        coordinates=Coordinates(lat=12.9716, lng=77.5946),
        price_range="₹₹",
        menu=[
            MenuItem(
                id=str(index),
                name=name,
                description=description,
                price=price,
                category=category,
                image=PLACEHOLDER_CARD_IMAGE,
                is_vegetarian=vegetarian,
                is_spicy=spicy,
            )
            for index, (name, description, price, category, vegetarian, spicy) in enumerate(dishes, start=1)
        ],
    )


def sample_order(order_id: str) -> StoredOrder:
    """Tracking page shown for an order no store knows about."""
    now = datetime.now(timezone.utc)
    return StoredOrder(
        id=order_id,
        user_id="",
        restaurant_id="1",
        restaurant_name="Pizza Palace",
        items=(
            OrderLine(menu_item_id="1", name="Margherita Pizza", price=299, quantity=1),
            OrderLine(menu_item_id="2", name="Caesar Salad", price=199, quantity=1),
        ),
        subtotal=498,
        delivery_fee=49,
        tax=0,
        total=547,
        delivery_address="123 Main St, City, State",
        status=OrderStatus.CONFIRMED,
        estimated_delivery_time="25-35 min",
        created_at=now,
        updated_at=now,
    )
