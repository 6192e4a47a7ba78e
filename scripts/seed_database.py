"""
Database Seed Script

Creates the storefront tables and loads sample restaurants with menus.
Existing restaurants and menu items are replaced; users and orders are kept.
Run from project root: python scripts/seed_database.py

Version: 1.0.0
"""

import asyncio
import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from sqlalchemy import delete

from storefront.core.config import get_settings
from storefront.database import build_engine, build_session_maker, init_db
from storefront.models import MenuItemRecord, RestaurantRecord

PLACEHOLDER = "/placeholder.svg?height=200&width=300"

# (name, cuisine, address, lat, lng, phone, rating, fee, time, price range)
RESTAURANTS = [
    ("Pizza Palace", "Italian", "MG Road, Bangalore, Karnataka 560001",
     12.9716, 77.5946, "+91 80 1234 5678", 4.5, 49, "25-35 min", "₹₹"),
    ("Burger Junction", "American", "Connaught Place, New Delhi, Delhi 110001",
     28.6139, 77.209, "+91 11 2345 6789", 4.2, 29, "20-30 min", "₹"),
    ("Biryani House", "Indian", "Hyderabad, Telangana 500001",
     17.385, 78.4867, "+91 40 5678 9012", 4.6, 39, "25-40 min", "₹₹"),
    ("South Indian Delights", "South Indian", "T. Nagar, Chennai, Tamil Nadu 600017",
     13.0827, 80.2707, "+91 44 6789 0123", 4.4, 35, "20-35 min", "₹"),
    ("Sushi Zen", "Japanese", "Bandra West, Mumbai, Maharashtra 400050",
     19.0596, 72.8295, "+91 22 3456 7890", 4.7, 79, "30-45 min", "₹₹₹"),
    ("Tandoor Express", "North Indian", "Sector 18, Noida, Uttar Pradesh 201301",
     28.5706, 77.3272, "+91 120 7890 1234", 4.3, 45, "30-40 min", "₹₹"),
]

# restaurant name -> (dish, description, price, category, vegetarian, spicy)
MENUS = {
    "Pizza Palace": [
        ("Margherita Pizza", "Fresh tomatoes, mozzarella, basil, and olive oil", 299, "pizza", True, False),
        ("Pepperoni Pizza", "Classic pepperoni with mozzarella cheese", 399, "pizza", False, False),
        ("Caesar Salad", "Romaine lettuce, parmesan, croutons, caesar dressing", 199, "salads", True, False),
        ("Garlic Bread", "Crispy bread with garlic butter and herbs", 149, "appetizers", True, False),
    ],
    "Burger Junction": [
        ("Classic Burger", "Beef patty with lettuce, tomato, onion, and special sauce", 249, "burgers", False, False),
        ("Veggie Burger", "Plant-based patty with fresh vegetables", 199, "burgers", True, False),
        ("French Fries", "Crispy golden fries with sea salt", 99, "sides", True, False),
        ("Chocolate Shake", "Rich chocolate milkshake with whipped cream", 129, "drinks", True, False),
    ],
    "Biryani House": [
        ("Chicken Biryani", "Aromatic basmati rice with tender chicken and spices", 299, "biryani", False, True),
        ("Mutton Biryani", "Fragrant rice with succulent mutton pieces", 399, "biryani", False, True),
        ("Veg Biryani", "Mixed vegetables with aromatic basmati rice", 249, "biryani", True, False),
        ("Raita", "Cool yogurt with cucumber and mint", 79, "sides", True, False),
    ],
    "South Indian Delights": [
        ("Masala Dosa", "Crispy crepe with spiced potato filling", 89, "dosa", True, True),
        ("Idli Sambar", "Steamed rice cakes with lentil curry", 69, "breakfast", True, False),
        ("Uttapam", "Thick pancake with vegetables and chutneys", 99, "breakfast", True, False),
        ("Filter Coffee", "Traditional South Indian coffee", 39, "drinks", True, False),
    ],
    "Sushi Zen": [
        ("California Roll", "Crab, avocado, and cucumber with sesame seeds", 299, "rolls", False, False),
        ("Spicy Tuna Roll", "Fresh tuna with spicy mayo and cucumber", 349, "rolls", False, True),
        ("Vegetable Roll", "Cucumber, avocado, and carrot with sesame seeds", 249, "rolls", True, False),
        ("Miso Soup", "Traditional soybean soup with tofu and seaweed", 149, "soups", True, False),
    ],
    "Tandoor Express": [
        ("Butter Chicken", "Tender chicken in rich tomato and butter gravy", 349, "curry", False, True),
        ("Paneer Tikka", "Grilled cottage cheese with spices and mint chutney", 279, "appetizers", True, True),
        ("Naan", "Soft leavened bread baked in tandoor", 49, "bread", True, False),
        ("Dal Makhani", "Creamy black lentils cooked with butter and spices", 229, "curry", True, False),
    ],
}


def build_records() -> list[RestaurantRecord]:
    records = []
    for name, cuisine, address, lat, lng, phone, rating, fee, eta, price_range in RESTAURANTS:
        restaurant = RestaurantRecord(
            name=name,
            cuisine=cuisine,
            address=address,
            latitude=lat,
            longitude=lng,
            phone=phone,
            rating=rating,
            delivery_fee=fee,
            delivery_time=eta,
            is_open=True,
            image_url=PLACEHOLDER,
            price_range=price_range,
        )
        restaurant.menu_items = [
            MenuItemRecord(
                name=dish,
                description=description,
                price=price,
                category=category,
                image_url=PLACEHOLDER,
                is_vegetarian=vegetarian,
                is_spicy=spicy,
                is_available=True,
            )
            for dish, description, price, category, vegetarian, spicy in MENUS[name]
        ]
        records.append(restaurant)
    return records


async def seed_database() -> bool:
    """Create tables and load the sample restaurants."""
    settings = get_settings()

    print("=" * 60)
    print("🌱 DATABASE SEED")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    if not settings.database_url:
        print("\n❌ DATABASE_URL not set!")
        print("   The API will serve sample data without a database.")
        return False

    engine = build_engine(settings.database_url, echo=settings.database_echo)
    try:
        await init_db(engine)
        print("\n✅ Tables ready")

        session_maker = build_session_maker(engine)
        async with session_maker() as session:
            await session.execute(delete(MenuItemRecord))
            await session.execute(delete(RestaurantRecord))
            print("🧹 Cleared existing restaurants and menu items")

            records = build_records()
            session.add_all(records)
            await session.commit()

        dish_count = sum(len(menu) for menu in MENUS.values())
        print(f"✅ Inserted {len(records)} restaurants")
        print(f"✅ Inserted {dish_count} menu items")
    finally:
        await engine.dispose()

    print("\n📋 RESTAURANTS:")
    print("-" * 60)
    for name, cuisine, address, *_ in RESTAURANTS:
        print(f"   {name:<24} {cuisine:<14} {address}")

    print("\n" + "=" * 60)
    print("✅ Seed complete")
    print("=" * 60)
    return True


if __name__ == "__main__":
    success = asyncio.run(seed_database())
    sys.exit(0 if success else 1)
