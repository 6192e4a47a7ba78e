"""
Menu Templates

Template dishes used to give places-provider restaurants (which carry no
menu of their own) a plausible menu for their cuisine. Prices are in the
storefront currency. Items are instantiated by ``catalog.build_menu``.
"""

from typing import Any

MenuTemplate = list[dict[str, Any]]


def _dish(
    name: str,
    description: str,
    price: float,
    category: str,
    is_vegetarian: bool,
    is_spicy: bool,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "is_vegetarian": is_vegetarian,
        "is_spicy": is_spicy,
    }


GENERAL_MENU: MenuTemplate = [
    _dish("Chef's Special", "Today's recommended dish by our chef", 299, "specials", False, False),
    _dish("Grilled Chicken", "Tender grilled chicken with herbs", 349, "mains", False, False),
    _dish("Vegetarian Platter", "Mixed vegetarian dishes", 279, "vegetarian", True, False),
    _dish("Fresh Juice", "Seasonal fruit juice", 99, "drinks", True, False),
]

MENU_TEMPLATES: dict[str, MenuTemplate] = {
    "indian": [
        _dish("Butter Chicken", "Tender chicken in rich tomato and butter gravy", 349, "main course", False, True),
        _dish("Paneer Butter Masala", "Cottage cheese in creamy tomato gravy", 299, "main course", True, False),
        _dish("Chicken Biryani", "Aromatic basmati rice with tender chicken pieces", 329, "biryani", False, True),
        _dish("Garlic Naan", "Soft bread with garlic and butter", 69, "bread", True, False),
    ],
    "chinese": [
        _dish("Chicken Fried Rice", "Wok-fried rice with chicken and vegetables", 249, "rice", False, False),
        _dish("Veg Hakka Noodles", "Indo-Chinese style vegetable noodles", 219, "noodles", True, False),
        _dish("Sweet & Sour Chicken", "Crispy chicken in tangy sauce", 319, "chicken", False, False),
        _dish("Spring Rolls", "Crispy vegetable rolls with sweet sauce", 149, "appetizers", True, False),
    ],
    "italian": [
        _dish("Margherita Pizza", "Fresh tomatoes, mozzarella, and basil", 299, "pizza", True, False),
        _dish("Pepperoni Pizza", "Classic pepperoni with mozzarella cheese", 399, "pizza", False, False),
        _dish("Pasta Carbonara", "Creamy pasta with bacon and parmesan", 349, "pasta", False, False),
        _dish("Caesar Salad", "Romaine lettuce with parmesan and croutons", 199, "salads", True, False),
    ],
    "fastfood": [
        _dish("Classic Burger", "Beef patty with lettuce, tomato, and sauce", 199, "burgers", False, False),
        _dish("Chicken Burger", "Grilled chicken with mayo and vegetables", 229, "burgers", False, False),
        _dish("French Fries", "Crispy golden fries with salt", 99, "sides", True, False),
        _dish("Chocolate Shake", "Rich chocolate milkshake", 149, "drinks", True, False),
    ],
    "japanese": [
        _dish("California Roll", "Crab, avocado, and cucumber roll", 299, "sushi", False, False),
        _dish("Vegetable Roll", "Cucumber, avocado, and carrot", 249, "sushi", True, False),
        _dish("Chicken Teriyaki", "Grilled chicken with teriyaki sauce", 379, "mains", False, False),
        _dish("Miso Soup", "Traditional soybean soup", 149, "soups", True, False),
    ],
    "cafe": [
        _dish("Cappuccino", "Espresso with steamed milk foam", 129, "coffee", True, False),
        _dish("Chicken Sandwich", "Grilled chicken with vegetables", 199, "sandwiches", False, False),
        _dish("Chocolate Croissant", "Buttery pastry with chocolate filling", 89, "pastries", True, False),
        _dish("Cheesecake", "Creamy New York style cheesecake", 159, "desserts", True, False),
    ],
    "thai": [
        _dish("Pad Thai", "Stir-fried noodles with tamarind sauce", 279, "noodles", False, True),
        _dish("Green Curry", "Spicy coconut curry with vegetables", 299, "curry", True, True),
        _dish("Tom Yum Soup", "Spicy and sour Thai soup", 199, "soups", False, True),
        _dish("Mango Sticky Rice", "Sweet coconut rice with mango", 159, "desserts", True, False),
    ],
    "general": GENERAL_MENU,
}
