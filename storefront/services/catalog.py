"""
Catalog Helpers

Small deterministic helpers shared by the search, slug and order paths:
    - Great-circle distance between two coordinates
    - Cuisine labelling from Google place types
    - Menu template selection from place types and restaurant names
    - Price-range labels from Google price levels
    - Restaurant slug construction and parsing
    - Delivery time estimates

Version: 1.0.0
"""

import math
import random
import re
from typing import Iterable, Optional

from storefront.core.config import get_settings
from storefront.schemas import MenuItem
from storefront.services.menus import MENU_TEMPLATES, GENERAL_MENU

EARTH_RADIUS_KM = 6371.0
HASH_LENGTH = 6

# Ordered: the first tag found in the place's types wins.
CUISINE_BY_PLACE_TYPE: dict[str, str] = {
    "chinese_restaurant": "Chinese",
    "indian_restaurant": "Indian",
    "italian_restaurant": "Italian",
    "japanese_restaurant": "Japanese",
    "mexican_restaurant": "Mexican",
    "thai_restaurant": "Thai",
    "american_restaurant": "American",
    "french_restaurant": "French",
    "korean_restaurant": "Korean",
    "mediterranean_restaurant": "Mediterranean",
    "pizza_restaurant": "Pizza",
    "seafood_restaurant": "Seafood",
    "steakhouse": "Steakhouse",
    "sushi_restaurant": "Japanese",
    "vegetarian_restaurant": "Vegetarian",
    "fast_food_restaurant": "Fast Food",
    "cafe": "Cafe",
    "bakery": "Bakery",
}

DEFAULT_CUISINE = "Multi-cuisine"

# (menu type, place types, name keywords) checked in order.
SEARCH_MENU_RULES: list[tuple[str, tuple[str, ...], tuple[str, ...]]] = [
    (
        "indian",
        ("indian_restaurant",),
        ("biryani", "tandoor", "curry", "indian", "punjabi", "south indian"),
    ),
    (
        "chinese",
        ("chinese_restaurant",),
        ("chinese", "noodle", "wok", "dragon", "golden"),
    ),
    (
        "italian",
        ("italian_restaurant", "pizza_restaurant"),
        ("pizza", "italian", "pasta", "romano"),
    ),
    (
        "fastfood",
        ("fast_food_restaurant", "meal_takeaway"),
        ("burger", "kfc", "mcdonald", "subway", "quick"),
    ),
    (
        "cafe",
        ("cafe", "bakery"),
        ("cafe", "coffee", "starbucks", "barista"),
    ),
    (
        "japanese",
        ("japanese_restaurant", "sushi_restaurant"),
        ("sushi", "japanese", "ramen"),
    ),
    (
        "thai",
        ("thai_restaurant",),
        ("thai", "bangkok"),
    ),
]

# (cuisine label, menu type, name keywords) for names recovered from a slug.
SLUG_NAME_RULES: list[tuple[str, str, tuple[str, ...]]] = [
    ("Italian", "italian", ("pizza",)),
    ("American", "fastfood", ("burger", "junction")),
    ("Indian", "indian", ("biryani", "tandoor", "indian")),
    ("Chinese", "chinese", ("chinese", "dragon", "golden")),
    ("Japanese", "japanese", ("sushi", "zen", "japanese")),
    ("Cafe", "cafe", ("cafe", "coffee", "starbucks")),
    ("Thai", "thai", ("thai", "bangkok")),
]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers between two (lat, lng) points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def cuisine_from_types(types: Iterable[str]) -> str:
    """
    Derive a cuisine label from Google place types.

    Specific restaurant tags are checked first, in the order the place lists
    them; generic takeaway/food tags come next.
    """
    types = list(types or [])

    for place_type in types:
        if place_type in CUISINE_BY_PLACE_TYPE:
            return CUISINE_BY_PLACE_TYPE[place_type]

    if "meal_takeaway" in types or "meal_delivery" in types:
        return "Fast Food"
    if "food" in types:
        return "Restaurant"

    return DEFAULT_CUISINE


def menu_type_for(types: Iterable[str], name: str) -> str:
    """Pick the menu template for a search result."""
    types = set(types or [])
    lowered = (name or "").lower()

    for menu_type, place_types, keywords in SEARCH_MENU_RULES:
        if types.intersection(place_types) or any(k in lowered for k in keywords):
            return menu_type

    return "general"


def classify_name(name: str) -> tuple[str, str]:
    """
    Classify a bare restaurant name into ``(cuisine, menu_type)``.

    Used when only the human-readable part of a slug survives.
    """
    lowered = (name or "").lower()

    for cuisine, menu_type, keywords in SLUG_NAME_RULES:
        if any(k in lowered for k in keywords):
            return cuisine, menu_type

    return DEFAULT_CUISINE, "general"


def build_menu(menu_type: str, restaurant_name: str) -> list[MenuItem]:
    """Instantiate a template menu for a restaurant."""
    settings = get_settings()
    base_id = re.sub(r"\s+", "_", restaurant_name or "").lower()
    template = MENU_TEMPLATES.get(menu_type, GENERAL_MENU)

    return [
        MenuItem(
            id=f"{base_id}_{index}",
            image=settings.placeholder_image,
            is_available=True,
            **item,
        )
        for index, item in enumerate(template, start=1)
    ]


def price_range(price_level: Optional[int]) -> str:
    """Map a Google price level (0-4) onto a currency-symbol label."""
    symbol = get_settings().currency_symbol
    tiers = {0: 1, 1: 1, 2: 2, 3: 3, 4: 4}
    return symbol * tiers.get(price_level, 2)


def hash_fragment(identifier: str) -> str:
    """Short cache key taken from the tail of an external identifier."""
    return identifier[-HASH_LENGTH:]


def slug_base(name: str) -> str:
    """URL-safe form of a restaurant name, without the hash fragment."""
    slug = (name or "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()


def slugify(name: str, identifier: str) -> str:
    """Build the shareable slug ``<name-slug>-<last 6 chars of id>``."""
    return f"{slug_base(name)}-{hash_fragment(identifier)}"


def split_slug(slug: str) -> tuple[str, str]:
    """
    Split a slug into ``(name, hash)``.

    The hash is the last hyphen-delimited segment; the remaining segments
    are title-cased and joined with spaces to recover a display name.
    """
    parts = slug.split("-")
    fragment = parts[-1]
    name = " ".join(word[:1].upper() + word[1:] for word in parts[:-1])
    return name, fragment


def random_delivery_window() -> str:
    """Delivery time shown on restaurant cards, e.g. ``"27-41 min"``."""
    low = 20 + random.randint(0, 24)
    high = 35 + random.randint(0, 14)
    return f"{low}-{high} min"


def estimate_delivery_time() -> str:
    """Estimated delivery window for a freshly placed order."""
    low = 20 + random.randint(0, 24)
    return f"{low}-{low + 10} min"


def random_delivery_fee() -> int:
    return random.randint(25, 74)


def random_phone() -> str:
    return f"+91 {random.randint(1000000000, 9999999999)}"
