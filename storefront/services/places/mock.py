"""
Mock Places Service Implementation

Simulates the Google Places API without making real API calls.
Used in development mode (ENV_MODE=development) for local testing.

Behavior:
    - Returns a fixed roster of restaurants scattered around the search point
    - Place ids are derived from name and location so repeated searches of
      the same area return the same ids (and therefore the same slugs)
    - Pages of 20 results with a next_page_token, like the real API
    - Optional simulated latency and random failure rate

Version: 1.0.0
"""

import asyncio
import hashlib
import logging
import random
import string
from typing import Optional, Sequence

from storefront.services.places.base import (
    BasePlacesService,
    NearbySearchResult,
    Place,
    PlaceDetailsResult,
    ReverseGeocodeResult,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
PAGE_TOKEN_PREFIX = "mock-page:"

# (name, place types, price level)
MOCK_ROSTER: list[tuple[str, list[str], int]] = [
    ("Pizza Corner", ["pizza_restaurant", "restaurant", "food"], 2),
    ("Biryani House", ["indian_restaurant", "restaurant", "food"], 2),
    ("Golden Dragon", ["chinese_restaurant", "restaurant", "food"], 2),
    ("Burger Junction", ["fast_food_restaurant", "restaurant", "food"], 1),
    ("Cafe Mocha", ["cafe", "food"], 2),
    ("Sushi Zen", ["japanese_restaurant", "restaurant", "food"], 3),
    ("Bangkok Bites", ["thai_restaurant", "restaurant", "food"], 2),
    ("Punjabi Dhaba", ["restaurant", "food"], 1),
    ("Romano's Trattoria", ["italian_restaurant", "restaurant", "food"], 3),
    ("Wok Express", ["meal_takeaway", "restaurant", "food"], 1),
    ("Tandoor Nights", ["restaurant", "food"], 2),
    ("Barista Brew", ["cafe", "food"], 1),
    ("Ramen Street", ["restaurant", "food"], 2),
    ("Quick Bite", ["meal_takeaway", "food"], 0),
    ("Mexican Cantina", ["mexican_restaurant", "restaurant", "food"], 2),
    ("Le Petit Bistro", ["french_restaurant", "restaurant", "food"], 4),
    ("Seoul Kitchen", ["korean_restaurant", "restaurant", "food"], 2),
    ("Ocean Catch", ["seafood_restaurant", "restaurant", "food"], 3),
    ("Green Leaf", ["vegetarian_restaurant", "restaurant", "food"], 1),
    ("Daily Bread Bakery", ["bakery", "food"], 1),
    ("Curry Leaf", ["restaurant", "food"], 2),
    ("Noodle Bar", ["restaurant", "food"], 1),
    ("Steak Station", ["steakhouse", "restaurant", "food"], 4),
    ("Spice Route", ["restaurant", "food"], 2),
    ("The Local Diner", ["american_restaurant", "restaurant", "food"], 2),
]


def mock_place_id(name: str, lat: float, lng: float) -> str:
    """Stable Google-looking place id for a roster entry near a point."""
    digest = hashlib.sha1(f"{name}|{lat:.2f}|{lng:.2f}".encode()).digest()
    alphabet = string.ascii_letters + string.digits
    return "ChIJ" + "".join(alphabet[b % len(alphabet)] for b in digest[:23])


class MockPlacesService(BasePlacesService):
    """
    Mock implementation of the places service.

    Attributes:
        failure_rate: Probability of simulated API failure (0.0-1.0)
        min_latency: Minimum response time in seconds
        max_latency: Maximum response time in seconds

    Example:
        >>> service = MockPlacesService()
        >>> result = await service.nearby_search(12.97, 77.59, 5000)
        >>> len(result.places)
        20
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._known_places: dict[str, Place] = {}

        logger.info(f"MockPlacesService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> float:
        """
        Simulate network latency.

        Returns:
            float: Latency in milliseconds
        """
        latency = random.uniform(self.min_latency, self.max_latency)
        if latency > 0:
            await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        """Determine if this request should simulate a failure."""
        return random.random() < self.failure_rate

    def _roster_near(self, lat: float, lng: float, radius: int) -> list[Place]:
        """Place every roster entry at a stable offset inside the radius."""
        rng = random.Random(f"{lat:.2f},{lng:.2f}")
        # ~111 km per degree of latitude
        spread = (radius / 1000) / 111.0

        places = []
        for name, types, price_level in MOCK_ROSTER:
            place = Place(
                place_id=mock_place_id(name, lat, lng),
                name=name,
                types=list(types),
                address=f"{rng.randint(1, 250)} {rng.choice(['MG Road', 'Church Street', 'Brigade Road', 'Residency Road'])}",
                latitude=round(lat + rng.uniform(-spread, spread) * 0.7, 6),
                longitude=round(lng + rng.uniform(-spread, spread) * 0.7, 6),
                rating=round(rng.uniform(3.5, 4.9), 1),
                price_level=price_level,
                open_now=rng.random() > 0.1,
                photo_reference=None,
                phone=f"+91 80 {rng.randint(1000, 9999)} {rng.randint(1000, 9999)}",
            )
            places.append(place)
            self._known_places[place.place_id] = place

        return places

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius: int,
        page_token: Optional[str] = None,
    ) -> NearbySearchResult:
        latency_ms = await self._simulate_latency()

        if self._should_fail():
            logger.debug("Mock: Simulated nearby search failure")
            return NearbySearchResult(
                success=False,
                error_message="Places service temporarily unavailable",
                error_code="service_unavailable",
                response_time_ms=latency_ms,
            )

        offset = 0
        if page_token:
            suffix = page_token[len(PAGE_TOKEN_PREFIX):]
            if not page_token.startswith(PAGE_TOKEN_PREFIX) or not suffix.isdigit():
                return NearbySearchResult(
                    success=False,
                    error_message="Invalid page token",
                    error_code="invalid_request",
                    response_time_ms=latency_ms,
                )
            offset = int(suffix)

        places = self._roster_near(lat, lng, radius)
        page = places[offset:offset + PAGE_SIZE]
        next_offset = offset + PAGE_SIZE
        next_token = f"{PAGE_TOKEN_PREFIX}{next_offset}" if next_offset < len(places) else None

        logger.info(f"Mock: Nearby search returned {len(page)} places")

        return NearbySearchResult(
            success=True,
            places=page,
            next_page_token=next_token,
            response_time_ms=latency_ms,
        )

    async def place_details(
        self,
        place_id: str,
        fields: Optional[Sequence[str]] = None,
    ) -> PlaceDetailsResult:
        latency_ms = await self._simulate_latency()

        if self._should_fail():
            return PlaceDetailsResult(
                success=False,
                error_message="Places service temporarily unavailable",
                error_code="service_unavailable",
                response_time_ms=latency_ms,
            )

        place = self._known_places.get(place_id)
        if place is None:
            return PlaceDetailsResult(
                success=False,
                error_message=f"Unknown place {place_id}",
                error_code="not_found",
                response_time_ms=latency_ms,
            )

        return PlaceDetailsResult(success=True, place=place, response_time_ms=latency_ms)

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeResult:
        latency_ms = await self._simulate_latency()

        address = (
            f"{random.randint(1, 9999)} Demo Street, Demo City, "
            f"DC {random.randint(10000, 99999)}"
        )
        return ReverseGeocodeResult(
            success=True,
            formatted_address=address,
            response_time_ms=latency_ms,
        )

    def photo_url(self, photo_reference: Optional[str], max_width: int = 400) -> Optional[str]:
        return None

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        logger.debug("Mock: Places health check passed")
        return True
