"""
Restaurant Service

Orchestrates restaurant discovery for the storefront:
    1. Nearby search through the places provider
    2. Merge with restaurants stored in the database (first page only)
    3. De-duplicate by name, sort by distance, cap the result size
    4. Attach slugs and populate the lookup cache

Each collaborator returns a result object; the fallback chosen when one
fails is decided here and logged.

Version: 1.0.0
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from storefront.core.config import Settings
from storefront.schemas import (
    Coordinates,
    NearbySearchRequest,
    Restaurant,
)
from storefront.services import catalog, fallback
from storefront.services.places import BasePlacesService, Place
from storefront.services.repository import StorefrontRepository
from storefront.services.restaurant_cache import RestaurantCache

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    restaurants: list[Restaurant]
    next_page_token: Optional[str]
    source: str


class RestaurantService:
    """
    Restaurant search and lookup.

    Args:
        places: Places provider
        cache: Slug lookup cache shared with the slug endpoint
        settings: Application settings
        repository: Database repository, or None when no database is configured
    """

    def __init__(
        self,
        places: BasePlacesService,
        cache: RestaurantCache,
        settings: Settings,
        repository: Optional[StorefrontRepository] = None,
    ):
        self.places = places
        self.cache = cache
        self.settings = settings
        self.repository = repository

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def search_nearby(self, request: NearbySearchRequest) -> SearchOutcome:
        """Nearby restaurants for a location; sample restaurants when the provider fails."""
        radius = request.radius or self.settings.default_search_radius_m

        result = await self.places.nearby_search(
            lat=request.lat,
            lng=request.lng,
            radius=radius,
            page_token=request.page_token,
        )

        if not result.success:
            logger.warning(
                f"Places search unavailable ({result.error_code}); "
                f"serving sample restaurants"
            )
            return self._finish(fallback.sample_restaurants(), None, "fallback")

        places = result.places[:self.settings.max_search_results]
        restaurants = list(await asyncio.gather(*(
            self._restaurant_from_place(place, request.lat, request.lng)
            for place in places
        )))

        source = "places"
        if self.repository is not None and request.page_token is None:
            db_result = await self.repository.find_restaurants_near(
                request.lat,
                request.lng,
                radius,
                limit=self.settings.db_search_limit,
            )
            if db_result.success:
                restaurants.extend(db_result.value)
                source = "places+database"
            else:
                logger.warning("Database search unavailable; using places results only")

        restaurants = self._dedupe_and_sort(restaurants)
        return self._finish(restaurants, result.next_page_token, source)

    def _finish(
        self,
        restaurants: list[Restaurant],
        next_page_token: Optional[str],
        source: str,
    ) -> SearchOutcome:
        for restaurant in restaurants:
            restaurant.slug = catalog.slugify(restaurant.name, restaurant.id)

        self.cache.put(restaurants)
        logger.info(f"Nearby search served {len(restaurants)} restaurants from {source}")
        return SearchOutcome(restaurants, next_page_token, source)

    def _dedupe_and_sort(self, restaurants: list[Restaurant]) -> list[Restaurant]:
        seen: set[str] = set()
        unique = []
        for restaurant in restaurants:
            key = restaurant.name.lower()
            if key in seen:
                continue
            seen.add(key)
            unique.append(restaurant)

        unique.sort(key=lambda r: r.distance or 0)
        return unique[:self.settings.max_search_results]

    async def _restaurant_from_place(self, place: Place, lat: float, lng: float) -> Restaurant:
        phone = place.phone
        if not phone and place.place_id:
            details = await self.places.place_details(
                place.place_id,
                fields=["formatted_phone_number"],
            )
            if details.success and details.place and details.place.phone:
                phone = details.place.phone

        distance = None
        if place.latitude is not None and place.longitude is not None:
            distance = catalog.haversine_km(lat, lng, place.latitude, place.longitude)

        return self.restaurant_from_place(place, distance=distance, phone=phone)

    def restaurant_from_place(
        self,
        place: Place,
        distance: Optional[float] = None,
        phone: Optional[str] = None,
        photo_width: int = 400,
    ) -> Restaurant:
        """Reshape a provider place into a storefront restaurant with a menu."""
        menu_type = catalog.menu_type_for(place.types, place.name)

        return Restaurant(
            id=place.place_id,
            name=place.name,
            cuisine=catalog.cuisine_from_types(place.types),
            rating=place.rating if place.rating is not None else 4.0,
            delivery_time=catalog.random_delivery_window(),
            delivery_fee=catalog.random_delivery_fee(),
            image=self.places.photo_url(place.photo_reference, photo_width)
            or self.settings.placeholder_image,
            distance=distance,
            is_open=place.open_now if place.open_now is not None else True,
            price_range=catalog.price_range(place.price_level),
            address=place.address or "Address not available",
            coordinates=Coordinates(lat=place.latitude or 0, lng=place.longitude or 0),
            phone=phone or place.phone or catalog.random_phone(),
            website=place.website,
            menu=catalog.build_menu(menu_type, place.name),
        )

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def resolve_slug(self, slug: str) -> Restaurant:
        return self.cache.resolve_slug(slug)

    def cache_restaurants(self, restaurants: list[Restaurant]) -> int:
        return self.cache.put(restaurants)

    async def get_place_restaurant(self, place_id: str) -> tuple[Restaurant, str]:
        """
        Restaurant page for a places-provider id.

        Falls back to the cached record for the same hash, then to the
        sample restaurant carrying the requested id.
        """
        result = await self.places.place_details(place_id)

        if result.success and result.place is not None:
            restaurant = self.restaurant_from_place(result.place, photo_width=800)
            restaurant.slug = catalog.slugify(restaurant.name, restaurant.id)
            self.cache.put([restaurant])
            return restaurant, "places"

        logger.warning(f"Place details unavailable for {place_id} ({result.error_code})")

        cached = self.cache.get(catalog.hash_fragment(place_id))
        if cached is not None:
            return cached, "cache"

        return fallback.sample_restaurant(place_id), "fallback"

    async def get_restaurant(self, restaurant_id: str) -> tuple[Optional[Restaurant], str]:
        """
        Restaurant page for a database id.

        Returns ``(None, "database")`` when the database answers that no such
        restaurant exists, and the sample restaurant when it cannot answer.
        """
        if self.repository is None:
            return fallback.sample_restaurant(restaurant_id), "fallback"

        result = await self.repository.get_restaurant(restaurant_id)
        if not result.success:
            logger.warning(f"Database unavailable for restaurant {restaurant_id}; serving sample")
            return fallback.sample_restaurant(restaurant_id), "fallback"

        return result.value, "database"

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        result = await self.places.reverse_geocode(lat, lng)
        if result.success and result.formatted_address:
            return result.formatted_address

        logger.warning(f"Reverse geocoding unavailable ({result.error_code}); using coordinates")
        return f"{lat:.5f}, {lng:.5f}"
