"""
Places Service Abstract Base Class

Defines the interface contract for all places provider implementations.
Both MockPlacesService and GooglePlacesService must implement these methods.

Every call returns a result object instead of raising: a failed upstream
call (transport error, quota, non-OK status) comes back with
``success=False`` and the caller decides which fallback to use.

Use Cases:
    - Nearby restaurant search with pagination
    - Place details for restaurant pages and phone numbers
    - Reverse geocoding of the shopper's location

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass
class Place:
    """
    Provider-neutral view of a place.

    Attributes:
        place_id: Stable external identifier
        name: Display name
        types: Provider category tags (e.g. "pizza_restaurant")
        address: Vicinity or formatted address
        latitude: GPS latitude
        longitude: GPS longitude
        rating: Average rating (0-5)
        price_level: 0 (cheap) to 4 (expensive)
        open_now: Current opening status if known
        photo_reference: Reference for the first photo, if any
        phone: Formatted phone number, if requested and known
        website: Website URL, if requested and known
    """
    place_id: str
    name: str
    types: list[str] = field(default_factory=list)
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    price_level: Optional[int] = None
    open_now: Optional[bool] = None
    photo_reference: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


@dataclass
class NearbySearchResult:
    """Result of a nearby search page."""
    success: bool
    places: list[Place] = field(default_factory=list)
    next_page_token: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0


@dataclass
class PlaceDetailsResult:
    """Result of a place details lookup."""
    success: bool
    place: Optional[Place] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0


@dataclass
class ReverseGeocodeResult:
    """Result of turning coordinates into an address."""
    success: bool
    formatted_address: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0


class BasePlacesService(ABC):
    """
    Abstract base class for places providers.

    Example:
        >>> service = get_places_service()
        >>> result = await service.nearby_search(lat=12.97, lng=77.59, radius=5000)
        >>> if result.success:
        ...     print([p.name for p in result.places])
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the places provider.

        Returns:
            str: Provider name (e.g., "mock", "google")
        """
        pass

    @abstractmethod
    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius: int,
        page_token: Optional[str] = None,
    ) -> NearbySearchResult:
        """
        Find restaurants around a point.

        Args:
            lat: Search center latitude
            lng: Search center longitude
            radius: Search radius in meters
            page_token: Token from a previous page, if continuing

        Returns:
            NearbySearchResult: Places plus the next page token, if any
        """
        pass

    @abstractmethod
    async def place_details(
        self,
        place_id: str,
        fields: Optional[Sequence[str]] = None,
    ) -> PlaceDetailsResult:
        """
        Fetch details for a single place.

        Args:
            place_id: External place identifier
            fields: Provider field names to request (all known when omitted)
        """
        pass

    @abstractmethod
    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeResult:
        """Turn coordinates into a human-readable address."""
        pass

    @abstractmethod
    def photo_url(self, photo_reference: Optional[str], max_width: int = 400) -> Optional[str]:
        """URL for a place photo, or None when the place has no photo."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the places provider.

        Returns:
            bool: True if service is operational
        """
        pass
