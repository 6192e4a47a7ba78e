"""
Google Places Service Implementation

Production implementation using the Google Maps Places and Geocoding APIs.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - GOOGLE_PLACES_API_KEY must be set in environment
    - Places API and Geocoding API must be enabled in Google Cloud Console

API Documentation:
    https://developers.google.com/maps/documentation/places/web-service

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

import googlemaps
from fastapi.concurrency import run_in_threadpool
from googlemaps.exceptions import ApiError, Timeout, TransportError

from storefront.core.config import get_settings
from storefront.services.places.base import (
    BasePlacesService,
    NearbySearchResult,
    Place,
    PlaceDetailsResult,
    ReverseGeocodeResult,
)

logger = logging.getLogger(__name__)

PHOTO_ENDPOINT = "https://maps.googleapis.com/maps/api/place/photo"

DETAIL_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "formatted_phone_number",
    "website",
    "opening_hours",
    "photo",
    "rating",
    "price_level",
    "type",
    "geometry",
]


class SingleAttemptClient(googlemaps.Client):
    """
    googlemaps client that sends each request once.

    The stock client re-sends on 5xx responses until its retry window
    closes. A failed attempt here surfaces as a TransportError and the
    caller falls back instead.
    """

    def _request(self, url, params, first_request_time=None, retry_counter=0, *args, **kwargs):
        if retry_counter > 0:
            raise TransportError(RuntimeError(f"{url} returned a retriable error"))
        return super()._request(url, params, first_request_time, retry_counter, *args, **kwargs)


def build_client(api_key: str, timeout: int) -> googlemaps.Client:
    """Places client with a request timeout and no retries."""
    return SingleAttemptClient(
        key=api_key,
        timeout=timeout,
        retry_timeout=timeout,
        retry_over_query_limit=False,
    )


def _elapsed_ms(start_time: datetime) -> float:
    return (datetime.now() - start_time).total_seconds() * 1000


def parse_place(raw: dict[str, Any]) -> Place:
    """
    Convert a Places API result object into a Place.

    Works for both nearby-search results and details results.
    """
    location = raw.get("geometry", {}).get("location", {})
    photos = raw.get("photos") or []

    return Place(
        place_id=raw.get("place_id", ""),
        name=raw.get("name", ""),
        types=list(raw.get("types", [])),
        address=raw.get("vicinity") or raw.get("formatted_address"),
        latitude=location.get("lat"),
        longitude=location.get("lng"),
        rating=raw.get("rating"),
        price_level=raw.get("price_level"),
        open_now=raw.get("opening_hours", {}).get("open_now"),
        photo_reference=photos[0].get("photo_reference") if photos else None,
        phone=raw.get("formatted_phone_number"),
        website=raw.get("website"),
    )


class GooglePlacesService(BasePlacesService):
    """
    Production Google Places service implementation.

    The googlemaps client is synchronous; calls run in the threadpool so
    the event loop keeps serving other requests meanwhile.

    Configuration:
        Requires GOOGLE_PLACES_API_KEY environment variable.
    """

    def __init__(self, client: Optional[googlemaps.Client] = None):
        """
        Initialize Google Maps client with API key.

        Raises:
            ValueError: If GOOGLE_PLACES_API_KEY is not configured
        """
        settings = get_settings()

        if client is None and not settings.google_places_api_key:
            raise ValueError(
                "GOOGLE_PLACES_API_KEY is required for production mode. "
                "Set it in your .env file or environment variables."
            )

        self._api_key = settings.google_places_api_key
        self._client = client or build_client(
            settings.google_places_api_key,
            settings.places_timeout_seconds,
        )

        logger.info("GooglePlacesService initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "google"

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius: int,
        page_token: Optional[str] = None,
    ) -> NearbySearchResult:
        """Search restaurants around a point using Places Nearby Search."""
        start_time = datetime.now()

        logger.debug(f"Google: Nearby search at ({lat}, {lng}) r={radius}m")

        try:
            response = await run_in_threadpool(
                self._client.places_nearby,
                location=(lat, lng),
                radius=radius,
                type="restaurant",
                page_token=page_token,
            )

            status = response.get("status", "UNKNOWN_ERROR")
            if status != "OK":
                logger.warning(f"Google: Nearby search returned {status}")
                return NearbySearchResult(
                    success=False,
                    error_message=f"Places search returned {status}",
                    error_code=status.lower(),
                    response_time_ms=_elapsed_ms(start_time),
                )

            places = [parse_place(raw) for raw in response.get("results", [])]

            logger.info(f"Google: Nearby search found {len(places)} places")

            return NearbySearchResult(
                success=True,
                places=places,
                next_page_token=response.get("next_page_token"),
                response_time_ms=_elapsed_ms(start_time),
            )

        except Timeout:
            logger.error("Google: API timeout")
            return NearbySearchResult(
                success=False,
                error_message="Places search timed out",
                error_code="timeout",
                response_time_ms=_elapsed_ms(start_time),
            )

        except ApiError as e:
            logger.error(f"Google: API error - {e}")
            return NearbySearchResult(
                success=False,
                error_message="Places search service error",
                error_code=(e.status or "api_error").lower(),
                response_time_ms=_elapsed_ms(start_time),
            )

        except TransportError as e:
            logger.error(f"Google: Transport error - {e}")
            return NearbySearchResult(
                success=False,
                error_message="Unable to reach places service",
                error_code="transport_error",
                response_time_ms=_elapsed_ms(start_time),
            )

    async def place_details(
        self,
        place_id: str,
        fields: Optional[Sequence[str]] = None,
    ) -> PlaceDetailsResult:
        """Fetch place details using the Place Details API."""
        start_time = datetime.now()

        try:
            response = await run_in_threadpool(
                self._client.place,
                place_id,
                fields=list(fields or DETAIL_FIELDS),
            )

            status = response.get("status", "UNKNOWN_ERROR")
            if status != "OK":
                logger.warning(f"Google: Details for {place_id} returned {status}")
                return PlaceDetailsResult(
                    success=False,
                    error_message=f"Place details returned {status}",
                    error_code=status.lower(),
                    response_time_ms=_elapsed_ms(start_time),
                )

            place = parse_place(response.get("result", {}))
            if not place.place_id:
                place.place_id = place_id

            return PlaceDetailsResult(
                success=True,
                place=place,
                response_time_ms=_elapsed_ms(start_time),
            )

        except Timeout:
            logger.error(f"Google: Details timeout for {place_id}")
            return PlaceDetailsResult(
                success=False,
                error_message="Place details timed out",
                error_code="timeout",
                response_time_ms=_elapsed_ms(start_time),
            )

        except ApiError as e:
            logger.error(f"Google: Details API error for {place_id} - {e}")
            return PlaceDetailsResult(
                success=False,
                error_message="Place details service error",
                error_code=(e.status or "api_error").lower(),
                response_time_ms=_elapsed_ms(start_time),
            )

        except TransportError as e:
            logger.error(f"Google: Details transport error for {place_id} - {e}")
            return PlaceDetailsResult(
                success=False,
                error_message="Unable to reach places service",
                error_code="transport_error",
                response_time_ms=_elapsed_ms(start_time),
            )

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeResult:
        """Resolve coordinates to the best formatted address."""
        start_time = datetime.now()

        try:
            results = await run_in_threadpool(self._client.reverse_geocode, (lat, lng))

            if not results:
                return ReverseGeocodeResult(
                    success=False,
                    error_message="No address found for location",
                    error_code="zero_results",
                    response_time_ms=_elapsed_ms(start_time),
                )

            return ReverseGeocodeResult(
                success=True,
                formatted_address=results[0].get("formatted_address"),
                response_time_ms=_elapsed_ms(start_time),
            )

        except (ApiError, Timeout, TransportError) as e:
            logger.error(f"Google: Reverse geocode error - {e}")
            return ReverseGeocodeResult(
                success=False,
                error_message="Reverse geocoding failed",
                error_code="geocode_error",
                response_time_ms=_elapsed_ms(start_time),
            )

    def photo_url(self, photo_reference: Optional[str], max_width: int = 400) -> Optional[str]:
        if not photo_reference:
            return None
        return (
            f"{PHOTO_ENDPOINT}?maxwidth={max_width}"
            f"&photoreference={photo_reference}&key={self._api_key}"
        )

    async def health_check(self) -> bool:
        """
        Verify Google Maps API connectivity.

        Makes a simple geocode request to verify credentials and connectivity.
        """
        try:
            result = await run_in_threadpool(self._client.geocode, "Bengaluru, India")

            if result:
                logger.debug("Google: Health check passed")
                return True

            return False

        except (ApiError, Timeout, TransportError) as e:
            logger.error(f"Google: Health check failed - {e}")
            return False
