"""
Places Service Factory

Provides a single entry point for obtaining a places service instance.
Automatically selects Mock or Google Places based on ENV_MODE configuration.

Usage:
    from storefront.services.places import get_places_service

    places = get_places_service()
    result = await places.nearby_search(lat=12.97, lng=77.59, radius=5000)

Version: 1.0.0
"""

import logging
from functools import lru_cache

from storefront.core.config import get_settings
from storefront.services.places.base import (
    BasePlacesService,
    NearbySearchResult,
    Place,
    PlaceDetailsResult,
    ReverseGeocodeResult,
)
from storefront.services.places.google import GooglePlacesService
from storefront.services.places.mock import MockPlacesService

logger = logging.getLogger(__name__)


@lru_cache()
def get_places_service() -> BasePlacesService:
    """
    Get the configured places service instance.

    Returns MockPlacesService in development and GooglePlacesService in
    staging and production.

    Raises:
        ValueError: If production mode but Google API key not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Places Service: Using MockPlacesService (development mode)")
        return MockPlacesService(
            failure_rate=settings.places_mock_failure_rate,
            min_latency=0.05,
            max_latency=0.2,
        )

    logger.info(
        f"Places Service: Using GooglePlacesService "
        f"({settings.env_mode.value} mode)"
    )
    return GooglePlacesService()


def reset_places_service() -> None:
    """
    Clear the cached places service instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_places_service.cache_clear()
    logger.debug("Places service cache cleared")


__all__ = [
    "get_places_service",
    "reset_places_service",
    "BasePlacesService",
    "NearbySearchResult",
    "Place",
    "PlaceDetailsResult",
    "ReverseGeocodeResult",
    "MockPlacesService",
    "GooglePlacesService",
]
