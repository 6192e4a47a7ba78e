"""
                        Services Module

Contains the storefront business logic. External dependencies follow the
hybrid architecture pattern: each has a Mock (development) and a Real
(production) implementation, and every call reports failure as a result
object so callers choose the fallback explicitly.

Services:
    - places: Google Places search, details and reverse geocoding
    - restaurants: Nearby search orchestration and restaurant lookups
    - restaurant_cache: Slug lookup cache
    - orders / order_store: Checkout and in-memory order tracking
    - repository: Optional database access
"""
