"""
Pydantic Schemas for Request/Response Validation

Covers:
- Restaurant cards, detail pages and menus
- Nearby search and slug cache requests
- Signup
- Order checkout and tracking

Version: 1.0.0
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# RESTAURANTS
# =============================================================================

class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90, examples=[12.9716])
    lng: float = Field(..., ge=-180, le=180, examples=[77.5946])


class MenuItem(BaseModel):
    """Single dish on a restaurant menu."""
    id: str
    name: str
    description: str = ""
    price: float = Field(..., ge=0, examples=[299])
    category: str = "specials"
    image: Optional[str] = None
    is_vegetarian: bool = False
    is_spicy: bool = False
    is_available: bool = True


class Restaurant(BaseModel):
    """
    Restaurant as returned to the storefront.

    ``id`` is either a places-provider identifier, a database id, or a
    ``reconstructed_<hash>`` marker for records rebuilt from a slug.
    """
    id: str = Field(..., min_length=1)
    name: str
    cuisine: str = "Multi-cuisine"
    rating: float = Field(default=4.0, ge=0, le=5)
    delivery_time: str = "30-45 min"
    delivery_fee: float = Field(default=49, ge=0)
    image: Optional[str] = None
    distance: Optional[float] = Field(None, description="Kilometers from the search point")
    is_open: bool = True
    price_range: str = "₹₹"
    address: str = "Address not available"
    coordinates: Coordinates = Field(default_factory=lambda: Coordinates(lat=0, lng=0))
    phone: Optional[str] = None
    website: Optional[str] = None
    slug: Optional[str] = None
    menu: List[MenuItem] = Field(default_factory=list)


class NearbySearchRequest(BaseModel):
    """Request schema for a nearby restaurant search."""
    lat: float = Field(..., ge=-90, le=90, examples=[12.9716])
    lng: float = Field(..., ge=-180, le=180, examples=[77.5946])
    radius: Optional[int] = Field(
        None,
        gt=0,
        le=50000,
        description="Meters; the configured default radius when omitted"
    )
    page_token: Optional[str] = Field(
        None,
        description="Token from a previous response to fetch the next page"
    )


class NearbySearchResponse(BaseModel):
    restaurants: List[Restaurant]
    next_page_token: Optional[str] = None
    source: str = Field(..., examples=["places", "fallback"])


class RestaurantResponse(BaseModel):
    restaurant: Restaurant


class CacheRestaurantsRequest(BaseModel):
    restaurants: List[Restaurant]


class CacheRestaurantsResponse(BaseModel):
    success: bool
    cached: int


# =============================================================================
# USERS
# =============================================================================

class SignupRequest(BaseModel):
    """Request schema for creating a storefront account."""
    username: str = Field(..., min_length=1, max_length=50, examples=["priya"])
    email: str = Field(..., min_length=1, max_length=255, examples=["priya@example.com"])
    password: str = Field(..., min_length=1, max_length=128)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("username", "email", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("All fields are required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(r'^[\w\.\+-]+@[\w\.-]+\.\w+$', v.strip()):
            raise ValueError("Invalid email format")
        return v.strip().lower()


class SignupResponse(BaseModel):
    message: str
    user_id: str


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemCreate(BaseModel):
    """Single cart line submitted at checkout."""
    id: str = Field(..., min_length=1, examples=["pizza_corner_1"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Margherita Pizza"])
    price: float = Field(..., ge=0, examples=[299])
    quantity: int = Field(..., ge=1, le=99, examples=[2])


class OrderCreate(BaseModel):
    """Request schema for placing an order."""
    user_id: str = Field(..., min_length=1)
    restaurant_id: str = Field(..., min_length=1)
    restaurant_name: str = Field(..., min_length=1)
    items: List[OrderItemCreate] = Field(..., min_length=1)
    delivery_address: str = Field(..., min_length=1, max_length=255)
    delivery_fee: Optional[float] = Field(
        None,
        ge=0,
        description="Restaurant delivery fee; the configured default when omitted"
    )

    @field_validator("delivery_address")
    @classmethod
    def address_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Delivery address is required")
        return v.strip()


class OrderItemResponse(BaseModel):
    id: str
    name: str
    quantity: int
    price: float


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    id: str
    user_id: Optional[str] = None
    restaurant_id: Optional[str] = None
    restaurant_name: str
    items: List[OrderItemResponse]
    subtotal: float
    delivery_fee: float
    tax: float
    total: float
    status: str
    estimated_delivery_time: str
    delivery_address: str
    restaurant_phone: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderCreateResponse(BaseModel):
    """Response after successfully creating an order."""
    success: bool
    message: str
    order_id: str
    estimated_delivery_time: str
    total: float


class OrderDetailResponse(BaseModel):
    order: OrderResponse
    source: str = Field(..., examples=["memory", "database", "fallback"])


class OrderListResponse(BaseModel):
    """Response for listing multiple orders."""
    total: int
    orders: List[OrderResponse]
    source: str = Field(..., examples=["memory", "database", "none"])


# =============================================================================
# GEOCODING
# =============================================================================

class ReverseGeocodeRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ReverseGeocodeResponse(BaseModel):
    address: str


# =============================================================================
# SYSTEM
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    places_service: str
    cached_restaurants: int
    stored_orders: int
    timestamp: datetime
