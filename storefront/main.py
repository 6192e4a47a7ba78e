"""
FastAPI Application Entry Point

Food Ordering Storefront - Hybrid Architecture
Supports both Mock places data (development) and Google Places (production).
The database is optional; without it orders live in the in-memory store.

Endpoints:
    - POST /api/auth/signup: Create an account
    - POST /api/restaurants/nearby: Nearby restaurant search
    - POST /api/restaurants/cache: Seed the slug lookup cache
    - GET /api/restaurants/slug/{slug}: Restaurant by shareable slug
    - GET /api/restaurants/google/{place_id}: Restaurant by places id
    - GET /api/restaurants/{restaurant_id}: Restaurant by database id
    - POST /api/orders: Place an order
    - GET /api/orders/user: Orders for a user
    - GET /api/orders/{order_id}: Order tracking
    - GET /api/orders: All in-memory orders (diagnostics)
    - POST /api/geocode/reverse: Address for coordinates
    - GET /health: System health check

Version: 1.0.0
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from storefront.core.config import Settings, get_settings, setup_logging
from storefront.database import build_session_maker, engine_from_settings, init_db
from storefront.schemas import (
    CacheRestaurantsRequest,
    CacheRestaurantsResponse,
    ErrorResponse,
    HealthResponse,
    NearbySearchRequest,
    NearbySearchResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderDetailResponse,
    OrderListResponse,
    RestaurantResponse,
    ReverseGeocodeRequest,
    ReverseGeocodeResponse,
    SignupRequest,
    SignupResponse,
)
from storefront.services.accounts import hash_password
from storefront.services.order_store import OrderStore
from storefront.services.orders import OrderService, to_response
from storefront.services.places import BasePlacesService, get_places_service
from storefront.services.repository import StorefrontRepository
from storefront.services.restaurant_cache import RestaurantCache
from storefront.services.restaurants import RestaurantService

logger = logging.getLogger(__name__)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_restaurant_service(request: Request) -> RestaurantService:
    return request.app.state.restaurant_service


def get_repository(request: Request) -> Optional[StorefrontRepository]:
    return request.app.state.repository


router = APIRouter()


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", tags=["Root"])
async def root(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍕 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    request: Request,
    repository: Optional[StorefrontRepository] = Depends(get_repository),
) -> HealthResponse:
    """Report the state of each component; the API itself always answers."""
    state = request.app.state

    if repository is None:
        db_status = "disabled"
    else:
        db_status = "healthy" if await repository.health_check() else "unhealthy"

    places_status = "healthy" if await state.places.health_check() else "unhealthy"

    overall = "operational" if (
        db_status in ("healthy", "disabled") and places_status == "healthy"
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        places_service=places_status,
        cached_restaurants=len(state.restaurant_cache),
        stored_orders=len(state.order_store),
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# AUTH ENDPOINTS
# =============================================================================

@router.post(
    "/api/auth/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def signup(
    payload: SignupRequest,
    repository: Optional[StorefrontRepository] = Depends(get_repository),
) -> SignupResponse:
    """Create a storefront account. Requires the database."""
    if repository is None:
        raise HTTPException(status_code=503, detail="Signup requires a configured database")

    result = await repository.create_user(
        username=payload.username.strip(),
        email=payload.email,
        password_hash=await run_in_threadpool(hash_password, payload.password),
        address=payload.address,
        phone=payload.phone,
    )

    if not result.success:
        if result.error_code == "user_exists":
            raise HTTPException(status_code=400, detail="User already exists")
        raise HTTPException(status_code=503, detail="Database unavailable")

    return SignupResponse(message="User created successfully", user_id=str(result.value))


# =============================================================================
# RESTAURANT ENDPOINTS
# =============================================================================

@router.post(
    "/api/restaurants/nearby",
    response_model=NearbySearchResponse,
    tags=["Restaurants"],
    summary="Nearby Restaurant Search",
)
async def nearby_restaurants(
    payload: NearbySearchRequest,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> NearbySearchResponse:
    """
    Search restaurants around a location.

    Never fails on provider errors: sample restaurants are returned with
    ``source="fallback"`` instead.
    """
    logger.info(f"Nearby search at ({payload.lat}, {payload.lng})")
    outcome = await restaurants.search_nearby(payload)

    return NearbySearchResponse(
        restaurants=outcome.restaurants,
        next_page_token=outcome.next_page_token,
        source=outcome.source,
    )


@router.post(
    "/api/restaurants/cache",
    response_model=CacheRestaurantsResponse,
    tags=["Restaurants"],
)
async def cache_restaurants(
    payload: CacheRestaurantsRequest,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> CacheRestaurantsResponse:
    cached = restaurants.cache_restaurants(payload.restaurants)
    return CacheRestaurantsResponse(success=True, cached=cached)


@router.get(
    "/api/restaurants/slug/{slug}",
    response_model=RestaurantResponse,
    tags=["Restaurants"],
)
async def restaurant_by_slug(
    slug: str,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    """Resolve a shareable slug; unknown slugs get a placeholder restaurant."""
    return RestaurantResponse(restaurant=restaurants.resolve_slug(slug))


@router.get(
    "/api/restaurants/google/{place_id}",
    response_model=RestaurantResponse,
    tags=["Restaurants"],
)
async def restaurant_by_place_id(
    place_id: str,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    restaurant, source = await restaurants.get_place_restaurant(place_id)
    logger.debug(f"Place {place_id} served from {source}")
    return RestaurantResponse(restaurant=restaurant)


@router.get(
    "/api/restaurants/{restaurant_id}",
    response_model=RestaurantResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def restaurant_by_id(
    restaurant_id: str,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    restaurant, _ = await restaurants.get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail=f"Restaurant {restaurant_id} not found")
    return RestaurantResponse(restaurant=restaurant)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.post(
    "/api/orders",
    response_model=OrderCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def create_order(
    payload: OrderCreate,
    orders: OrderService = Depends(get_order_service),
) -> OrderCreateResponse:
    """
    Place an order.

    Totals are computed server-side from the submitted prices. The order is
    recorded in memory first and mirrored to the database when configured.
    """
    logger.info(f"Creating order for user {payload.user_id} at {payload.restaurant_name}")
    order = await orders.create(payload)

    return OrderCreateResponse(
        success=True,
        message="Order placed successfully!",
        order_id=order.id,
        estimated_delivery_time=order.estimated_delivery_time,
        total=order.total,
    )


@router.get(
    "/api/orders/user",
    response_model=OrderListResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def orders_for_user(
    user_id: Optional[str] = Query(None),
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> OrderListResponse:
    """Orders for one user, newest first."""
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=400, detail="user_id is required")

    found, source = await orders.list_for_user(user_id)
    return OrderListResponse(
        total=len(found),
        orders=[to_response(o, settings.restaurant_phone) for o in found],
        source=source,
    )


@router.get(
    "/api/orders/{order_id}",
    response_model=OrderDetailResponse,
    tags=["Orders"],
)
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> OrderDetailResponse:
    """Order tracking. Unknown ids get a sample order so the page renders."""
    order, source = await orders.get(order_id)
    return OrderDetailResponse(
        order=to_response(order, settings.restaurant_phone),
        source=source,
    )


@router.get(
    "/api/orders",
    response_model=OrderListResponse,
    tags=["Orders"],
    summary="List In-Memory Orders",
)
async def list_orders(
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> OrderListResponse:
    """Every order held in memory by this process, newest first."""
    found = orders.all_orders()
    return OrderListResponse(
        total=len(found),
        orders=[to_response(o, settings.restaurant_phone) for o in found],
        source="memory",
    )


# =============================================================================
# GEOCODING ENDPOINTS
# =============================================================================

@router.post(
    "/api/geocode/reverse",
    response_model=ReverseGeocodeResponse,
    tags=["Geocoding"],
)
async def reverse_geocode(
    payload: ReverseGeocodeRequest,
    restaurants: RestaurantService = Depends(get_restaurant_service),
) -> ReverseGeocodeResponse:
    address = await restaurants.reverse_geocode(payload.lat, payload.lng)
    return ReverseGeocodeResponse(address=address)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error_body(error: str, detail: Optional[str] = None) -> dict[str, Any]:
    return ErrorResponse(error=error, detail=detail).model_dump()


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors (400), never recorded."""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in errors
    )
    logger.warning(f"Rejected {request.method} {request.url.path}: {detail}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request data", detail),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def make_global_exception_handler(settings: Settings):
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Internal Server Error",
                str(exc) if settings.debug else "An unexpected error occurred",
            ),
        )

    return global_exception_handler


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    places: Optional[BasePlacesService] = None,
) -> FastAPI:
    """
    Build the storefront application.

    Args:
        settings: Settings to use instead of the environment
        places: Places provider to use instead of the configured one
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        # Startup
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info("=" * 60)

        engine = engine_from_settings(settings.database_url, echo=settings.database_echo)
        repository = None
        if engine is not None:
            repository = StorefrontRepository(
                build_session_maker(engine),
                placeholder_image=settings.placeholder_image,
            )
            try:
                await init_db(engine)
                logger.info("✅ Database initialized")
            except (SQLAlchemyError, OSError) as e:
                # Repository calls report failures, so the app runs degraded.
                logger.error(f"❌ Database initialization failed: {e}")
        else:
            logger.info("ℹ️ No database configured; orders kept in memory")

        places_service = places or get_places_service()
        logger.info(f"✅ Places Service: {places_service.provider_name}")

        order_store = OrderStore()
        restaurant_cache = RestaurantCache(
            max_entries=settings.restaurant_cache_max_entries,
            ttl_seconds=settings.restaurant_cache_ttl_seconds,
        )

        app.state.settings = settings
        app.state.places = places_service
        app.state.repository = repository
        app.state.order_store = order_store
        app.state.restaurant_cache = restaurant_cache
        app.state.order_service = OrderService(order_store, settings, repository)
        app.state.restaurant_service = RestaurantService(
            places_service,
            restaurant_cache,
            settings,
            repository,
        )

        # Validate production config
        if settings.use_real_services:
            missing = settings.validate_production_config()
            if missing:
                logger.warning(f"⚠️ Missing production config: {missing}")

        logger.info("=" * 60)
        logger.info("✅ Application ready!")
        logger.info("=" * 60)

        yield  # Application runs

        # Shutdown
        logger.info("Shutting down...")
        if engine is not None:
            await engine.dispose()
        logger.info("✅ Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Restaurant discovery and ordering API for the storefront. "
            "Uses mock places data for development and Google Places in production."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, make_global_exception_handler(settings))

    return app


setup_logging()
app = create_app()

