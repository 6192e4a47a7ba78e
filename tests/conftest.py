"""
Pytest configuration for storefront tests.
"""

import os

# Tests always run against the mock places provider and no default database.
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = ""
os.environ["GOOGLE_PLACES_API_KEY"] = ""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.core.config import Settings, get_settings
from storefront.database import build_engine, build_session_maker, init_db
from storefront.main import create_app
from storefront.services.places import MockPlacesService, reset_places_service
from storefront.services.repository import StorefrontRepository

get_settings.cache_clear()
reset_places_service()


@pytest.fixture
def settings() -> Settings:
    """Development settings with no database."""
    return Settings(_env_file=None, env_mode="development", database_url=None)


@pytest.fixture
def places() -> MockPlacesService:
    """Mock places provider without latency or failures."""
    return MockPlacesService(failure_rate=0.0)


@pytest.fixture
def client(settings: Settings, places: MockPlacesService):
    """API client for an app running on in-memory stores only."""
    app = create_app(settings=settings, places=places)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}"


@pytest.fixture
def db_client(db_url: str, places: MockPlacesService):
    """API client for an app backed by a SQLite database."""
    settings = Settings(_env_file=None, env_mode="development", database_url=db_url)
    app = create_app(settings=settings, places=places)
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def session_maker(db_url: str):
    """Session factory over a fresh SQLite database with all tables."""
    engine = build_engine(db_url)
    await init_db(engine)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest.fixture
def repository(session_maker) -> StorefrontRepository:
    return StorefrontRepository(session_maker, placeholder_image="/placeholder.svg")
