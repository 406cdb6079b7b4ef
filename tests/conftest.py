"""
Test configuration and fixtures
"""

import os

# Settings are read at import time
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("PIPELINE_STAGE_DELAY", "0")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import random

import pytest
import pytest_asyncio
from aiocache import Cache
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

import marketlens.models  # noqa: F401
from marketlens.api.deps import get_session_factory
from marketlens.core.cache import AnalysisCache, OrjsonSerializer, get_analysis_cache
from marketlens.core.database import build_engine, build_sessionmaker, get_async_session
from marketlens.main import app
from marketlens.models.enums import Platform
from marketlens.services.mock_marketplace import MockMarketplaceScraper
from marketlens.services.session_tracker import SessionTracker, get_session_tracker


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite database per test"""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def tracker():
    return SessionTracker()


@pytest.fixture
def analysis_cache():
    return AnalysisCache(backend=Cache(Cache.MEMORY, serializer=OrjsonSerializer()), ttl=60)


@pytest.fixture
def scraper():
    return MockMarketplaceScraper(rng=random.Random(42), products_per_platform=2, reviews_per_product=3)


@pytest_asyncio.fixture
async def client(session_factory, tracker, analysis_cache):
    """Create test client with database, tracker and cache overrides"""

    async def get_test_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = get_test_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_session_tracker] = lambda: tracker
    app.dependency_overrides[get_analysis_cache] = lambda: analysis_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_search_request():
    """Sample search request payload"""
    return {
        "query": "wireless earbuds",
        "platforms": [Platform.SHOPEE.value, Platform.TOKOPEDIA.value],
    }
