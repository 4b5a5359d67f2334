"""
Shared fixtures for the RecipePad test suite.

Every test gets its own SQLite file database; the FastAPI app is exercised
in-process through ``httpx.ASGITransport`` with ``get_db`` overridden.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["TELEGRAM_BOT_TOKEN"] = "123456:TEST-TOKEN"
os.environ["TELEGRAM_CHAT_ID"] = "-100500"
os.environ["LOG_JSON"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from recipepad.core.db import ensure_schema, get_db
from recipepad.domains.recipes.cache import ListingCache
from recipepad.main import app


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'recipepad.db'}")
    await ensure_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def listing_cache(clock):
    return ListingCache(ttl=15.0, clock=clock)


@pytest_asyncio.fixture
async def client(session_factory, listing_cache):
    async def _get_db():
        async with session_factory() as session:
            yield session

    original_cache = app.state.listing_cache
    app.dependency_overrides[get_db] = _get_db
    app.state.listing_cache = listing_cache

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client

    app.dependency_overrides.clear()
    app.state.listing_cache = original_cache
