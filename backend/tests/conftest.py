"""
Headlines Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable infrastructure: a throwaway SQLite database per test, a mock
       session for failure paths, canned listing pages, and an HTTP client.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings: Settings pointing at a per-test SQLite file
    ├── database: Database with tables created (disposed afterwards)
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── listing_page: HTML with two listings, "A" and "B"
    ├── page_transport: httpx.MockTransport serving listing_page
    └── test_client: HTTPX AsyncClient bound to a fresh app
"""

import os
import tempfile

# Override settings for testing BEFORE any headlines imports
# Why: headlines.main builds an app from the environment at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="headlines_test_"), "import.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from headlines.config import Settings
from headlines.database import Database


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'headlines.db'}",
        log_level="WARNING",
        auto_create_tables=False,
        scrape_url="https://dev.to",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database on a fresh SQLite file with all tables created."""
    db = Database(test_settings)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
        with pytest.raises(StoreError):
            await article_store.list_all(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def listing_page():
    """Two dev.to-style listings: "A" by Alice and "B" by Bob."""
    return """
    <html><body>
      <div class="crayons-story">
        <h2 class="crayons-story__title"><a href="/alice/a-post">  A  </a></h2>
        <h4>  Alice </h4>
      </div>
      <div class="sidebar"><h2><a href="/ad">Not a listing</a></h2></div>
      <div class="crayons-story">
        <h2 class="crayons-story__title"><a href="https://example.com/b">B</a></h2>
        <h4>Bob</h4>
      </div>
    </body></html>
    """


@pytest.fixture
def make_transport():
    """Factory: httpx.MockTransport answering every request with one response."""
    def factory(status_code=200, text=""):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, text=text)
        return httpx.MockTransport(handler)
    return factory


@pytest.fixture
def failing_transport():
    """Factory: httpx.MockTransport raising a transport error for every request."""
    def factory(exc_type=httpx.ConnectError):
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)
        return httpx.MockTransport(handler)
    return factory


@pytest.fixture
def page_transport(make_transport, listing_page):
    return make_transport(text=listing_page)


@pytest_asyncio.fixture
async def app_factory(test_settings):
    """
    Builds apps on the per-test database; disposes their engines afterwards.

    ASGITransport does not run the lifespan, so tables are created here.
    """
    from headlines.main import create_app

    apps = []

    async def factory(transport=None, **overrides):
        settings = test_settings.model_copy(update=overrides)
        app = create_app(settings, scrape_transport=transport)
        await app.state.db.create_tables()
        apps.append(app)
        return app

    yield factory

    for app in apps:
        await app.state.db.dispose()


@pytest_asyncio.fixture
async def test_client(app_factory, page_transport):
    """
    HTTPX AsyncClient talking to a fresh app whose scrape target serves
    the listing_page fixture.
    """
    app = await app_factory(page_transport)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
