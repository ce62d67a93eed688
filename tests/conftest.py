from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from luckyegg.api.deps import get_backend, get_catalog
from luckyegg.backend import BackendClient
from luckyegg.cart.storage import MemoryCartStorage
from luckyegg.cart.store import CartStore
from luckyegg.db.database import get_session
from luckyegg.main import app
from luckyegg.models.db import Base
from luckyegg.services.catalog import CatalogView
from tests.factories import ANON_KEY, BACKEND_URL


@pytest.fixture
def storage() -> MemoryCartStorage:
    return MemoryCartStorage()


@pytest.fixture
def store(storage: MemoryCartStorage) -> CartStore:
    return CartStore(storage)


@pytest.fixture
async def backend() -> AsyncGenerator[BackendClient, None]:
    """Backend client pointed at the mocked backend URL."""
    client = BackendClient(BACKEND_URL, ANON_KEY)
    yield client
    await client.aclose()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(
    async_engine: AsyncEngine, backend: BackendClient
) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an async test client.

    The local store is the in-memory engine and the backend client points
    at BACKEND_URL, which tests mock with respx. Each test gets a fresh
    catalog view over that client.
    """
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    catalog = CatalogView(backend)
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_catalog] = lambda: catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    catalog.close()
