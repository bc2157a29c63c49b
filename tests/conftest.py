"""Pytest configuration and fixtures for the service layer.

Unit tests run the services against MemoryCacheStore and the recording
FakeRepository; integration tests use SQLAlchemy with in-memory SQLite.
"""

from collections.abc import AsyncIterator, Iterator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from service_layer.application.services.base_service import BaseService
from service_layer.core.config import get_settings
from service_layer.core.office_context import clear_current_user
from service_layer.infrastructure.cache.memory_cache import MemoryCacheStore
from service_layer.infrastructure.cache.tagged_cache import TaggedCache
from service_layer.infrastructure.persistence.database import Base
from service_layer.providers import get_cache_store, get_tagged_cache
from tests.fakes import FakeRepository, Widget

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _isolated_context() -> Iterator[None]:
    """Each test starts unauthenticated with fresh settings and cache singletons."""
    clear_current_user()
    get_settings.cache_clear()
    get_cache_store.cache_clear()
    get_tagged_cache.cache_clear()
    yield
    clear_current_user()
    get_settings.cache_clear()
    get_cache_store.cache_clear()
    get_tagged_cache.cache_clear()


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def tagged_cache(memory_store: MemoryCacheStore) -> TaggedCache:
    return TaggedCache(memory_store)


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def service(repository: FakeRepository, tagged_cache: TaggedCache) -> BaseService[Widget]:
    return BaseService(repository, tagged_cache, cache_ttl=60)


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Rolls back after test."""
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        await session.rollback()
