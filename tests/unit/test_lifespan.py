"""Tests for the application lifespan wiring."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI

from service_layer.core import lifespan as lifespan_module
from service_layer.core.lifespan import create_lifespan
from service_layer.infrastructure.cache.memory_cache import MemoryCacheStore
from service_layer.infrastructure.cache.redis_cache import RedisCacheStore


async def test_memory_backend_is_exposed_on_app_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    app = FastAPI()
    async with create_lifespan(app):
        assert isinstance(app.state.cache_store, MemoryCacheStore)


async def test_redis_store_connected_and_disconnected(monkeypatch: pytest.MonkeyPatch) -> None:
    store = RedisCacheStore()
    connect = AsyncMock()
    disconnect = AsyncMock()
    monkeypatch.setattr(store, "connect", connect)
    monkeypatch.setattr(store, "disconnect", disconnect)
    monkeypatch.setattr(lifespan_module, "get_cache_store", lambda: store)
    app = FastAPI()
    async with create_lifespan(app):
        connect.assert_awaited_once()
        disconnect.assert_not_awaited()
    disconnect.assert_awaited_once()
