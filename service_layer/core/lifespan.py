"""Application lifespan: startup and shutdown.

Wires infrastructure only: logging, optional tracing, the cache store
connection and the SQL engine dispose. Use as FastAPI(lifespan=create_lifespan).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from service_layer.core.config import get_settings
from service_layer.core.logging import setup_logging
from service_layer.infrastructure.cache.redis_cache import RedisCacheStore
from service_layer.infrastructure.persistence.database import dispose_engine, get_engine
from service_layer.providers import get_cache_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the cache store on startup; disconnect and dispose the engine on shutdown."""
    setup_logging()
    settings = get_settings()
    store = get_cache_store()

    telemetry = None
    if settings.telemetry_enabled:
        from service_layer.core.telemetry import Telemetry, set_telemetry

        telemetry = Telemetry.from_settings(settings)
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        if isinstance(store, RedisCacheStore):
            telemetry.instrument_redis()
        engine = get_engine()
        if engine is not None:
            telemetry.instrument_sqlalchemy(engine)
    app.state.telemetry = telemetry

    if isinstance(store, RedisCacheStore):
        await store.connect()
    app.state.cache_store = store
    logger.info("Cache backend: %s", store.backend)

    yield

    if isinstance(store, RedisCacheStore):
        await store.disconnect()
    await dispose_engine()
    if telemetry is not None:
        from service_layer.core.telemetry import set_telemetry

        telemetry.shutdown()
        set_telemetry(None)
