# bookinfo/core/lifespan.py
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from bookinfo.core.config import Settings
from bookinfo.db import mongo, mysql
from bookinfo.domain.repositories.ratings_repo import (
    DocumentRatingsStore,
    InMemoryRatingsStore,
    RatingsStore,
    RelationalRatingsStore,
)
from bookinfo.domain.services.health_simulator import HealthSimulator, ServiceHealthState

logger = logging.getLogger(__name__)


async def build_ratings_store(settings: Settings) -> RatingsStore:
    """
    Pick the ratings backend once for the process lifetime:
    v2 + DB_TYPE=mysql -> relational, v2 otherwise -> document, anything else -> in-memory.
    """
    if not settings.database_backed:
        return InMemoryRatingsStore()
    if settings.DB_TYPE == "mysql":
        return RelationalRatingsStore(mysql.create_mysql_engine(settings), timeout_s=settings.STORE_TIMEOUT_S)
    await mongo.connect(settings)
    return DocumentRatingsStore(mongo.get_ratings_collection(), timeout_s=settings.STORE_TIMEOUT_S)


async def close_ratings_store(store: RatingsStore) -> None:
    if isinstance(store, RelationalRatingsStore):
        mysql.dispose(store.engine)
        logger.info("🔌 MySQL engine disposed")
    elif isinstance(store, DocumentRatingsStore):
        await mongo.disconnect()
        logger.info("🔌 Mongo disconnected")


@asynccontextmanager
async def service_lifespan(app: FastAPI):
    """Every service owns one pooled HTTP client for its outbound calls."""
    settings: Settings = app.state.settings

    # --- Startup ---
    app.state.http_client = httpx.AsyncClient()
    logger.info("✅ %s started (topology: %s)", app.state.service_label,
                {n.name: n.base_url for n in app.state.topology.walk()})

    try:
        yield
    finally:
        # --- Shutdown ---
        await app.state.http_client.aclose()
        logger.info("🔌 %s stopped (env=%s)", app.state.service_label, settings.APP_ENV)


@asynccontextmanager
async def ratings_lifespan(app: FastAPI):
    """Ratings additionally owns its store and the health simulator timers."""
    settings: Settings = app.state.settings

    async with service_lifespan(app):
        store = await build_ratings_store(settings)
        app.state.ratings_store = store
        logger.info("✅ ratings backend=%s (SERVICE_VERSION=%s)", store.name, settings.SERVICE_VERSION)

        app.state.health_state = ServiceHealthState()
        simulator = HealthSimulator(
            app.state.health_state,
            unavailable_interval_s=settings.UNAVAILABLE_TOGGLE_INTERVAL_S,
            unhealthy_interval_s=settings.UNHEALTHY_TOGGLE_INTERVAL_S,
            toggle_availability=settings.toggles_availability,
            toggle_health=settings.toggles_health,
        )
        app.state.health_simulator = simulator
        simulator.start()

        try:
            yield
        finally:
            await simulator.stop()
            await close_ratings_store(store)
