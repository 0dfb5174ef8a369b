from contextlib import asynccontextmanager

import logging

from fastapi import FastAPI

from feedhub.api import articles
from feedhub.api import channels
from feedhub.api import health
from feedhub.api.errors import register_error_handlers
from feedhub.config import LOG_LEVEL, ROOT_PATH, get_settings
from feedhub.core.errors import StoreError
from feedhub.db.store import create_store


logger = logging.getLogger("feedhub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Presence only, never the values
    logger.info("API routes initializing with %s store", settings.store_backend)
    logger.info("Has DATABASE_URL: %s", bool(settings.database_url))
    logger.info("Has SUPABASE_URL: %s", bool(settings.supabase_url))
    logger.info("Has SUPABASE_SERVICE_KEY: %s", bool(settings.supabase_service_key))

    # One store client per process, shared by all requests through app.state
    store = create_store(settings)
    try:
        await store.connect()
    except StoreError as e:
        # /api/health must come up anyway; data routes retry and answer 500 until the store is back
        logger.warning("Store unavailable at startup: %s", e, extra={"event": "store_connect_failed"})
    app.state.store = store
    try:
        yield
    finally:
        app.state.store = None
        await store.close()


app = FastAPI(
    title="feedhub",
    lifespan=lifespan,
    root_path=ROOT_PATH,
)
register_error_handlers(app)
app.include_router(health.router)
app.include_router(channels.router)
app.include_router(articles.router)

# Basic logging configuration (can be overridden by server config)
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
