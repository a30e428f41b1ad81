"""
FastAPI application entry point.
Mounts routes, middleware (CORS, Prometheus) and the error envelope; the
lifespan owns the event dispatcher so subscribers drain before shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from inventory_api.api.v1.router import api_router
from inventory_api.cache.redis_client import close_redis
from inventory_api.config import get_settings
from inventory_api.core.errors import setup_exception_handlers
from inventory_api.core.logging_config import configure_logging
from inventory_api.db.session import async_session_maker
from inventory_api.events.subscribers import build_dispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: start the dispatcher. Shutdown: drain pending events, close Redis."""
    dispatcher = app.state.dispatcher
    if not dispatcher.running:
        await dispatcher.start()
    logger.info("Application started")
    yield
    await dispatcher.stop()
    await close_redis()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(
        title=settings.app_name,
        description="Inventory management API: items, folders, tags, activity log, alerts and settings.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.dispatcher = build_dispatcher(async_session_maker, settings)

    # CORS for frontend/API consumers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # Prometheus metrics at /metrics, dispatcher counters included
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
