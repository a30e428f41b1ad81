"""
Health checks - for load balancers, Kubernetes, and monitoring.
Liveness is instant; readiness pings the database and reports the event
dispatcher, since a stopped dispatcher means no activity or alert bookkeeping.
"""

import logging

from fastapi import APIRouter
from sqlalchemy import text

from inventory_api.config import get_settings
from inventory_api.core.dependencies import Dispatcher
from inventory_api.db.session import DbSession

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(session: DbSession, dispatcher: Dispatcher):
    """Readiness: database reachable and dispatcher consuming."""
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning("Readiness check: database unavailable: %s", e)
        database = "unavailable"
    status = "ready" if database == "ok" and dispatcher.running else "degraded"
    return {
        "status": status,
        "database": database,
        "dispatcher": "running" if dispatcher.running else "stopped",
    }
