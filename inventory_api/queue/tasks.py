"""
Celery tasks - scheduled maintenance that must not run inside a request.
"""

import asyncio
import logging

from inventory_api.config import get_settings
from inventory_api.queue.celery_app import celery_app

logger = logging.getLogger(__name__)


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _cleanup() -> int:
    # Fresh engine per run: pooled asyncpg connections are bound to the loop that opened them
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from inventory_api.services.alert_deriver import AlertDeriver

    settings = get_settings()
    engine = create_async_engine(settings.database_url)
    try:
        return await AlertDeriver(async_sessionmaker(engine, expire_on_commit=False), settings).cleanup()
    finally:
        await engine.dispose()


@celery_app.task(bind=True, max_retries=3)
def cleanup_alerts_task(self):
    """Delete expired alerts and alerts past the retention horizon."""
    try:
        removed = _run_async(_cleanup())
    except Exception as exc:
        raise self.retry(exc=exc, countdown=30)
    logger.info("Alert cleanup task removed %d alerts", removed)
    return removed
