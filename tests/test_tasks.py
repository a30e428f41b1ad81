"""
Celery wiring for alert maintenance: registration, beat schedule, sync bridge.
"""

from inventory_api.config import get_settings
from inventory_api.queue.celery_app import celery_app
from inventory_api.queue.tasks import _run_async, cleanup_alerts_task


def test_cleanup_task_is_registered():
    assert cleanup_alerts_task.name == "inventory_api.queue.tasks.cleanup_alerts_task"
    assert cleanup_alerts_task.name in celery_app.tasks


def test_beat_runs_cleanup_on_configured_interval():
    entry = celery_app.conf.beat_schedule["cleanup-expired-alerts"]
    assert entry["task"] == cleanup_alerts_task.name
    assert entry["schedule"] == get_settings().alert_cleanup_interval_minutes * 60.0


def test_run_async_returns_coroutine_result():
    async def answer():
        return 42

    assert _run_async(answer()) == 42
