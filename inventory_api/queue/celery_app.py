"""
Celery application - periodic maintenance off the request path.
RabbitMQ as broker, Redis as result backend; beat drives alert cleanup.
"""

from celery import Celery

from inventory_api.config import get_settings

settings = get_settings()

celery_app = Celery(
    "inventory_api",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["inventory_api.queue.tasks"],
)

# Task settings: retries, time limits, serialization
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=60,
    worker_prefetch_multiplier=1,  # Fair distribution
    beat_schedule={
        "cleanup-expired-alerts": {
            "task": "inventory_api.queue.tasks.cleanup_alerts_task",
            "schedule": settings.alert_cleanup_interval_minutes * 60.0,
        },
    },
)
