"""
Celery configuration for notification tasks
"""
from celery import Celery
from app.core.config import settings

celery_app = Celery(
    "devtoolshub",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.notification_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_ignore_result=True,
    task_time_limit=5 * 60,
    worker_prefetch_multiplier=1,
    broker_connection_timeout=3,
)
