"""Celery application and beat schedule"""

from celery import Celery
from celery.schedules import crontab

from ..config import get_settings

settings = get_settings()

celery_app = Celery(
    "micromeet",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["micromeet.workers.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    "invoices-mark-overdue-daily": {
        "task": "invoices.mark_overdue",
        "schedule": crontab(hour=settings.OVERDUE_SWEEP_HOUR_UTC, minute=0),
        "options": {
            "expires": 3600,  # Task expires after 1 hour if not picked up
        },
    },
}
