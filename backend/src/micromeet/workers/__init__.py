"""Background workers (Celery) for scheduled jobs.

Run a worker with the beat scheduler embedded:

    celery -A micromeet.workers.celery_app worker --beat --loglevel=info
"""

from .celery_app import celery_app

__all__ = ["celery_app"]
