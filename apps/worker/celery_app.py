from __future__ import annotations

from celery import Celery

from fleetlog.core.config import settings
from fleetlog.core.logging import configure_logging

configure_logging(settings.log_level)

celery = Celery(
    "fleetlog",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["apps.worker.tasks"],
)

celery.conf.update(
    timezone=settings.tz,
    enable_utc=True,
    task_track_started=True,
    # one workbook at a time per worker process
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)
