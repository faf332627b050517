"""Celery worker configuration."""

from celery import Celery

from frameup.config import settings
from frameup.logging import setup_logging

# Setup logging before anything else
setup_logging()

# Create Celery app
celery_app = Celery(
    "frameup",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Task execution
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=270,
    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=4,
    # Result backend
    result_expires=86400,  # 24 hours
    # Task routing
    task_routes={
        "notifications.send": {"queue": "default"},
        "projects.reconcile_statuses": {"queue": "low"},
    },
    # Beat scheduler (for periodic tasks)
    beat_schedule={
        # Repair project statuses that drifted from their videos
        "reconcile-project-statuses": {
            "task": "projects.reconcile_statuses",
            "schedule": float(settings.reconcile_interval_seconds),
            "options": {"queue": "low"},
        },
    },
)

# Auto-discover tasks
celery_app.autodiscover_tasks(["frameup.jobs"])
