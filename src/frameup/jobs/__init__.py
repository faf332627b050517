"""Celery job definitions."""

from frameup.jobs.tasks import reconcile_statuses_task, send_notification_task

__all__ = [
    "reconcile_statuses_task",
    "send_notification_task",
]
