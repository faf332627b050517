"""Celery task definitions for notifications and status maintenance."""

from typing import Any

from frameup.adapters.notifications.base import Notification
from frameup.adapters.notifications.database import store_notification
from frameup.db.session import get_session_context
from frameup.logging import get_logger
from frameup.services.projects import reconcile_all_project_statuses
from frameup.worker import celery_app

logger = get_logger(__name__)


@celery_app.task(
    bind=True,
    name="notifications.send",
    max_retries=3,
    default_retry_delay=30,
)
def send_notification_task(self: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Persist a notification enqueued by the workflow.

    Args:
        payload: Notification serialized with `Notification.to_payload()`
    """
    task_id = self.request.id
    notification = Notification.from_payload(payload)

    try:
        with get_session_context() as session:
            row = store_notification(session, notification)
            session.flush()
            notification_id = str(row.id)
    except Exception as e:
        logger.error("notification_task_failed", task_id=task_id, error=str(e))
        raise self.retry(exc=e)

    logger.info(
        "notification_task_completed",
        task_id=task_id,
        notification_id=notification_id,
        type=str(notification.type),
    )
    return {"success": True, "notification_id": notification_id}


@celery_app.task(bind=True, name="projects.reconcile_statuses")
def reconcile_statuses_task(self: Any) -> dict[str, Any]:
    """Rewrite stored project statuses that no longer match their videos."""
    task_id = self.request.id
    logger.info("reconcile_statuses_started", task_id=task_id)

    with get_session_context() as session:
        changes = reconcile_all_project_statuses(session)

    return {
        "success": True,
        "changed": len(changes),
        "changes": [
            {
                "project_id": str(change.project_id),
                "previous": str(change.previous),
                "current": str(change.current),
            }
            for change in changes
        ],
    }
