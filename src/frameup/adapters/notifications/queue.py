"""Notifications handed off to the Celery worker."""

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.logging import get_logger

logger = get_logger(__name__)


class QueueNotifier(Notifier):
    """Enqueues notifications; the worker persists them."""

    @property
    def name(self) -> str:
        return "queue"

    async def notify(self, notification: Notification) -> None:
        from frameup.jobs.tasks import send_notification_task

        result = send_notification_task.delay(notification.to_payload())
        logger.info(
            "notification_enqueued",
            task_id=result.id,
            user_id=str(notification.user_id),
            type=str(notification.type),
        )

    async def health_check(self) -> bool:
        """Verify the Celery broker accepts connections."""
        from frameup.worker import celery_app

        try:
            with celery_app.connection_for_write() as connection:
                connection.ensure_connection(max_retries=1)
            return True
        except Exception as e:
            logger.error("notification_broker_unavailable", error=str(e))
            return False
