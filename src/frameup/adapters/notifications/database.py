"""In-app notifications stored in the database."""

from collections.abc import Callable
from contextlib import AbstractContextManager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.db.models import NotificationModel
from frameup.db.session import get_session_context
from frameup.logging import get_logger

logger = get_logger(__name__)


def store_notification(session: Session, notification: Notification) -> NotificationModel:
    """Insert a notification row (not committed)."""
    row = NotificationModel(
        user_id=notification.user_id,
        type=str(notification.type),
        title=notification.title,
        message=notification.message,
        project_id=notification.project_id,
        data=notification.data,
        read=False,
    )
    session.add(row)
    return row


class DatabaseNotifier(Notifier):
    """Writes each notification in its own session, apart from the workflow transaction."""

    def __init__(
        self,
        session_factory: Callable[[], AbstractContextManager[Session]] = get_session_context,
    ) -> None:
        self.session_factory = session_factory

    @property
    def name(self) -> str:
        return "database"

    async def notify(self, notification: Notification) -> None:
        with self.session_factory() as session:
            row = store_notification(session, notification)
            session.flush()
            logger.info(
                "notification_stored",
                notification_id=str(row.id),
                user_id=str(notification.user_id),
                type=str(notification.type),
            )

    async def health_check(self) -> bool:
        """Verify the notifications table is reachable."""
        try:
            with self.session_factory() as session:
                session.execute(select(NotificationModel.id).limit(1))
            return True
        except SQLAlchemyError as e:
            logger.error("notification_store_unavailable", error=str(e))
            return False
