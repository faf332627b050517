"""Stub notifier for testing."""

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.logging import get_logger

logger = get_logger(__name__)


class StubNotifier(Notifier):
    """Stub notifier that only logs and remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    @property
    def name(self) -> str:
        return "stub"

    async def notify(self, notification: Notification) -> None:
        self.sent.append(notification)
        logger.info(
            "stub_notification",
            user_id=str(notification.user_id),
            type=str(notification.type),
            title=notification.title,
        )
