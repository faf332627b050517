"""User notification channels."""

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.adapters.notifications.database import DatabaseNotifier
from frameup.adapters.notifications.queue import QueueNotifier
from frameup.adapters.notifications.stub import StubNotifier
from frameup.config import settings
from frameup.logging import get_logger

logger = get_logger(__name__)


def get_notifier() -> Notifier:
    """Get the configured notification channel."""
    provider_name = settings.notification_provider.lower()

    if provider_name == "stub":
        return StubNotifier()
    elif provider_name == "database":
        return DatabaseNotifier()
    elif provider_name == "queue":
        return QueueNotifier()

    logger.warning(f"Unknown notification_provider '{provider_name}', using stub")
    return StubNotifier()


__all__ = [
    "DatabaseNotifier",
    "Notification",
    "Notifier",
    "QueueNotifier",
    "StubNotifier",
    "get_notifier",
]
