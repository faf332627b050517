"""Base interface for user notification channels."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from frameup.domain.enums import NotificationType


@dataclass
class Notification:
    """A notification addressed to one user."""

    user_id: UUID
    type: NotificationType
    title: str
    message: str
    project_id: UUID | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe representation (for the task queue)."""
        return {
            "user_id": str(self.user_id),
            "type": str(self.type),
            "title": self.title,
            "message": self.message,
            "project_id": str(self.project_id) if self.project_id else None,
            "data": self.data,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Notification":
        project_id = payload.get("project_id")
        return cls(
            user_id=UUID(payload["user_id"]),
            type=NotificationType(payload["type"]),
            title=payload["title"],
            message=payload["message"],
            project_id=UUID(project_id) if project_id else None,
            data=payload.get("data") or {},
        )


class Notifier(ABC):
    """Abstract base class for notification channels.

    Delivery is fire-and-forget from the workflow's point of view: callers
    log failures and carry on.

    Implementations:
    - StubNotifier: Logs and keeps notifications in memory
    - DatabaseNotifier: Stores in-app notifications
    - QueueNotifier: Hands notifications to the Celery worker
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel name."""
        ...

    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        """Deliver a notification.

        Args:
            notification: Recipient, event type and message
        """
        ...

    async def health_check(self) -> bool:
        """Check if the channel can accept notifications.

        Returns:
            True if the channel is operational, False otherwise
        """
        return True
