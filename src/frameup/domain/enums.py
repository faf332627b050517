"""Domain enumerations."""

from enum import StrEnum


class BatchVideoStatus(StrEnum):
    """Status of a single video deliverable within an order."""

    PENDING = "pending"  # Not started yet
    IN_PROGRESS = "in_progress"  # Editor working
    DELIVERED = "delivered"  # Awaiting creator review
    REVISION = "revision"  # Creator asked for changes
    APPROVED = "approved"  # Accepted, earnings released

    @property
    def rank(self) -> int:
        """Position in the workflow, independent of the string value."""
        return _VIDEO_STATUS_ORDER.index(self)


_VIDEO_STATUS_ORDER = (
    BatchVideoStatus.PENDING,
    BatchVideoStatus.IN_PROGRESS,
    BatchVideoStatus.DELIVERED,
    BatchVideoStatus.REVISION,
    BatchVideoStatus.APPROVED,
)


class ProjectStatus(StrEnum):
    """Status of an order (project)."""

    DRAFT = "draft"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    REVISION = "revision"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Set by other flows (checkout, cancellation); never overridden by the resolver.
PROTECTED_PROJECT_STATUSES = frozenset({ProjectStatus.DRAFT, ProjectStatus.CANCELLED})


class DeliveryMode(StrEnum):
    """How the videos of a batch are released to the editor."""

    SEQUENTIAL = "sequential"
    SIMULTANEOUS = "simultaneous"


class DeliveryStatus(StrEnum):
    """Status of a single delivery (submission) record."""

    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REVISION_REQUESTED = "revision_requested"


class DeliveryLinkType(StrEnum):
    """Supported hosts for delivered videos."""

    YOUTUBE = "youtube"
    GDRIVE = "gdrive"


class NotificationType(StrEnum):
    """Events users are notified about."""

    VIDEO_DELIVERED = "video_delivered"
    VIDEO_APPROVED = "video_approved"
    REVISION_REQUESTED = "revision_requested"
    EXTRA_REVISIONS_PAID = "extra_revisions_paid"
    VIDEO_UNLOCKED = "video_unlocked"
    PROJECT_COMPLETED = "project_completed"


class PaymentStatus(StrEnum):
    """Outcome of a payment attempt."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
