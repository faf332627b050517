"""Domain models and business logic."""

from frameup.domain.batch import (
    PROJECT_STATUS_RULES,
    apply_resolved_status,
    calculate_batch_stats,
    can_edit_video,
    editable_indices,
    resolve_project_status,
)
from frameup.domain.enums import (
    PROTECTED_PROJECT_STATUSES,
    BatchVideoStatus,
    DeliveryMode,
    DeliveryStatus,
    NotificationType,
    ProjectStatus,
)
from frameup.domain.errors import (
    InvalidDeliveryUrlError,
    InvalidTransitionError,
    NotFoundError,
    PaymentRequiredError,
    ProjectValidationError,
    SequenceLockedError,
    WorkflowError,
)
from frameup.domain.models import BatchOverview, BatchStats, BatchVideo

__all__ = [
    "BatchOverview",
    "BatchStats",
    "BatchVideo",
    "BatchVideoStatus",
    "DeliveryMode",
    "DeliveryStatus",
    "InvalidDeliveryUrlError",
    "InvalidTransitionError",
    "NotFoundError",
    "NotificationType",
    "PROJECT_STATUS_RULES",
    "PROTECTED_PROJECT_STATUSES",
    "PaymentRequiredError",
    "ProjectStatus",
    "ProjectValidationError",
    "SequenceLockedError",
    "WorkflowError",
    "apply_resolved_status",
    "calculate_batch_stats",
    "can_edit_video",
    "editable_indices",
    "resolve_project_status",
]
