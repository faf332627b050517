"""Workflow errors surfaced to callers.

All of these are local, recoverable conditions. Callers (HTTP handlers, CLI)
turn them into user-facing messages; none of them is retried by the core.
"""

from decimal import Decimal
from typing import Any


class WorkflowError(Exception):
    """Base class for batch workflow errors."""

    pass


class InvalidTransitionError(WorkflowError):
    """Raised when a video cannot move from its current status to the target."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move video from '{current}' to '{target}'")


class SequenceLockedError(WorkflowError):
    """Raised when a sequential batch video is started before its predecessor is approved."""

    def __init__(self, sequence_order: int) -> None:
        self.sequence_order = sequence_order
        super().__init__(
            f"Video #{sequence_order} is locked until video #{sequence_order - 1} is approved"
        )


class PaymentRequiredError(WorkflowError):
    """Raised when work resumes past the free-revision allowance without settlement."""

    def __init__(self, amount: Decimal) -> None:
        self.amount = amount
        super().__init__(f"Extra revisions must be paid before work resumes (amount due: {amount})")


class NotFoundError(WorkflowError):
    """Raised when a referenced project or video does not exist."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class InvalidDeliveryUrlError(WorkflowError):
    """Raised when a delivery link is not a supported video link."""

    pass


class ProjectValidationError(WorkflowError):
    """Raised for invalid order or request parameters."""

    pass
