"""Domain models - pure Python classes independent of database."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from frameup.domain.enums import BatchVideoStatus, DeliveryMode, ProjectStatus


class VideoState(Protocol):
    """Anything exposing a batch video status (domain objects or ORM rows)."""

    status: str


@dataclass
class BatchVideo:
    """One deliverable unit within an order."""

    id: UUID
    project_id: UUID
    sequence_order: int
    status: BatchVideoStatus = BatchVideoStatus.PENDING
    title: str | None = None
    delivery_url: str | None = None
    delivered_at: datetime | None = None
    approved_at: datetime | None = None
    released_at: datetime | None = None
    revision_count: int = 0
    extra_revisions_purchased: int = 0


@dataclass(frozen=True)
class BatchStats:
    """Aggregate counts over a batch. Derived on every read, never stored."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    awaiting_review: int = 0
    in_revision: int = 0
    approved: int = 0
    percent_complete: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "pending": self.pending,
            "in_progress": self.in_progress,
            "awaiting_review": self.awaiting_review,
            "in_revision": self.in_revision,
            "approved": self.approved,
            "percent_complete": self.percent_complete,
        }


@dataclass
class BatchOverview:
    """Snapshot of an order with its derived batch state."""

    project_id: UUID
    title: str
    stored_status: ProjectStatus
    resolved_status: ProjectStatus
    delivery_mode: DeliveryMode
    videos: list[BatchVideo]
    stats: BatchStats
    editable_indices: list[int] = field(default_factory=list)
    editor_earnings_per_video: Decimal = Decimal("0")
    editor_earnings_released: Decimal = Decimal("0")

    @property
    def in_sync(self) -> bool:
        """Whether the stored project status matches the derived one."""
        return self.stored_status == self.resolved_status
