"""Batch aggregation, project status resolution and sequential gating.

Pure functions over ordered collections of batch videos. They accept domain
`BatchVideo` objects or ORM rows alike; only `status` is read.
"""

from collections.abc import Callable, Sequence
from typing import NamedTuple

from frameup.domain.enums import (
    PROTECTED_PROJECT_STATUSES,
    BatchVideoStatus,
    DeliveryMode,
    ProjectStatus,
)
from frameup.domain.models import BatchStats, VideoState


def calculate_batch_stats(videos: Sequence[VideoState]) -> BatchStats:
    """Count videos per status and compute the completion percentage.

    Completion counts approved videos only and rounds half up, so a batch of
    8 with one approval reports 13%. An empty batch yields all-zero stats.
    """
    counts = dict.fromkeys(BatchVideoStatus, 0)
    for video in videos:
        counts[BatchVideoStatus(video.status)] += 1

    total = len(videos)
    approved = counts[BatchVideoStatus.APPROVED]
    # floor(100 * approved / total + 0.5) in integer arithmetic
    percent_complete = (200 * approved + total) // (2 * total) if total else 0

    return BatchStats(
        total=total,
        pending=counts[BatchVideoStatus.PENDING],
        in_progress=counts[BatchVideoStatus.IN_PROGRESS],
        awaiting_review=counts[BatchVideoStatus.DELIVERED],
        in_revision=counts[BatchVideoStatus.REVISION],
        approved=approved,
        percent_complete=percent_complete,
    )


class StatusRule(NamedTuple):
    """One entry of the project status precedence table."""

    name: str
    predicate: Callable[[BatchStats], bool]
    status: ProjectStatus


# Evaluated top to bottom, first match wins. Completion requires every video
# approved; something waiting on the creator outranks revision and progress.
PROJECT_STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule("empty_batch", lambda s: s.total == 0, ProjectStatus.PENDING),
    StatusRule("all_approved", lambda s: s.approved == s.total, ProjectStatus.COMPLETED),
    StatusRule("awaiting_review", lambda s: s.awaiting_review > 0, ProjectStatus.DELIVERED),
    StatusRule("in_revision", lambda s: s.in_revision > 0, ProjectStatus.REVISION),
    StatusRule("in_progress", lambda s: s.in_progress > 0, ProjectStatus.IN_PROGRESS),
)

DEFAULT_PROJECT_STATUS = ProjectStatus.PENDING


def matching_rule(stats: BatchStats) -> StatusRule | None:
    """Return the first precedence rule that matches, if any."""
    for rule in PROJECT_STATUS_RULES:
        if rule.predicate(stats):
            return rule
    return None


def resolve_project_status(videos: Sequence[VideoState]) -> ProjectStatus:
    """Derive the project-level status from its batch videos."""
    rule = matching_rule(calculate_batch_stats(videos))
    return rule.status if rule else DEFAULT_PROJECT_STATUS


def apply_resolved_status(
    current: ProjectStatus | str, videos: Sequence[VideoState]
) -> ProjectStatus:
    """Status to store on a project after a video mutation.

    Draft and cancelled projects keep their status.
    """
    current = ProjectStatus(current)
    if current in PROTECTED_PROJECT_STATUSES:
        return current
    return resolve_project_status(videos)


def can_edit_video(
    videos: Sequence[VideoState],
    index: int,
    mode: DeliveryMode | str,
) -> bool:
    """Whether the video at `index` (0-based, in sequence order) may be worked on.

    Simultaneous batches unlock every video. Sequential batches unlock the
    first video and then each video once its predecessor is approved.
    """
    if DeliveryMode(mode) == DeliveryMode.SIMULTANEOUS:
        return True

    if index < 0:
        raise IndexError(f"Video index must be non-negative, got {index}")

    if index == 0:
        return True

    if index - 1 >= len(videos):
        return False

    return BatchVideoStatus(videos[index - 1].status) == BatchVideoStatus.APPROVED


def editable_indices(videos: Sequence[VideoState], mode: DeliveryMode | str) -> list[int]:
    """Indices of the videos that are currently unlocked."""
    return [i for i in range(len(videos)) if can_edit_video(videos, i, mode)]
