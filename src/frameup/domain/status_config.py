"""Display metadata for batch video and project statuses."""

from dataclasses import dataclass

from frameup.domain.enums import BatchVideoStatus, ProjectStatus


@dataclass(frozen=True)
class StatusDisplay:
    """How a batch video status is shown to users."""

    icon: str
    label: str
    description: str
    tone: str  # gray, blue, orange, yellow, green


@dataclass(frozen=True)
class StatusBadge:
    """Badge for a project status."""

    label: str
    variant: str  # default, secondary, outline, destructive


VIDEO_STATUS_CONFIG: dict[BatchVideoStatus, StatusDisplay] = {
    BatchVideoStatus.PENDING: StatusDisplay(
        icon="⏳",
        label="Waiting",
        description="The editor has not started this video yet",
        tone="gray",
    ),
    BatchVideoStatus.IN_PROGRESS: StatusDisplay(
        icon="🎬",
        label="In Progress",
        description="The editor is working on this video",
        tone="blue",
    ),
    BatchVideoStatus.DELIVERED: StatusDisplay(
        icon="👀",
        label="Awaiting Review",
        description="Video delivered! Review and approve it to unlock the next one",
        tone="orange",
    ),
    BatchVideoStatus.REVISION: StatusDisplay(
        icon="🔄",
        label="In Revision",
        description="The editor is applying your feedback",
        tone="yellow",
    ),
    BatchVideoStatus.APPROVED: StatusDisplay(
        icon="✅",
        label="Approved",
        description="Video approved and finished",
        tone="green",
    ),
}

PROJECT_STATUS_BADGES: dict[ProjectStatus, StatusBadge] = {
    ProjectStatus.DRAFT: StatusBadge("Draft", "secondary"),
    ProjectStatus.PENDING: StatusBadge("Waiting", "secondary"),
    ProjectStatus.IN_PROGRESS: StatusBadge("In Progress", "default"),
    ProjectStatus.DELIVERED: StatusBadge("Delivered", "outline"),
    ProjectStatus.REVISION: StatusBadge("Changes Requested", "destructive"),
    ProjectStatus.COMPLETED: StatusBadge("Completed", "default"),
    ProjectStatus.CANCELLED: StatusBadge("Cancelled", "destructive"),
}


def get_video_status_config(status: BatchVideoStatus | str) -> StatusDisplay:
    """Display metadata for a video status; unknown values show as pending."""
    try:
        return VIDEO_STATUS_CONFIG[BatchVideoStatus(status)]
    except ValueError:
        return VIDEO_STATUS_CONFIG[BatchVideoStatus.PENDING]


def get_project_status_badge(status: ProjectStatus | str) -> StatusBadge:
    """Badge for a project status; unknown values show their raw name."""
    try:
        return PROJECT_STATUS_BADGES[ProjectStatus(status)]
    except ValueError:
        return StatusBadge(label=str(status), variant="secondary")
