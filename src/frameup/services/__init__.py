"""Business services."""

from frameup.services.delivery import (
    ApprovalOutcome,
    BatchDeliveryService,
    RevisionOutcome,
    SettlementResult,
    TransitionResult,
)
from frameup.services.projects import (
    BatchOrder,
    StatusChange,
    assign_editor,
    cancel_project,
    create_batch_project,
    get_batch_overview,
    get_batch_videos,
    get_project,
    reconcile_all_project_statuses,
    reconcile_project_status,
)

__all__ = [
    "ApprovalOutcome",
    "BatchDeliveryService",
    "BatchOrder",
    "RevisionOutcome",
    "SettlementResult",
    "StatusChange",
    "TransitionResult",
    "assign_editor",
    "cancel_project",
    "create_batch_project",
    "get_batch_overview",
    "get_batch_videos",
    "get_project",
    "reconcile_all_project_statuses",
    "reconcile_project_status",
]
