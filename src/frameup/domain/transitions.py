"""Allowed batch video status transitions."""

from frameup.domain.enums import BatchVideoStatus
from frameup.domain.errors import InvalidTransitionError

# (from, to) -> action name
ALLOWED_TRANSITIONS: dict[tuple[BatchVideoStatus, BatchVideoStatus], str] = {
    (BatchVideoStatus.PENDING, BatchVideoStatus.IN_PROGRESS): "start",
    (BatchVideoStatus.IN_PROGRESS, BatchVideoStatus.DELIVERED): "deliver",
    (BatchVideoStatus.DELIVERED, BatchVideoStatus.APPROVED): "approve",
    (BatchVideoStatus.DELIVERED, BatchVideoStatus.REVISION): "request_revision",
    (BatchVideoStatus.REVISION, BatchVideoStatus.IN_PROGRESS): "resume",
}


def ensure_transition(current: BatchVideoStatus | str, target: BatchVideoStatus | str) -> str:
    """Return the action name for an edge, or raise InvalidTransitionError."""
    edge = (BatchVideoStatus(current), BatchVideoStatus(target))
    action = ALLOWED_TRANSITIONS.get(edge)
    if action is None:
        raise InvalidTransitionError(str(edge[0]), str(edge[1]))
    return action


def next_statuses(current: BatchVideoStatus | str) -> list[BatchVideoStatus]:
    """Statuses reachable from `current` in one step."""
    current = BatchVideoStatus(current)
    return [target for (source, target) in ALLOWED_TRANSITIONS if source == current]
