"""Order (project) management service.

Creates batch orders with their videos, assembles read-side overviews and
repairs stored project statuses that drifted from their videos.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from frameup.db.models import BatchVideoModel, ProjectModel
from frameup.domain.batch import (
    apply_resolved_status,
    calculate_batch_stats,
    editable_indices,
    resolve_project_status,
)
from frameup.domain.enums import (
    PROTECTED_PROJECT_STATUSES,
    BatchVideoStatus,
    DeliveryMode,
    ProjectStatus,
)
from frameup.domain.errors import NotFoundError, ProjectValidationError
from frameup.domain.models import BatchOverview, BatchVideo
from frameup.domain.pricing import (
    BusinessRules,
    calculate_price_quote,
    default_editor_earnings,
    money,
)
from frameup.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BatchOrder:
    """Parameters of a new order as placed by a creator."""

    creator_id: UUID
    title: str
    base_price: Decimal
    quantity: int = 1
    is_batch: bool = False
    delivery_mode: DeliveryMode = DeliveryMode.SEQUENTIAL
    estimated_delivery_days: int = 3
    description: str | None = None
    platform_fee_percent: Decimal | None = None
    video_titles: list[str] = field(default_factory=list)
    stripe_customer_id: str | None = None
    stripe_payment_method_id: str | None = None


@dataclass(frozen=True)
class StatusChange:
    """A stored project status rewritten by reconciliation."""

    project_id: UUID
    previous: ProjectStatus
    current: ProjectStatus


def lock_project(session: Session, project_id: UUID) -> ProjectModel:
    """Load a project with a row lock held until the transaction ends.

    Raises:
        NotFoundError: If the project does not exist.
    """
    project = session.execute(
        select(ProjectModel).where(ProjectModel.id == project_id).with_for_update()
    ).scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def to_domain_video(row: BatchVideoModel) -> BatchVideo:
    """Convert a batch video row into its domain object."""
    return BatchVideo(
        id=row.id,
        project_id=row.project_id,
        sequence_order=row.sequence_order,
        status=BatchVideoStatus(row.status),
        title=row.title,
        delivery_url=row.delivery_url,
        delivered_at=row.delivered_at,
        approved_at=row.approved_at,
        released_at=row.released_at,
        revision_count=row.revision_count,
        extra_revisions_purchased=row.extra_revisions_purchased,
    )


def _validate_order(order: BatchOrder, rules: BusinessRules) -> None:
    if not order.title or not order.title.strip():
        raise ProjectValidationError("Project title is required")

    if Decimal(order.base_price) <= 0:
        raise ProjectValidationError("Base price must be positive")

    if order.estimated_delivery_days < 1:
        raise ProjectValidationError("Estimated delivery days must be at least 1")

    if not order.is_batch:
        if order.quantity != 1:
            raise ProjectValidationError("A single-video order must have quantity 1")
        return

    if not rules.min_batch_quantity <= order.quantity <= rules.max_batch_quantity:
        raise ProjectValidationError(
            f"Batch quantity must be between {rules.min_batch_quantity} "
            f"and {rules.max_batch_quantity}, got {order.quantity}"
        )

    if len(order.video_titles) > order.quantity:
        raise ProjectValidationError("More video titles than videos in the batch")


def create_batch_project(
    session: Session,
    order: BatchOrder,
    rules: BusinessRules,
) -> ProjectModel:
    """Create an order and all of its batch videos in one commit.

    Args:
        session: Database session.
        order: Order parameters.
        rules: Platform pricing and revision rules.

    Returns:
        The created project, in `draft` until an editor is assigned.

    Raises:
        ProjectValidationError: If the order parameters are invalid.
    """
    _validate_order(order, rules)

    mode = DeliveryMode(order.delivery_mode) if order.is_batch else DeliveryMode.SEQUENTIAL
    quote = calculate_price_quote(
        base_price=Decimal(order.base_price),
        quantity=order.quantity,
        delivery_mode=mode,
        rules=rules,
        estimated_delivery_days=order.estimated_delivery_days,
        platform_fee_percent=order.platform_fee_percent,
    )

    project = ProjectModel(
        creator_id=order.creator_id,
        title=order.title.strip(),
        description=order.description,
        is_batch=order.is_batch,
        batch_quantity=order.quantity,
        batch_delivery_mode=str(mode),
        batch_discount_percent=quote.discount_percent,
        status=str(ProjectStatus.DRAFT),
        base_price=quote.base_price,
        platform_fee=quote.platform_fee,
        total_paid_by_creator=quote.total_paid_by_creator,
        editor_earnings_per_video=quote.editor_earnings_per_video,
        editor_earnings_released=Decimal("0.00"),
        videos_approved=0,
        current_revisions=0,
        max_revisions=rules.free_revisions_limit,
        estimated_delivery_days=quote.estimated_delivery_days,
        stripe_customer_id=order.stripe_customer_id,
        stripe_payment_method_id=order.stripe_payment_method_id,
    )

    for sequence_order in range(1, order.quantity + 1):
        titles = order.video_titles
        title = titles[sequence_order - 1] if sequence_order <= len(titles) else None
        project.batch_videos.append(
            BatchVideoModel(
                sequence_order=sequence_order,
                title=title or f"Video {sequence_order}",
                status=str(BatchVideoStatus.PENDING),
                revision_count=0,
                extra_revisions_purchased=0,
            )
        )

    session.add(project)
    session.commit()
    session.refresh(project)

    logger.info(
        "project_created",
        project_id=str(project.id),
        quantity=order.quantity,
        delivery_mode=str(mode),
        total_paid_by_creator=str(quote.total_paid_by_creator),
    )
    return project


def get_project(session: Session, project_id: UUID) -> ProjectModel:
    """Get a project by ID.

    Raises:
        NotFoundError: If the project does not exist.
    """
    project = session.get(ProjectModel, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def get_batch_videos(session: Session, project_id: UUID) -> list[BatchVideoModel]:
    """Get a project's batch videos in sequence order."""
    get_project(session, project_id)
    return list(
        session.execute(
            select(BatchVideoModel)
            .where(BatchVideoModel.project_id == project_id)
            .order_by(BatchVideoModel.sequence_order)
        ).scalars()
    )


def get_batch_overview(
    session: Session,
    project_id: UUID,
    rules: BusinessRules | None = None,
) -> BatchOverview:
    """Build a project snapshot with stats and status derived at read time."""
    project = get_project(session, project_id)
    rows = get_batch_videos(session, project_id)
    videos = [to_domain_video(row) for row in rows]
    mode = DeliveryMode(project.batch_delivery_mode)

    earnings = project.editor_earnings_per_video
    if earnings is None:
        earnings = default_editor_earnings(project.base_price, rules or BusinessRules())

    return BatchOverview(
        project_id=project.id,
        title=project.title,
        stored_status=ProjectStatus(project.status),
        resolved_status=apply_resolved_status(project.status, videos),
        delivery_mode=mode,
        videos=videos,
        stats=calculate_batch_stats(videos),
        editable_indices=editable_indices(videos, mode),
        editor_earnings_per_video=money(earnings),
        editor_earnings_released=money(project.editor_earnings_released or 0),
    )


def assign_editor(session: Session, project_id: UUID, editor_id: UUID) -> ProjectModel:
    """Assign an editor and move a draft project into the workflow.

    Raises:
        NotFoundError: If the project does not exist.
        ProjectValidationError: If the project was cancelled.
    """
    try:
        project = lock_project(session, project_id)
        if project.status == ProjectStatus.CANCELLED:
            raise ProjectValidationError("Cannot assign an editor to a cancelled project")

        project.editor_id = editor_id
        if project.status == ProjectStatus.DRAFT:
            project.status = str(resolve_project_status(project.batch_videos))
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        "editor_assigned",
        project_id=str(project_id),
        editor_id=str(editor_id),
        status=project.status,
    )
    return project


def cancel_project(session: Session, project_id: UUID) -> ProjectModel:
    """Cancel a project. The resolver never overrides a cancelled project.

    Raises:
        NotFoundError: If the project does not exist.
        ProjectValidationError: If the project is already completed.
    """
    try:
        project = lock_project(session, project_id)
        if project.status == ProjectStatus.COMPLETED:
            raise ProjectValidationError("A completed project cannot be cancelled")
        project.status = str(ProjectStatus.CANCELLED)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("project_cancelled", project_id=str(project_id))
    return project


def reconcile_project_status(session: Session, project_id: UUID) -> StatusChange | None:
    """Rewrite a project's stored status from its videos.

    Returns:
        The change applied, or None if the stored status was already correct.
    """
    try:
        project = lock_project(session, project_id)
        change = _reconcile(project)
        session.commit()
    except Exception:
        session.rollback()
        raise

    if change:
        logger.warning(
            "project_status_repaired",
            project_id=str(project_id),
            previous=str(change.previous),
            current=str(change.current),
        )
    return change


def reconcile_all_project_statuses(session: Session) -> list[StatusChange]:
    """Reconcile every project whose status the resolver owns."""
    protected = [str(status) for status in PROTECTED_PROJECT_STATUSES]
    try:
        projects = session.execute(
            select(ProjectModel)
            .where(ProjectModel.status.not_in(protected))
            .order_by(ProjectModel.created_at)
            .with_for_update()
        ).scalars().all()
        changes = [change for project in projects if (change := _reconcile(project))]
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("project_statuses_reconciled", changed=len(changes))
    return changes


def _reconcile(project: ProjectModel) -> StatusChange | None:
    previous = ProjectStatus(project.status)
    current = apply_resolved_status(previous, project.batch_videos)
    if current == previous:
        return None
    project.status = str(current)
    return StatusChange(project_id=project.id, previous=previous, current=current)
