"""Project (order) endpoints."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from frameup.api.deps import RulesDep, SessionDep
from frameup.db.models import ProjectModel
from frameup.domain.enums import BatchVideoStatus, DeliveryMode, ProjectStatus
from frameup.domain.models import BatchOverview
from frameup.domain.pricing import calculate_project_total_value
from frameup.domain.status_config import get_project_status_badge, get_video_status_config
from frameup.domain.transitions import next_statuses
from frameup.logging import get_logger
from frameup.services import projects as project_service

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = get_logger(__name__)


class CreateProjectRequest(BaseModel):
    """Request to create an order."""

    creator_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    base_price: Decimal = Field(..., gt=0, description="Catalog price of one video")
    quantity: int = Field(default=1, ge=1)
    is_batch: bool = False
    delivery_mode: DeliveryMode = DeliveryMode.SEQUENTIAL
    estimated_delivery_days: int = Field(default=3, ge=1)
    platform_fee_percent: Decimal | None = Field(None, ge=0, le=100)
    video_titles: list[str] = Field(default_factory=list)
    stripe_customer_id: str | None = None
    stripe_payment_method_id: str | None = None


class AssignEditorRequest(BaseModel):
    """Request to assign an editor."""

    editor_id: UUID


class ProjectResponse(BaseModel):
    """Project response model."""

    id: UUID
    creator_id: UUID
    editor_id: UUID | None
    title: str
    status: str
    is_batch: bool
    batch_quantity: int
    delivery_mode: str
    batch_discount_percent: Decimal
    base_price: Decimal
    total_before_discount: Decimal
    discount_amount: Decimal
    platform_fee: Decimal
    total_paid_by_creator: Decimal
    editor_earnings_per_video: Decimal | None
    estimated_delivery_days: int | None
    created_at: datetime | None


class BatchVideoResponse(BaseModel):
    """A batch video with its display metadata."""

    id: UUID
    sequence_order: int
    title: str | None
    status: BatchVideoStatus
    status_label: str
    status_icon: str
    delivery_url: str | None
    revision_count: int
    extra_revisions_purchased: int
    can_edit: bool
    next_statuses: list[BatchVideoStatus]


class ProjectOverviewResponse(BaseModel):
    """Project with batch statistics derived at read time."""

    id: UUID
    title: str
    status: ProjectStatus
    resolved_status: ProjectStatus
    status_label: str
    status_variant: str
    delivery_mode: DeliveryMode
    stats: dict[str, int]
    videos: list[BatchVideoResponse]
    editor_earnings_per_video: Decimal
    editor_earnings_released: Decimal


class ReconcileResponse(BaseModel):
    """Outcome of a status reconciliation."""

    project_id: UUID
    changed: bool
    previous: ProjectStatus | None = None
    current: ProjectStatus | None = None


def _model_to_response(project: ProjectModel) -> ProjectResponse:
    """Convert a ProjectModel to ProjectResponse."""
    value = calculate_project_total_value(
        project.base_price, project.batch_quantity, project.batch_discount_percent
    )
    return ProjectResponse(
        id=project.id,
        creator_id=project.creator_id,
        editor_id=project.editor_id,
        title=project.title,
        status=project.status,
        is_batch=project.is_batch,
        batch_quantity=project.batch_quantity,
        delivery_mode=project.batch_delivery_mode,
        batch_discount_percent=project.batch_discount_percent,
        base_price=project.base_price,
        total_before_discount=value.total_before_discount,
        discount_amount=value.discount_amount,
        platform_fee=project.platform_fee,
        total_paid_by_creator=project.total_paid_by_creator,
        editor_earnings_per_video=project.editor_earnings_per_video,
        estimated_delivery_days=project.estimated_delivery_days,
        created_at=project.created_at,
    )


def _overview_to_response(overview: BatchOverview) -> ProjectOverviewResponse:
    """Convert a BatchOverview to ProjectOverviewResponse."""
    badge = get_project_status_badge(overview.resolved_status)
    editable = set(overview.editable_indices)

    videos = []
    for index, video in enumerate(overview.videos):
        display = get_video_status_config(video.status)
        videos.append(
            BatchVideoResponse(
                id=video.id,
                sequence_order=video.sequence_order,
                title=video.title,
                status=video.status,
                status_label=display.label,
                status_icon=display.icon,
                delivery_url=video.delivery_url,
                revision_count=video.revision_count,
                extra_revisions_purchased=video.extra_revisions_purchased,
                can_edit=index in editable,
                next_statuses=next_statuses(video.status),
            )
        )

    return ProjectOverviewResponse(
        id=overview.project_id,
        title=overview.title,
        status=overview.stored_status,
        resolved_status=overview.resolved_status,
        status_label=badge.label,
        status_variant=badge.variant,
        delivery_mode=overview.delivery_mode,
        stats=overview.stats.as_dict(),
        videos=videos,
        editor_earnings_per_video=overview.editor_earnings_per_video,
        editor_earnings_released=overview.editor_earnings_released,
    )


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Create an order and its batch videos.",
)
async def create_project(
    request: CreateProjectRequest,
    session: SessionDep,
    rules: RulesDep,
) -> ProjectResponse:
    """Create a new order."""
    logger.info("create_project", title=request.title, quantity=request.quantity)

    order = project_service.BatchOrder(**request.model_dump())
    project = project_service.create_batch_project(session, order, rules)
    return _model_to_response(project)


@router.get(
    "/{project_id}",
    response_model=ProjectOverviewResponse,
    summary="Get project",
    description="Get a project with batch statistics, labels and per-video editability.",
)
async def get_project(
    project_id: UUID,
    session: SessionDep,
    rules: RulesDep,
) -> ProjectOverviewResponse:
    """Get a project overview."""
    overview = project_service.get_batch_overview(session, project_id, rules)
    return _overview_to_response(overview)


@router.post(
    "/{project_id}/assign-editor",
    response_model=ProjectResponse,
    summary="Assign editor",
    description="Assign an editor and move a draft project into the workflow.",
)
async def assign_editor(
    project_id: UUID,
    request: AssignEditorRequest,
    session: SessionDep,
) -> ProjectResponse:
    """Assign an editor to a project."""
    project = project_service.assign_editor(session, project_id, request.editor_id)
    return _model_to_response(project)


@router.post(
    "/{project_id}/cancel",
    response_model=ProjectResponse,
    summary="Cancel project",
)
async def cancel_project(project_id: UUID, session: SessionDep) -> ProjectResponse:
    """Cancel a project."""
    project = project_service.cancel_project(session, project_id)
    return _model_to_response(project)


@router.post(
    "/{project_id}/reconcile",
    response_model=ReconcileResponse,
    summary="Reconcile project status",
    description="Rewrite the stored status from the batch videos if it drifted.",
)
async def reconcile_project(project_id: UUID, session: SessionDep) -> ReconcileResponse:
    """Repair a project's stored status."""
    change = project_service.reconcile_project_status(session, project_id)
    if change is None:
        return ReconcileResponse(project_id=project_id, changed=False)
    return ReconcileResponse(
        project_id=project_id,
        changed=True,
        previous=change.previous,
        current=change.current,
    )
