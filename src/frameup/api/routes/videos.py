"""Batch video workflow endpoints."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from frameup.api.deps import DeliveryServiceDep
from frameup.domain.enums import BatchVideoStatus, ProjectStatus
from frameup.services.delivery import TransitionResult

router = APIRouter(prefix="/projects/{project_id}/videos", tags=["Videos"])


class DeliverRequest(BaseModel):
    """Request to deliver a video version."""

    delivery_url: str = Field(..., description="YouTube or Google Drive file link")
    notes: str | None = Field(None, max_length=5000)


class ApproveRequest(BaseModel):
    """Request to approve a delivered video."""

    feedback: str | None = Field(None, max_length=5000)


class RevisionRequest(BaseModel):
    """Request to send a video back for changes."""

    reason: str = Field(..., max_length=5000)


class TransitionResponse(BaseModel):
    """Video status change."""

    video_id: UUID
    previous_status: BatchVideoStatus
    status: BatchVideoStatus
    project_status: ProjectStatus


class ApprovalResponse(BaseModel):
    """Approval outcome."""

    video_id: UUID
    status: BatchVideoStatus = BatchVideoStatus.APPROVED
    released_amount: Decimal
    project_status: ProjectStatus
    project_completed: bool
    next_video_id: UUID | None


class RevisionResponse(BaseModel):
    """Revision request outcome."""

    revision_number: int
    free_revisions_remaining: int
    payment_required: bool
    amount_due: Decimal


class SettlementResponse(BaseModel):
    """Extra-revision payment outcome."""

    success: bool
    charged: bool
    amount: Decimal
    revisions_granted: int
    transaction_id: str | None
    error_message: str | None


def _transition_response(result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        video_id=result.video_id,
        previous_status=result.previous_status,
        status=result.status,
        project_status=result.project_status,
    )


@router.post("/{video_id}/start", response_model=TransitionResponse, summary="Start video")
async def start_video(
    project_id: UUID,
    video_id: UUID,
    service: DeliveryServiceDep,
) -> TransitionResponse:
    """Editor starts work on a video."""
    return _transition_response(await service.start_video(project_id, video_id))


@router.post("/{video_id}/deliver", response_model=TransitionResponse, summary="Deliver video")
async def deliver_video(
    project_id: UUID,
    video_id: UUID,
    request: DeliverRequest,
    service: DeliveryServiceDep,
) -> TransitionResponse:
    """Editor delivers a version for review."""
    result = await service.deliver_video(project_id, video_id, request.delivery_url, request.notes)
    return _transition_response(result)


@router.post("/{video_id}/approve", response_model=ApprovalResponse, summary="Approve video")
async def approve_video(
    project_id: UUID,
    video_id: UUID,
    service: DeliveryServiceDep,
    request: ApproveRequest | None = None,
) -> ApprovalResponse:
    """Creator approves a delivered video."""
    outcome = await service.approve_video(
        project_id, video_id, feedback=request.feedback if request else None
    )
    return ApprovalResponse(
        video_id=outcome.video_id,
        released_amount=outcome.released_amount,
        project_status=outcome.project_status,
        project_completed=outcome.project_completed,
        next_video_id=outcome.next_video_id,
    )


@router.post(
    "/{video_id}/revisions",
    response_model=RevisionResponse,
    summary="Request revision",
)
async def request_revision(
    project_id: UUID,
    video_id: UUID,
    request: RevisionRequest,
    service: DeliveryServiceDep,
) -> RevisionResponse:
    """Creator requests changes to a delivered video."""
    outcome = await service.request_revision(project_id, video_id, request.reason)
    return RevisionResponse(
        revision_number=outcome.revision_number,
        free_revisions_remaining=outcome.free_revisions_remaining,
        payment_required=outcome.payment_required,
        amount_due=outcome.amount_due,
    )


@router.post(
    "/{video_id}/revision-payment",
    response_model=SettlementResponse,
    summary="Pay for extra revisions",
)
async def settle_extra_revisions(
    project_id: UUID,
    video_id: UUID,
    service: DeliveryServiceDep,
) -> SettlementResponse:
    """Charge the creator for an extra-revision package."""
    result = await service.settle_extra_revisions(project_id, video_id)
    return SettlementResponse(
        success=result.success,
        charged=result.charged,
        amount=result.amount,
        revisions_granted=result.revisions_granted,
        transaction_id=result.transaction_id,
        error_message=result.error_message,
    )


@router.post("/{video_id}/resume", response_model=TransitionResponse, summary="Resume video")
async def resume_video(
    project_id: UUID,
    video_id: UUID,
    service: DeliveryServiceDep,
) -> TransitionResponse:
    """Editor resumes work after a revision request."""
    return _transition_response(await service.resume_video(project_id, video_id))
