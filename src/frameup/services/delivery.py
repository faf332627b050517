"""Batch delivery and review workflow.

Drives each batch video through its lifecycle:

    pending -> in_progress -> delivered -> approved
                    ^             |
                    |             v
                    +-------- revision

Each operation locks the project row, validates the move, applies every
resulting change (video, delivery record, project counters, earnings ledger
and the re-resolved project status) and commits once. Notifications go out
after the commit; a failed notification never undoes the transition.
"""

from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.adapters.payments.base import ChargeRequest, PaymentProvider
from frameup.config import settings
from frameup.db.models import (
    BatchVideoModel,
    DeliveryModel,
    EarningsReleaseModel,
    ProjectModel,
    RevisionPaymentModel,
)
from frameup.domain.batch import apply_resolved_status, can_edit_video
from frameup.domain.delivery_links import normalize_delivery_url
from frameup.domain.enums import (
    PROTECTED_PROJECT_STATUSES,
    BatchVideoStatus,
    DeliveryMode,
    DeliveryStatus,
    NotificationType,
    PaymentStatus,
    ProjectStatus,
)
from frameup.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    PaymentRequiredError,
    ProjectValidationError,
    SequenceLockedError,
)
from frameup.domain.pricing import (
    BusinessRules,
    RevisionCharge,
    calculate_extra_revision_charge,
    default_editor_earnings,
    free_revisions_remaining,
    money,
    needs_payment_for_revision,
    revision_allowance,
)
from frameup.domain.transitions import ensure_transition
from frameup.logging import bind_workflow_context, get_logger
from frameup.services.projects import lock_project

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    """A video status change and the project status stored with it."""

    video_id: UUID
    previous_status: BatchVideoStatus
    status: BatchVideoStatus
    project_status: ProjectStatus


@dataclass(frozen=True)
class ApprovalOutcome:
    """Result of approving a video."""

    video_id: UUID
    released_amount: Decimal
    project_status: ProjectStatus
    next_video_id: UUID | None = None

    @property
    def project_completed(self) -> bool:
        return self.project_status == ProjectStatus.COMPLETED


@dataclass(frozen=True)
class RevisionOutcome:
    """Result of a revision request."""

    revision_number: int
    free_revisions_remaining: int
    payment_required: bool
    amount_due: Decimal


@dataclass(frozen=True)
class SettlementResult:
    """Result of charging for extra revisions. A decline is not an error."""

    success: bool
    charged: bool
    amount: Decimal = Decimal("0.00")
    revisions_granted: int = 0
    transaction_id: str | None = None
    error_message: str | None = None


class BatchDeliveryService:
    """State machine for batch videos, with payment and notification side effects."""

    def __init__(
        self,
        session: Session,
        payments: PaymentProvider,
        notifier: Notifier,
        rules: BusinessRules | None = None,
        currency: str | None = None,
    ) -> None:
        self.session = session
        self.payments = payments
        self.notifier = notifier
        self.rules = rules or BusinessRules.from_settings(settings)
        self.currency = currency or settings.payment_currency

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def start_video(self, project_id: UUID, video_id: UUID) -> TransitionResult:
        """Editor starts work on a pending video.

        Raises:
            SequenceLockedError: If the previous video of a sequential batch
                is not approved yet.
        """
        with self._transaction("start", project_id, video_id):
            project, video = self._load(project_id, video_id)
            previous = self._move(video, BatchVideoStatus.IN_PROGRESS, "start")

            index = self._index_of(project, video)
            if not can_edit_video(project.batch_videos, index, project.batch_delivery_mode):
                raise SequenceLockedError(video.sequence_order)

            project_status = self._resolve(project)
            result = TransitionResult(video.id, previous, BatchVideoStatus.IN_PROGRESS, project_status)

        logger.info(
            "video_started",
            project_id=str(project_id),
            video_id=str(video_id),
            project_status=str(result.project_status),
        )
        return result

    async def deliver_video(
        self,
        project_id: UUID,
        video_id: UUID,
        delivery_url: str,
        notes: str | None = None,
    ) -> TransitionResult:
        """Editor submits a new version of a video for review.

        Raises:
            InvalidDeliveryUrlError: If the link is not a YouTube or Drive file link.
        """
        link = normalize_delivery_url(delivery_url)
        now = datetime.now(timezone.utc)

        with self._transaction("deliver", project_id, video_id):
            project, video = self._load(project_id, video_id)
            previous = self._move(video, BatchVideoStatus.DELIVERED, "deliver")

            version = len(video.deliveries) + 1
            video.deliveries.append(
                DeliveryModel(
                    project_id=project.id,
                    version=version,
                    video_url=link.url,
                    video_type=str(link.type),
                    notes=notes,
                    status=str(DeliveryStatus.PENDING_REVIEW),
                    delivered_at=now,
                )
            )
            video.delivery_url = link.url
            video.delivered_at = now

            project_status = self._resolve(project)
            result = TransitionResult(video.id, previous, BatchVideoStatus.DELIVERED, project_status)
            notifications = [
                Notification(
                    user_id=project.creator_id,
                    type=NotificationType.VIDEO_DELIVERED,
                    title="Video delivered",
                    message=f"{video.title} of '{project.title}' is ready for your review.",
                    project_id=project.id,
                    data={"video_id": str(video.id), "version": version},
                )
            ]

        logger.info(
            "video_delivered",
            project_id=str(project_id),
            video_id=str(video_id),
            version=version,
            link_type=str(link.type),
        )
        await self._send(notifications)
        return result

    async def approve_video(
        self,
        project_id: UUID,
        video_id: UUID,
        feedback: str | None = None,
    ) -> ApprovalOutcome:
        """Creator approves a delivered video and its earnings are released.

        In sequential batches the next pending video is started in the same
        transaction when `auto_start_next_video` is enabled.
        """
        now = datetime.now(timezone.utc)

        with self._transaction("approve", project_id, video_id):
            project, video = self._load(project_id, video_id)
            self._move(video, BatchVideoStatus.APPROVED, "approve")

            earnings = self._earnings_per_video(project)
            video.approved_at = now
            video.released_at = now
            video.payment_amount = earnings

            project.videos_approved = (project.videos_approved or 0) + 1
            project.editor_earnings_released = money(
                (project.editor_earnings_released or Decimal("0")) + earnings
            )
            self.session.add(
                EarningsReleaseModel(
                    project_id=project.id,
                    batch_video_id=video.id,
                    editor_id=project.editor_id,
                    amount=earnings,
                    description=f"{project.title} - {video.title}",
                    released_at=now,
                )
            )

            if video.deliveries:
                latest = video.deliveries[-1]
                latest.status = str(DeliveryStatus.APPROVED)
                latest.feedback = feedback
                latest.reviewed_at = now

            next_video = self._auto_start_next(project, video)
            project_status = self._resolve(project)

            outcome = ApprovalOutcome(
                video_id=video.id,
                released_amount=earnings,
                project_status=project_status,
                next_video_id=next_video.id if next_video else None,
            )
            notifications = self._approval_notifications(project, video, next_video, outcome)

        logger.info(
            "video_approved",
            project_id=str(project_id),
            video_id=str(video_id),
            released_amount=str(outcome.released_amount),
            next_video_id=str(outcome.next_video_id) if outcome.next_video_id else None,
            project_status=str(outcome.project_status),
        )
        await self._send(notifications)
        return outcome

    async def request_revision(
        self,
        project_id: UUID,
        video_id: UUID,
        reason: str,
    ) -> RevisionOutcome:
        """Creator sends a delivered video back to the editor.

        Past the free allowance the video stays in `revision` until the extra
        revisions are paid for.

        Raises:
            ProjectValidationError: If no reason is given.
        """
        if not reason or not reason.strip():
            raise ProjectValidationError("A revision request needs a reason")
        now = datetime.now(timezone.utc)

        with self._transaction("request_revision", project_id, video_id):
            project, video = self._load(project_id, video_id)
            self._move(video, BatchVideoStatus.REVISION, "request_revision")

            video.revision_count = (video.revision_count or 0) + 1
            project.current_revisions = (project.current_revisions or 0) + 1

            if video.deliveries:
                latest = video.deliveries[-1]
                latest.status = str(DeliveryStatus.REVISION_REQUESTED)
                latest.revision_notes = reason
                latest.reviewed_at = now

            allowance = revision_allowance(project.max_revisions, video.extra_revisions_purchased)
            payment_required = needs_payment_for_revision(video.revision_count, allowance)
            amount_due = (
                self._revision_charge(project).total if payment_required else Decimal("0.00")
            )
            self._resolve(project)

            outcome = RevisionOutcome(
                revision_number=video.revision_count,
                free_revisions_remaining=free_revisions_remaining(video.revision_count, allowance),
                payment_required=payment_required,
                amount_due=amount_due,
            )
            notifications = self._editor_notification(
                project,
                NotificationType.REVISION_REQUESTED,
                title="Revision requested",
                message=f"The creator asked for changes to {video.title}: {reason}",
                data={"video_id": str(video.id), "revision_number": video.revision_count},
            )

        logger.info(
            "revision_requested",
            project_id=str(project_id),
            video_id=str(video_id),
            revision_number=outcome.revision_number,
            payment_required=outcome.payment_required,
        )
        await self._send(notifications)
        return outcome

    async def settle_extra_revisions(self, project_id: UUID, video_id: UUID) -> SettlementResult:
        """Charge the creator for an extra-revision package.

        The project row stays locked across the charge, so concurrent
        settlements of the same video cannot both bill the creator.
        """
        with self._transaction("settle_extra_revisions", project_id, video_id):
            project, video = self._load(project_id, video_id)
            if video.status != BatchVideoStatus.REVISION:
                raise ProjectValidationError(
                    f"Extra revisions can only be paid while a video is in revision "
                    f"(video is '{video.status}')"
                )

            allowance = revision_allowance(project.max_revisions, video.extra_revisions_purchased)
            if not needs_payment_for_revision(video.revision_count, allowance):
                return SettlementResult(success=True, charged=False)

            charge = self._revision_charge(project)
            result = await self.payments.charge(
                ChargeRequest(
                    amount=charge.total,
                    currency=self.currency,
                    description=f"Extra revisions for {project.title} - {video.title}",
                    customer_id=project.stripe_customer_id,
                    payment_method_id=project.stripe_payment_method_id,
                    metadata={
                        "project_id": str(project.id),
                        "batch_video_id": str(video.id),
                        "type": "extra_revisions",
                    },
                )
            )

            granted = self.rules.extra_revisions_per_payment if result.success else 0
            self.session.add(
                RevisionPaymentModel(
                    project_id=project.id,
                    batch_video_id=video.id,
                    amount=charge.extra_cost,
                    platform_fee=charge.platform_fee,
                    total_charged=charge.total,
                    revisions_granted=granted,
                    provider=result.provider,
                    transaction_id=result.transaction_id,
                    status=str(PaymentStatus.SUCCEEDED if result.success else PaymentStatus.FAILED),
                    error_message=result.error_message,
                )
            )
            video.extra_revisions_purchased = (video.extra_revisions_purchased or 0) + granted

            settlement = SettlementResult(
                success=result.success,
                charged=True,
                amount=charge.total,
                revisions_granted=granted,
                transaction_id=result.transaction_id,
                error_message=result.error_message,
            )
            notifications = []
            if result.success:
                notifications = self._editor_notification(
                    project,
                    NotificationType.EXTRA_REVISIONS_PAID,
                    title="Extra revisions paid",
                    message=f"The creator paid for {granted} more revisions of {video.title}.",
                    data={"video_id": str(video.id), "revisions_granted": granted},
                )

        if settlement.success:
            logger.info(
                "extra_revisions_settled",
                project_id=str(project_id),
                video_id=str(video_id),
                amount=str(settlement.amount),
                transaction_id=settlement.transaction_id,
            )
        else:
            logger.warning(
                "extra_revisions_payment_failed",
                project_id=str(project_id),
                video_id=str(video_id),
                amount=str(settlement.amount),
                error=settlement.error_message,
            )
        await self._send(notifications)
        return settlement

    async def resume_video(self, project_id: UUID, video_id: UUID) -> TransitionResult:
        """Editor resumes work on a video sent back for revision.

        Raises:
            PaymentRequiredError: While the video has more revisions than its
                allowance and the extra ones are unpaid.
        """
        with self._transaction("resume", project_id, video_id):
            project, video = self._load(project_id, video_id)
            previous = self._move(video, BatchVideoStatus.IN_PROGRESS, "resume")

            allowance = revision_allowance(project.max_revisions, video.extra_revisions_purchased)
            if needs_payment_for_revision(video.revision_count, allowance):
                raise PaymentRequiredError(self._revision_charge(project).total)

            project_status = self._resolve(project)
            result = TransitionResult(video.id, previous, BatchVideoStatus.IN_PROGRESS, project_status)

        logger.info("video_resumed", project_id=str(project_id), video_id=str(video_id))
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @contextmanager
    def _transaction(
        self, action: str, project_id: UUID, video_id: UUID
    ) -> Generator[None, None, None]:
        """Commit once on success, roll back (releasing the row lock) on error."""
        with bind_workflow_context(action=action, project_id=project_id, video_id=video_id):
            try:
                yield
                self.session.commit()
            except Exception as e:
                self.session.rollback()
                logger.info("workflow_rolled_back", error=type(e).__name__)
                raise

    def _load(self, project_id: UUID, video_id: UUID) -> tuple[ProjectModel, BatchVideoModel]:
        project = lock_project(self.session, project_id)
        if project.status in PROTECTED_PROJECT_STATUSES:
            raise ProjectValidationError(f"Videos of a {project.status} project cannot change")
        if project.editor_id is None:
            raise ProjectValidationError("Project has no editor assigned")
        video = self.session.get(BatchVideoModel, video_id)
        if video is None or video.project_id != project.id:
            raise NotFoundError("BatchVideo", video_id)
        return project, video

    @staticmethod
    def _move(video: BatchVideoModel, target: BatchVideoStatus, action: str) -> BatchVideoStatus:
        previous = BatchVideoStatus(video.status)
        if ensure_transition(previous, target) != action:
            raise InvalidTransitionError(str(previous), str(target))
        video.status = str(target)
        return previous

    @staticmethod
    def _index_of(project: ProjectModel, video: BatchVideoModel) -> int:
        for index, candidate in enumerate(project.batch_videos):
            if candidate.id == video.id:
                return index
        raise NotFoundError("BatchVideo", video.id)

    @staticmethod
    def _resolve(project: ProjectModel) -> ProjectStatus:
        status = apply_resolved_status(project.status, project.batch_videos)
        project.status = str(status)
        return status

    def _earnings_per_video(self, project: ProjectModel) -> Decimal:
        if project.editor_earnings_per_video is not None:
            return money(project.editor_earnings_per_video)
        return default_editor_earnings(project.base_price, self.rules)

    def _revision_charge(self, project: ProjectModel) -> RevisionCharge:
        return calculate_extra_revision_charge(self._earnings_per_video(project), self.rules)

    def _auto_start_next(
        self, project: ProjectModel, video: BatchVideoModel
    ) -> BatchVideoModel | None:
        if not self.rules.auto_start_next_video:
            return None
        if DeliveryMode(project.batch_delivery_mode) != DeliveryMode.SEQUENTIAL:
            return None

        videos = project.batch_videos
        index = self._index_of(project, video) + 1
        if index >= len(videos) or videos[index].status != BatchVideoStatus.PENDING:
            return None

        next_video = videos[index]
        self._move(next_video, BatchVideoStatus.IN_PROGRESS, "start")
        return next_video

    def _editor_notification(
        self,
        project: ProjectModel,
        type_: NotificationType,
        title: str,
        message: str,
        data: dict,
    ) -> list[Notification]:
        if project.editor_id is None:
            return []
        return [
            Notification(
                user_id=project.editor_id,
                type=type_,
                title=title,
                message=message,
                project_id=project.id,
                data=data,
            )
        ]

    def _approval_notifications(
        self,
        project: ProjectModel,
        video: BatchVideoModel,
        next_video: BatchVideoModel | None,
        outcome: ApprovalOutcome,
    ) -> list[Notification]:
        notifications = self._editor_notification(
            project,
            NotificationType.VIDEO_APPROVED,
            title="Video approved",
            message=f"{video.title} was approved. {outcome.released_amount} has been released.",
            data={"video_id": str(video.id), "amount": str(outcome.released_amount)},
        )
        if next_video is not None:
            notifications += self._editor_notification(
                project,
                NotificationType.VIDEO_UNLOCKED,
                title="Next video unlocked",
                message=f"{next_video.title} of '{project.title}' is ready to edit.",
                data={"video_id": str(next_video.id)},
            )
        if outcome.project_completed:
            notifications += self._editor_notification(
                project,
                NotificationType.PROJECT_COMPLETED,
                title="Project completed",
                message=f"All videos of '{project.title}' were approved.",
                data={"videos_approved": project.videos_approved},
            )
        return notifications

    async def _send(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            try:
                await self.notifier.notify(notification)
            except Exception as e:
                logger.error(
                    "notification_failed",
                    notifier=self.notifier.name,
                    type=str(notification.type),
                    user_id=str(notification.user_id),
                    error=str(e),
                )
