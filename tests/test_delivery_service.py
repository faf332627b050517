"""Tests for the batch delivery workflow service."""

from dataclasses import replace
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select

from frameup.adapters.notifications.base import Notification, Notifier
from frameup.adapters.payments.stub import StubPaymentProvider
from frameup.db.models import (
    BatchVideoModel,
    EarningsReleaseModel,
    ProjectModel,
    RevisionPaymentModel,
)
from frameup.domain.enums import (
    BatchVideoStatus,
    DeliveryMode,
    DeliveryStatus,
    NotificationType,
    ProjectStatus,
)
from frameup.domain.errors import (
    InvalidDeliveryUrlError,
    InvalidTransitionError,
    NotFoundError,
    PaymentRequiredError,
    ProjectValidationError,
    SequenceLockedError,
)
from frameup.services.delivery import BatchDeliveryService
from frameup.services.projects import cancel_project

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class FailingNotifier(Notifier):
    """Notifier whose channel is down."""

    @property
    def name(self) -> str:
        return "failing"

    async def notify(self, notification: Notification) -> None:
        raise ConnectionError("notification channel unavailable")


def video_ids(project: ProjectModel) -> list:
    return [video.id for video in project.batch_videos]


async def deliver(service: BatchDeliveryService, project_id, video_id) -> None:
    """Move a pending video to delivered."""
    await service.start_video(project_id, video_id)
    await service.deliver_video(project_id, video_id, YOUTUBE_URL)


class TestStartVideo:
    """Tests for starting work on a video."""

    @pytest.mark.asyncio
    async def test_start_first_video(self, session, delivery_service, make_project):
        project = make_project()
        ids = video_ids(project)

        result = await delivery_service.start_video(project.id, ids[0])

        assert result.previous_status == BatchVideoStatus.PENDING
        assert result.status == BatchVideoStatus.IN_PROGRESS
        assert result.project_status == ProjectStatus.IN_PROGRESS
        assert session.get(ProjectModel, project.id).status == "in_progress"

    @pytest.mark.asyncio
    async def test_sequential_video_locked(self, session, delivery_service, make_project):
        project = make_project()
        ids = video_ids(project)

        with pytest.raises(SequenceLockedError) as exc_info:
            await delivery_service.start_video(project.id, ids[1])

        assert exc_info.value.sequence_order == 2
        assert session.get(BatchVideoModel, ids[1]).status == "pending"
        assert session.get(ProjectModel, project.id).status == "pending"

    @pytest.mark.asyncio
    async def test_unlocks_after_predecessor_approved(
        self, session, payment_provider, notifier, rules, make_project
    ):
        service = BatchDeliveryService(
            session, payment_provider, notifier, replace(rules, auto_start_next_video=False)
        )
        project = make_project(quantity=4)
        ids = video_ids(project)

        with pytest.raises(SequenceLockedError):
            await service.start_video(project.id, ids[1])

        await deliver(service, project.id, ids[0])
        outcome = await service.approve_video(project.id, ids[0])
        assert outcome.next_video_id is None

        result = await service.start_video(project.id, ids[1])
        assert result.status == BatchVideoStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_simultaneous_batch_starts_any_video(self, delivery_service, make_project):
        project = make_project(quantity=5, mode=DeliveryMode.SIMULTANEOUS)

        for video_id in video_ids(project):
            result = await delivery_service.start_video(project.id, video_id)
            assert result.status == BatchVideoStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_start_twice_rejected(self, delivery_service, make_project):
        project = make_project()
        ids = video_ids(project)
        await delivery_service.start_video(project.id, ids[0])

        with pytest.raises(InvalidTransitionError):
            await delivery_service.start_video(project.id, ids[0])


class TestDeliverVideo:
    """Tests for delivering a version."""

    @pytest.mark.asyncio
    async def test_deliver_records_version_and_notifies_creator(
        self, session, delivery_service, notifier, make_project
    ):
        project = make_project()
        ids = video_ids(project)
        creator_id = project.creator_id
        await delivery_service.start_video(project.id, ids[0])

        result = await delivery_service.deliver_video(
            project.id,
            ids[0],
            "https://drive.google.com/file/d/abc123/view",
            notes="First cut",
        )

        assert result.status == BatchVideoStatus.DELIVERED
        assert result.project_status == ProjectStatus.DELIVERED

        video = session.get(BatchVideoModel, ids[0])
        assert video.delivery_url == "https://drive.google.com/file/d/abc123/preview"
        assert video.delivered_at is not None
        assert [d.version for d in video.deliveries] == [1]
        assert video.deliveries[0].video_type == "gdrive"
        assert video.deliveries[0].notes == "First cut"

        assert len(notifier.sent) == 1
        assert notifier.sent[0].type == NotificationType.VIDEO_DELIVERED
        assert notifier.sent[0].user_id == creator_id

    @pytest.mark.asyncio
    async def test_invalid_link_leaves_video_in_progress(
        self, session, delivery_service, make_project
    ):
        project = make_project()
        ids = video_ids(project)
        await delivery_service.start_video(project.id, ids[0])

        with pytest.raises(InvalidDeliveryUrlError):
            await delivery_service.deliver_video(
                project.id, ids[0], "https://drive.google.com/drive/folders/xyz"
            )

        assert session.get(BatchVideoModel, ids[0]).status == "in_progress"

    @pytest.mark.asyncio
    async def test_deliver_pending_video_rejected(self, delivery_service, make_project):
        project = make_project()

        with pytest.raises(InvalidTransitionError):
            await delivery_service.deliver_video(project.id, video_ids(project)[0], YOUTUBE_URL)


class TestApproveVideo:
    """Tests for approving a delivered video."""

    @pytest.mark.asyncio
    async def test_approve_releases_earnings_and_starts_next(
        self, session, delivery_service, notifier, make_project
    ):
        editor_id = uuid4()
        project = make_project(editor_id=editor_id)
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])

        outcome = await delivery_service.approve_video(project.id, ids[0], feedback="Great")

        assert outcome.released_amount == Decimal("80.75")
        assert outcome.next_video_id == ids[1]
        assert outcome.project_status == ProjectStatus.IN_PROGRESS
        assert outcome.project_completed is False

        project = session.get(ProjectModel, project.id)
        assert project.videos_approved == 1
        assert project.editor_earnings_released == Decimal("80.75")

        video = session.get(BatchVideoModel, ids[0])
        assert video.status == "approved"
        assert video.approved_at is not None
        assert video.released_at is not None
        assert video.payment_amount == Decimal("80.75")
        assert video.deliveries[-1].status == DeliveryStatus.APPROVED
        assert video.deliveries[-1].feedback == "Great"

        assert session.get(BatchVideoModel, ids[1]).status == "in_progress"

        release = session.execute(select(EarningsReleaseModel)).scalar_one()
        assert release.batch_video_id == ids[0]
        assert release.editor_id == editor_id
        assert release.amount == Decimal("80.75")

        sent = [n.type for n in notifier.sent]
        assert sent == [
            NotificationType.VIDEO_DELIVERED,
            NotificationType.VIDEO_APPROVED,
            NotificationType.VIDEO_UNLOCKED,
        ]
        assert notifier.sent[-1].user_id == editor_id

    @pytest.mark.asyncio
    async def test_double_approval_rejected(self, session, delivery_service, make_project):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])
        await delivery_service.approve_video(project.id, ids[0])

        with pytest.raises(InvalidTransitionError):
            await delivery_service.approve_video(project.id, ids[0])

        project = session.get(ProjectModel, project.id)
        assert project.videos_approved == 1
        assert project.editor_earnings_released == Decimal("80.75")
        releases = session.execute(select(EarningsReleaseModel)).scalars().all()
        assert len(releases) == 1

    @pytest.mark.asyncio
    async def test_single_video_order_completes(
        self, session, delivery_service, notifier, make_project
    ):
        project = make_project(quantity=1)
        video_id = video_ids(project)[0]
        await deliver(delivery_service, project.id, video_id)

        outcome = await delivery_service.approve_video(project.id, video_id)

        assert outcome.project_completed is True
        assert outcome.released_amount == Decimal("85.00")
        assert session.get(ProjectModel, project.id).status == "completed"
        assert notifier.sent[-1].type == NotificationType.PROJECT_COMPLETED

    @pytest.mark.asyncio
    async def test_full_sequential_batch(self, session, delivery_service, make_project):
        project = make_project(quantity=4)
        ids = video_ids(project)

        await delivery_service.start_video(project.id, ids[0])
        for video_id in ids:
            await delivery_service.deliver_video(project.id, video_id, YOUTUBE_URL)
            outcome = await delivery_service.approve_video(project.id, video_id)

        assert outcome.project_completed is True
        project = session.get(ProjectModel, project.id)
        assert project.status == "completed"
        assert project.videos_approved == 4
        assert project.editor_earnings_released == Decimal("323.00")

    @pytest.mark.asyncio
    async def test_approve_pending_video_rejected(self, delivery_service, make_project):
        project = make_project()

        with pytest.raises(InvalidTransitionError):
            await delivery_service.approve_video(project.id, video_ids(project)[0])


class TestRevisions:
    """Tests for revision requests, extra-revision payment and resuming."""

    @pytest.mark.asyncio
    async def test_revision_on_pending_video_rejected(self, delivery_service, make_project):
        project = make_project()

        with pytest.raises(InvalidTransitionError):
            await delivery_service.request_revision(project.id, video_ids(project)[0], "Fix audio")

    @pytest.mark.asyncio
    async def test_revision_needs_reason(self, delivery_service, make_project):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])

        with pytest.raises(ProjectValidationError):
            await delivery_service.request_revision(project.id, ids[0], "   ")

    @pytest.mark.asyncio
    async def test_free_revision(self, session, delivery_service, notifier, make_project):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])

        outcome = await delivery_service.request_revision(project.id, ids[0], "Louder music")

        assert outcome.revision_number == 1
        assert outcome.free_revisions_remaining == 1
        assert outcome.payment_required is False
        assert outcome.amount_due == Decimal("0.00")

        video = session.get(BatchVideoModel, ids[0])
        assert video.status == "revision"
        assert video.deliveries[-1].status == DeliveryStatus.REVISION_REQUESTED
        assert video.deliveries[-1].revision_notes == "Louder music"
        project = session.get(ProjectModel, project.id)
        assert project.current_revisions == 1
        assert project.status == "revision"
        assert notifier.sent[-1].type == NotificationType.REVISION_REQUESTED

        result = await delivery_service.resume_video(project.id, ids[0])
        assert result.status == BatchVideoStatus.IN_PROGRESS

        await delivery_service.deliver_video(project.id, ids[0], YOUTUBE_URL)
        video = session.get(BatchVideoModel, ids[0])
        assert [d.version for d in video.deliveries] == [1, 2]

    @pytest.mark.asyncio
    async def test_paid_revision_cycle(
        self, session, delivery_service, payment_provider, notifier, make_project
    ):
        project = make_project()
        ids = video_ids(project)
        await delivery_service.start_video(project.id, ids[0])

        for _ in range(2):
            await delivery_service.deliver_video(project.id, ids[0], YOUTUBE_URL)
            await delivery_service.request_revision(project.id, ids[0], "Another pass")
            await delivery_service.resume_video(project.id, ids[0])

        await delivery_service.deliver_video(project.id, ids[0], YOUTUBE_URL)
        outcome = await delivery_service.request_revision(project.id, ids[0], "Third pass")

        # 20% of 80.75 plus 15% on top
        assert outcome.revision_number == 3
        assert outcome.payment_required is True
        assert outcome.free_revisions_remaining == 0
        assert outcome.amount_due == Decimal("18.57")

        with pytest.raises(PaymentRequiredError) as exc_info:
            await delivery_service.resume_video(project.id, ids[0])
        assert exc_info.value.amount == Decimal("18.57")
        assert session.get(BatchVideoModel, ids[0]).status == "revision"

        settlement = await delivery_service.settle_extra_revisions(project.id, ids[0])

        assert settlement.success is True
        assert settlement.charged is True
        assert settlement.amount == Decimal("18.57")
        assert settlement.revisions_granted == 2
        assert settlement.transaction_id.startswith("stub_")

        charge = payment_provider.charges[0]
        assert charge.amount == Decimal("18.57")
        assert charge.currency == "brl"
        assert charge.customer_id == "cus_test"
        assert charge.metadata["batch_video_id"] == str(ids[0])

        payment = session.execute(select(RevisionPaymentModel)).scalar_one()
        assert payment.status == "succeeded"
        assert payment.amount == Decimal("16.15")
        assert payment.platform_fee == Decimal("2.42")
        assert payment.total_charged == Decimal("18.57")
        assert session.get(BatchVideoModel, ids[0]).extra_revisions_purchased == 2
        assert notifier.sent[-1].type == NotificationType.EXTRA_REVISIONS_PAID

        result = await delivery_service.resume_video(project.id, ids[0])
        assert result.status == BatchVideoStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_declined_payment_parks_video(
        self, session, notifier, rules, make_project
    ):
        service = BatchDeliveryService(session, StubPaymentProvider(succeed=False), notifier, rules)
        project = make_project()
        ids = video_ids(project)
        await deliver(service, project.id, ids[0])

        # No free revisions on this order
        session.get(ProjectModel, project.id).max_revisions = 0
        session.commit()

        outcome = await service.request_revision(project.id, ids[0], "Recut intro")
        assert outcome.payment_required is True

        settlement = await service.settle_extra_revisions(project.id, ids[0])

        assert settlement.success is False
        assert settlement.charged is True
        assert settlement.revisions_granted == 0
        assert settlement.error_message == "Card declined (stub)"

        payment = session.execute(select(RevisionPaymentModel)).scalar_one()
        assert payment.status == "failed"
        assert session.get(BatchVideoModel, ids[0]).status == "revision"
        assert session.get(BatchVideoModel, ids[0]).extra_revisions_purchased == 0

        with pytest.raises(PaymentRequiredError):
            await service.resume_video(project.id, ids[0])

    @pytest.mark.asyncio
    async def test_settle_without_debt(self, delivery_service, payment_provider, make_project):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])
        await delivery_service.request_revision(project.id, ids[0], "Small fix")

        settlement = await delivery_service.settle_extra_revisions(project.id, ids[0])

        assert settlement.success is True
        assert settlement.charged is False
        assert payment_provider.charges == []

    @pytest.mark.asyncio
    async def test_settle_requires_revision_status(self, delivery_service, make_project):
        project = make_project()

        with pytest.raises(ProjectValidationError, match="in revision"):
            await delivery_service.settle_extra_revisions(project.id, video_ids(project)[0])

    @pytest.mark.asyncio
    async def test_resume_pending_video_rejected(self, delivery_service, make_project):
        """Resuming is only valid from revision, even though start shares the target."""
        project = make_project()

        with pytest.raises(InvalidTransitionError):
            await delivery_service.resume_video(project.id, video_ids(project)[0])


class TestLookupsAndSideEffects:
    """Tests for missing records and notification failures."""

    @pytest.mark.asyncio
    async def test_unknown_project(self, delivery_service):
        with pytest.raises(NotFoundError):
            await delivery_service.start_video(uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_video_of_another_project(self, delivery_service, make_project):
        project = make_project()
        other = make_project()

        with pytest.raises(NotFoundError):
            await delivery_service.start_video(project.id, video_ids(other)[0])

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_undo_transition(
        self, session, payment_provider, rules, make_project
    ):
        service = BatchDeliveryService(session, payment_provider, FailingNotifier(), rules)
        project = make_project()
        ids = video_ids(project)

        await deliver(service, project.id, ids[0])
        outcome = await service.approve_video(project.id, ids[0])

        assert outcome.released_amount == Decimal("80.75")
        assert session.get(BatchVideoModel, ids[0]).status == "approved"


class TestProjectLifecycleGuards:
    """Videos only move while their project is assigned and active."""

    @pytest.mark.asyncio
    async def test_cancelled_project_releases_nothing(
        self, session, delivery_service, make_project
    ):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])
        cancel_project(session, project.id)

        with pytest.raises(ProjectValidationError, match="cancelled"):
            await delivery_service.approve_video(project.id, ids[0])
        with pytest.raises(ProjectValidationError):
            await delivery_service.start_video(project.id, ids[1])

        stored = session.get(ProjectModel, project.id)
        assert stored.status == "cancelled"
        assert stored.editor_earnings_released == Decimal("0")
        assert session.get(BatchVideoModel, ids[0]).status == "delivered"
        assert session.scalars(select(EarningsReleaseModel)).all() == []

    @pytest.mark.asyncio
    async def test_unassigned_project_cannot_start(
        self, session, delivery_service, make_project
    ):
        project = make_project(assign=False)
        ids = video_ids(project)

        with pytest.raises(ProjectValidationError):
            await delivery_service.start_video(project.id, ids[0])

        assert session.get(BatchVideoModel, ids[0]).status == "pending"
        assert session.get(ProjectModel, project.id).status == "draft"

    @pytest.mark.asyncio
    async def test_missing_editor_blocks_approval(
        self, session, delivery_service, make_project
    ):
        project = make_project()
        ids = video_ids(project)
        await deliver(delivery_service, project.id, ids[0])
        session.get(ProjectModel, project.id).editor_id = None
        session.commit()

        with pytest.raises(ProjectValidationError, match="no editor"):
            await delivery_service.approve_video(project.id, ids[0])

        assert session.scalars(select(EarningsReleaseModel)).all() == []
