"""Tests for adapter implementations."""

from contextlib import contextmanager
from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from frameup.adapters.notifications import (
    DatabaseNotifier,
    Notification,
    QueueNotifier,
    StubNotifier,
    get_notifier,
)
from frameup.adapters.payments import (
    ChargeRequest,
    StripePaymentProvider,
    StubPaymentProvider,
    get_payment_provider,
)
from frameup.db.models import NotificationModel
from frameup.domain.enums import NotificationType


def make_notification(**overrides) -> Notification:
    fields = {
        "user_id": uuid4(),
        "type": NotificationType.VIDEO_APPROVED,
        "title": "Video approved",
        "message": "Video 1 was approved.",
        "data": {"amount": "80.75"},
    }
    fields.update(overrides)
    return Notification(**fields)


@pytest.mark.asyncio
async def test_payment_stub(payment_provider) -> None:
    """Test stub payment provider."""
    request = ChargeRequest(amount=Decimal("18.57"), currency="brl", description="Extra revisions")

    result = await payment_provider.charge(request)

    assert result.success is True
    assert result.provider == "stub"
    assert result.amount == Decimal("18.57")
    assert result.transaction_id is not None
    assert payment_provider.charges == [request]


@pytest.mark.asyncio
async def test_payment_stub_decline() -> None:
    """Test stub payment provider configured to decline."""
    provider = StubPaymentProvider(succeed=False)

    result = await provider.charge(
        ChargeRequest(amount=Decimal("10.00"), currency="brl", description="test")
    )

    assert result.success is False
    assert result.transaction_id is None
    assert result.error_message


@pytest.mark.asyncio
async def test_payment_health_check(payment_provider) -> None:
    """Test payment provider health check."""
    assert await payment_provider.health_check() is True


@pytest.mark.asyncio
async def test_notifier_stub(notifier) -> None:
    """Test stub notifier keeps what it sends."""
    notification = make_notification()

    await notifier.notify(notification)

    assert notifier.sent == [notification]
    assert notifier.name == "stub"


def test_notification_payload_roundtrip() -> None:
    project_id = uuid4()
    notification = make_notification(project_id=project_id)

    payload = notification.to_payload()

    assert payload["type"] == "video_approved"
    assert payload["project_id"] == str(project_id)
    assert Notification.from_payload(payload) == notification


@pytest.mark.asyncio
async def test_database_notifier(session_factory, session) -> None:
    """Test notifications are stored in their own session."""

    @contextmanager
    def scoped_session():
        db = session_factory()
        try:
            yield db
            db.commit()
        finally:
            db.close()

    notification = make_notification()

    await DatabaseNotifier(session_factory=scoped_session).notify(notification)

    row = session.query(NotificationModel).one()
    assert row.user_id == notification.user_id
    assert row.type == "video_approved"
    assert row.data == {"amount": "80.75"}
    assert row.read is False


@pytest.mark.asyncio
async def test_queue_notifier_enqueues_task() -> None:
    """Test the queue notifier hands the payload to Celery."""
    notification = make_notification()

    with patch("frameup.jobs.tasks.send_notification_task.delay") as mock_delay:
        mock_delay.return_value = MagicMock(id="task-123")
        await QueueNotifier().notify(notification)

    mock_delay.assert_called_once_with(notification.to_payload())


class TestFactories:
    """Tests for settings-driven adapter factories."""

    def test_payment_provider_factory(self):
        with patch("frameup.adapters.payments.settings") as mock_settings:
            mock_settings.payment_provider = "stripe"
            assert isinstance(get_payment_provider(), StripePaymentProvider)

            mock_settings.payment_provider = "paypal"
            assert isinstance(get_payment_provider(), StubPaymentProvider)

    @pytest.mark.parametrize(
        "provider,expected",
        [
            ("stub", StubNotifier),
            ("database", DatabaseNotifier),
            ("QUEUE", QueueNotifier),
            ("carrier-pigeon", StubNotifier),
        ],
    )
    def test_notifier_factory(self, provider, expected):
        with patch("frameup.adapters.notifications.settings") as mock_settings:
            mock_settings.notification_provider = provider
            assert isinstance(get_notifier(), expected)


@pytest.mark.asyncio
async def test_notifier_health_checks(session_factory) -> None:
    """Test stub and database channels report healthy."""

    @contextmanager
    def scoped_session():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    assert await StubNotifier().health_check() is True
    assert await DatabaseNotifier(session_factory=scoped_session).health_check() is True
