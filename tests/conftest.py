"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "redis://localhost:6379/1"
os.environ["CELERY_BROKER_URL"] = "redis://localhost:6379/1"
os.environ["CELERY_RESULT_BACKEND"] = "redis://localhost:6379/1"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PAYMENT_PROVIDER"] = "stub"
os.environ["NOTIFICATION_PROVIDER"] = "stub"

from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from frameup.db.models import Base, ProjectModel  # noqa: E402
from frameup.db.session import build_engine  # noqa: E402
from frameup.domain.enums import DeliveryMode  # noqa: E402
from frameup.domain.pricing import BusinessRules  # noqa: E402


@pytest.fixture(scope="session")
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from frameup.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    """Session factory bound to a fresh in-memory database."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Database session for a single test."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def rules() -> BusinessRules:
    """Default platform rules."""
    return BusinessRules(
        batch_discounts={4: Decimal("5"), 7: Decimal("10"), 10: Decimal("15")},
    )


@pytest.fixture
def payment_provider():
    """Get a stub payment provider that approves charges."""
    from frameup.adapters.payments.stub import StubPaymentProvider

    return StubPaymentProvider()


@pytest.fixture
def notifier():
    """Get a stub notifier that keeps what it sends."""
    from frameup.adapters.notifications.stub import StubNotifier

    return StubNotifier()


@pytest.fixture
def delivery_service(session: Session, payment_provider, notifier, rules: BusinessRules):
    """Delivery workflow wired to stubs and the test session."""
    from frameup.services.delivery import BatchDeliveryService

    return BatchDeliveryService(session, payment_provider, notifier, rules, currency="brl")


@pytest.fixture
def make_project(session: Session, rules: BusinessRules) -> Callable[..., ProjectModel]:
    """Factory creating an order with an assigned editor."""
    from frameup.services.projects import BatchOrder, assign_editor, create_batch_project

    def _make(
        quantity: int = 4,
        mode: DeliveryMode = DeliveryMode.SEQUENTIAL,
        base_price: Decimal = Decimal("100.00"),
        editor_id: UUID | None = None,
        assign: bool = True,
    ) -> ProjectModel:
        order = BatchOrder(
            creator_id=uuid4(),
            title="Podcast cuts",
            base_price=base_price,
            quantity=quantity,
            is_batch=quantity > 1,
            delivery_mode=mode,
            estimated_delivery_days=2,
            stripe_customer_id="cus_test",
            stripe_payment_method_id="pm_test",
        )
        project = create_batch_project(session, order, rules)
        if assign:
            project = assign_editor(session, project.id, editor_id or uuid4())
        return project

    return _make


@pytest.fixture
def api_client(session: Session, payment_provider, notifier) -> Generator[TestClient, None, None]:
    """Test client whose session and collaborators are the test fixtures."""
    from frameup.api import deps
    from frameup.db.session import get_session
    from frameup.main import app

    def _session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[deps.get_payments] = lambda: payment_provider
    app.dependency_overrides[deps.get_notifications] = lambda: notifier
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
