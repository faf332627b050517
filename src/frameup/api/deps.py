"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from frameup.adapters.notifications import Notifier, get_notifier
from frameup.adapters.payments import PaymentProvider, get_payment_provider
from frameup.config import settings
from frameup.db.session import get_session
from frameup.domain.pricing import BusinessRules
from frameup.services.delivery import BatchDeliveryService

# Database session dependency
SessionDep = Annotated[Session, Depends(get_session)]


def get_payments() -> PaymentProvider:
    """Get the payment provider instance."""
    return get_payment_provider()


def get_notifications() -> Notifier:
    """Get the notification channel instance."""
    return get_notifier()


def get_business_rules() -> BusinessRules:
    """Get the platform rules from settings."""
    return BusinessRules.from_settings(settings)


PaymentsDep = Annotated[PaymentProvider, Depends(get_payments)]
NotifierDep = Annotated[Notifier, Depends(get_notifications)]
RulesDep = Annotated[BusinessRules, Depends(get_business_rules)]


def get_delivery_service(
    session: SessionDep,
    payments: PaymentsDep,
    notifier: NotifierDep,
    rules: RulesDep,
) -> BatchDeliveryService:
    """Get the delivery workflow bound to the request's session."""
    return BatchDeliveryService(session, payments, notifier, rules)


DeliveryServiceDep = Annotated[BatchDeliveryService, Depends(get_delivery_service)]
