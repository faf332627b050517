"""Payment providers for extra-revision charges."""

from frameup.adapters.payments.base import ChargeRequest, ChargeResult, PaymentProvider
from frameup.adapters.payments.stripe import StripePaymentProvider
from frameup.adapters.payments.stub import StubPaymentProvider
from frameup.config import settings
from frameup.logging import get_logger

logger = get_logger(__name__)


def get_payment_provider() -> PaymentProvider:
    """Get the configured payment provider."""
    provider_name = settings.payment_provider.lower()

    if provider_name == "stub":
        return StubPaymentProvider()
    elif provider_name == "stripe":
        return StripePaymentProvider()

    logger.warning(f"Unknown payment_provider '{provider_name}', using stub")
    return StubPaymentProvider()


__all__ = [
    "ChargeRequest",
    "ChargeResult",
    "PaymentProvider",
    "StripePaymentProvider",
    "StubPaymentProvider",
    "get_payment_provider",
]
