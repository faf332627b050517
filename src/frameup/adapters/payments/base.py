"""Base interface for payment providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class ChargeRequest:
    """Request to charge a creator."""

    amount: Decimal
    currency: str
    description: str
    customer_id: str | None = None
    payment_method_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChargeResult:
    """Outcome of a charge. Declines are results, not exceptions."""

    success: bool
    provider: str
    amount: Decimal
    transaction_id: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] | None = None


class PaymentProvider(ABC):
    """Abstract base class for payment providers.

    Implementations:
    - StubPaymentProvider: Approves or declines without external calls
    - StripePaymentProvider: Charges a saved card through Stripe PaymentIntents
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def charge(self, request: ChargeRequest) -> ChargeResult:
        """Charge the creator.

        Args:
            request: Amount, currency and the creator's saved payment details

        Returns:
            ChargeResult with the processor's transaction ID or an error message
        """
        ...

    async def health_check(self) -> bool:
        """Check if the provider is configured and reachable.

        Returns:
            True if provider is operational, False otherwise
        """
        return True
