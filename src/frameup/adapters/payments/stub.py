"""Stub payment provider for testing."""

from uuid import uuid4

from frameup.adapters.payments.base import ChargeRequest, ChargeResult, PaymentProvider
from frameup.logging import get_logger

logger = get_logger(__name__)


class StubPaymentProvider(PaymentProvider):
    """Stub provider that approves (or declines) every charge without external calls."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.charges: list[ChargeRequest] = []

    @property
    def name(self) -> str:
        return "stub"

    async def charge(self, request: ChargeRequest) -> ChargeResult:
        """Record the charge and return a canned result."""
        self.charges.append(request)
        logger.info(
            "stub_charge",
            amount=str(request.amount),
            currency=request.currency,
            succeed=self.succeed,
        )

        if not self.succeed:
            return ChargeResult(
                success=False,
                provider=self.name,
                amount=request.amount,
                error_message="Card declined (stub)",
            )

        return ChargeResult(
            success=True,
            provider=self.name,
            amount=request.amount,
            transaction_id=f"stub_{uuid4().hex[:12]}",
            metadata={"adapter": "stub"},
        )
