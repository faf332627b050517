"""Stripe payment provider."""

from decimal import Decimal
from typing import Any

import httpx

from frameup.adapters.payments.base import ChargeRequest, ChargeResult, PaymentProvider
from frameup.config import settings
from frameup.logging import get_logger

logger = get_logger(__name__)


class StripePaymentProvider(PaymentProvider):
    """Charges a creator's saved card with a confirmed, off-session PaymentIntent.

    Stripe's REST API takes form-encoded bodies and amounts in the smallest
    currency unit. A card decline comes back as HTTP 402 with an error object.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        minimum_amount: Decimal | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key or settings.stripe_api_key
        self.base_url = (base_url or settings.stripe_api_base).rstrip("/")
        self.minimum_amount = (
            minimum_amount if minimum_amount is not None else settings.minimum_charge_amount
        )
        self.timeout = timeout

        if not self.api_key:
            logger.warning("Stripe API key not configured")

    @property
    def name(self) -> str:
        return "stripe"

    @staticmethod
    def _to_minor_units(amount: Decimal) -> int:
        return int((Decimal(amount) * 100).to_integral_value())

    def _build_form(self, request: ChargeRequest) -> dict[str, Any]:
        form: dict[str, Any] = {
            "amount": self._to_minor_units(request.amount),
            "currency": request.currency,
            "description": request.description,
            "confirm": "true",
            "off_session": "true",
        }
        if request.customer_id:
            form["customer"] = request.customer_id
        if request.payment_method_id:
            form["payment_method"] = request.payment_method_id
        for key, value in request.metadata.items():
            form[f"metadata[{key}]"] = str(value)
        return form

    def _failed(self, request: ChargeRequest, message: str) -> ChargeResult:
        return ChargeResult(
            success=False,
            provider=self.name,
            amount=request.amount,
            error_message=message,
        )

    async def charge(self, request: ChargeRequest) -> ChargeResult:
        """Create and confirm a PaymentIntent for the request."""
        if not self.api_key:
            return self._failed(request, "Stripe API key not configured")

        if request.amount < self.minimum_amount:
            return self._failed(
                request, f"Amount below the minimum charge of {self.minimum_amount}"
            )

        if not request.customer_id or not request.payment_method_id:
            return self._failed(request, "Creator has no saved payment method")

        logger.info(
            "stripe_charge_started",
            amount=str(request.amount),
            currency=request.currency,
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/payment_intents",
                    auth=(self.api_key, ""),
                    data=self._build_form(request),
                )
                response.raise_for_status()
                intent = response.json()

        except httpx.HTTPStatusError as e:
            error = _stripe_error_message(e.response)
            logger.error(
                "stripe_charge_declined",
                status_code=e.response.status_code,
                error=error,
            )
            return self._failed(request, error)
        except httpx.RequestError as e:
            logger.error("stripe_request_error", error=str(e))
            return self._failed(request, f"Stripe unreachable: {e}")

        status = intent.get("status")
        if status != "succeeded":
            logger.warning("stripe_charge_incomplete", intent_id=intent.get("id"), status=status)
            return ChargeResult(
                success=False,
                provider=self.name,
                amount=request.amount,
                transaction_id=intent.get("id"),
                error_message=f"Payment not completed (status: {status})",
            )

        logger.info("stripe_charge_succeeded", intent_id=intent.get("id"))
        return ChargeResult(
            success=True,
            provider=self.name,
            amount=request.amount,
            transaction_id=intent.get("id"),
            metadata={"status": status},
        )

    async def health_check(self) -> bool:
        """Verify the key by reading the account balance."""
        if not self.api_key:
            return False

        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(f"{self.base_url}/balance", auth=(self.api_key, ""))
                return response.status_code == 200
        except httpx.RequestError as e:
            logger.error("stripe_health_check_failed", error=str(e))
            return False


def _stripe_error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
    except ValueError:
        return f"Stripe API error: {response.status_code}"
    return error.get("message") or f"Stripe API error: {response.status_code}"
