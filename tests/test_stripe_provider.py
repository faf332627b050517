"""Unit tests for the Stripe payment provider."""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from frameup.adapters.payments.base import ChargeRequest
from frameup.adapters.payments.stripe import StripePaymentProvider

API_BASE = "https://api.stripe.test/v1"


def make_request(**overrides) -> ChargeRequest:
    fields = {
        "amount": Decimal("18.57"),
        "currency": "brl",
        "description": "Extra revisions for Podcast cuts - Video 1",
        "customer_id": "cus_123",
        "payment_method_id": "pm_456",
        "metadata": {"project_id": "p-1", "type": "extra_revisions"},
    }
    fields.update(overrides)
    return ChargeRequest(**fields)


def stripe_response(status_code: int, body: dict) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=body,
        request=httpx.Request("POST", f"{API_BASE}/payment_intents"),
    )


@pytest.fixture
def provider() -> StripePaymentProvider:
    return StripePaymentProvider(api_key="sk_test_abc", base_url=API_BASE)


class TestStripeCharge:
    """Tests for StripePaymentProvider.charge."""

    @pytest.mark.asyncio
    async def test_successful_charge(self, provider):
        response = stripe_response(200, {"id": "pi_789", "status": "succeeded"})

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = response
            result = await provider.charge(make_request())

        assert result.success is True
        assert result.provider == "stripe"
        assert result.transaction_id == "pi_789"

        mock_post.assert_called_once()
        url = mock_post.call_args[0][0]
        form = mock_post.call_args[1]["data"]
        assert url == f"{API_BASE}/payment_intents"
        assert mock_post.call_args[1]["auth"] == ("sk_test_abc", "")
        assert form["amount"] == 1857
        assert form["currency"] == "brl"
        assert form["confirm"] == "true"
        assert form["off_session"] == "true"
        assert form["customer"] == "cus_123"
        assert form["payment_method"] == "pm_456"
        assert form["metadata[type]"] == "extra_revisions"

    @pytest.mark.asyncio
    async def test_card_declined(self, provider):
        response = stripe_response(
            402, {"error": {"type": "card_error", "message": "Your card was declined."}}
        )

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = response
            result = await provider.charge(make_request())

        assert result.success is False
        assert result.error_message == "Your card was declined."

    @pytest.mark.asyncio
    async def test_requires_action_is_not_success(self, provider):
        response = stripe_response(200, {"id": "pi_789", "status": "requires_action"})

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = response
            result = await provider.charge(make_request())

        assert result.success is False
        assert result.transaction_id == "pi_789"
        assert "requires_action" in result.error_message

    @pytest.mark.asyncio
    async def test_network_error(self, provider):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("connection refused")
            result = await provider.charge(make_request())

        assert result.success is False
        assert "unreachable" in result.error_message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"amount": Decimal("0.10")}, "minimum"),
            ({"payment_method_id": None}, "payment method"),
        ],
    )
    async def test_rejected_before_calling_stripe(self, provider, overrides, message):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            result = await provider.charge(make_request(**overrides))

        assert result.success is False
        assert message in result.error_message
        mock_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        with patch("frameup.adapters.payments.stripe.settings") as mock_settings:
            mock_settings.stripe_api_key = None
            mock_settings.stripe_api_base = API_BASE
            mock_settings.minimum_charge_amount = Decimal("0.50")
            provider = StripePaymentProvider()

        result = await provider.charge(make_request())

        assert result.success is False
        assert "not configured" in result.error_message
        assert await provider.health_check() is False
