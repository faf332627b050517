"""Pricing endpoints."""

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from frameup.api.deps import RulesDep
from frameup.domain.enums import DeliveryMode
from frameup.domain.pricing import calculate_price_quote

router = APIRouter(prefix="/pricing", tags=["Pricing"])


class QuoteRequest(BaseModel):
    """Request to price an order."""

    base_price: Decimal = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)
    delivery_mode: DeliveryMode = DeliveryMode.SEQUENTIAL
    estimated_delivery_days: int = Field(default=3, ge=1)
    platform_fee_percent: Decimal | None = Field(None, ge=0, le=100)


class QuoteResponse(BaseModel):
    """Price breakdown."""

    base_price: Decimal
    quantity: int
    discount_percent: Decimal
    urgency_multiplier: Decimal
    price_per_video: Decimal
    subtotal: Decimal
    platform_fee_percent: Decimal
    platform_fee: Decimal
    total_paid_by_creator: Decimal
    editor_earnings_per_video: Decimal
    estimated_delivery_days: int
    delivery_mode: DeliveryMode


@router.post("/quote", response_model=QuoteResponse, summary="Price an order")
async def quote(request: QuoteRequest, rules: RulesDep) -> QuoteResponse:
    """Quote an order without creating it."""
    result = calculate_price_quote(
        base_price=request.base_price,
        quantity=request.quantity,
        delivery_mode=request.delivery_mode,
        rules=rules,
        estimated_delivery_days=request.estimated_delivery_days,
        platform_fee_percent=request.platform_fee_percent,
    )
    return QuoteResponse(**vars(result))
