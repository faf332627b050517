"""Order pricing, editor earnings and extra-revision charges.

All amounts are Decimal and quantized to cents.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from frameup.domain.enums import DeliveryMode

if TYPE_CHECKING:
    from frameup.config import Settings

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Simultaneous batches take half as long again as a single video.
SIMULTANEOUS_DEADLINE_FACTOR = Decimal("1.5")


def money(value: Decimal | int | float | str) -> Decimal:
    """Quantize an amount to cents, rounding half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BusinessRules:
    """Platform-wide pricing and revision rules."""

    free_revisions_limit: int = 2
    extra_revision_fee_percent: Decimal = Decimal("20")
    extra_revision_platform_fee_percent: Decimal = Decimal("15")
    extra_revisions_per_payment: int = 2
    editor_earnings_percent: Decimal = Decimal("85")
    platform_fee_percent: Decimal = Decimal("15")
    simultaneous_delivery_multiplier: Decimal = Decimal("1.2")
    min_batch_quantity: int = 4
    max_batch_quantity: int = 20
    batch_discounts: dict[int, Decimal] = field(default_factory=dict)
    auto_start_next_video: bool = True

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BusinessRules":
        """Build the rules from application settings."""
        return cls(
            free_revisions_limit=settings.free_revisions_limit,
            extra_revision_fee_percent=settings.extra_revision_fee_percent,
            extra_revision_platform_fee_percent=settings.extra_revision_platform_fee_percent,
            extra_revisions_per_payment=settings.extra_revisions_per_payment,
            editor_earnings_percent=settings.editor_earnings_percent,
            platform_fee_percent=settings.platform_fee_percent,
            simultaneous_delivery_multiplier=settings.simultaneous_delivery_multiplier,
            min_batch_quantity=settings.min_batch_quantity,
            max_batch_quantity=settings.max_batch_quantity,
            batch_discounts=dict(settings.batch_discounts),
            auto_start_next_video=settings.auto_start_next_video,
        )


@dataclass(frozen=True)
class PriceQuote:
    """Full price breakdown for an order."""

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


@dataclass(frozen=True)
class ProjectTotal:
    """Order value before and after the batch discount."""

    total_before_discount: Decimal
    discount_amount: Decimal
    total_after_discount: Decimal
    price_per_video: Decimal


@dataclass(frozen=True)
class RevisionCharge:
    """Amount charged to the creator for an extra-revision package."""

    extra_cost: Decimal
    platform_fee: Decimal
    total: Decimal


def batch_discount_percent(
    quantity: int,
    tiers: dict[int, Decimal],
    min_batch_quantity: int,
) -> Decimal:
    """Discount of the highest tier reached by `quantity` (0 below the batch minimum)."""
    if quantity < min_batch_quantity:
        return Decimal("0")

    reached = [threshold for threshold in tiers if quantity >= threshold]
    if not reached:
        return Decimal("0")
    return Decimal(tiers[max(reached)])


def calculate_price_quote(
    base_price: Decimal,
    quantity: int,
    delivery_mode: DeliveryMode | str,
    rules: BusinessRules,
    estimated_delivery_days: int,
    platform_fee_percent: Decimal | None = None,
) -> PriceQuote:
    """Price an order of `quantity` videos.

    Args:
        base_price: Catalog price of one video.
        quantity: Number of videos in the order.
        delivery_mode: Sequential or simultaneous release.
        rules: Platform rules (discount tiers, fees, urgency multiplier).
        estimated_delivery_days: Turnaround of a single video.
        platform_fee_percent: Per-catalog-entry fee overriding the platform default.

    Returns:
        PriceQuote with per-video, subtotal, fee and editor earnings figures.
    """
    mode = DeliveryMode(delivery_mode)
    base_price = Decimal(base_price)

    discount = batch_discount_percent(quantity, rules.batch_discounts, rules.min_batch_quantity)
    urgency = (
        rules.simultaneous_delivery_multiplier
        if mode == DeliveryMode.SIMULTANEOUS
        else Decimal("1")
    )
    fee_percent = (
        platform_fee_percent if platform_fee_percent is not None else rules.platform_fee_percent
    )

    price_per_video = base_price * (1 - discount / HUNDRED) * urgency
    subtotal = price_per_video * quantity
    platform_fee = subtotal * fee_percent / HUNDRED
    editor_earnings = price_per_video * (1 - fee_percent / HUNDRED)

    if mode == DeliveryMode.SEQUENTIAL:
        deadline_days = estimated_delivery_days * quantity
    else:
        deadline_days = math.ceil(estimated_delivery_days * SIMULTANEOUS_DEADLINE_FACTOR)

    return PriceQuote(
        base_price=money(base_price),
        quantity=quantity,
        discount_percent=discount,
        urgency_multiplier=urgency,
        price_per_video=money(price_per_video),
        subtotal=money(subtotal),
        platform_fee_percent=fee_percent,
        platform_fee=money(platform_fee),
        total_paid_by_creator=money(subtotal + platform_fee),
        editor_earnings_per_video=money(editor_earnings),
        estimated_delivery_days=deadline_days,
        delivery_mode=mode,
    )


def calculate_project_total_value(
    base_price: Decimal,
    batch_quantity: int = 1,
    discount_percent: Decimal = Decimal("0"),
) -> ProjectTotal:
    total_before = Decimal(base_price) * batch_quantity
    discount_amount = total_before * Decimal(discount_percent) / HUNDRED
    total_after = total_before - discount_amount
    per_video = total_after / batch_quantity if batch_quantity > 0 else Decimal(base_price)

    return ProjectTotal(
        total_before_discount=money(total_before),
        discount_amount=money(discount_amount),
        total_after_discount=money(total_after),
        price_per_video=money(per_video),
    )


def default_editor_earnings(base_price: Decimal, rules: BusinessRules) -> Decimal:
    """Editor earnings for a project that has no stored per-video amount."""
    return money(Decimal(base_price) * rules.editor_earnings_percent / HUNDRED)


def calculate_extra_revision_charge(
    editor_earnings_per_video: Decimal, rules: BusinessRules
) -> RevisionCharge:
    extra_cost = Decimal(editor_earnings_per_video) * rules.extra_revision_fee_percent / HUNDRED
    platform_fee = extra_cost * rules.extra_revision_platform_fee_percent / HUNDRED
    return RevisionCharge(
        extra_cost=money(extra_cost),
        platform_fee=money(platform_fee),
        total=money(extra_cost + platform_fee),
    )


def revision_allowance(max_revisions: int, extra_revisions_purchased: int = 0) -> int:
    """Revisions a video may receive before (more) payment is required."""
    return max_revisions + extra_revisions_purchased


def needs_payment_for_revision(revision_count: int, allowance: int) -> bool:
    """True once a video has received more revisions than it is entitled to."""
    return revision_count > allowance


def free_revisions_remaining(revision_count: int, allowance: int) -> int:
    return max(0, allowance - revision_count)
