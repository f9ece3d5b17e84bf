"""
Booking Pricing

Pure pricing rules for a cart of campaign slots:
- tiered bulk discount keyed to the total number of slots
- flat UK VAT on the discounted subtotal

Intermediate arithmetic keeps full Decimal precision; monetary outputs are
rounded half away from zero to pence only when the breakdown is built.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

from shared.domain.base import ValueObject

PENNY = Decimal("0.01")
ZERO = Decimal("0")
VAT_RATE = Decimal("0.20")

# (minimum total slots, discount) ordered highest tier first.
DISCOUNT_TIERS: Tuple[Tuple[int, Decimal], ...] = (
    (6, Decimal("0.20")),
    (4, Decimal("0.15")),
    (2, Decimal("0.10")),
)


def _money(value: Decimal) -> Decimal:
    return value.quantize(PENNY, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartItem(ValueObject):
    """
    One line of a client-held cart

    Never persisted; it only feeds the pricing rules.
    """
    campaign_id: int
    slots_required: int
    price_per_slot: Decimal
    adverts_per_slot: int = 0

    @property
    def total_price(self) -> Decimal:
        return Decimal(self.price_per_slot) * self.slots_required


@dataclass(frozen=True)
class PricingBreakdown(ValueObject):
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    discounted_subtotal: Decimal
    vat: Decimal
    total: Decimal
    total_slots: int
    total_adverts: int

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "discountPercentage": str(self.discount_percentage),
            "discountAmount": str(self.discount_amount),
            "discountedSubtotal": str(self.discounted_subtotal),
            "vat": str(self.vat),
            "total": str(self.total),
            "totalSlots": self.total_slots,
            "totalAdverts": self.total_adverts,
        }


def discount_for(total_slots: int) -> Decimal:
    """Bulk discount rate for the given number of slots"""
    for minimum_slots, rate in DISCOUNT_TIERS:
        if total_slots >= minimum_slots:
            return rate
    return ZERO


def price(items: Iterable[CartItem]) -> PricingBreakdown:
    """
    Price a cart

    Deterministic and side-effect free. An empty cart prices to zero;
    slot bounds are validated by callers beforehand.
    """
    items = list(items)

    subtotal = sum((item.total_price for item in items), ZERO)
    total_slots = sum(item.slots_required for item in items)
    total_adverts = sum(item.slots_required * item.adverts_per_slot for item in items)

    discount_percentage = discount_for(total_slots)
    discount_amount = subtotal * discount_percentage
    discounted_subtotal = subtotal - discount_amount
    vat = discounted_subtotal * VAT_RATE
    total = discounted_subtotal + vat

    return PricingBreakdown(
        subtotal=_money(subtotal),
        discount_percentage=discount_percentage,
        discount_amount=_money(discount_amount),
        discounted_subtotal=_money(discounted_subtotal),
        vat=_money(vat),
        total=_money(total),
        total_slots=total_slots,
        total_adverts=total_adverts,
    )
