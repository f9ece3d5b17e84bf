from decimal import Decimal

import pytest

from apps.bookings.domain.pricing import CartItem, discount_for, price


def _item(campaign_id: int, slots: int, unit: str, adverts: int = 0) -> CartItem:
    return CartItem(
        campaign_id=campaign_id,
        slots_required=slots,
        price_per_slot=Decimal(unit),
        adverts_per_slot=adverts,
    )


@pytest.mark.parametrize(
    "slots, expected",
    [
        (1, Decimal("0")),
        (2, Decimal("0.10")),
        (3, Decimal("0.10")),
        (4, Decimal("0.15")),
        (5, Decimal("0.15")),
        (6, Decimal("0.20")),
        (20, Decimal("0.20")),
    ],
)
def test_discount_tier_boundaries(slots, expected):
    assert discount_for(slots) == expected


def test_rounds_only_monetary_outputs():
    breakdown = price([_item(1, 1, "29.99"), _item(2, 2, "30.00")])

    assert breakdown.subtotal == Decimal("89.99")
    assert breakdown.total_slots == 3
    assert breakdown.discount_percentage == Decimal("0.10")
    assert breakdown.discount_amount == Decimal("9.00")
    assert breakdown.discounted_subtotal == Decimal("80.99")
    assert breakdown.vat == Decimal("16.20")
    assert breakdown.total == Decimal("97.19")


def test_half_pennies_round_up():
    breakdown = price([_item(1, 1, "0.125")])

    assert breakdown.subtotal == Decimal("0.13")
    assert breakdown.vat == Decimal("0.03")
    assert breakdown.total == Decimal("0.15")


def test_four_slots_get_fifteen_percent():
    breakdown = price([_item(1, 4, "100.00")])

    assert breakdown.discount_amount == Decimal("60.00")
    assert breakdown.discounted_subtotal == Decimal("340.00")
    assert breakdown.vat == Decimal("68.00")
    assert breakdown.total == Decimal("408.00")


def test_counts_adverts_across_items():
    breakdown = price([_item(1, 2, "10.00", adverts=5), _item(2, 1, "10.00", adverts=3)])

    assert breakdown.total_adverts == 13
    assert breakdown.total_slots == 3


def test_empty_cart_prices_to_zero():
    breakdown = price([])

    assert breakdown.total == Decimal("0")
    assert breakdown.subtotal == Decimal("0")
    assert breakdown.discount_percentage == Decimal("0")
    assert breakdown.total_slots == 0


def test_pricing_is_deterministic():
    items = [_item(1, 3, "45.50", adverts=2), _item(7, 4, "12.34")]

    assert price(items) == price(list(items))


def test_breakdown_serialises_to_camel_case_strings():
    data = price([_item(1, 2, "50.00")]).to_dict()

    assert data["discountPercentage"] == "0.10"
    assert data["discountedSubtotal"] == "90.00"
    assert data["total"] == "108.00"
    assert data["totalSlots"] == 2
