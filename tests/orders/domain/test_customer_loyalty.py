"""Tests for the Customer aggregate — loyalty balance, tiers and affiliate earnings."""

import pytest
from protean.exceptions import ValidationError

from storefront.customer.customer import Customer, LoyaltyTier, tier_for


def _customer(**kwargs):
    customer = Customer.register(email="asha@example.com", name="Asha Rao", **kwargs)
    customer._events.clear()
    return customer


class TestLoyaltyPoints:
    def test_points_accumulate(self):
        customer = _customer()
        customer.add_loyalty_points(100, order_number="ORD-1")
        customer.add_loyalty_points(59)
        assert customer.loyalty_points == 159

    def test_zero_points_is_a_no_op(self):
        customer = _customer()
        customer.add_loyalty_points(0)
        assert customer.loyalty_points == 0
        assert customer._events == []

    def test_negative_points_rejected(self):
        with pytest.raises(ValidationError):
            _customer().add_loyalty_points(-5)

    def test_crossing_a_threshold_changes_tier(self):
        customer = _customer()
        customer.add_loyalty_points(1000)
        assert customer.loyalty_tier == LoyaltyTier.SILVER.value
        assert [e.__class__.__name__ for e in customer._events] == ["LoyaltyPointsAwarded", "LoyaltyTierChanged"]

    def test_staying_in_tier_raises_no_tier_event(self):
        customer = _customer()
        customer.add_loyalty_points(10)
        assert [e.__class__.__name__ for e in customer._events] == ["LoyaltyPointsAwarded"]


@pytest.mark.parametrize(
    "points,tier",
    [
        (0, LoyaltyTier.BRONZE),
        (999, LoyaltyTier.BRONZE),
        (1000, LoyaltyTier.SILVER),
        (4999, LoyaltyTier.SILVER),
        (5000, LoyaltyTier.GOLD),
        (9999, LoyaltyTier.GOLD),
        (10000, LoyaltyTier.PLATINUM),
    ],
)
def test_tier_boundaries(points, tier):
    assert tier_for(points) == tier


class TestAffiliate:
    def test_affiliate_code_is_upper_cased(self):
        assert _customer(affiliate_code="asha10").affiliate_code == "ASHA10"

    def test_commission_accumulates(self):
        customer = _customer(affiliate_code="ASHA10")
        customer.credit_affiliate_commission(50.0, "ORD-1")
        customer.credit_affiliate_commission(29.95, "ORD-2")
        assert customer.affiliate_earnings == pytest.approx(79.95)

    def test_non_affiliate_cannot_earn(self):
        with pytest.raises(ValidationError):
            _customer().credit_affiliate_commission(10.0, "ORD-1")
