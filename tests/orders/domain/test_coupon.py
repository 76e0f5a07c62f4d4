"""Tests for the Coupon aggregate — eligibility and discount computation."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from storefront.coupon.coupon import Coupon


def _coupon(**overrides):
    defaults = {
        "code": "SAVE10",
        "discount_type": "percentage",
        "discount_value": 10.0,
    }
    defaults.update(overrides)
    return Coupon(**defaults)


class TestDiscount:
    def test_percentage(self):
        assert _coupon().discount_for(1000.0) == 100.0

    def test_percentage_is_capped(self):
        assert _coupon(max_discount_amount=50.0).discount_for(1000.0) == 50.0

    def test_fixed(self):
        assert _coupon(discount_type="fixed", discount_value=150.0).discount_for(1000.0) == 150.0

    def test_fixed_never_exceeds_subtotal(self):
        assert _coupon(discount_type="fixed", discount_value=500.0).discount_for(200.0) == 200.0

    def test_rounded_to_whole_units(self):
        assert _coupon(discount_value=15.0).discount_for(333.0) == 50.0


class TestEligibility:
    def test_inactive(self):
        with pytest.raises(ValidationError):
            _coupon(is_active=False).discount_for(1000.0)

    def test_not_yet_valid(self):
        with pytest.raises(ValidationError):
            _coupon(valid_from=datetime.now(UTC) + timedelta(days=1)).discount_for(1000.0)

    def test_expired(self):
        with pytest.raises(ValidationError) as exc_info:
            _coupon(valid_to=datetime.now(UTC) - timedelta(days=1)).discount_for(1000.0)
        assert "expired" in exc_info.value.messages["coupon_code"][0]

    def test_usage_limit_reached(self):
        coupon = _coupon(usage_limit=1)
        coupon.redeem()
        with pytest.raises(ValidationError):
            coupon.discount_for(1000.0)

    def test_minimum_order_amount(self):
        with pytest.raises(ValidationError):
            _coupon(min_order_amount=999.0).discount_for(500.0)

    def test_naive_window_is_treated_as_utc(self):
        coupon = _coupon(valid_to=datetime.now() + timedelta(days=1))
        assert coupon.discount_for(100.0) == 10.0


def test_percentage_over_hundred_rejected():
    with pytest.raises(ValidationError):
        _coupon(discount_value=120.0)


def test_redeem_counts_usage():
    coupon = _coupon()
    coupon.redeem()
    coupon.redeem()
    assert coupon.used_count == 2
