"""Coupon aggregate — discount codes applied at order creation."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from storefront.domain import storefront


def _as_utc(moment):
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@storefront.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was used by an order."""

    __version__ = 1

    coupon_id = String(required=True)
    code = String(required=True)
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=20, unique=True)
    description = String(max_length=500)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(min_value=1)
    used_count = Integer(default=0, min_value=0)
    valid_from = DateTime()
    valid_to = DateTime()
    is_active = Boolean(default=True)

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.discount_value > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    def _assert_usable(self, subtotal, now):
        if not self.is_active:
            raise ValidationError({"coupon_code": ["This coupon is no longer active"]})
        if self.valid_from and now < _as_utc(self.valid_from):
            raise ValidationError({"coupon_code": ["This coupon is not yet active"]})
        if self.valid_to and now > _as_utc(self.valid_to):
            raise ValidationError({"coupon_code": ["This coupon has expired"]})
        if self.usage_limit and self.used_count >= self.usage_limit:
            raise ValidationError({"coupon_code": ["This coupon has reached its usage limit"]})
        if subtotal < (self.min_order_amount or 0.0):
            raise ValidationError({"coupon_code": [f"Minimum order amount is {self.min_order_amount}"]})

    def discount_for(self, subtotal, now=None):
        """Discount this coupon grants on ``subtotal``, rounded to whole units."""
        now = _as_utc(now or datetime.now(UTC))
        self._assert_usable(subtotal, now)

        if self.discount_type == DiscountType.PERCENTAGE.value:
            discount = subtotal * self.discount_value / 100
            if self.max_discount_amount:
                discount = min(discount, self.max_discount_amount)
        else:
            discount = min(self.discount_value, subtotal)
        return float(round(discount))

    def redeem(self):
        self.used_count = (self.used_count or 0) + 1
        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                used_count=self.used_count,
                redeemed_at=datetime.now(UTC),
            )
        )
