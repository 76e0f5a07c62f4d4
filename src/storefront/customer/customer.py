"""Customer aggregate — the shopper account that owns orders and loyalty points.

The loyalty balance is a plain counter, not a ledger: each order adds
``floor(total / 10)`` points and the tier is recomputed from the new balance.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from storefront.customer.events import (
    AffiliateCommissionCredited,
    CustomerRegistered,
    LoyaltyPointsAwarded,
    LoyaltyTierChanged,
)
from storefront.domain import storefront


class LoyaltyTier(Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


# Lower bound of each tier, highest first
_TIER_THRESHOLDS = [
    (10000, LoyaltyTier.PLATINUM),
    (5000, LoyaltyTier.GOLD),
    (1000, LoyaltyTier.SILVER),
    (0, LoyaltyTier.BRONZE),
]


def tier_for(points):
    for threshold, tier in _TIER_THRESHOLDS:
        if points >= threshold:
            return tier
    return LoyaltyTier.BRONZE


@storefront.aggregate
class Customer:
    email = String(required=True, max_length=254, unique=True)
    name = String(required=True, max_length=150)
    phone = String(max_length=20)
    loyalty_points = Integer(default=0, min_value=0)
    loyalty_tier = String(choices=LoyaltyTier, default=LoyaltyTier.BRONZE.value)
    affiliate_code = String(max_length=50)
    affiliate_earnings = Float(default=0.0)
    registered_at = DateTime()

    @classmethod
    def register(cls, email, name, phone=None, affiliate_code=None):
        now = datetime.now(UTC)
        customer = cls(
            email=email,
            name=name,
            phone=phone,
            affiliate_code=affiliate_code.upper() if affiliate_code else None,
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                email=email,
                name=name,
                affiliate_code=customer.affiliate_code,
                registered_at=now,
            )
        )
        return customer

    def add_loyalty_points(self, points, order_number=None):
        if points < 0:
            raise ValidationError({"points": ["Loyalty points cannot be negative"]})
        if points == 0:
            return

        now = datetime.now(UTC)
        self.loyalty_points = (self.loyalty_points or 0) + points
        self.raise_(
            LoyaltyPointsAwarded(
                customer_id=str(self.id),
                points=points,
                new_balance=self.loyalty_points,
                order_number=order_number,
                awarded_at=now,
            )
        )

        new_tier = tier_for(self.loyalty_points).value
        if new_tier != self.loyalty_tier:
            previous_tier = self.loyalty_tier
            self.loyalty_tier = new_tier
            self.raise_(
                LoyaltyTierChanged(
                    customer_id=str(self.id),
                    previous_tier=previous_tier,
                    new_tier=new_tier,
                    changed_at=now,
                )
            )

    def credit_affiliate_commission(self, amount, order_number):
        if not self.affiliate_code:
            raise ValidationError({"affiliate_code": ["Customer is not an affiliate"]})
        if amount <= 0:
            raise ValidationError({"amount": ["Commission must be positive"]})

        self.affiliate_earnings = (self.affiliate_earnings or 0.0) + amount
        self.raise_(
            AffiliateCommissionCredited(
                customer_id=str(self.id),
                affiliate_code=self.affiliate_code,
                amount=amount,
                order_number=order_number,
                credited_at=datetime.now(UTC),
            )
        )
