"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A shopper account was created."""

    __version__ = 1

    customer_id = Identifier(required=True)
    email = String(required=True)
    name = String(required=True)
    affiliate_code = String()
    registered_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class LoyaltyPointsAwarded:
    """Points were credited to a customer's running balance."""

    __version__ = 1

    customer_id = Identifier(required=True)
    points = Integer(required=True)
    new_balance = Integer(required=True)
    order_number = String()
    awarded_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class LoyaltyTierChanged:
    """The running balance crossed a tier boundary."""

    __version__ = 1

    customer_id = Identifier(required=True)
    previous_tier = String(required=True)
    new_tier = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class AffiliateCommissionCredited:
    """A referred order earned the affiliate a commission."""

    __version__ = 1

    customer_id = Identifier(required=True)
    affiliate_code = String(required=True)
    amount = Float(required=True)
    order_number = String(required=True)
    credited_at = DateTime(required=True)
