"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; pricing is the checkout snapshot."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    status = String(required=True)
    payment_status = String(required=True)
    payment_method = String(required=True)
    subtotal = Float(required=True)
    shipping = Float(required=True)
    tax = Float(required=True)
    discount = Float(required=True)
    total = Float(required=True)
    currency = String(default="INR")
    coupon_code = String()
    affiliate_code = String()
    loyalty_points_earned = Integer(default=0)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    note = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled; stock for catalogue lines has been put back."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusUpdated:
    """A gateway callback reported a new payment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_payment_status = String(required=True)
    payment_status = String(required=True)
    payment_reference = String()
    updated_at = DateTime(required=True)


@storefront.event(part_of="Order")
class TrackingNumberAssigned:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    tracking_number = String(required=True)
    carrier = String(required=True)
    assigned_at = DateTime(required=True)
