"""Order aggregate — the checkout snapshot and its status lifecycle.

State Machine (6 states):
    pending → confirmed → processing → shipped → delivered
    cancelled (from pending, confirmed, processing)

``delivered`` and ``cancelled`` are terminal. Pricing is captured once at
placement and never recomputed; line prices are snapshots of what the
customer was charged, independent of later catalogue changes.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.config import CancellationPolicy
from storefront.domain import storefront
from storefront.errors import AuthorizationError, StateTransitionError
from storefront.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusUpdated,
    TrackingNumberAssigned,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class ItemStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Gateways report a settled capture as "completed"
_PAYMENT_STATUS_ALIASES = {"completed": PaymentStatus.PAID}

CASH_ON_DELIVERY = "cod"

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_OWNER_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def parse_order_status(value) -> OrderStatus:
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value}"]}) from None


def parse_payment_status(value) -> PaymentStatus:
    normalized = str(value).strip().lower()
    if normalized in _PAYMENT_STATUS_ALIASES:
        return _PAYMENT_STATUS_ALIASES[normalized]
    try:
        return PaymentStatus(normalized)
    except ValueError:
        raise ValidationError({"payment_status": [f"Unknown payment status: {value}"]}) from None


def allowed_transitions(status) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS[parse_order_status(status)])


def cancellable_states(policy: CancellationPolicy) -> set[OrderStatus]:
    """States a customer may cancel from under ``policy``."""
    if policy == CancellationPolicy.TRANSITION_TABLE:
        return {state for state, targets in _VALID_TRANSITIONS.items() if OrderStatus.CANCELLED in targets}
    return set(_OWNER_CANCELLABLE_STATES)


def is_settled(payment_status, payment_method) -> bool:
    """Paid up front or cash on delivery; either way the order can ship."""
    if str(payment_method or "").strip().lower() == CASH_ON_DELIVERY:
        return True
    return payment_status is not None and parse_payment_status(payment_status) == PaymentStatus.PAID


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, frozen at checkout."""

    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    address = String(required=True, max_length=500)
    landmark = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=10)
    country = String(max_length=100, default="India")


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Monetary breakdown of an order at checkout.

    ``total`` is always ``subtotal + shipping + tax - discount``.
    """

    subtotal = Float(required=True, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(required=True)
    currency = String(max_length=3, default="INR")

    @invariant.post
    def total_matches_breakdown(self):
        expected = self.subtotal + (self.shipping or 0.0) + (self.tax or 0.0) - (self.discount or 0.0)
        if abs(self.total - expected) > 0.005:
            raise ValidationError({"total": [f"Total {self.total} does not equal breakdown {expected:.2f}"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if (self.discount or 0.0) > self.subtotal:
            raise ValidationError({"discount": ["Discount cannot exceed subtotal"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line. Either references a catalogue product or carries a
    custom-product descriptor (JSON) instead."""

    product_id = Identifier()
    custom_product = Text()  # JSON
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    size = String(max_length=50)
    color = String(max_length=50)
    customization = Text()  # JSON
    item_status = String(choices=ItemStatus, default=ItemStatus.PENDING.value)

    @property
    def is_catalogue_item(self):
        return self.product_id is not None

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@storefront.entity(part_of="Order")
class StatusChange:
    status = String(required=True, max_length=20)
    note = String(max_length=500)
    changed_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, max_length=50)
    payment_reference = String(max_length=255)
    shipping_address = ValueObject(ShippingAddress)
    billing_address = ValueObject(ShippingAddress)
    tracking_number = String(max_length=100)
    carrier = String(max_length=50)
    estimated_delivery = String(max_length=10)  # ISO date string
    coupon_code = String(max_length=20)
    affiliate_code = String(max_length=50)
    affiliate_commission = Float(default=0.0)
    loyalty_points_earned = Integer(default=0)
    cancellation_reason = String(max_length=500)
    cancelled_by = String(max_length=50)
    status_history = HasMany(StatusChange)
    created_at = DateTime()
    updated_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    refunded_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        items_data,
        pricing,
        shipping_address,
        payment_method,
        billing_address=None,
        payment_status=None,
        payment_reference=None,
        coupon_code=None,
        affiliate_code=None,
        affiliate_commission=0.0,
        loyalty_points_earned=0,
        estimated_delivery=None,
    ):
        """Create an order from checkout data.

        Args:
            items_data: List of dicts with name, quantity, unit_price and either
                product_id or custom_product; size, color, sku and
                customization are optional.
            pricing: Dict with subtotal, shipping, tax, discount, total, currency.
            shipping_address: Dict matching ``ShippingAddress``.
            billing_address: Defaults to the shipping address.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})
        if not shipping_address:
            raise ValidationError({"shipping_address": ["Shipping address is required"]})
        if not payment_method:
            raise ValidationError({"payment_method": ["Payment method is required"]})

        payment = parse_payment_status(payment_status or PaymentStatus.PENDING.value)
        status = OrderStatus.CONFIRMED if is_settled(payment.value, payment_method) else OrderStatus.PENDING
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            pricing=OrderPricing(**pricing),
            status=status.value,
            payment_status=payment.value,
            payment_method=payment_method.strip().lower(),
            payment_reference=payment_reference,
            shipping_address=ShippingAddress(**shipping_address),
            billing_address=ShippingAddress(**(billing_address or shipping_address)),
            estimated_delivery=estimated_delivery,
            coupon_code=coupon_code,
            affiliate_code=affiliate_code,
            affiliate_commission=affiliate_commission,
            loyalty_points_earned=loyalty_points_earned,
            created_at=now,
            updated_at=now,
        )
        for data in items_data:
            if not data.get("product_id") and not data.get("custom_product"):
                raise ValidationError({"items": ["Each item needs a product_id or a custom_product"]})
            order.add_items(
                OrderItem(
                    product_id=data.get("product_id"),
                    custom_product=_as_json(data.get("custom_product")),
                    name=data["name"],
                    sku=data.get("sku"),
                    quantity=data["quantity"],
                    unit_price=data["unit_price"],
                    size=data.get("size"),
                    color=data.get("color"),
                    customization=_as_json(data.get("customization")),
                )
            )
        order.add_status_history(StatusChange(status=status.value, note="Order placed", changed_at=now))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id) if item.product_id else None,
                            "name": item.name,
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                        }
                        for item in order.items
                    ]
                ),
                status=order.status,
                payment_status=order.payment_status,
                payment_method=order.payment_method,
                subtotal=order.pricing.subtotal,
                shipping=order.pricing.shipping,
                tax=order.pricing.tax,
                discount=order.pricing.discount,
                total=order.pricing.total,
                currency=order.pricing.currency,
                coupon_code=coupon_code,
                affiliate_code=affiliate_code,
                loyalty_points_earned=loyalty_points_earned,
                placed_at=now,
            )
        )
        return order

    @property
    def catalogue_items(self):
        return [item for item in self.items if item.is_catalogue_item]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, new_status, note=None, tracking_number=None):
        """Move to ``new_status`` if the state machine allows it.

        Raises:
            StateTransitionError: the pair is not in the transition table.
        """
        target = parse_order_status(new_status)
        current = OrderStatus(self.status)
        allowed = _VALID_TRANSITIONS[current]
        if target not in allowed:
            raise StateTransitionError(current.value, target.value, [s.value for s in allowed])

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
            for item in self.items:
                item.item_status = ItemStatus.DELIVERED.value
        elif target == OrderStatus.SHIPPED:
            for item in self.items:
                item.item_status = ItemStatus.SHIPPED.value
        elif target == OrderStatus.CANCELLED:
            self.cancelled_at = now
            for item in self.items:
                item.item_status = ItemStatus.CANCELLED.value
        if tracking_number:
            self.tracking_number = tracking_number

        self.add_status_history(StatusChange(status=target.value, note=note, changed_at=now))
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                tracking_number=tracking_number,
                note=note,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def assert_cancellable_by(self, user_id, policy=CancellationPolicy.OWNER):
        """Check ownership and eligibility without changing anything."""
        if str(self.customer_id) != str(user_id):
            raise AuthorizationError(f"Order {self.order_number} does not belong to {user_id}")

        current = OrderStatus(self.status)
        if current not in cancellable_states(policy):
            raise StateTransitionError(
                current.value,
                OrderStatus.CANCELLED.value,
                [s.value for s in _VALID_TRANSITIONS[current]],
                message=f"Order cannot be cancelled in {current.value} status",
            )

    def cancel(self, requested_by, reason=None, policy=CancellationPolicy.OWNER):
        self.assert_cancellable_by(requested_by, policy)

        previous = self.status
        self.transition_to(OrderStatus.CANCELLED.value, note=reason)
        self.cancellation_reason = reason
        self.cancelled_by = str(requested_by)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                reason=reason,
                cancelled_by=str(requested_by),
                cancelled_at=self.cancelled_at,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, payment_status, payment_reference=None):
        """Record a gateway callback.

        ``paid`` on a pending order confirms it; any other combination leaves
        the order status alone, so repeated or late callbacks never regress it.
        """
        new_status = parse_payment_status(payment_status)
        previous = self.payment_status
        now = datetime.now(UTC)

        self.payment_status = new_status.value
        if payment_reference:
            self.payment_reference = payment_reference
        if new_status == PaymentStatus.REFUNDED and self.refunded_at is None:
            self.refunded_at = now
        self.updated_at = now

        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_payment_status=previous,
                payment_status=new_status.value,
                payment_reference=payment_reference,
                updated_at=now,
            )
        )

        if new_status == PaymentStatus.PAID and OrderStatus(self.status) == OrderStatus.PENDING:
            self.transition_to(OrderStatus.CONFIRMED.value, note="Payment confirmed")

    # -------------------------------------------------------------------
    # Shipment
    # -------------------------------------------------------------------
    def assign_tracking(self, tracking_number, carrier):
        if not tracking_number:
            raise ValidationError({"tracking_number": ["Tracking number is required"]})

        now = datetime.now(UTC)
        self.tracking_number = tracking_number
        self.carrier = carrier
        self.updated_at = now

        self.raise_(
            TrackingNumberAssigned(
                order_id=str(self.id),
                order_number=self.order_number,
                tracking_number=tracking_number,
                carrier=carrier,
                assigned_at=now,
            )
        )


def _as_json(value):
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)
