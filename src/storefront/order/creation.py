"""Order placement — command and handler.

The handler only builds and stores the aggregate. Stock, loyalty and the
best-effort side effects are coordinated by ``OrderService`` around it.
"""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    order_number = String(required=True, max_length=50)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict
    payment_method = String(required=True, max_length=50)
    payment_status = String(max_length=30)
    payment_reference = String(max_length=255)
    subtotal = Float(required=True)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(required=True)
    currency = String(max_length=3, default="INR")
    coupon_code = String(max_length=20)
    affiliate_code = String(max_length=50)
    affiliate_commission = Float(default=0.0)
    loyalty_points_earned = Integer(default=0)
    estimated_delivery = String(max_length=10)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            order_number=command.order_number,
            customer_id=command.customer_id,
            items_data=json.loads(command.items),
            pricing={
                "subtotal": command.subtotal,
                "shipping": command.shipping,
                "tax": command.tax,
                "discount": command.discount,
                "total": command.total,
                "currency": command.currency,
            },
            shipping_address=json.loads(command.shipping_address),
            billing_address=json.loads(command.billing_address) if command.billing_address else None,
            payment_method=command.payment_method,
            payment_status=command.payment_status,
            payment_reference=command.payment_reference,
            coupon_code=command.coupon_code,
            affiliate_code=command.affiliate_code,
            affiliate_commission=command.affiliate_commission,
            loyalty_points_earned=command.loyalty_points_earned,
            estimated_delivery=command.estimated_delivery,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
