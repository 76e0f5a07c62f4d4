"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept apart from the Protean commands they feed.
"""

import json
from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str
    phone: str
    address: str
    landmark: str | None = None
    city: str
    state: str
    pincode: str
    country: str = "India"


class OrderItemSchema(BaseModel):
    product_id: str | None = None
    custom_product: dict | None = None
    name: str | None = None
    sku: str | None = None
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    size: str | None = None
    color: str | None = None
    customization: dict | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_id: str
    items: list[OrderItemSchema] = Field(min_length=1)
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str
    payment_status: str | None = None
    payment_reference: str | None = None
    coupon_code: str | None = None
    affiliate_code: str | None = None
    tax: float = Field(ge=0, default=0.0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "c6a1e1d4-4f0e-4a55-9e0e-8d7f1b2a3c4d",
                    "items": [
                        {
                            "product_id": "2f0b6c3e-1b7a-4c1d-9a5e-7e2b1f0d4c8a",
                            "quantity": 2,
                            "unit_price": 300.0,
                            "size": "M",
                        }
                    ],
                    "shipping_address": {
                        "name": "Asha Rao",
                        "phone": "9876543210",
                        "address": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                    },
                    "payment_method": "cod",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str
    note: str | None = None
    tracking_number: str | None = None


class CancelOrderRequest(BaseModel):
    user_id: str
    reason: str | None = None


class PaymentCallbackRequest(BaseModel):
    payment_status: str
    payment_reference: str | None = None


# ---------------------------------------------------------------------------
# Catalogue / Customer / Coupon Request Schemas
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    sku: str
    name: str
    price: float = Field(ge=0)
    initial_stock: int = Field(ge=0, default=0)
    low_stock_threshold: int = Field(ge=0, default=10)


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)


class RegisterCustomerRequest(BaseModel):
    email: str
    name: str
    phone: str | None = None
    affiliate_code: str | None = None


class CreateCouponRequest(BaseModel):
    code: str = Field(max_length=20)
    description: str | None = None
    discount_type: str
    discount_value: float = Field(ge=0)
    max_discount_amount: float | None = None
    min_order_amount: float = Field(ge=0, default=0.0)
    usage_limit: int | None = Field(ge=1, default=None)
    valid_from: datetime | None = None
    valid_to: datetime | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class IdResponse(BaseModel):
    id: str


class PricingSchema(BaseModel):
    subtotal: float
    shipping: float
    tax: float
    discount: float
    total: float
    currency: str


class OrderItemResponse(BaseModel):
    product_id: str | None
    custom_product: dict | None
    name: str
    quantity: int
    unit_price: float
    size: str | None
    color: str | None
    item_status: str


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    payment_status: str
    payment_method: str
    payment_reference: str | None
    pricing: PricingSchema
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    tracking_number: str | None
    carrier: str | None
    estimated_delivery: str | None
    coupon_code: str | None
    loyalty_points_earned: int
    cancellation_reason: str | None
    created_at: datetime | None
    delivered_at: datetime | None
    cancelled_at: datetime | None
    refunded_at: datetime | None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        pricing = order.pricing
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            pricing=PricingSchema(
                subtotal=pricing.subtotal,
                shipping=pricing.shipping,
                tax=pricing.tax,
                discount=pricing.discount,
                total=pricing.total,
                currency=pricing.currency,
            ),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id) if item.product_id else None,
                    custom_product=json.loads(item.custom_product) if item.custom_product else None,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    size=item.size,
                    color=item.color,
                    item_status=item.item_status,
                )
                for item in order.items
            ],
            shipping_address=AddressSchema(
                name=address.name,
                phone=address.phone,
                address=address.address,
                landmark=address.landmark,
                city=address.city,
                state=address.state,
                pincode=address.pincode,
                country=address.country or "India",
            ),
            tracking_number=order.tracking_number,
            carrier=order.carrier,
            estimated_delivery=order.estimated_delivery,
            coupon_code=order.coupon_code,
            loyalty_points_earned=order.loyalty_points_earned or 0,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            refunded_at=order.refunded_at,
        )


class DeliveryEstimateResponse(BaseModel):
    pincode: str
    days: int
    estimated_delivery: str
