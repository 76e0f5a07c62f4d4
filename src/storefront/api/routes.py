"""FastAPI routes for the storefront — orders, delivery estimates and the
catalogue, customer and coupon maintenance endpoints."""

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    CancelOrderRequest,
    CreateCouponRequest,
    CreateOrderRequest,
    DeliveryEstimateResponse,
    IdResponse,
    OrderResponse,
    PaymentCallbackRequest,
    RegisterCustomerRequest,
    RegisterProductRequest,
    RestockRequest,
    UpdateStatusRequest,
)
from storefront.coupon.management import CreateCoupon
from storefront.customer.customer import Customer
from storefront.customer.loyalty import RegisterCustomer
from storefront.order.delivery import delivery_days
from storefront.order.service import OrderService
from storefront.product.product import Product
from storefront.product.stock import RegisterProduct, RestockProduct


def get_order_service(request: Request) -> OrderService:
    """The service instance built by the application factory."""
    return request.app.state.order_service


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, service: OrderService = Depends(get_order_service)):
    order = service.create_order(
        customer_id=body.customer_id,
        items=[item.model_dump() for item in body.items],
        shipping_address=body.shipping_address.model_dump(),
        billing_address=body.billing_address.model_dump() if body.billing_address else None,
        payment_method=body.payment_method,
        payment_status=body.payment_status,
        payment_reference=body.payment_reference,
        coupon_code=body.coupon_code,
        affiliate_code=body.affiliate_code,
        tax=body.tax,
    )
    return OrderResponse.from_order(order)


@order_router.get("/number/{order_number}", response_model=OrderResponse)
async def get_order_by_number(order_number: str, service: OrderService = Depends(get_order_service)):
    return OrderResponse.from_order(service.get_by_order_number(order_number))


@order_router.get("/customer/{customer_id}", response_model=list[OrderResponse])
async def list_customer_orders(customer_id: str, service: OrderService = Depends(get_order_service)):
    return [OrderResponse.from_order(order) for order in service.list_customer_orders(customer_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return OrderResponse.from_order(service.get_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateStatusRequest, service: OrderService = Depends(get_order_service)
):
    order = service.update_status(order_id, body.status, note=body.note, tracking_number=body.tracking_number)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest, service: OrderService = Depends(get_order_service)):
    order = service.cancel_order(order_id, body.user_id, reason=body.reason)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/payment", response_model=OrderResponse)
async def payment_callback(
    order_id: str, body: PaymentCallbackRequest, service: OrderService = Depends(get_order_service)
):
    """Gateway callback: record the payment status, confirming a pending order when paid."""
    order = service.update_payment_status(order_id, body.payment_status, payment_reference=body.payment_reference)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/delivery", tags=["delivery"])


@delivery_router.get("/estimate/{pincode}", response_model=DeliveryEstimateResponse)
async def delivery_estimate(pincode: str, service: OrderService = Depends(get_order_service)):
    return DeliveryEstimateResponse(
        pincode=pincode,
        days=delivery_days(pincode),
        estimated_delivery=service.estimate_delivery(pincode).isoformat(),
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=IdResponse)
async def register_product(body: RegisterProductRequest) -> IdResponse:
    command = RegisterProduct(
        sku=body.sku,
        name=body.name,
        price=body.price,
        initial_stock=body.initial_stock,
        low_stock_threshold=body.low_stock_threshold,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@product_router.post("/{product_id}/restock", status_code=204)
async def restock_product(product_id: str, body: RestockRequest):
    current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    product = current_domain.repository_for(Product).get(product_id)
    return {
        "id": str(product.id),
        "sku": product.sku,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
        "sold": product.sold,
        "is_active": product.is_active,
    }


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=IdResponse)
async def register_customer(body: RegisterCustomerRequest) -> IdResponse:
    command = RegisterCustomer(
        email=body.email,
        name=body.name,
        phone=body.phone,
        affiliate_code=body.affiliate_code,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@customer_router.get("/{customer_id}/loyalty")
async def get_loyalty(customer_id: str) -> dict:
    customer = current_domain.repository_for(Customer).get(customer_id)
    return {
        "customer_id": str(customer.id),
        "loyalty_points": customer.loyalty_points,
        "loyalty_tier": customer.loyalty_tier,
        "affiliate_earnings": customer.affiliate_earnings,
    }


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.post("", status_code=201, response_model=IdResponse)
async def create_coupon(body: CreateCouponRequest) -> IdResponse:
    command = CreateCoupon(
        code=body.code,
        description=body.description,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        max_discount_amount=body.max_discount_amount,
        min_order_amount=body.min_order_amount,
        usage_limit=body.usage_limit,
        valid_from=body.valid_from,
        valid_to=body.valid_to,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)
