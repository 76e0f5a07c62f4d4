"""Storefront HTTP API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    coupon_router,
    customer_router,
    delivery_router,
    order_router,
    product_router,
)

__all__ = [
    "order_router",
    "delivery_router",
    "product_router",
    "customer_router",
    "coupon_router",
    "register_error_handlers",
]
