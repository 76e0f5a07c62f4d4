"""Composition root — wires the order service to its collaborators.

Called once at process start (and by tests); the returned service is passed
to request handlers instead of living in a module global.
"""

import structlog

from storefront.config import Settings
from storefront.coupon.management import CouponBook
from storefront.customer.loyalty import CustomerAccounts
from storefront.notification.email_port import EmailPort
from storefront.notification.fake_email import FakeEmailAdapter
from storefront.notification.notifier import OrderNotifier
from storefront.order.service import OrderService
from storefront.product.stock import CatalogueStock
from storefront.shipping import build_carrier
from storefront.shipping.port import CarrierPort

logger = structlog.get_logger(__name__)


def build_order_service(
    settings: Settings | None = None,
    email: EmailPort | None = None,
    carrier: CarrierPort | None = None,
) -> OrderService:
    settings = settings or Settings.from_env()
    carrier = carrier or build_carrier(settings)
    service = OrderService(
        stock=CatalogueStock(),
        customers=CustomerAccounts(),
        notifier=OrderNotifier(email or FakeEmailAdapter()),
        carrier=carrier,
        coupons=CouponBook(),
        settings=settings,
    )
    logger.info(
        "Order service ready",
        carrier=carrier.name,
        cancellation_policy=settings.cancellation_policy.value,
        price_policy=settings.price_policy.value,
    )
    return service
