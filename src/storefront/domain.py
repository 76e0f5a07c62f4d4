"""Storefront bounded context — orders, catalogue stock, loyalty and coupons.

A single Protean domain holds every aggregate the order core touches, so the
order workflow can coordinate stock, loyalty and coupon writes in-process.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
