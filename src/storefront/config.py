"""Runtime settings for the order core, read from environment variables.

Protean's own configuration (providers, brokers, event store) stays with the
framework defaults and is selected through PROTEAN_ENV; this module only holds
the business knobs and adapter selection.
"""

import os
from dataclasses import dataclass
from enum import Enum


class CancellationPolicy(Enum):
    """Which states a customer may cancel from."""

    OWNER = "owner"  # pending, confirmed
    TRANSITION_TABLE = "transition_table"  # anything that may move to cancelled


class PricePolicy(Enum):
    """How submitted unit prices are treated against the catalogue price."""

    TRUST = "trust"
    REJECT = "reject"
    REPRICE = "reprice"


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    free_shipping_threshold: float = 599.0
    flat_shipping_fee: float = 49.0
    loyalty_points_divisor: int = 10
    affiliate_commission_rate: float = 0.05
    currency: str = "INR"

    cancellation_policy: CancellationPolicy = CancellationPolicy.OWNER
    price_policy: PricePolicy = PricePolicy.TRUST
    price_tolerance: float = 0.01

    default_parcel_weight_kg: float = 0.5

    carrier_adapter: str = "fake"
    delhivery_api_url: str = "https://track.delhivery.com/api"
    delhivery_api_key: str | None = None
    delhivery_client_name: str = "STOREFRONT"
    delhivery_pickup_location: str = "STOREFRONT-WAREHOUSE"
    carrier_timeout_seconds: float = 15.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from STOREFRONT_* environment variables."""
        return cls(
            free_shipping_threshold=_env_float("STOREFRONT_FREE_SHIPPING_THRESHOLD", 599.0),
            flat_shipping_fee=_env_float("STOREFRONT_FLAT_SHIPPING_FEE", 49.0),
            loyalty_points_divisor=_env_int("STOREFRONT_LOYALTY_POINTS_DIVISOR", 10),
            affiliate_commission_rate=_env_float("STOREFRONT_AFFILIATE_COMMISSION_RATE", 0.05),
            currency=os.environ.get("STOREFRONT_CURRENCY", "INR"),
            cancellation_policy=CancellationPolicy(os.environ.get("STOREFRONT_CANCELLATION_POLICY", "owner")),
            price_policy=PricePolicy(os.environ.get("STOREFRONT_PRICE_POLICY", "trust")),
            price_tolerance=_env_float("STOREFRONT_PRICE_TOLERANCE", 0.01),
            default_parcel_weight_kg=_env_float("STOREFRONT_DEFAULT_PARCEL_WEIGHT_KG", 0.5),
            carrier_adapter=os.environ.get("CARRIER_ADAPTER", "fake"),
            delhivery_api_url=os.environ.get("DELHIVERY_API_URL", "https://track.delhivery.com/api"),
            delhivery_api_key=os.environ.get("DELHIVERY_API_KEY"),
            delhivery_client_name=os.environ.get("DELHIVERY_CLIENT_NAME", "STOREFRONT"),
            delhivery_pickup_location=os.environ.get("DELHIVERY_PICKUP_LOCATION", "STOREFRONT-WAREHOUSE"),
            carrier_timeout_seconds=_env_float("CARRIER_TIMEOUT_SECONDS", 15.0),
        )
