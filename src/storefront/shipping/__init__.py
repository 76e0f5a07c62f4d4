"""Carrier adapters — pluggable shipment booking.

``build_carrier`` is called once at the composition root; the resulting
adapter is injected into the order service rather than held globally.
"""

from storefront.config import Settings
from storefront.shipping.port import CarrierPort


def build_carrier(settings: Settings) -> CarrierPort:
    """Return the carrier adapter named by ``settings.carrier_adapter``."""
    if settings.carrier_adapter == "fake":
        from storefront.shipping.fake_adapter import FakeCarrier

        return FakeCarrier()
    if settings.carrier_adapter == "delhivery":
        from storefront.shipping.delhivery_adapter import DelhiveryCarrier

        return DelhiveryCarrier(
            api_url=settings.delhivery_api_url,
            api_key=settings.delhivery_api_key,
            client_name=settings.delhivery_client_name,
            pickup_location=settings.delhivery_pickup_location,
            timeout=settings.carrier_timeout_seconds,
        )
    raise ValueError(f"Unknown carrier adapter: {settings.carrier_adapter}")
