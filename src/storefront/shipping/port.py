"""Carrier port — abstract interface for shipment booking.

The order service programs against this port; adapters are swapped through
configuration at the composition root.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShipmentCustomer:
    name: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    country: str = "India"


@dataclass(frozen=True)
class ShipmentLine:
    name: str
    sku: str
    quantity: int
    price: float


@dataclass(frozen=True)
class ShipmentRequest:
    """Everything a carrier needs to book a parcel for one order."""

    order_id: str
    order_number: str
    customer: ShipmentCustomer
    items: list[ShipmentLine] = field(default_factory=list)
    total_weight: float = 0.5  # kg
    payment_mode: str = "prepaid"  # "cod" | "prepaid"
    cod_amount: float = 0.0
    invoice_value: float = 0.0


@dataclass(frozen=True)
class ShipmentResult:
    success: bool
    awb_number: str | None = None
    reference: str | None = None
    error: str | None = None


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    name: str = "carrier"

    @abstractmethod
    def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        """Book a shipment. Returns the carrier's AWB number on success."""
        ...
