"""Delhivery carrier adapter — books parcels through the Delhivery CMU API."""

import math

import httpx
import structlog

from storefront.errors import IntegrationError
from storefront.shipping.port import CarrierPort, ShipmentRequest, ShipmentResult

logger = structlog.get_logger(__name__)


class DelhiveryCarrier(CarrierPort):
    name = "delhivery"

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        client_name: str,
        pickup_location: str,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.client_name = client_name
        self.pickup_location = pickup_location
        self.timeout = timeout
        self.transport = transport

    def _payload(self, request: ShipmentRequest) -> dict:
        customer = request.customer
        return {
            "shipments": [
                {
                    "name": customer.name,
                    "add": customer.address,
                    "pin": customer.pincode,
                    "city": customer.city,
                    "state": customer.state,
                    "country": customer.country or "India",
                    "phone": customer.phone,
                    "order": request.order_number,
                    "payment_mode": request.payment_mode.upper(),
                    "cod_amount": request.cod_amount if request.payment_mode == "cod" else 0,
                    "total_amount": request.invoice_value,
                    "weight": math.ceil(request.total_weight * 1000),  # grams
                    "seller_name": self.client_name,
                    "products_desc": ", ".join(f"{line.name} x{line.quantity}" for line in request.items),
                    "client": self.client_name,
                    "return_name": self.client_name,
                    "return_add": self.pickup_location,
                }
            ],
            "pickup_location": {"name": self.pickup_location},
        }

    def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        if not self.api_key:
            return ShipmentResult(success=False, error="Delhivery API key not configured")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{self.api_url}/cmu/create.json",
                    headers={"Authorization": f"Token {self.api_key}", "Content-Type": "application/json"},
                    json=self._payload(request),
                )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise IntegrationError(f"Delhivery request failed: {exc}") from exc
        data = response.json()

        packages = data.get("packages") or []
        waybill = packages[0].get("waybill") if packages else None
        if data.get("success") or waybill:
            return ShipmentResult(
                success=True,
                awb_number=waybill,
                reference=packages[0].get("refnum") if packages else None,
            )

        error = data.get("rmk") or data.get("error") or "Shipment creation failed"
        logger.warning("Delhivery rejected shipment", order_number=request.order_number, error=error)
        return ShipmentResult(success=False, error=error)
