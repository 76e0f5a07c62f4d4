"""Fake carrier adapter — deterministic carrier for testing and development."""

from uuid import uuid4

from storefront.shipping.port import CarrierPort, ShipmentRequest, ShipmentResult


class FakeCarrier(CarrierPort):
    """Carrier that books every shipment by default and remembers the requests."""

    name = "fake"

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.raise_error = False
        self.requests: list[ShipmentRequest] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable", raise_error=False):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        self.requests.append(request)
        if self.raise_error:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return ShipmentResult(success=False, error=self.failure_reason)

        return ShipmentResult(
            success=True,
            awb_number=f"FAKE{uuid4().hex[:12].upper()}",
            reference=request.order_number,
        )

    def reset(self):
        self.requests.clear()
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.raise_error = False
