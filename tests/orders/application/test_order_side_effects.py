"""Application tests for the best-effort side effects of order placement."""

import pytest


@pytest.fixture()
def tee(make_product):
    return make_product(sku="TEE", price=300.0, stock=20)


def _place(order_service, customer_id, address, tee, **kwargs):
    return order_service.create_order(
        customer_id,
        [{"product_id": tee, "quantity": 2, "unit_price": 300.0, "size": "M"}],
        address,
        kwargs.pop("payment_method", "upi"),
        **kwargs,
    )


class TestConfirmationMail:
    def test_mail_goes_to_customer(self, order_service, mailbox, customer_id, address, tee):
        order = _place(order_service, customer_id, address, tee)

        inbox = mailbox.inbox("asha@example.com")
        assert len(inbox) == 1
        assert order.order_number in inbox[0]["subject"]
        assert "Cotton Tee x2" in inbox[0]["body"]
        assert "Total: INR 600.00" in inbox[0]["body"]

    def test_mail_failure_is_swallowed(self, order_service, mailbox, customer_id, address, tee):
        mailbox.configure(should_succeed=False)

        order = _place(order_service, customer_id, address, tee)

        assert order.status == "pending"
        assert mailbox.sent_emails == []


class TestShipmentBooking:
    def test_cod_order_books_shipment_and_stores_awb(self, order_service, carrier, customer_id, address, tee):
        order = _place(order_service, customer_id, address, tee, payment_method="cod")

        assert len(carrier.requests) == 1
        assert order.tracking_number.startswith("FAKE")
        assert order.carrier == "fake"
        assert order.status == "confirmed"

    def test_cod_request_carries_amount_and_mode(self, order_service, carrier, customer_id, address, tee):
        order = _place(order_service, customer_id, address, tee, payment_method="cod")

        request = carrier.requests[0]
        assert request.order_number == order.order_number
        assert request.payment_mode == "cod"
        assert request.cod_amount == 600.0
        assert request.invoice_value == 600.0
        assert request.total_weight == 0.5
        assert request.customer.pincode == "560001"
        assert [(line.name, line.quantity) for line in request.items] == [("Cotton Tee", 2)]

    def test_prepaid_order_books_prepaid_shipment(self, order_service, carrier, customer_id, address, tee):
        _place(order_service, customer_id, address, tee, payment_method="card", payment_status="paid")

        request = carrier.requests[0]
        assert request.payment_mode == "prepaid"
        assert request.cod_amount == 0.0

    def test_unpaid_order_does_not_ship(self, order_service, carrier, customer_id, address, tee):
        order = _place(order_service, customer_id, address, tee)

        assert carrier.requests == []
        assert order.tracking_number is None

    def test_carrier_rejection_is_swallowed(self, order_service, carrier, customer_id, address, tee):
        carrier.configure(should_succeed=False, failure_reason="Pincode not serviceable")

        order = _place(order_service, customer_id, address, tee, payment_method="cod")

        assert order.status == "confirmed"
        assert order.tracking_number is None

    def test_carrier_exception_is_swallowed(self, order_service, carrier, customer_id, address, tee):
        carrier.configure(raise_error=True)

        order = _place(order_service, customer_id, address, tee, payment_method="cod")

        assert order.status == "confirmed"
        assert order.tracking_number is None
