"""Application tests for administrative status updates."""

import pytest
from protean.exceptions import ObjectNotFoundError

from storefront.errors import StateTransitionError


@pytest.fixture()
def order(order_service, make_product, customer_id, address):
    tee = make_product()
    return order_service.create_order(customer_id, [{"product_id": tee, "quantity": 1, "unit_price": 300.0}], address, "upi")


def test_walks_the_happy_path(order_service, order):
    for status in ("confirmed", "processing", "shipped", "delivered"):
        order = order_service.update_status(order.id, status)
    assert order.status == "delivered"
    assert order.delivered_at is not None


def test_illegal_transition_is_refused_and_nothing_changes(order_service, order):
    with pytest.raises(StateTransitionError) as exc_info:
        order_service.update_status(order.id, "shipped")

    assert exc_info.value.allowed == ["cancelled", "confirmed"]
    assert order_service.get_order(order.id).status == "pending"


def test_tracking_number_can_accompany_shipping(order_service, order):
    order_service.update_status(order.id, "confirmed")
    order_service.update_status(order.id, "processing")
    shipped = order_service.update_status(order.id, "shipped", tracking_number="AWB42", note="Handed to courier")

    assert shipped.tracking_number == "AWB42"
    assert shipped.status_history[-1].note == "Handed to courier"


def test_unknown_order(order_service):
    with pytest.raises(ObjectNotFoundError):
        order_service.update_status("missing-order", "confirmed")
