"""Tests for the Order state machine — every (current, requested) pair."""

import itertools

import pytest

from storefront.errors import StateTransitionError
from storefront.order.order import Order, OrderStatus, allowed_transitions

ALLOWED = {
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "processing"),
    ("confirmed", "cancelled"),
    ("processing", "shipped"),
    ("processing", "cancelled"),
    ("shipped", "delivered"),
}

# Path from pending to each state through legal transitions
_PATH = {
    "pending": [],
    "confirmed": ["confirmed"],
    "processing": ["confirmed", "processing"],
    "shipped": ["confirmed", "processing", "shipped"],
    "delivered": ["confirmed", "processing", "shipped", "delivered"],
    "cancelled": ["cancelled"],
}


def _order_at(status):
    order = Order.place(
        order_number="ORD-1-STATEMACH",
        customer_id="cust-001",
        items_data=[{"product_id": "prod-001", "name": "Tee", "quantity": 1, "unit_price": 100.0}],
        pricing={"subtotal": 100.0, "shipping": 49.0, "total": 149.0},
        shipping_address={
            "name": "A",
            "phone": "1",
            "address": "1 St",
            "city": "C",
            "state": "S",
            "pincode": "302001",
        },
        payment_method="upi",
    )
    for step in _PATH[status]:
        order.transition_to(step)
    order._events.clear()
    return order


ALL_PAIRS = list(itertools.product([s.value for s in OrderStatus], repeat=2))


@pytest.mark.parametrize("current,requested", [p for p in ALL_PAIRS if p in ALLOWED])
def test_allowed_transition_succeeds(current, requested):
    order = _order_at(current)
    order.transition_to(requested)
    assert order.status == requested


@pytest.mark.parametrize("current,requested", [p for p in ALL_PAIRS if p not in ALLOWED])
def test_disallowed_transition_fails(current, requested):
    order = _order_at(current)
    with pytest.raises(StateTransitionError) as exc_info:
        order.transition_to(requested)

    assert order.status == current
    assert exc_info.value.current == current
    assert exc_info.value.requested == requested
    assert exc_info.value.allowed == sorted(s.value for s in allowed_transitions(current))
    assert order._events == []


def test_delivered_to_cancelled_fails():
    order = _order_at("delivered")
    with pytest.raises(StateTransitionError):
        order.transition_to("cancelled")


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_terminal_states_allow_nothing(terminal):
    assert allowed_transitions(terminal) == set()


def test_shipped_cannot_be_cancelled():
    assert OrderStatus.CANCELLED not in allowed_transitions("shipped")


def test_unknown_status_is_a_validation_error():
    from protean.exceptions import ValidationError

    order = _order_at("pending")
    with pytest.raises(ValidationError) as exc_info:
        order.transition_to("teleported")
    assert "status" in exc_info.value.messages


def test_delivery_stamps_delivered_at():
    order = _order_at("shipped")
    order.transition_to("delivered")
    assert order.delivered_at is not None
    assert all(item.item_status == "delivered" for item in order.items)


def test_cancellation_stamps_cancelled_at():
    order = _order_at("processing")
    order.transition_to("cancelled")
    assert order.cancelled_at is not None


def test_transition_records_history_and_event():
    order = _order_at("confirmed")
    order.transition_to("processing", note="Packed")

    assert [change.status for change in order.status_history] == ["pending", "confirmed", "processing"]
    assert order.status_history[-1].note == "Packed"
    assert len(order._events) == 1
    event = order._events[0]
    assert event.__class__.__name__ == "OrderStatusChanged"
    assert event.previous_status == "confirmed"
    assert event.new_status == "processing"


def test_transition_can_carry_tracking_number():
    order = _order_at("processing")
    order.transition_to("shipped", tracking_number="AWB123")
    assert order.tracking_number == "AWB123"
