"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from storefront.customer.customer import Customer
from storefront.errors import AuthorizationError, StockError
from storefront.product.product import Product


@pytest.fixture()
def context():
    """Scenario state: registered products by SKU, the current order, captured errors."""
    return {"products": {}, "order": None, "error": None}


def _items(context, first_qty, first_sku, first_price, second_qty, second_sku, second_price):
    return [
        {"product_id": context["products"][first_sku], "quantity": first_qty, "unit_price": first_price},
        {"product_id": context["products"][second_sku], "quantity": second_qty, "unit_price": second_price},
    ]


_ORDER_LINES = '{first_qty:d} "{first_sku}" at {first_price:g} and {second_qty:d} "{second_sku}" at {second_price:g}'


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a customer "{email}"'))
def _(context, make_customer, email):
    context["customer_id"] = make_customer(email=email, name="BDD Customer")


@given(parsers.cfparse('a product "{sku}" priced {price:g} with {stock:d} in stock'))
def _(context, make_product, sku, price, stock):
    context["products"][sku] = make_product(sku=sku, name=sku.title(), price=price, stock=stock)


@given(parsers.cfparse("the customer has ordered " + _ORDER_LINES + ' paying by "{method}"'))
def _(context, order_service, address, first_qty, first_sku, first_price, second_qty, second_sku, second_price, method):
    items = _items(context, first_qty, first_sku, first_price, second_qty, second_sku, second_price)
    context["order"] = order_service.create_order(context["customer_id"], items, address, method)


@given(parsers.cfparse('the order has moved through "{statuses}"'))
def _(context, order_service, statuses):
    for status in statuses.split(","):
        context["order"] = order_service.update_status(context["order"].id, status.strip())


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the customer orders " + _ORDER_LINES + ' paying by "{method}"'))
def _(context, order_service, address, first_qty, first_sku, first_price, second_qty, second_sku, second_price, method):
    items = _items(context, first_qty, first_sku, first_price, second_qty, second_sku, second_price)
    context["order"] = order_service.create_order(context["customer_id"], items, address, method)


@when(parsers.cfparse("the customer tries to order " + _ORDER_LINES))
def _(context, order_service, address, first_qty, first_sku, first_price, second_qty, second_sku, second_price):
    items = _items(context, first_qty, first_sku, first_price, second_qty, second_sku, second_price)
    try:
        context["order"] = order_service.create_order(context["customer_id"], items, address, "upi")
    except ValidationError as exc:
        context["error"] = exc


@when("the customer cancels the order")
def _(context, order_service):
    context["order"] = order_service.cancel_order(context["order"].id, context["customer_id"])


@when("the customer tries to cancel the order")
def _(context, order_service):
    try:
        order_service.cancel_order(context["order"].id, context["customer_id"])
    except (ValidationError, AuthorizationError) as exc:
        context["error"] = exc
    context["order"] = order_service.get_order(context["order"].id)


@when(parsers.cfparse('the gateway reports the payment as "{payment_status}"'))
def _(context, order_service, payment_status):
    context["order"] = order_service.update_payment_status(context["order"].id, payment_status)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order subtotal is {amount:g}"))
def _(context, amount):
    assert context["order"].pricing.subtotal == amount


@then(parsers.cfparse("the order shipping is {amount:g}"))
def _(context, amount):
    assert context["order"].pricing.shipping == amount


@then(parsers.cfparse("the order total is {amount:g}"))
def _(context, amount):
    assert context["order"].pricing.total == amount


@then(parsers.cfparse('the order status is "{status}"'))
def _(context, status):
    assert context["order"].status == status


@then("the order has a tracking number")
def _(context):
    assert context["order"].tracking_number


@then("the order is rejected for insufficient stock")
def _(context):
    assert isinstance(context["error"], StockError)
    assert context["order"] is None


@then("the cancellation is refused")
def _(context):
    assert context["error"] is not None


@then(parsers.cfparse('"{sku}" has {stock:d} in stock'))
def _(context, sku, stock):
    assert current_domain.repository_for(Product).get(context["products"][sku]).stock == stock


@then(parsers.cfparse("the customer has {points:d} loyalty points"))
def _(context, points):
    assert current_domain.repository_for(Customer).get(context["customer_id"]).loyalty_points == points
