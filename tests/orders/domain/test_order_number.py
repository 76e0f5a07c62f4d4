"""Tests for order number generation."""

import re

from storefront.order.numbering import generate_order_number

PATTERN = re.compile(r"^ORD-\d+-[0-9A-Z]{9}$")


def test_format():
    assert PATTERN.match(generate_order_number())


def test_embeds_timestamp():
    assert generate_order_number(now_millis=1700000000000).startswith("ORD-1700000000000-")


def test_numbers_are_unique():
    numbers = {generate_order_number(now_millis=1700000000000) for _ in range(500)}
    assert len(numbers) == 500
