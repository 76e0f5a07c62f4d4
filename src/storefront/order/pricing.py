"""Checkout arithmetic: shipping fee, order totals, loyalty and affiliate credit."""

import math

from storefront.config import Settings


def shipping_fee(subtotal: float, settings: Settings) -> float:
    """Free at or above the threshold, flat fee below it."""
    return 0.0 if subtotal >= settings.free_shipping_threshold else settings.flat_shipping_fee


def calculate_pricing(items, settings: Settings, discount: float = 0.0, tax: float = 0.0) -> dict:
    """Price a list of ``{"unit_price", "quantity"}`` lines.

    The discount is clamped to ``[0, subtotal]``.
    """
    subtotal = round(sum(item["unit_price"] * item["quantity"] for item in items), 2)
    shipping = shipping_fee(subtotal, settings)
    discount = round(max(0.0, min(discount or 0.0, subtotal)), 2)
    tax = round(tax or 0.0, 2)
    return {
        "subtotal": subtotal,
        "shipping": shipping,
        "tax": tax,
        "discount": discount,
        "total": round(subtotal + shipping + tax - discount, 2),
        "currency": settings.currency,
    }


def loyalty_points_for(total: float, settings: Settings) -> int:
    return max(0, math.floor(total / settings.loyalty_points_divisor))


def affiliate_commission_for(total: float, settings: Settings) -> float:
    return round(total * settings.affiliate_commission_rate, 2)
