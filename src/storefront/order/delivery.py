"""Delivery estimate from a postal code.

A coarse heuristic, not a carrier quote: metro pincodes arrive in 3 days,
remote regions (leading 7 or 8) in 7, everything else in 5. The metro check
wins, so Kolkata (70xxxx) is 3 days.
"""

from datetime import date, timedelta

METRO_PREFIXES = frozenset(code[:2] for code in ("110001", "400001", "560001", "600001", "700001", "500001"))
REMOTE_LEADING_DIGITS = ("7", "8")

METRO_DAYS = 3
REMOTE_DAYS = 7
DEFAULT_DAYS = 5


def delivery_days(pincode: str) -> int:
    pincode = (pincode or "").strip()
    if pincode[:2] in METRO_PREFIXES:
        return METRO_DAYS
    if pincode.startswith(REMOTE_LEADING_DIGITS):
        return REMOTE_DAYS
    return DEFAULT_DAYS


def estimate_delivery(pincode: str, today: date | None = None) -> date:
    today = today or date.today()
    return today + timedelta(days=delivery_days(pincode))
