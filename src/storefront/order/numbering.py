"""Human-facing order numbers: ``ORD-<epoch millis>-<9 base-36 chars>``."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number(now_millis: int | None = None) -> str:
    millis = now_millis if now_millis is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"ORD-{millis}-{suffix}"
