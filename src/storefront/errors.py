"""Order-core exceptions layered on top of Protean's exception types.

Input and business-rule failures subclass Protean's ``ValidationError`` so the
framework's handlers (and callers catching ``ValidationError``) treat them as
client errors. Authorization and integration failures are separate families.
"""

from protean.exceptions import ValidationError


class StockError(ValidationError):
    """Requested quantity exceeds the available stock of a catalogue product."""

    def __init__(self, product_id, requested, available, product_name=None):
        label = product_name or product_id
        super().__init__({"stock": [f"Insufficient stock for {label}. Requested: {requested}, available: {available}"]})
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StateTransitionError(ValidationError):
    """The order cannot move from its current status to the requested one."""

    def __init__(self, current, requested, allowed, message=None):
        allowed = sorted(allowed)
        message = message or f"Cannot transition from {current} to {requested}"
        super().__init__({"status": [message]})
        self.current = current
        self.requested = requested
        self.allowed = allowed


class AuthorizationError(Exception):
    """The caller does not own the resource it is trying to change."""


class IntegrationError(Exception):
    """A downstream collaborator (mail, carrier) failed."""
