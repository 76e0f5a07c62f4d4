"""Customer cancellation — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.config import CancellationPolicy
from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    reason = String(max_length=500)
    policy = String(max_length=30, default=CancellationPolicy.OWNER.value)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(
            requested_by=command.requested_by,
            reason=command.reason,
            policy=CancellationPolicy(command.policy),
        )
        repo.add(order)
