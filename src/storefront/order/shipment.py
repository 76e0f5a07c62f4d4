"""Carrier bookings — recording the AWB returned by the carrier."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class AssignTrackingNumber:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)
    carrier = String(required=True, max_length=50)


@storefront.command_handler(part_of=Order)
class AssignTrackingNumberHandler:
    @handle(AssignTrackingNumber)
    def assign_tracking_number(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assign_tracking(command.tracking_number, command.carrier)
        repo.add(order)
