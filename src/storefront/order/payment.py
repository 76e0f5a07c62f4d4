"""Payment callbacks — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=30)
    payment_reference = String(max_length=255)


@storefront.command_handler(part_of=Order)
class PaymentStatusHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_payment_status(command.payment_status, payment_reference=command.payment_reference)
        repo.add(order)
