"""Order notifier — renders order mail and hands it to the email port."""

import structlog

from storefront.errors import IntegrationError
from storefront.notification.email_port import EmailPort
from storefront.notification.templates import OrderConfirmationTemplate

logger = structlog.get_logger(__name__)


class OrderNotifier:
    def __init__(self, email: EmailPort):
        self.email = email

    def send_order_confirmation(self, email: str, name: str | None, order) -> str:
        """Mail the confirmation for ``order``. Returns the message id.

        Raises:
            IntegrationError: the email channel reported a failure.
        """
        pricing = order.pricing
        content = OrderConfirmationTemplate.render(
            {
                "order_number": order.order_number,
                "customer_name": name,
                "currency": pricing.currency,
                "items": [
                    {"name": item.name, "quantity": item.quantity, "unit_price": item.unit_price}
                    for item in order.items
                ],
                "subtotal": pricing.subtotal,
                "shipping": pricing.shipping,
                "discount": pricing.discount,
                "total": pricing.total,
                "estimated_delivery": order.estimated_delivery,
            }
        )
        receipt = self.email.send(to=email, subject=content["subject"], body=content["body"])
        if not receipt.delivered:
            raise IntegrationError(f"Order confirmation failed: {receipt.error or 'unknown error'}")

        logger.info("Order confirmation sent", order_number=order.order_number, message_id=receipt.message_id)
        return receipt.message_id
