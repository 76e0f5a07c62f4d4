"""Order lookups beyond fetch-by-id."""

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number):
        matches = self._dao.query.filter(order_number=order_number).all().items
        return matches[0] if matches else None

    def find_for_customer(self, customer_id):
        """All orders placed by ``customer_id``, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return sorted(orders, key=lambda order: order.created_at, reverse=True)
