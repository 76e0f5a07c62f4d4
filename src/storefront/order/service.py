"""Order service — coordinates stock, pricing, loyalty and side effects.

Each step is its own command and unit of work. Stock is checked for every
catalogue line before anything is written; the decrement that follows is
guarded by the product itself and released if a later line or the order
write fails. Confirmation mail, coupon redemption, affiliate credit and
shipment booking run after the order is stored and never undo it.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.config import PricePolicy, Settings
from storefront.errors import StockError
from storefront.order.cancellation import CancelOrder
from storefront.order.creation import PlaceOrder
from storefront.order.delivery import estimate_delivery
from storefront.order.numbering import generate_order_number
from storefront.order.order import (
    CASH_ON_DELIVERY,
    Order,
    OrderStatus,
    PaymentStatus,
    is_settled,
    parse_payment_status,
)
from storefront.order.payment import UpdatePaymentStatus
from storefront.order.pricing import affiliate_commission_for, calculate_pricing, loyalty_points_for
from storefront.order.shipment import AssignTrackingNumber
from storefront.order.transitions import UpdateOrderStatus
from storefront.shipping.port import ShipmentCustomer, ShipmentLine, ShipmentRequest

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(self, stock, customers, notifier, carrier, coupons, settings: Settings | None = None):
        self.stock = stock
        self.customers = customers
        self.notifier = notifier
        self.carrier = carrier
        self.coupons = coupons
        self.settings = settings or Settings()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id) -> Order:
        """Raises ``ObjectNotFoundError`` when the id does not resolve."""
        return current_domain.repository_for(Order).get(order_id)

    def get_by_order_number(self, order_number) -> Order:
        order = current_domain.repository_for(Order).find_by_order_number(order_number)
        if order is None:
            raise ObjectNotFoundError(f"Order with order number `{order_number}` does not exist.")
        return order

    def list_customer_orders(self, customer_id) -> list[Order]:
        return current_domain.repository_for(Order).find_for_customer(customer_id)

    def estimate_delivery(self, pincode, today=None):
        return estimate_delivery(pincode, today=today)

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create_order(
        self,
        customer_id,
        items,
        shipping_address,
        payment_method,
        billing_address=None,
        payment_status=None,
        payment_reference=None,
        coupon_code=None,
        affiliate_code=None,
        tax=0.0,
    ) -> Order:
        """Place an order and return it.

        Raises:
            ValidationError: missing input, unknown coupon or a price mismatch.
            StockError: a catalogue line asks for more than is on the shelf.
        """
        self._validate_input(customer_id, items, shipping_address, payment_method)
        if payment_status is not None:
            parse_payment_status(payment_status)

        lines = [self._prepare_line(item) for item in items]
        self._check_stock(lines)

        subtotal = sum(line["unit_price"] * line["quantity"] for line in lines)
        discount = self.coupons.discount_for(coupon_code, subtotal) if coupon_code else 0.0
        pricing = calculate_pricing(lines, self.settings, discount=discount, tax=tax)

        points = loyalty_points_for(pricing["total"], self.settings)
        commission = affiliate_commission_for(pricing["total"], self.settings) if affiliate_code else 0.0
        coupon_code = coupon_code.strip().upper() if coupon_code else None
        affiliate_code = affiliate_code.strip().upper() if affiliate_code else None
        checkout = dict(
            order_number=generate_order_number(),
            customer_id=customer_id,
            items_data=lines,
            pricing=pricing,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            payment_status=payment_status,
            payment_reference=payment_reference,
            coupon_code=coupon_code,
            affiliate_code=affiliate_code,
            affiliate_commission=commission,
            loyalty_points_earned=points,
            estimated_delivery=estimate_delivery(shipping_address.get("pincode")).isoformat(),
        )
        order_number = checkout["order_number"]

        # Addresses, lines and pricing are validated here, before any stock moves
        Order.place(**checkout)

        self._commit_stock(lines, order_number)
        try:
            order_id = current_domain.process(
                PlaceOrder(
                    order_number=order_number,
                    customer_id=customer_id,
                    items=json.dumps(lines),
                    shipping_address=json.dumps(shipping_address),
                    billing_address=json.dumps(billing_address) if billing_address else None,
                    payment_method=payment_method,
                    payment_status=payment_status,
                    payment_reference=payment_reference,
                    coupon_code=coupon_code,
                    affiliate_code=affiliate_code,
                    affiliate_commission=commission,
                    loyalty_points_earned=points,
                    estimated_delivery=checkout["estimated_delivery"],
                    **pricing,
                ),
                asynchronous=False,
            )
        except Exception:
            self._release_stock(lines, order_number)
            raise

        logger.info(
            "Order placed",
            order_id=order_id,
            order_number=order_number,
            customer_id=str(customer_id),
            total=pricing["total"],
        )

        if points:
            self._best_effort(
                "loyalty_credit",
                order_number,
                self.customers.add_loyalty_points,
                customer_id,
                points,
                order_number=order_number,
            )
        if coupon_code:
            self._best_effort("coupon_redemption", order_number, self.coupons.redeem, coupon_code)
        if affiliate_code and commission:
            self._best_effort(
                "affiliate_commission",
                order_number,
                self.customers.credit_affiliate,
                affiliate_code,
                commission,
                order_number,
            )

        order = self.get_order(order_id)
        self._best_effort("confirmation_mail", order_number, self._send_confirmation, order)
        if is_settled(order.payment_status, order.payment_method):
            self._best_effort("shipment_booking", order_number, self._book_shipment, order)

        return self.get_order(order_id)

    def _validate_input(self, customer_id, items, shipping_address, payment_method):
        errors = {}
        if not customer_id:
            errors["customer_id"] = ["Customer is required"]
        if not items:
            errors["items"] = ["An order needs at least one item"]
        if not shipping_address:
            errors["shipping_address"] = ["Shipping address is required"]
        if not payment_method:
            errors["payment_method"] = ["Payment method is required"]
        if errors:
            raise ValidationError(errors)

    def _prepare_line(self, item) -> dict:
        """Normalise one submitted item, applying the price policy to catalogue lines."""
        line = dict(item)
        quantity = line.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
        if line.get("unit_price") is None or line["unit_price"] < 0:
            raise ValidationError({"unit_price": ["Unit price must be zero or more"]})

        product_id = line.get("product_id")
        if not product_id:
            if not line.get("custom_product"):
                raise ValidationError({"items": ["Each item needs a product_id or a custom_product"]})
            line["name"] = line.get("name") or "Custom product"
            return line

        line["product_id"] = str(product_id)
        product = self.stock.get(product_id)
        if product is None:
            # Reported as out of stock by the stock check
            line["name"] = line.get("name") or line["product_id"]
            return line
        line["name"] = line.get("name") or product.name
        line["sku"] = line.get("sku") or product.sku

        policy = self.settings.price_policy
        if policy == PricePolicy.TRUST:
            return line
        current = self.stock.catalog_price(product_id)
        if policy == PricePolicy.REPRICE:
            line["unit_price"] = current
        elif abs(line["unit_price"] - current) > self.settings.price_tolerance:
            raise ValidationError(
                {"unit_price": [f"Price for {product.name} changed: submitted {line['unit_price']}, current {current}"]}
            )
        return line

    def _check_stock(self, lines):
        for line in lines:
            if not line.get("product_id"):
                continue
            result = self.stock.check_stock(line["product_id"], line["quantity"])
            if not result.available:
                raise StockError(
                    line["product_id"],
                    line["quantity"],
                    result.current_stock,
                    product_name=line.get("name"),
                )

    def _commit_stock(self, lines, order_number):
        """Decrement every catalogue line; undo the ones already taken if one fails."""
        committed = []
        for line in lines:
            if not line.get("product_id"):
                continue
            try:
                self.stock.update_stock_after_order(line["product_id"], line["quantity"])
            except Exception:
                logger.warning(
                    "Stock commit failed, releasing earlier lines",
                    order_number=order_number,
                    product_id=line["product_id"],
                )
                self._release_stock(committed, order_number)
                raise
            committed.append(line)

    def _release_stock(self, lines, order_number):
        for line in lines:
            if line.get("product_id"):
                self.stock.release(line["product_id"], line["quantity"])
        logger.info("Stock released", order_number=order_number, lines=len(lines))

    # -------------------------------------------------------------------
    # Status and cancellation
    # -------------------------------------------------------------------
    def update_status(self, order_id, new_status, note=None, tracking_number=None) -> Order:
        """Raises ``StateTransitionError`` unless the move is in the transition table."""
        self.get_order(order_id)
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, status=new_status, note=note, tracking_number=tracking_number),
            asynchronous=False,
        )
        order = self.get_order(order_id)
        logger.info("Order status updated", order_number=order.order_number, status=order.status)
        return order

    def cancel_order(self, order_id, user_id, reason=None) -> Order:
        """Owner cancellation: restock catalogue lines, then mark cancelled.

        Eligibility is checked before any stock moves. If the status write
        fails the restocked units are withdrawn again, so a refused or failed
        cancellation leaves both stock and status as they were.
        """
        policy = self.settings.cancellation_policy
        order = self.get_order(order_id)
        order.assert_cancellable_by(user_id, policy)

        restocked = []
        try:
            for item in order.catalogue_items:
                self.stock.restock(str(item.product_id), item.quantity)
                restocked.append(item)
            current_domain.process(
                CancelOrder(order_id=order_id, requested_by=user_id, reason=reason, policy=policy.value),
                asynchronous=False,
            )
        except Exception:
            logger.warning("Cancellation failed, withdrawing restocked units", order_number=order.order_number)
            for item in restocked:
                self.stock.withdraw(str(item.product_id), item.quantity)
            raise

        order = self.get_order(order_id)
        logger.info("Order cancelled", order_number=order.order_number, reason=reason)
        return order

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, order_id, payment_status, payment_reference=None) -> Order:
        before = self.get_order(order_id)
        was_paid = before.payment_status == PaymentStatus.PAID.value

        current_domain.process(
            UpdatePaymentStatus(
                order_id=order_id,
                payment_status=payment_status,
                payment_reference=payment_reference,
            ),
            asynchronous=False,
        )
        order = self.get_order(order_id)
        logger.info(
            "Payment status updated",
            order_number=order.order_number,
            payment_status=order.payment_status,
            status=order.status,
        )

        newly_paid = not was_paid and order.payment_status == PaymentStatus.PAID.value
        if newly_paid and not order.tracking_number and order.status != OrderStatus.CANCELLED.value:
            self._best_effort("shipment_booking", order.order_number, self._book_shipment, order)
            self._best_effort("confirmation_mail", order.order_number, self._send_confirmation, order)
            order = self.get_order(order_id)
        return order

    # -------------------------------------------------------------------
    # Side effects
    # -------------------------------------------------------------------
    def _best_effort(self, effect, order_number, func, /, *args, **kwargs):
        """Run a side effect; log and swallow any failure."""
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            logger.warning(
                "Order side effect failed",
                effect=effect,
                order_number=order_number,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

    def _send_confirmation(self, order):
        contact = self.customers.contact_for(order.customer_id)
        if contact is None:
            logger.info("No contact for confirmation mail", order_number=order.order_number)
            return None
        email, name = contact
        return self.notifier.send_order_confirmation(email, name, order)

    def _book_shipment(self, order):
        address = order.shipping_address
        cod = order.payment_method == CASH_ON_DELIVERY
        request = ShipmentRequest(
            order_id=str(order.id),
            order_number=order.order_number,
            customer=ShipmentCustomer(
                name=address.name,
                phone=address.phone,
                address=", ".join(part for part in (address.address, address.landmark) if part),
                city=address.city,
                state=address.state,
                pincode=address.pincode,
                country=address.country or "India",
            ),
            items=[
                ShipmentLine(name=item.name, sku=item.sku, quantity=item.quantity, price=item.unit_price)
                for item in order.items
            ],
            total_weight=self.settings.default_parcel_weight_kg,
            payment_mode="cod" if cod else "prepaid",
            cod_amount=order.pricing.total if cod else 0.0,
            invoice_value=order.pricing.total,
        )
        result = self.carrier.create_shipment(request)
        if not result.success:
            logger.warning("Shipment booking rejected", order_number=order.order_number, error=result.error)
            return None

        if result.awb_number:
            current_domain.process(
                AssignTrackingNumber(
                    order_id=str(order.id),
                    tracking_number=result.awb_number,
                    carrier=self.carrier.name,
                ),
                asynchronous=False,
            )
        logger.info("Shipment booked", order_number=order.order_number, awb_number=result.awb_number)
        return result
