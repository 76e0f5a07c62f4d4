"""Customer registration, loyalty and affiliate credit — commands, handler, collaborator."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Customer")
class RegisterCustomer:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=150)
    phone = String(max_length=20)
    affiliate_code = String(max_length=50)


@storefront.command(part_of="Customer")
class AwardLoyaltyPoints:
    customer_id = Identifier(required=True)
    points = Integer(required=True, min_value=0)
    order_number = String(max_length=50)


@storefront.command(part_of="Customer")
class CreditAffiliateCommission:
    customer_id = Identifier(required=True)
    amount = Float(required=True)
    order_number = String(required=True, max_length=50)


@storefront.repository(part_of=Customer)
class CustomerRepository:
    def find_by_affiliate_code(self, code):
        matches = self._dao.query.filter(affiliate_code=code.upper()).all().items
        return matches[0] if matches else None


@storefront.command_handler(part_of=Customer)
class CustomerLoyaltyHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(
            email=command.email,
            name=command.name,
            phone=command.phone,
            affiliate_code=command.affiliate_code,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

    @handle(AwardLoyaltyPoints)
    def award_loyalty_points(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.add_loyalty_points(command.points, order_number=command.order_number)
        repo.add(customer)

    @handle(CreditAffiliateCommission)
    def credit_affiliate_commission(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.credit_affiliate_commission(command.amount, command.order_number)
        repo.add(customer)


class CustomerAccounts:
    """Customer collaborator handed to the order service."""

    def add_loyalty_points(self, customer_id, points, order_number=None):
        current_domain.process(
            AwardLoyaltyPoints(customer_id=customer_id, points=points, order_number=order_number),
            asynchronous=False,
        )

    def contact_for(self, customer_id):
        """Return ``(email, name)`` for a customer, or None if unknown."""
        try:
            customer = current_domain.repository_for(Customer).get(customer_id)
        except ObjectNotFoundError:
            return None
        return customer.email, customer.name

    def credit_affiliate(self, affiliate_code, amount, order_number):
        """Credit the customer owning ``affiliate_code``. Returns False if nobody owns it."""
        affiliate = current_domain.repository_for(Customer).find_by_affiliate_code(affiliate_code)
        if affiliate is None:
            logger.info("Unknown affiliate code", affiliate_code=affiliate_code, order_number=order_number)
            return False
        current_domain.process(
            CreditAffiliateCommission(
                customer_id=str(affiliate.id),
                amount=amount,
                order_number=order_number,
            ),
            asynchronous=False,
        )
        return True
