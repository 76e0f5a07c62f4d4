"""Coupon management — commands, handler and the coupon collaborator."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon
from storefront.domain import storefront


def normalize_code(code):
    return code.strip().upper()


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=20)
    description = String(max_length=500)
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(min_value=1)
    valid_from = DateTime()
    valid_to = DateTime()
    is_active = Boolean(default=True)


@storefront.command(part_of="Coupon")
class RedeemCoupon:
    coupon_id = Identifier(required=True)


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code):
        matches = self._dao.query.filter(code=normalize_code(code)).all().items
        return matches[0] if matches else None


@storefront.command_handler(part_of=Coupon)
class CouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        coupon = Coupon(
            code=normalize_code(command.code),
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            max_discount_amount=command.max_discount_amount,
            min_order_amount=command.min_order_amount,
            usage_limit=command.usage_limit,
            valid_from=command.valid_from,
            valid_to=command.valid_to,
            is_active=command.is_active,
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)

    @handle(RedeemCoupon)
    def redeem_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.redeem()
        repo.add(coupon)


class CouponBook:
    """Coupon collaborator handed to the order service."""

    def discount_for(self, code, subtotal):
        coupon = current_domain.repository_for(Coupon).find_by_code(code)
        if coupon is None:
            raise ValidationError({"coupon_code": ["Invalid coupon code"]})
        return max(0.0, min(coupon.discount_for(subtotal), subtotal))

    def redeem(self, code):
        coupon = current_domain.repository_for(Coupon).find_by_code(code)
        if coupon is None:
            raise ValidationError({"coupon_code": ["Invalid coupon code"]})
        current_domain.process(RedeemCoupon(coupon_id=str(coupon.id)), asynchronous=False)
