"""Application tests for product, customer and coupon maintenance commands."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.coupon.management import CouponBook, CreateCoupon
from storefront.customer.loyalty import CustomerAccounts
from storefront.product.product import Product
from storefront.product.stock import CatalogueStock, ReleaseStock, RestockProduct


class TestProducts:
    def test_register_and_restock(self, make_product):
        product_id = make_product(stock=2)
        current_domain.process(RestockProduct(product_id=product_id, quantity=8), asynchronous=False)
        assert current_domain.repository_for(Product).get(product_id).stock == 10

    def test_stock_collaborator(self, make_product):
        product_id = make_product(stock=3, price=199.0)
        stock = CatalogueStock()

        assert stock.check_stock(product_id, 3).available is True
        assert stock.check_stock(product_id, 4).available is False
        assert stock.catalog_price(product_id) == 199.0

        updated = stock.update_stock_after_order(product_id, 2)
        assert (updated.stock, updated.sold) == (1, 2)
        assert stock.restock(product_id, 2).stock == 3

    def test_release_reverses_an_order_commit(self, make_product):
        product_id = make_product(stock=5)
        stock = CatalogueStock()
        stock.update_stock_after_order(product_id, 2)

        current_domain.process(ReleaseStock(product_id=product_id, quantity=2), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert (product.stock, product.sold) == (5, 0)

    def test_withdraw_reverses_a_restock(self, make_product):
        product_id = make_product(stock=5)
        stock = CatalogueStock()
        stock.restock(product_id, 3)

        updated = stock.withdraw(product_id, 3)
        assert (updated.stock, updated.sold) == (5, 0)

    def test_stock_collaborator_on_unknown_product(self):
        stock = CatalogueStock()
        result = stock.check_stock("nope", 1)
        assert (result.available, result.current_stock) == (False, 0)
        assert stock.update_stock_after_order("nope", 1) is None
        assert stock.restock("nope", 1) is None
        assert stock.release("nope", 1) is None
        assert stock.withdraw("nope", 1) is None
        assert stock.catalog_price("nope") is None


class TestCustomers:
    def test_contact_lookup(self, customer_id):
        assert CustomerAccounts().contact_for(customer_id) == ("asha@example.com", "Asha Rao")
        assert CustomerAccounts().contact_for("nobody") is None

    def test_credit_unknown_affiliate(self):
        assert CustomerAccounts().credit_affiliate("NOBODY", 10.0, "ORD-1") is False


class TestCoupons:
    def test_code_is_normalised(self):
        current_domain.process(
            CreateCoupon(code=" diwali ", discount_type="fixed", discount_value=100.0), asynchronous=False
        )
        assert CouponBook().discount_for("DIWALI", 500.0) == 100.0

    def test_unknown_code(self):
        with pytest.raises(ValidationError):
            CouponBook().discount_for("NOPE", 500.0)

    def test_redeem_unknown_code(self):
        with pytest.raises(ValidationError):
            CouponBook().redeem("NOPE")
