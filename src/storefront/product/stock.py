"""Catalogue stock — commands, handler and the stock collaborator used by orders."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product, StockCheck


@storefront.command(part_of="Product")
class RegisterProduct:
    sku = String(required=True, max_length=50)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    initial_stock = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=10, min_value=0)


@storefront.command(part_of="Product")
class CommitStock:
    """Decrement stock and increment sold after an order is placed."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class ReleaseStock:
    """Return units taken by ``CommitStock`` for an order that was never stored."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class WithdrawStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class ProductStockHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            sku=command.sku,
            name=command.name,
            price=command.price,
            initial_stock=command.initial_stock,
            low_stock_threshold=command.low_stock_threshold,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(CommitStock)
    def commit_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.commit_sale(command.quantity)
        repo.add(product)

    @handle(ReleaseStock)
    def release_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.release_sale(command.quantity)
        repo.add(product)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)

    @handle(WithdrawStock)
    def withdraw_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.withdraw(command.quantity)
        repo.add(product)


class CatalogueStock:
    """Stock collaborator handed to the order service.

    Every mutation is its own command (and unit of work); nothing here spans
    more than one product.
    """

    def _find(self, product_id):
        try:
            return current_domain.repository_for(Product).get(product_id)
        except ObjectNotFoundError:
            return None

    def get(self, product_id):
        return self._find(product_id)

    def check_stock(self, product_id, quantity) -> StockCheck:
        product = self._find(product_id)
        if product is None or not product.is_active:
            return StockCheck(available=False, current_stock=0)
        return product.check_stock(quantity)

    def catalog_price(self, product_id):
        product = self._find(product_id)
        return product.price if product else None

    def update_stock_after_order(self, product_id, quantity):
        if self._find(product_id) is None:
            return None
        current_domain.process(CommitStock(product_id=product_id, quantity=quantity), asynchronous=False)
        return self._find(product_id)

    def restock(self, product_id, quantity):
        if self._find(product_id) is None:
            return None
        current_domain.process(RestockProduct(product_id=product_id, quantity=quantity), asynchronous=False)
        return self._find(product_id)

    def release(self, product_id, quantity):
        """Reverse ``update_stock_after_order``: stock back up, sold back down."""
        if self._find(product_id) is None:
            return None
        current_domain.process(ReleaseStock(product_id=product_id, quantity=quantity), asynchronous=False)
        return self._find(product_id)

    def withdraw(self, product_id, quantity):
        if self._find(product_id) is None:
            return None
        current_domain.process(WithdrawStock(product_id=product_id, quantity=quantity), asynchronous=False)
        return self._find(product_id)
