"""Product aggregate — the catalogue record the order core reserves stock from.

Only the stock-keeping side of a product lives here: catalogue price, units on
the shelf (``stock``) and the running ``sold`` counter used for popularity
ranking. Stock never goes below zero; a sale larger than the shelf raises
``StockError``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from storefront.domain import storefront
from storefront.errors import StockError
from storefront.product.events import (
    LowStockDetected,
    ProductRegistered,
    ProductRestocked,
    StockCommitted,
    StockReleased,
    StockWithdrawn,
)


@dataclass(frozen=True)
class StockCheck:
    """Answer to "can this product cover the requested quantity?"."""

    available: bool
    current_stock: int


@storefront.aggregate
class Product:
    sku = String(required=True, max_length=50, unique=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    sold = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=10, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, sku, name, price, initial_stock=0, low_stock_threshold=10):
        now = datetime.now(UTC)
        product = cls(
            sku=sku,
            name=name,
            price=price,
            stock=initial_stock,
            sold=0,
            low_stock_threshold=low_stock_threshold,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                sku=sku,
                name=name,
                price=price,
                initial_stock=initial_stock,
                registered_at=now,
            )
        )
        return product

    def check_stock(self, quantity):
        return StockCheck(available=self.stock >= quantity, current_stock=self.stock)

    def commit_sale(self, quantity):
        """Take ``quantity`` units off the shelf and count them as sold."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.stock:
            raise StockError(str(self.id), quantity, self.stock, product_name=self.name)

        now = datetime.now(UTC)
        self.stock = self.stock - quantity
        self.sold = self.sold + quantity
        self.updated_at = now

        self.raise_(
            StockCommitted(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                new_sold=self.sold,
                committed_at=now,
            )
        )
        if self.stock <= self.low_stock_threshold:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    sku=self.sku,
                    current_stock=self.stock,
                    threshold=self.low_stock_threshold,
                    detected_at=now,
                )
            )

    def restock(self, quantity):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        now = datetime.now(UTC)
        self.stock = self.stock + quantity
        self.updated_at = now

        self.raise_(
            ProductRestocked(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                restocked_at=now,
            )
        )

    def release_sale(self, quantity):
        """Undo ``commit_sale`` for an order that was never stored."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.sold:
            raise ValidationError({"quantity": [f"Cannot release {quantity} units, only {self.sold} sold"]})

        now = datetime.now(UTC)
        self.stock = self.stock + quantity
        self.sold = self.sold - quantity
        self.updated_at = now

        self.raise_(
            StockReleased(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                new_sold=self.sold,
                released_at=now,
            )
        )

    def withdraw(self, quantity):
        """Take units off the shelf without counting them as sold; the inverse of ``restock``."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.stock:
            raise StockError(str(self.id), quantity, self.stock, product_name=self.name)

        now = datetime.now(UTC)
        self.stock = self.stock - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                withdrawn_at=now,
            )
        )
