"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalogue with its opening stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    name = String(required=True)
    price = Float(required=True)
    initial_stock = Integer(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockCommitted:
    """Units left the shelf for an order; stock went down and sold went up."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold = Integer(required=True)
    committed_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    """Units were put back on the shelf (cancellation or replenishment)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    restocked_at = DateTime(required=True)


@storefront.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    current_stock = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """A committed sale was undone before its order existed; stock and sold both reverted."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold = Integer(required=True)
    released_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units were taken back off the shelf without being sold."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    withdrawn_at = DateTime(required=True)
