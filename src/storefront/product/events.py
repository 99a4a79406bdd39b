"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    name: String(required=True, max_length=100)
    price: Float(required=True)
    currency: String(max_length=3)
    stock: Integer()
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    price: Float(required=True)
    currency: String(max_length=3)


@storefront.event(part_of="Product")
class StockChanged:
    """Stock moved by ``delta``; ``new_stock`` is never negative."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
