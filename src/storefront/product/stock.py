"""Manual stock adjustments by administrators."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductErrors


@storefront.command(part_of="Product")
class AdjustStock:
    product_id: Identifier(required=True)
    delta: Integer(required=True)


@storefront.command_handler(part_of=Product)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise ProductErrors.NOT_FOUND.to_exception()

        product.change_stock(command.delta)
        repo.add(product)
        return product.stock
