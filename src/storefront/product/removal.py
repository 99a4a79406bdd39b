"""Product removal: refused once any order references the product."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductErrors


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        from storefront.order.order import OrderItem

        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise ProductErrors.NOT_FOUND.to_exception()

        ordered = current_domain.repository_for(OrderItem).query.filter(product_id=str(product.id)).all().total
        if ordered:
            raise ProductErrors.CANNOT_DELETE_IN_USE.to_exception()

        repo.remove(product)
