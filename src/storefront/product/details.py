"""Product detail maintenance: command and handler."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductErrors


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    currency: String(max_length=3)
    category_id: Identifier(required=True)
    description: Text()
    image_url: String(max_length=500)


@storefront.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise ProductErrors.NOT_FOUND.to_exception()

        if current_domain.repository_for(Category).get_or_none(command.category_id) is None:
            raise ProductErrors.INVALID_CATEGORY.to_exception()

        product.update_details(
            name=command.name,
            price=command.price,
            currency=command.currency,
            category_id=command.category_id,
            description=command.description,
            image_url=command.image_url,
        )
        repo.add(product)
