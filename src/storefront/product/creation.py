"""Product creation: command and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductErrors


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    sku: String(required=True, max_length=255)
    price: Float(required=True)
    currency: String(max_length=3, default="USD")
    stock: Integer(default=0)
    category_id: Identifier(required=True)
    description: Text()
    image_url: String(max_length=500)


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if current_domain.repository_for(Category).get_or_none(command.category_id) is None:
            raise ProductErrors.INVALID_CATEGORY.to_exception()

        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise ProductErrors.DUPLICATE_SKU.to_exception()

        product = Product.create(
            name=command.name,
            sku=command.sku,
            price=command.price,
            currency=command.currency,
            stock=command.stock,
            category_id=command.category_id,
            description=command.description,
            image_url=command.image_url,
        )
        repo.add(product)
        return str(product.id)
