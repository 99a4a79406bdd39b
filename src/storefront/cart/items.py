"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import CartErrors


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if current_domain.repository_for(Product).get_or_none(command.product_id) is None:
            raise CartErrors.INVALID_PRODUCT.to_exception()

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(command.user_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise CartErrors.ITEM_NOT_FOUND.to_exception()

        cart.update_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise CartErrors.ITEM_NOT_FOUND.to_exception()

        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return

        cart.clear()
        repo.add(cart)
