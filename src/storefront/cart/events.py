"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its quantity topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartItemQuantityChanged:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="Cart")
class CartCleared:
    """Every line was dropped, by the customer or by a successful checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items_removed = Integer(required=True)
