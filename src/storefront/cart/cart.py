"""Cart aggregate: the per-user staging area for a future order.

A user has at most one cart. It is created lazily on the first add and emptied
(not deleted) by checkout.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityChanged,
    CartItemRemoved,
)
from storefront.domain import storefront
from storefront.shared.errors import CartErrors


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id, updated_at=datetime.now(UTC))

    @property
    def is_empty(self):
        return not self.items

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity):
        """Add ``quantity`` of a product, merging into an existing line."""
        if quantity is None or quantity < 1:
            raise CartErrors.INVALID_QUANTITY.to_exception()

        existing = self.item_for(product_id)
        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity))
            new_quantity = quantity

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def update_item(self, product_id, quantity):
        """Set a line's quantity; zero or less drops the line."""
        item = self.item_for(product_id)
        if item is None:
            raise CartErrors.ITEM_NOT_FOUND.to_exception()

        if quantity is None or quantity <= 0:
            self.remove_item(product_id)
            return

        previous = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemQuantityChanged(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.item_for(product_id)
        if item is None:
            raise CartErrors.ITEM_NOT_FOUND.to_exception()

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        count = len(self.items)
        if count:
            self.remove_items(list(self.items))
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), user_id=str(self.user_id), items_removed=count))


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id):
        return self.query.filter(user_id=str(user_id)).all().first
