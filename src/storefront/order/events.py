"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A Pending order was created from the user's cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total = Float(required=True)
    currency = String(required=True, max_length=3)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    provider = String(required=True, max_length=50)
    reference = String(max_length=255)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    changed_at = DateTime(required=True)
