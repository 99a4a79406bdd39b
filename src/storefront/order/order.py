"""Order aggregate: a priced, immutable record of what a user bought.

State machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING, PROCESSING → CANCELLED

Delivered and Cancelled are terminal. Payment does not move the order out of
Pending; it only records the provider and reference.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.core.entity import BaseEntity
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentRecorded,
)
from storefront.shared.errors import OrderErrors
from storefront.shared.money import Money


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, name):
        """Case-insensitive lookup by status name."""
        if name is None or not name.strip():
            raise OrderErrors.EMPTY_STATUS.to_exception()
        for status in cls:
            if status.value.lower() == name.strip().lower():
                return status
        raise OrderErrors.invalid_status(name).to_exception()


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_SNAPSHOT_FIELDS = frozenset({"product_id", "product_name", "quantity", "unit_price", "currency"})


@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line. Name and price are snapshots taken at checkout.

    Once built, a line is read-only: assigning a different value to any of
    its snapshot fields raises ``Order.ItemImmutable``.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    currency = String(required=True, max_length=3)

    @property
    def subtotal(self):
        return round(self.quantity * self.unit_price, 2)

    def __setattr__(self, name, value):
        if name in _SNAPSHOT_FIELDS and getattr(self, "_initialized", False):
            current = getattr(self, name, None)
            if current is not None and current != value:
                raise OrderErrors.ITEM_IMMUTABLE.to_exception()
        BaseEntity.__setattr__(self, name, value)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    placed_at = DateTime(required=True)
    total = ValueObject(Money)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    payment_provider = String(max_length=50)
    payment_reference = String(max_length=255)
    cancellation_reason = String(max_length=500)

    @invariant.post
    def total_must_match_items(self):
        if self.total is None or not self.items:
            return
        expected = round(sum(item.subtotal for item in self.items), 2)
        if abs(self.total.amount - expected) > 0.005:
            raise OrderErrors.TOTAL_MISMATCH.to_exception()

    @invariant.post
    def items_must_share_currency(self):
        currencies = {item.currency for item in self.items or []}
        if len(currencies) > 1 or (self.total is not None and currencies and self.total.currency not in currencies):
            raise OrderErrors.MIXED_CURRENCIES.to_exception()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines):
        """Build a Pending order.

        Args:
            user_id: The buyer.
            lines: Dicts with product_id, product_name, quantity, unit_price
                and currency, usually snapshots of the current catalogue.
        """
        if not user_id or not str(user_id).strip():
            raise OrderErrors.EMPTY_USER_ID.to_exception()
        if not lines:
            raise OrderErrors.NO_ITEMS.to_exception()

        currencies = {line["currency"] for line in lines}
        if len(currencies) > 1:
            raise OrderErrors.MIXED_CURRENCIES.to_exception()

        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line["product_name"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                currency=line["currency"],
            )
            for line in lines
        ]
        total = Money.of(sum(item.subtotal for item in items), currencies.pop())

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            placed_at=now,
            total=total,
            status=OrderStatus.PENDING.value,
            items=items,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                total=total.amount,
                currency=total.currency,
                item_count=sum(item.quantity for item in items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target):
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise OrderErrors.invalid_status_transition(current.value, target.value).to_exception()

    def record_payment(self, provider, reference):
        self.payment_provider = provider
        self.payment_reference = reference
        self.raise_(PaymentRecorded(order_id=str(self.id), provider=provider, reference=reference))

    def cancel(self, reason=None):
        self._assert_can_transition(OrderStatus.CANCELLED)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason

        self.raise_(OrderCancelled(order_id=str(self.id), reason=reason, cancelled_at=datetime.now(UTC)))

    def change_status(self, name):
        """Administrative move to ``name``, matched case-insensitively."""
        target = OrderStatus.parse(name)
        previous = self.status
        if target.value == previous:
            return

        self._assert_can_transition(target)
        self.status = target.value

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=datetime.now(UTC),
            )
        )


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id):
        """All of a user's orders, newest first."""
        return self.query.filter(user_id=str(user_id)).order_by("-placed_at").limit(None).all().items

    def newest_first(self, status=None):
        query = self.query.order_by("-placed_at")
        if status:
            query = query.filter(status=status)
        return query

    def recent(self, limit=5):
        return self.query.order_by("-placed_at").limit(limit).all().items
