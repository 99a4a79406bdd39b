"""Administrative order status changes."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.errors import OrderErrors


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=50)


@storefront.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_or_none(command.order_id)
        if order is None:
            raise OrderErrors.NOT_FOUND.to_exception()

        order.change_status(command.status)
        repo.add(order)
        return order.status
