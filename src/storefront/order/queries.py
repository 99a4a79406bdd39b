"""Read side of orders: the buyer's history, order detail and the admin list."""

from dataclasses import replace

from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product
from storefront.shared.errors import OrderErrors
from storefront.shared.paging import paginate

UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_USER = "Unknown"


def _emails_for(user_ids):
    ids = list({str(user_id) for user_id in user_ids})
    if not ids:
        return {}
    users = current_domain.repository_for(User).query.filter(id__in=ids).limit(None).all().items
    return {str(user.id): user.email for user in users}


def order_view(order, product_names=None, user_email=None):
    product_names = product_names or {}
    view = {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "placed_at": order.placed_at,
        "total": order.total.amount,
        "currency": order.total.currency,
        "status": order.status,
        "payment_provider": order.payment_provider,
        "payment_reference": order.payment_reference,
        "cancellation_reason": order.cancellation_reason,
        "items": [
            {
                "product_id": str(item.product_id),
                "product_name": item.product_name or product_names.get(str(item.product_id), UNKNOWN_PRODUCT),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
    }
    if user_email is not None:
        view["user_email"] = user_email
    return view


def _product_names(orders):
    ids = {str(item.product_id) for order in orders for item in order.items}
    products = current_domain.repository_for(Product).find_many(ids)
    return {product_id: product.name for product_id, product in products.items()}


def my_orders(user_id):
    orders = current_domain.repository_for(Order).for_user(user_id)
    names = _product_names(orders)
    return [order_view(order, names) for order in orders]


def order_detail(order_id, user_id, is_admin=False):
    """An order as seen by its owner or an administrator.

    Other users get the same NotFound as for a missing order.
    """
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None or (not is_admin and str(order.user_id) != str(user_id)):
        raise OrderErrors.NOT_FOUND.to_exception()

    return order_view(order, _product_names([order]), _emails_for([order.user_id]).get(str(order.user_id)))


def all_orders(page_number=1, page_size=10, status=None):
    if status and status.strip():
        status = OrderStatus.parse(status).value
    else:
        status = None

    query = current_domain.repository_for(Order).newest_first(status)
    page = paginate(query, page_number, page_size, lambda order: order)

    emails = _emails_for(order.user_id for order in page.items)
    names = _product_names(page.items)
    return replace(
        page,
        items=[order_view(order, names, emails.get(str(order.user_id), UNKNOWN_USER)) for order in page.items],
    )
