"""Admin dashboard statistics."""

from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product

UNKNOWN_USER = "Unknown"


def dashboard_stats():
    """Revenue, counts, the lowest-stock products and the latest orders.

    Revenue counts every order that was not cancelled, in whatever currency it
    was placed; the shop runs on a single currency in practice.
    """
    orders = current_domain.repository_for(Order)
    products = current_domain.repository_for(Product)
    users = current_domain.repository_for(User)

    billable = orders.query.exclude(status=OrderStatus.CANCELLED.value).limit(None).all().items
    total_revenue = round(sum(order.total.amount for order in billable), 2)

    recent = orders.recent(limit=5)
    user_ids = list({str(order.user_id) for order in recent})
    emails = {}
    if user_ids:
        emails = {str(user.id): user.email for user in users.query.filter(id__in=user_ids).limit(None).all().items}

    return {
        "total_revenue": total_revenue,
        "total_orders": orders.query.all().total,
        "total_products": products.query.all().total,
        "total_users": users.query.all().total,
        "low_stock_products": [
            {"id": str(product.id), "name": product.name, "stock": product.stock} for product in products.low_stock()
        ],
        "recent_orders": [
            {
                "id": str(order.id),
                "user_email": emails.get(str(order.user_id), UNKNOWN_USER),
                "total": order.total.amount,
                "placed_at": order.placed_at,
                "status": order.status,
            }
            for order in recent
        ],
    }
