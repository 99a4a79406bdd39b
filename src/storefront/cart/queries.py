"""Cart view with current product names and prices."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.product.product import Product
from storefront.shared.money import DEFAULT_CURRENCY


def get_cart(user_id):
    """Render the user's cart; a user without one sees an empty cart."""
    cart = current_domain.repository_for(Cart).for_user(user_id)
    items = list(cart.items) if cart else []
    products = current_domain.repository_for(Product).find_many([item.product_id for item in items])

    lines = []
    for item in items:
        product = products.get(str(item.product_id))
        unit_price = product.price if product else 0.0
        lines.append(
            {
                "product_id": str(item.product_id),
                "product_name": product.name if product else "Unknown Product",
                "unit_price": unit_price,
                "quantity": item.quantity,
                "subtotal": round(unit_price * item.quantity, 2),
                "image_url": product.image_url if product else None,
            }
        )

    currency = DEFAULT_CURRENCY
    if products:
        currency = next(iter(products.values())).currency

    return {
        "cart_id": str(cart.id) if cart else None,
        "items": lines,
        "total": round(sum(line["subtotal"] for line in lines), 2),
        "item_count": sum(line["quantity"] for line in lines),
        "currency": currency,
        "updated_at": cart.updated_at if cart else None,
    }
