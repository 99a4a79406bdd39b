"""Storefront HTTP API package."""

from storefront.api.routes import (
    admin_router,
    auth_router,
    cart_router,
    category_router,
    image_router,
    order_router,
    product_router,
    user_router,
)

ROUTERS = [
    auth_router,
    user_router,
    category_router,
    product_router,
    cart_router,
    order_router,
    admin_router,
    image_router,
]

__all__ = [
    "ROUTERS",
    "admin_router",
    "auth_router",
    "cart_router",
    "category_router",
    "image_router",
    "order_router",
    "product_router",
    "user_router",
]
