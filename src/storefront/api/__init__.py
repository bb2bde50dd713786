"""Storefront API package."""

from storefront.api.errors import register_storefront_error_handlers
from storefront.api.routes import (
    address_router,
    admin_router,
    cart_router,
    category_router,
    checkout_router,
    order_router,
    product_router,
)

routers = [
    product_router,
    category_router,
    cart_router,
    checkout_router,
    order_router,
    address_router,
    admin_router,
]

__all__ = ["routers", "register_storefront_error_handlers"]
