"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import (
    checkout_router,
    company_router,
    customer_router,
    delivery_router,
    driver_router,
    order_router,
    store_router,
)

ROUTERS = [
    checkout_router,
    order_router,
    customer_router,
    store_router,
    company_router,
    delivery_router,
    driver_router,
]

__all__ = [
    "ROUTERS",
    "checkout_router",
    "company_router",
    "customer_router",
    "delivery_router",
    "driver_router",
    "order_router",
    "register_error_handlers",
    "store_router",
]
