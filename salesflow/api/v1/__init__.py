"""
API v1 package initialization.
"""

from salesflow.api.v1.auth import router as auth_router
from salesflow.api.v1.customers import router as customers_router
from salesflow.api.v1.orders import router as orders_router
from salesflow.api.v1.products import router as products_router
from salesflow.api.v1.users import router as users_router
from salesflow.api.v1.vehicles import router as vehicles_router

__all__ = [
    "auth_router",
    "customers_router",
    "orders_router",
    "products_router",
    "users_router",
    "vehicles_router",
]
