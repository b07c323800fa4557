"""
Database models package initialization.

Models are imported here so they are registered with the Base metadata
before tables are created.
"""

from salesflow.database.base import Base, BaseModel, create_table_args
from salesflow.database.models.customer import Customer, CustomerAddress, CustomerType
from salesflow.database.models.order import Order, OrderItem, OrderStatusHistory
from salesflow.database.models.product import Product
from salesflow.database.models.user import User, UserRole
from salesflow.database.models.vehicle import TransportVehicle, VehicleStatus, VehicleType

__all__ = [
    "Base",
    "BaseModel",
    "create_table_args",
    "Customer",
    "CustomerAddress",
    "CustomerType",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "Product",
    "User",
    "UserRole",
    "TransportVehicle",
    "VehicleStatus",
    "VehicleType",
]
