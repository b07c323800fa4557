"""
Order data access repository.

This module implements the OrderRepository class providing methods for
creating orders with their items in one unit of work, retrieving orders
with filters, and reading order items and status history.
"""

from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.models.order import Order, OrderItem, OrderStatusHistory
from salesflow.services.errors import NotFoundError
from salesflow.services.orders.enums import OrderStatus

logger = get_logger(__name__)


class OrderRepository:
    """
    Repository for order data access operations.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_order_with_items(
        self,
        customer_id: int,
        customer_name: str,
        customer_type: str,
        ship_to_address_id: Optional[int],
        ship_to_address: str,
        total_amount: Decimal,
        items: Sequence[dict[str, Any]],
        created_by: int,
        created_by_name: str,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Create order with items.

        Args:
            customer_id: Ordering customer
            customer_name: Customer name snapshot
            customer_type: Customer type snapshot
            ship_to_address_id: Selected address id
            ship_to_address: Formatted address snapshot
            total_amount: Total order amount
            items: Order lines with product_id, product_name, quantity,
                unit_price and total_price
            created_by: Creating user id
            created_by_name: Creating user name
            notes: Optional order notes

        Returns:
            Created order with items, flushed so its id is assigned
        """
        order = Order(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_type=customer_type,
            ship_to_address_id=ship_to_address_id,
            ship_to_address=ship_to_address,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            notes=notes,
            created_by=created_by,
            created_by_name=created_by_name,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    total_price=item["total_price"],
                )
                for item in items
            ],
        )

        self.session.add(order)
        self.session.flush()

        logger.info(
            "Order created with items",
            order_id=order.id,
            customer_id=customer_id,
            item_count=len(items),
        )

        return order

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.session.get(Order, order_id)

    def get_order_or_raise(self, order_id: int) -> Order:
        """
        Raises:
            NotFoundError: If the order does not exist
        """
        order = self.get_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        created_by: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> list[Order]:
        """
        List orders newest first, optionally filtered.
        """
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        if created_by is not None:
            stmt = stmt.where(Order.created_by == created_by)
        if customer_id is not None:
            stmt = stmt.where(Order.customer_id == customer_id)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        return list(self.session.scalars(stmt))

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        )
        return list(self.session.scalars(stmt))

    def get_status_history(self, order_id: int) -> list[OrderStatusHistory]:
        stmt = (
            select(OrderStatusHistory)
            .where(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.id)
        )
        return list(self.session.scalars(stmt))
