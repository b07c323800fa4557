"""
Order models for order management and fulfillment tracking.

This module defines the Order, OrderItem and OrderStatusHistory models.
Orders snapshot the customer and ship-to address at creation, carry a total
fixed at creation, and collect one group of lifecycle fields per
fulfillment stage.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesflow.database.base import BaseModel, create_table_args
from salesflow.services.orders.enums import OrderStatus


def _status_enum(name: str) -> SQLEnum:
    return SQLEnum(
        OrderStatus,
        name=name,
        native_enum=False,
        values_callable=lambda statuses: [s.value for s in statuses],
    )


class Order(BaseModel):
    """
    Sales order.

    Attributes:
        customer_id: Ordering customer
        customer_name: Customer name at order time
        customer_type: Customer pricing tier at order time
        ship_to_address_id: Selected customer address
        ship_to_address: Formatted address at order time
        total_amount: Sum of line totals, fixed at creation
        status: Lifecycle status
        notes: Order notes, replaced by the reason when rejected
        created_by: Creating user id
        created_by_name: Creating user display name
        approved_*: Set once on approval
        rejected_*: Set once on rejection
        dispatched_*, tracking_number: Set once on dispatch
        delivered_at, pod_image, delivery_notes: Set once on delivery
    """

    __tablename__ = "orders"

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_type: Mapped[str] = mapped_column(String(32), nullable=False)

    ship_to_address_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ship_to_address: Mapped[str] = mapped_column(String(500), nullable=False)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        _status_enum("order_status"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_by_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Approval
    approved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approval_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Rejection
    rejected_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Dispatch
    dispatched_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    dispatched_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    dispatched_vehicle_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("transport_vehicles.id", ondelete="RESTRICT"),
        nullable=True,
    )

    # Delivery
    delivered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    pod_image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    delivery_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
        lazy="selectin",
    )

    status_history: Mapped[list["OrderStatusHistory"]] = relationship(
        "OrderStatusHistory",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.id",
        lazy="selectin",
    )

    __table_args__ = create_table_args(
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
        Index("ix_orders_status_created", "status", "created_at"),
        comment="Sales orders",
    )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()


class OrderItem(BaseModel):
    """
    Order line with a product and price snapshot taken at order time.
    """

    __tablename__ = "order_items"

    order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order: Mapped["Order"] = relationship("Order", back_populates="items")

    __table_args__ = create_table_args(
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        comment="Order line items",
    )


class OrderStatusHistory(BaseModel):
    """
    Append-only record of every status change, creation included.
    """

    __tablename__ = "order_status_history"

    order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[Optional[OrderStatus]] = mapped_column(
        _status_enum("history_from_status"),
        nullable=True,
    )
    to_status: Mapped[OrderStatus] = mapped_column(
        _status_enum("history_to_status"),
        nullable=False,
    )
    changed_by: Mapped[int] = mapped_column(Integer, nullable=False)
    changed_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="status_history")

    __table_args__ = create_table_args(comment="Order status audit trail")
