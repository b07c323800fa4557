"""
Order management Pydantic schemas for API request/response validation.

Transition requests deliberately accept blank values: whether a reason,
tracking number or proof of delivery is present is decided by the order
state machine, which reports it as an invalid input.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from salesflow.services.orders.enums import OrderStatus


class OrderLineRequest(BaseModel):
    """A single cart line."""

    product_id: int = Field(..., gt=0, description="Product identifier")
    quantity: int = Field(..., gt=0, description="Quantity to order")


class OrderCreateRequest(BaseModel):
    """Order placement request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: int = Field(..., gt=0, description="Ordering customer")
    ship_to_address_id: Optional[int] = Field(
        None,
        description="Customer address to ship to; the default address when omitted",
    )
    line_items: list[OrderLineRequest] = Field(
        ...,
        min_length=1,
        description="Cart lines; lines for the same product are merged",
    )
    notes: Optional[str] = Field(None, max_length=2000)


class OrderApproveRequest(BaseModel):
    approver_name: Optional[str] = Field(
        None,
        max_length=255,
        description="Recorded approver; defaults to the current user's name",
    )
    comment: Optional[str] = Field(None, max_length=2000)


class OrderRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000, description="Rejection reason")


class OrderDispatchRequest(BaseModel):
    tracking_number: Optional[str] = Field(None, max_length=100)
    vehicle_id: Optional[int] = Field(None, description="Active transport vehicle")
    dispatcher_name: Optional[str] = Field(
        None,
        max_length=255,
        description="Recorded dispatcher; defaults to the current user's name",
    )


class OrderDeliverRequest(BaseModel):
    pod_image: Optional[str] = Field(
        None,
        max_length=1000,
        description="Proof-of-delivery image reference",
    )
    notes: Optional[str] = Field(None, max_length=2000, description="Delivery notes")


class OrderItemResponse(BaseModel):
    """Order line with the price captured at creation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    created_at: datetime


class OrderStatusHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    from_status: Optional[OrderStatus]
    to_status: OrderStatus
    changed_by: int
    changed_by_name: str
    reason: Optional[str]
    created_at: datetime


class OrderResponse(BaseModel):
    """Complete order state."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    customer_name: str
    customer_type: str
    ship_to_address_id: Optional[int]
    ship_to_address: str
    total_amount: Decimal
    status: OrderStatus
    notes: Optional[str]
    created_by: int
    created_by_name: str
    created_at: datetime

    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    approval_comment: Optional[str] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    dispatched_by: Optional[str] = None
    dispatched_at: Optional[datetime] = None
    tracking_number: Optional[str] = None
    dispatched_vehicle_id: Optional[int] = None
    delivered_at: Optional[datetime] = None
    pod_image: Optional[str] = None
    delivery_notes: Optional[str] = None

    items: list[OrderItemResponse] = Field(default_factory=list)
    allowed_actions: list[str] = Field(
        default_factory=list,
        description="Transitions the current user may perform next",
    )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int

