"""
Order management API endpoints.

This module implements the FastAPI router for the order lifecycle: order
creation, listing, and the approve, reject, dispatch and deliver
transitions. Service errors are translated to HTTP responses by the
application's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from salesflow.api.deps import CurrentUser, DatabaseDep
from salesflow.core.logging import get_logger
from salesflow.database.models.order import Order
from salesflow.database.models.user import User
from salesflow.schemas.orders import (
    OrderApproveRequest,
    OrderCreateRequest,
    OrderDeliverRequest,
    OrderDispatchRequest,
    OrderItemResponse,
    OrderListResponse,
    OrderRejectRequest,
    OrderResponse,
    OrderStatusHistoryResponse,
)
from salesflow.services.orders.enums import OrderStatus
from salesflow.services.orders.service import OrderService

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def _to_response(service: OrderService, order: Order, current_user: User) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.allowed_actions = [
        action.value for action in service.allowed_actions(order, current_user)
    ]
    return response


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new order",
    description="Create a pending order priced for the customer's type",
)
def create_order(
    request: OrderCreateRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> OrderResponse:
    logger.info(
        "Creating order",
        user_id=current_user.id,
        customer_id=request.customer_id,
        item_count=len(request.line_items),
    )
    with database.session() as session:
        service = OrderService(session)
        order = service.create_order(
            actor=current_user,
            customer_id=request.customer_id,
            line_items=[item.model_dump() for item in request.line_items],
            ship_to_address_id=request.ship_to_address_id,
            notes=request.notes,
        )
        return _to_response(service, order, current_user)


@router.get("", response_model=OrderListResponse, summary="List orders")
def list_orders(
    current_user: CurrentUser,
    database: DatabaseDep,
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    created_by: Optional[int] = Query(None),
    customer_id: Optional[int] = Query(None),
) -> OrderListResponse:
    """List orders newest first."""
    with database.session() as session:
        service = OrderService(session)
        orders = service.list_orders(
            status=status_filter, created_by=created_by, customer_id=customer_id
        )
        items = [_to_response(service, order, current_user) for order in orders]
    return OrderListResponse(items=items, total=len(items))


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order")
def get_order(order_id: int, current_user: CurrentUser, database: DatabaseDep) -> OrderResponse:
    with database.session() as session:
        service = OrderService(session)
        return _to_response(service, service.get_order(order_id), current_user)


@router.get("/{order_id}/items", response_model=list[OrderItemResponse], summary="Get order items")
def get_order_items(
    order_id: int, current_user: CurrentUser, database: DatabaseDep
) -> list[OrderItemResponse]:
    with database.session() as session:
        items = OrderService(session).get_order_items(order_id)
        return [OrderItemResponse.model_validate(item) for item in items]


@router.get(
    "/{order_id}/history",
    response_model=list[OrderStatusHistoryResponse],
    summary="Get order status history",
)
def get_order_history(
    order_id: int, current_user: CurrentUser, database: DatabaseDep
) -> list[OrderStatusHistoryResponse]:
    with database.session() as session:
        history = OrderService(session).get_status_history(order_id)
        return [OrderStatusHistoryResponse.model_validate(entry) for entry in history]


@router.post("/{order_id}/approve", response_model=OrderResponse, summary="Approve order")
def approve_order(
    order_id: int,
    request: OrderApproveRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> OrderResponse:
    with database.session() as session:
        service = OrderService(session)
        order = service.approve(
            order_id,
            current_user,
            approver_name=request.approver_name,
            comment=request.comment,
        )
        return _to_response(service, order, current_user)


@router.post("/{order_id}/reject", response_model=OrderResponse, summary="Reject order")
def reject_order(
    order_id: int,
    request: OrderRejectRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> OrderResponse:
    with database.session() as session:
        service = OrderService(session)
        order = service.reject(order_id, current_user, reason=request.reason)
        return _to_response(service, order, current_user)


@router.post("/{order_id}/dispatch", response_model=OrderResponse, summary="Dispatch order")
def dispatch_order(
    order_id: int,
    request: OrderDispatchRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> OrderResponse:
    with database.session() as session:
        service = OrderService(session)
        order = service.dispatch(
            order_id,
            current_user,
            tracking_number=request.tracking_number,
            vehicle_id=request.vehicle_id,
            dispatcher_name=request.dispatcher_name,
        )
        return _to_response(service, order, current_user)


@router.post("/{order_id}/deliver", response_model=OrderResponse, summary="Mark order delivered")
def deliver_order(
    order_id: int,
    request: OrderDeliverRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> OrderResponse:
    with database.session() as session:
        service = OrderService(session)
        order = service.mark_delivered(
            order_id,
            current_user,
            pod_image=request.pod_image,
            notes=request.notes,
        )
        return _to_response(service, order, current_user)
