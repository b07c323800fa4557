"""
Order service orchestrating order creation and the fulfillment workflow.

This module implements the OrderService class: creating orders from a
cart of line items priced for the customer's type, and driving the
approve, reject, dispatch and deliver transitions through the state
machine. Every operation runs inside the caller's unit of work, so a
failure leaves the store unchanged.
"""

from collections import OrderedDict
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.models.customer import Customer, CustomerAddress
from salesflow.database.models.order import Order, OrderItem, OrderStatusHistory
from salesflow.database.models.product import Product
from salesflow.database.models.user import User
from salesflow.database.models.vehicle import TransportVehicle
from salesflow.services.authorization import Action, require_permission
from salesflow.services.errors import InvalidInputError, NotFoundError
from salesflow.services.orders.enums import OrderStatus
from salesflow.services.orders.repository import OrderRepository
from salesflow.services.orders.state_machine import OrderStateMachine
from salesflow.services.pricing import line_total, order_total, resolve_unit_price

logger = get_logger(__name__)


class OrderService:
    """
    Order service orchestrating business logic.

    Attributes:
        session: Session of the current unit of work
        repository: Order repository for data access
        state_machine: State machine for order lifecycle management
    """

    def __init__(self, session: Session):
        self.session = session
        self.repository = OrderRepository(session)
        self.state_machine = OrderStateMachine(session)

    def create_order(
        self,
        actor: User,
        customer_id: int,
        line_items: Iterable[Mapping[str, Any]],
        ship_to_address_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Create a pending order.

        Args:
            actor: User placing the order
            customer_id: Ordering customer
            line_items: Cart lines, each with product_id and quantity.
                Lines for the same product are merged.
            ship_to_address_id: One of the customer's addresses; the
                default address is used when omitted
            notes: Optional order notes

        Returns:
            The created order with its items

        Raises:
            PermissionDeniedError: If the actor may not create orders
            NotFoundError: If the customer or a product does not exist
            InvalidInputError: If the cart or address is invalid
        """
        require_permission(actor.role, Action.CREATE_ORDER, user_id=actor.id)

        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)

        address = self._resolve_ship_to(customer, ship_to_address_id)
        quantities = self._merge_line_items(line_items)

        items = []
        for product_id, quantity in quantities.items():
            product = self.session.get(Product, product_id)
            if product is None:
                raise NotFoundError("Product", product_id)
            unit_price = resolve_unit_price(product, customer.type)
            items.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": quantity,
                    "unit_price": unit_price,
                    "total_price": line_total(quantity, unit_price),
                }
            )

        total_amount = order_total(item["total_price"] for item in items)

        order = self.repository.create_order_with_items(
            customer_id=customer.id,
            customer_name=customer.name,
            customer_type=customer.type.value,
            ship_to_address_id=address.id,
            ship_to_address=address.format(),
            total_amount=total_amount,
            items=items,
            created_by=actor.id,
            created_by_name=actor.full_name,
            notes=(notes or "").strip() or None,
        )
        self.state_machine.record_creation(order, actor)
        self.session.flush()

        logger.info(
            "Order created successfully",
            order_id=order.id,
            customer_id=customer.id,
            total_amount=str(total_amount),
            created_by=actor.id,
        )
        return order

    def approve(
        self,
        order_id: int,
        actor: User,
        approver_name: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> Order:
        """
        Approve a pending order.

        The approver name defaults to the actor's full name.
        """
        order = self.repository.get_order_or_raise(order_id)
        return self.state_machine.apply_transition(
            order,
            OrderStatus.APPROVED,
            actor,
            approver_name=actor.full_name if approver_name is None else approver_name,
            comment=comment,
        )

    def reject(self, order_id: int, actor: User, reason: Optional[str]) -> Order:
        """
        Reject a pending order. A non-empty reason is required and replaces
        the order notes.
        """
        order = self.repository.get_order_or_raise(order_id)
        return self.state_machine.apply_transition(
            order,
            OrderStatus.REJECTED,
            actor,
            reason=reason,
        )

    def dispatch(
        self,
        order_id: int,
        actor: User,
        tracking_number: Optional[str],
        vehicle_id: Optional[int],
        dispatcher_name: Optional[str] = None,
    ) -> Order:
        """
        Dispatch an approved order on an active vehicle.

        The dispatcher name defaults to the actor's full name. The vehicle
        is looked up only after the role and the order status are checked.

        Raises:
            PermissionDeniedError: If the actor may not dispatch orders
            StateTransitionError: If the order is not approved
            NotFoundError: If the order or the vehicle does not exist
            InvalidInputError: If tracking number or vehicle is missing, or
                the vehicle is not active
        """
        order = self.repository.get_order_or_raise(order_id)
        self.state_machine.check_entry(order, OrderStatus.DISPATCHED, actor)

        vehicle = None
        if vehicle_id is not None:
            vehicle = self.session.get(TransportVehicle, vehicle_id)
            if vehicle is None:
                raise NotFoundError("Vehicle", vehicle_id)

        return self.state_machine.apply_transition(
            order,
            OrderStatus.DISPATCHED,
            actor,
            dispatcher_name=actor.full_name if dispatcher_name is None else dispatcher_name,
            tracking_number=tracking_number,
            vehicle=vehicle,
        )

    def mark_delivered(
        self,
        order_id: int,
        actor: User,
        pod_image: Optional[str],
        notes: Optional[str] = None,
    ) -> Order:
        """
        Mark a dispatched order delivered with proof of delivery.
        """
        order = self.repository.get_order_or_raise(order_id)
        return self.state_machine.apply_transition(
            order,
            OrderStatus.DELIVERED,
            actor,
            pod_image=pod_image,
            delivery_notes=notes,
        )

    def get_order(self, order_id: int) -> Order:
        return self.repository.get_order_or_raise(order_id)

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        created_by: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> list[Order]:
        return self.repository.list_orders(
            status=status, created_by=created_by, customer_id=customer_id
        )

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        self.repository.get_order_or_raise(order_id)
        return self.repository.get_order_items(order_id)

    def get_status_history(self, order_id: int) -> list[OrderStatusHistory]:
        self.repository.get_order_or_raise(order_id)
        return self.repository.get_status_history(order_id)

    def allowed_actions(self, order: Order, actor: User) -> list[Action]:
        return self.state_machine.allowed_actions(order, actor.role)

    @staticmethod
    def _resolve_ship_to(
        customer: Customer, ship_to_address_id: Optional[int]
    ) -> CustomerAddress:
        if ship_to_address_id is None:
            address = customer.default_address
            if address is None:
                raise InvalidInputError(
                    f"Customer {customer.id} has no shipping address",
                    customer_id=customer.id,
                    fields=["ship_to_address_id"],
                )
            return address

        for address in customer.addresses:
            if address.id == ship_to_address_id:
                return address
        raise InvalidInputError(
            f"Address {ship_to_address_id} does not belong to customer {customer.id}",
            customer_id=customer.id,
            fields=["ship_to_address_id"],
        )

    @staticmethod
    def _merge_line_items(line_items: Iterable[Mapping[str, Any]]) -> "OrderedDict[int, int]":
        quantities: "OrderedDict[int, int]" = OrderedDict()
        for index, item in enumerate(line_items):
            product_id = item.get("product_id")
            quantity = item.get("quantity")
            if product_id is None:
                raise InvalidInputError(
                    f"Line item {index} has no product",
                    fields=[f"line_items[{index}].product_id"],
                )
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise InvalidInputError(
                    f"Line item {index} quantity must be a positive integer",
                    fields=[f"line_items[{index}].quantity"],
                    quantity=quantity,
                )
            quantities[product_id] = quantities.get(product_id, 0) + quantity

        if not quantities:
            raise InvalidInputError(
                "An order needs at least one line item",
                fields=["line_items"],
            )
        return quantities
